"""
API Response Models

Pydantic models for API response serialization.
"""

from typing import Any

from pydantic import BaseModel, Field

from core.schemas import AgentType


# Key under which each agent's record is returned
RESULT_KEYS: dict[AgentType, str] = {
    AgentType.CLIMATE: "prediction",
    AgentType.MARKET: "prediction",
    AgentType.CROP_HEALTH: "analysis",
    AgentType.POST_HARVEST: "analysis",
    AgentType.GOVERNMENT_REPORTING: "report",
}

SUCCESS_MESSAGES: dict[AgentType, str] = {
    AgentType.CLIMATE: "Climate prediction generated successfully",
    AgentType.CROP_HEALTH: "Crop health analysis completed",
    AgentType.MARKET: "Market intelligence generated successfully",
    AgentType.POST_HARVEST: "Post-harvest analysis completed",
    AgentType.GOVERNMENT_REPORTING: "Policy brief generated successfully",
}


class HealthResponse(BaseModel):
    """Response for GET /health endpoint."""

    ok: bool = True
    service: str = "shamba-agents-api"
    version: str = "v1"
    store_backend: str | None = None
    llm_configured: bool = False
    dispatch_enabled: bool = True


class AgentRunResponse(BaseModel):
    """
    Response for a successful agent run.

    Exactly one of prediction / analysis / report is returned, chosen by
    agent type (see RESULT_KEYS).
    """

    success: bool = True
    prediction: dict[str, Any] | None = None
    analysis: dict[str, Any] | None = None
    report: dict[str, Any] | None = None
    alerts: list[dict[str, Any]] = Field(default_factory=list)
    message: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    def to_content(self, agent_type: AgentType) -> dict[str, Any]:
        """Serialize, keeping only the result key for this agent type."""
        keep = RESULT_KEYS[agent_type]
        drop = {k for k in set(RESULT_KEYS.values()) if k != keep}
        return self.model_dump(mode="json", exclude=drop)


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    success: bool = False
    error: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Stable machine-readable error code")
    details: dict[str, Any] = Field(default_factory=dict)
