"""
API Request Models

Pydantic models for API request validation.

Agent endpoints take the agent's context input as a free-form JSON
object; the agent's own input model decides which keys are required.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AgentRunRequest(BaseModel):
    """Request body for the agent endpoints (any JSON object)."""

    model_config = ConfigDict(extra="allow")

    def context_input(self) -> dict[str, Any]:
        """The body as the agent's context input."""
        return dict(self.model_extra or {})


class DashboardQuery(BaseModel):
    """Query parameters for GET /dashboard."""

    limit: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Number of most recent predictions to aggregate",
    )
