"""
Schemas
File: escalation.py

Purpose: Side effects decided by the escalation policy.

An EscalationActions value is pure data: the policy returns it, the
runner applies it. Both actions may be present at once.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .types import AgentType, AlertSeverity, AlertType


class AlertSpec(BaseModel):
    """An alert the runner should create for the current prediction."""

    model_config = ConfigDict(frozen=True)

    alert_type: AlertType
    severity: AlertSeverity
    message: str = Field(..., min_length=1)


class CrossAgentTrigger(BaseModel):
    """A downstream agent run the runner should hand to the dispatcher."""

    model_config = ConfigDict(frozen=True)

    target: AgentType
    reason: str = Field(..., description="Causal reason carried into the target payload")
    input: dict[str, Any] = Field(
        default_factory=dict,
        description="Context input for the target agent",
    )


class EscalationActions(BaseModel):
    """Zero, one or both escalation side effects."""

    model_config = ConfigDict(frozen=True)

    cross_agent_trigger: Optional[CrossAgentTrigger] = None
    alert: Optional[AlertSpec] = None

    @property
    def is_empty(self) -> bool:
        return self.cross_agent_trigger is None and self.alert is None

    @classmethod
    def none(cls) -> "EscalationActions":
        return cls()
