"""
Climate Agent

Forecasts climate risk for a region from its recent climate readings.

A high or critical forecast raises a climate alert and starts the
post-harvest agent for the region's stored maize.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from agents.base import AgentCapability
from agents.registry import register_agent
from agents.runner import PredictionAgent, rows_to_json
from core.schemas import (
    PREDICTION_TTL,
    TABLE_CLIMATE_DATA,
    AgentType,
    ClimateInput,
    ClimatePayload,
    EscalationActions,
    RiskLevel,
)

from .prompts import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE

if TYPE_CHECKING:
    from agents.context import AgentContext


# Post-harvest was handed a trigger for this record
COLLABORATION_NOTIFIED = "Post-Harvest Agent notified"

RECENT_READINGS = 5


class ClimateAgent(PredictionAgent):
    """Climate risk forecaster."""

    _name = "ClimateAgent"
    _capabilities = {AgentCapability.LLM, AgentCapability.STORE_READ, AgentCapability.TRIGGERS}

    agent_type = AgentType.CLIMATE
    input_model = ClimateInput
    system_prompt = SYSTEM_PROMPT
    temperature = 0.7
    ttl = PREDICTION_TTL

    def fetch_context(self, ctx: "AgentContext", inp: ClimateInput) -> dict[str, Any]:
        readings = ctx.store.select(
            TABLE_CLIMATE_DATA,
            filters={"region": inp.region},
            order_by="recorded_at",
            limit=RECENT_READINGS,
        )
        return {"climate_data": readings}

    def build_prompt(self, inp: ClimateInput, context: dict[str, Any]) -> str:
        return USER_PROMPT_TEMPLATE.format(
            region=inp.region,
            request_type=inp.request_type,
            climate_data=rows_to_json(context.get("climate_data", [])),
        )

    def annotate(self, payload: ClimatePayload, actions: EscalationActions) -> ClimatePayload:
        if actions.cross_agent_trigger is None:
            return payload
        return payload.model_copy(update={"collaboration_status": COLLABORATION_NOTIFIED})

    def derive_risk(self, payload: ClimatePayload) -> RiskLevel:
        return RiskLevel(payload.risk_level)


def _register_agents() -> None:
    """Register the climate agent."""
    register_agent(
        agent_type=AgentType.CLIMATE,
        name="ClimateAgent",
        factory=lambda ctx: ClimateAgent(),
        capabilities={AgentCapability.LLM, AgentCapability.STORE_READ, AgentCapability.TRIGGERS},
        priority=100,
    )


# Auto-register on import
_register_agents()
