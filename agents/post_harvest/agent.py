"""
Post-Harvest Agent

Estimates spoilage risk for stored produce from the region's latest
climate reading. Runs on request or when the climate agent escalates a
high-risk forecast, in which case the trigger reason is recorded on the
payload.
"""

from __future__ import annotations

from typing import Any, Optional, TYPE_CHECKING

from agents.base import AgentCapability
from agents.registry import register_agent
from agents.runner import PredictionAgent
from core.schemas import (
    TABLE_CLIMATE_DATA,
    AgentType,
    PostHarvestInput,
    PostHarvestPayload,
    RiskLevel,
)

from .prompts import SYSTEM_PROMPT, TRIGGER_NOTE_TEMPLATE, UNKNOWN_READING, USER_PROMPT_TEMPLATE

if TYPE_CHECKING:
    from agents.context import AgentContext


def _reading(row: Optional[dict[str, Any]], column: str) -> Any:
    if not row or row.get(column) is None:
        return UNKNOWN_READING
    return row[column]


class PostHarvestAgent(PredictionAgent):
    """Stored produce spoilage analyst."""

    _name = "PostHarvestAgent"

    agent_type = AgentType.POST_HARVEST
    input_model = PostHarvestInput
    system_prompt = SYSTEM_PROMPT

    def fetch_context(self, ctx: "AgentContext", inp: PostHarvestInput) -> dict[str, Any]:
        rows = ctx.store.select(
            TABLE_CLIMATE_DATA,
            filters={"region": inp.region},
            order_by="recorded_at",
            limit=1,
        )
        return {"climate": rows[0] if rows else None}

    def build_prompt(self, inp: PostHarvestInput, context: dict[str, Any]) -> str:
        climate = context.get("climate")
        trigger_note = ""
        if inp.trigger_reason:
            trigger_note = TRIGGER_NOTE_TEMPLATE.format(trigger_reason=inp.trigger_reason)
        return USER_PROMPT_TEMPLATE.format(
            crop_type=inp.crop_type,
            storage_type=inp.storage_type,
            region=inp.region,
            trigger_note=trigger_note,
            temperature=_reading(climate, "temperature"),
            humidity=_reading(climate, "humidity_percent"),
        )

    def enrich(
        self,
        payload: PostHarvestPayload,
        inp: PostHarvestInput,
        context: dict[str, Any],
    ) -> PostHarvestPayload:
        return payload.model_copy(update={
            "crop_type": inp.crop_type,
            "storage_type": inp.storage_type,
            "trigger_reason": inp.trigger_reason,
        })

    def derive_risk(self, payload: PostHarvestPayload) -> RiskLevel:
        return RiskLevel(payload.risk.lower())


def _register_agents() -> None:
    """Register the post-harvest agent."""
    register_agent(
        agent_type=AgentType.POST_HARVEST,
        name="PostHarvestAgent",
        factory=lambda ctx: PostHarvestAgent(),
        capabilities={AgentCapability.LLM, AgentCapability.STORE_READ},
        priority=100,
    )


# Auto-register on import
_register_agents()
