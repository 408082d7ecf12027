"""
Market Agent

Produces market intelligence for a commodity from its recent price
records. A confident upward trend raises an informational selling
alert.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from agents.base import AgentCapability
from agents.registry import register_agent
from agents.runner import PredictionAgent, rows_to_json
from core.schemas import (
    PREDICTION_TTL,
    TABLE_MARKET_PRICES,
    AgentType,
    MarketInput,
    MarketPayload,
    RiskLevel,
)

from .prompts import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE

if TYPE_CHECKING:
    from agents.context import AgentContext


RECENT_PRICES = 10


class MarketAgent(PredictionAgent):
    """Commodity market analyst."""

    _name = "MarketAgent"

    agent_type = AgentType.MARKET
    input_model = MarketInput
    system_prompt = SYSTEM_PROMPT
    temperature = 0.6
    ttl = PREDICTION_TTL

    def fetch_context(self, ctx: "AgentContext", inp: MarketInput) -> dict[str, Any]:
        prices = ctx.store.select(
            TABLE_MARKET_PRICES,
            filters={"commodity": inp.commodity},
            order_by="recorded_at",
            limit=RECENT_PRICES,
        )
        return {"price_data": prices}

    def build_prompt(self, inp: MarketInput, context: dict[str, Any]) -> str:
        return USER_PROMPT_TEMPLATE.format(
            commodity=inp.commodity,
            location=inp.location,
            price_data=rows_to_json(context.get("price_data", [])),
        )

    def enrich(self, payload: MarketPayload, inp: MarketInput, context: dict[str, Any]) -> MarketPayload:
        return payload.model_copy(update={"commodity": inp.commodity})

    def derive_risk(self, payload: MarketPayload) -> RiskLevel:
        # Falling prices are the only market signal treated as a risk
        if payload.trend == "decreasing":
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    def region_of(self, inp: MarketInput) -> str:
        return inp.location


def _register_agents() -> None:
    """Register the market agent."""
    register_agent(
        agent_type=AgentType.MARKET,
        name="MarketAgent",
        factory=lambda ctx: MarketAgent(),
        capabilities={AgentCapability.LLM, AgentCapability.STORE_READ},
        priority=100,
    )


# Auto-register on import
_register_agents()
