"""
Government Reporting Agent

Builds the national food security policy brief from the active alerts,
the latest predictions of every agent and recent market prices. The
brief never escalates.
"""

from __future__ import annotations

from typing import Any, TYPE_CHECKING

from agents.base import AgentCapability
from agents.registry import register_agent
from agents.runner import PredictionAgent, rows_to_json
from core.schemas import (
    TABLE_ALERTS,
    TABLE_MARKET_PRICES,
    TABLE_PREDICTIONS,
    AgentType,
    AlertSeverity,
    GovernmentReportInput,
    GovernmentReportPayload,
    RiskLevel,
)

from .prompts import SYSTEM_PROMPT, USER_PROMPT_TEMPLATE

if TYPE_CHECKING:
    from agents.context import AgentContext


RECENT_PREDICTIONS = 10
RECENT_PRICES = 10

# More active alerts than this marks the national picture as high risk
HIGH_RISK_ALERT_COUNT = 5


class GovernmentReportAgent(PredictionAgent):
    """National policy brief writer."""

    _name = "GovernmentReportAgent"

    agent_type = AgentType.GOVERNMENT_REPORTING
    input_model = GovernmentReportInput
    system_prompt = SYSTEM_PROMPT

    def fetch_context(self, ctx: "AgentContext", inp: GovernmentReportInput) -> dict[str, Any]:
        alerts = ctx.store.select(TABLE_ALERTS, filters={"is_active": True})
        predictions = ctx.store.select(
            TABLE_PREDICTIONS,
            order_by="created_at",
            limit=RECENT_PREDICTIONS,
        )
        # market_prices rows carry recorded_at, not created_at
        prices = ctx.store.select(
            TABLE_MARKET_PRICES,
            order_by="recorded_at",
            limit=RECENT_PRICES,
        )
        return {
            "alerts": alerts,
            "predictions": predictions,
            "market": prices,
        }

    def build_prompt(self, inp: GovernmentReportInput, context: dict[str, Any]) -> str:
        active, critical = _alert_counts(context)
        return USER_PROMPT_TEMPLATE.format(
            active_alert_count=active,
            critical_alert_count=critical,
            market_data=rows_to_json(context.get("market", [])),
            prediction_data=rows_to_json(context.get("predictions", [])),
        )

    def enrich(
        self,
        payload: GovernmentReportPayload,
        inp: GovernmentReportInput,
        context: dict[str, Any],
    ) -> GovernmentReportPayload:
        active, critical = _alert_counts(context)
        return payload.model_copy(update={
            "active_alert_count": active,
            "critical_alert_count": critical,
        })

    def derive_risk(self, payload: GovernmentReportPayload) -> RiskLevel:
        if payload.active_alert_count > HIGH_RISK_ALERT_COUNT:
            return RiskLevel.HIGH
        return RiskLevel.LOW


def _alert_counts(context: dict[str, Any]) -> tuple[int, int]:
    alerts = context.get("alerts", [])
    critical = sum(1 for a in alerts if a.get("severity") == AlertSeverity.CRITICAL.value)
    return len(alerts), critical


def _register_agents() -> None:
    """Register the government reporting agent."""
    register_agent(
        agent_type=AgentType.GOVERNMENT_REPORTING,
        name="GovernmentReportAgent",
        factory=lambda ctx: GovernmentReportAgent(),
        capabilities={AgentCapability.LLM, AgentCapability.STORE_READ},
        priority=100,
    )


# Auto-register on import
_register_agents()
