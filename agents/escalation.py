"""
Escalation Policy

Pure decision function mapping a normalized payload to its side effects.
Rules, one per agent, evaluated independently (both actions may fire):

- climate: risk_level high/critical -> post-harvest trigger + alert
- crop-health: severity high -> warning alert; health_status critical -> critical alert
- market: trend increasing and confidence > 0.7 -> info alert
- post-harvest: risk High (any case) -> warning alert
- government-reporting: nothing

The policy only decides. The runner applies the actions.
"""

from __future__ import annotations

from typing import Optional

from core.schemas.escalation import AlertSpec, CrossAgentTrigger, EscalationActions
from core.schemas.payloads import (
    BasePayload,
    ClimatePayload,
    CropHealthPayload,
    GovernmentReportPayload,
    MarketPayload,
    PostHarvestPayload,
)
from core.schemas.types import AgentType, AlertSeverity, AlertType, parse_agent_type


# Market alerts fire strictly above this confidence
MARKET_CONFIDENCE_THRESHOLD = 0.7

# Storage assumed for climate-triggered post-harvest runs
TRIGGERED_CROP_TYPE = "Maize"
TRIGGERED_STORAGE_TYPE = "Silo"

CLIMATE_TRIGGER_PREFIX = "Climate Risk: "

# Which agent each agent can start downstream
TRIGGER_TARGETS: dict[AgentType, AgentType] = {AgentType.CLIMATE: AgentType.POST_HARVEST}


def climate_trigger_reason(summary: str) -> str:
    return f"{CLIMATE_TRIGGER_PREFIX}{summary}"


def _decide_climate(payload: ClimatePayload, region: Optional[str]) -> EscalationActions:
    if payload.risk_level not in ("high", "critical"):
        return EscalationActions()

    reason = climate_trigger_reason(payload.summary)
    trigger_input = {
        "crop_type": TRIGGERED_CROP_TYPE,
        "storage_type": TRIGGERED_STORAGE_TYPE,
        "trigger_reason": reason,
    }
    if region is not None:
        trigger_input["region"] = region

    severity = AlertSeverity.CRITICAL if payload.risk_level == "critical" else AlertSeverity.WARNING
    return EscalationActions(
        cross_agent_trigger=CrossAgentTrigger(
            target=TRIGGER_TARGETS[AgentType.CLIMATE],
            reason=reason,
            input=trigger_input,
        ),
        alert=AlertSpec(
            alert_type=AlertType.CLIMATE,
            severity=severity,
            message=payload.summary or "Climate risk detected",
        ),
    )


def _decide_crop_health(payload: CropHealthPayload) -> EscalationActions:
    if payload.severity != "high" and payload.health_status != "critical":
        return EscalationActions()

    # severity=high wins over health_status=critical
    severity = AlertSeverity.WARNING if payload.severity == "high" else AlertSeverity.CRITICAL
    finding = payload.disease_detected or payload.pest_detected or "Health issue"
    return EscalationActions(
        alert=AlertSpec(
            alert_type=AlertType.PEST,
            severity=severity,
            message=f"{finding} detected in {payload.crop_type or 'crop'}",
        ),
    )


def _decide_market(payload: MarketPayload) -> EscalationActions:
    if payload.trend != "increasing" or not payload.confidence > MARKET_CONFIDENCE_THRESHOLD:
        return EscalationActions()
    commodity = payload.commodity or "Commodity"
    return EscalationActions(
        alert=AlertSpec(
            alert_type=AlertType.MARKET,
            severity=AlertSeverity.INFO,
            message=f"{commodity} prices trending up - good selling opportunity",
        ),
    )


def _decide_post_harvest(payload: PostHarvestPayload) -> EscalationActions:
    if not payload.is_high_risk:
        return EscalationActions()
    severity = AlertSeverity.CRITICAL if payload.risk.lower() == "critical" else AlertSeverity.WARNING
    threat = next((w for w in payload.warnings if w and w.strip()), None) or "Spoilage risk"
    return EscalationActions(
        alert=AlertSpec(
            alert_type=AlertType.POST_HARVEST,
            severity=severity,
            message=f"{threat} detected for {payload.crop_type or 'stored produce'}",
        ),
    )


def decide(
    agent_type: "AgentType | str",
    payload: BasePayload,
    *,
    region: Optional[str] = None,
) -> EscalationActions:
    """
    Decide the escalation actions for one normalized payload.

    Pure: the same arguments always yield an equal result.

    Args:
        agent_type: Agent that produced the payload
        payload: Normalized payload
        region: Region of the prediction, carried into trigger input

    Raises:
        TypeError: If the payload variant does not match the agent type
    """
    agent_type = parse_agent_type(agent_type)

    if agent_type is AgentType.CLIMATE and isinstance(payload, ClimatePayload):
        return _decide_climate(payload, region)
    if agent_type is AgentType.CROP_HEALTH and isinstance(payload, CropHealthPayload):
        return _decide_crop_health(payload)
    if agent_type is AgentType.MARKET and isinstance(payload, MarketPayload):
        return _decide_market(payload)
    if agent_type is AgentType.POST_HARVEST and isinstance(payload, PostHarvestPayload):
        return _decide_post_harvest(payload)
    if agent_type is AgentType.GOVERNMENT_REPORTING and isinstance(payload, GovernmentReportPayload):
        return EscalationActions()

    raise TypeError(
        f"Payload {type(payload).__name__} does not belong to agent type {agent_type.value}"
    )
