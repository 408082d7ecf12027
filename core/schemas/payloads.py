"""
Schemas
File: payloads.py

Purpose: Per-agent structured payloads.

Each agent produces exactly one payload variant. The variants form a
tagged union keyed by ``agent_type`` so downstream code (normalizer,
escalation policy, store mapping) can match exhaustively instead of
probing fields by name.

Required fields carry no defaults here: the Response Normalizer is the
single place that fills them, so a payload that validates is always
structurally complete.
"""

import math
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import AgentType, RiskLevel


_NULL_STRINGS = {"", "null", "none", "n/a", "nil"}

POST_HARVEST_RISKS = {"low", "medium", "high", "critical"}
# Severe wording outside the scale is recorded as High rather than defaulted
_SEVERE_RISK_TERMS = {"very high", "severe", "extreme"}


def _lower_str(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().lower()
    return v


def _as_str_list(v: Any) -> Any:
    """Coerce a scalar or mixed list into a list of strings."""
    if v is None:
        return []
    if isinstance(v, str):
        return [v] if v.strip() else []
    if isinstance(v, (list, tuple)):
        out = []
        for item in v:
            if item is None:
                continue
            if isinstance(item, str):
                out.append(item)
            elif isinstance(item, dict):
                # {"action": "..."} style entries: keep the text
                text = next((x for x in item.values() if isinstance(x, str)), None)
                out.append(text if text is not None else str(item))
            else:
                out.append(str(item))
        return out
    return v


def _as_list(v: Any) -> Any:
    if v is None:
        return []
    if isinstance(v, (str, dict)):
        return [v]
    return v


def _unit_interval(v: Any) -> Any:
    """Parse a 0-1 score, accepting percentages like 85 or "85%"."""
    if isinstance(v, bool):
        raise ValueError("score must be numeric")
    percent = False
    if isinstance(v, str):
        percent = v.strip().endswith("%")
        v = v.strip().rstrip("%")
    try:
        value = float(v)
    except (TypeError, ValueError):
        raise ValueError(f"score must be numeric, got {v!r}")
    if not math.isfinite(value):
        raise ValueError(f"score must be finite, got {value!r}")
    if percent or (1.0 < value <= 100.0 and value.is_integer()):
        value = value / 100.0
    return max(0.0, min(1.0, value))


class BasePayload(BaseModel):
    """
    Fields shared by every payload variant.

    Unknown keys returned by the oracle are kept (``extra="allow"``) so the
    stored payload stays a faithful audit of what the model said.
    """

    model_config = ConfigDict(extra="allow", use_enum_values=True)

    # Names of the fields the oracle must supply for this variant
    required_fields: ClassVar[tuple[str, ...]] = ()

    agent_type: str
    trigger_reason: Optional[str] = Field(
        default=None,
        description="Causal reason when this run was started by another agent",
    )

    @field_validator("trigger_reason", mode="before")
    @classmethod
    def blank_reason(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ClimatePayload(BasePayload):
    """Climate risk forecast for a region."""

    required_fields: ClassVar[tuple[str, ...]] = (
        "risk_level",
        "rainfall_forecast",
        "temperature_trend",
        "recommendations",
        "warnings",
        "summary",
    )

    agent_type: Literal["climate"] = "climate"
    risk_level: RiskLevel
    rainfall_forecast: str
    temperature_trend: str
    recommendations: list[str]
    warnings: list[str]
    summary: str
    collaboration_status: Optional[str] = None

    @field_validator("risk_level", mode="before")
    @classmethod
    def lower_risk(cls, v: Any) -> Any:
        return _lower_str(v)

    @field_validator("recommendations", "warnings", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _as_str_list(v)


class CropHealthPayload(BasePayload):
    """Crop health assessment for a crop at a location."""

    required_fields: ClassVar[tuple[str, ...]] = (
        "health_status",
        "disease_detected",
        "pest_detected",
        "confidence_score",
        "recommendations",
        "severity",
    )

    agent_type: Literal["crop-health"] = "crop-health"
    health_status: Literal["healthy", "stressed", "diseased", "critical", "unknown"]
    disease_detected: Optional[str]
    pest_detected: Optional[str]
    confidence_score: float = Field(..., ge=0.0, le=1.0)
    recommendations: list[str]
    severity: Literal["low", "medium", "high"]
    crop_type: Optional[str] = None
    location: Optional[str] = None

    @field_validator("health_status", mode="before")
    @classmethod
    def lower_status(cls, v: Any) -> Any:
        return _lower_str(v)

    @field_validator("severity", mode="before")
    @classmethod
    def cap_severity(cls, v: Any) -> Any:
        # The scale tops out at high; harsher wording must still alert
        v = _lower_str(v)
        if v == "critical" or v in _SEVERE_RISK_TERMS:
            return "high"
        return v

    @field_validator("recommendations", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _as_str_list(v)

    @field_validator("confidence_score", mode="before")
    @classmethod
    def coerce_score(cls, v: Any) -> Any:
        return _unit_interval(v)

    @field_validator("disease_detected", "pest_detected", mode="before")
    @classmethod
    def nullish_findings(cls, v: Any) -> Any:
        if v is False:
            return None
        if isinstance(v, str) and v.strip().lower() in _NULL_STRINGS:
            return None
        return v


class MarketPayload(BasePayload):
    """Market intelligence for a commodity."""

    required_fields: ClassVar[tuple[str, ...]] = (
        "trend",
        "price_prediction",
        "best_selling_time",
        "supply_analysis",
        "demand_analysis",
        "opportunities",
        "recommendations",
        "confidence",
    )

    agent_type: Literal["market"] = "market"
    trend: Literal["increasing", "stable", "decreasing"]
    price_prediction: str
    best_selling_time: str
    supply_analysis: str
    demand_analysis: str
    opportunities: list[str]
    recommendations: list[str]
    confidence: float = Field(..., ge=0.0, le=1.0)
    commodity: Optional[str] = None

    @field_validator("trend", mode="before")
    @classmethod
    def lower_trend(cls, v: Any) -> Any:
        return _lower_str(v)

    @field_validator("opportunities", "recommendations", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _as_str_list(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_score(cls, v: Any) -> Any:
        return _unit_interval(v)


class PostHarvestPayload(BasePayload):
    """Post-harvest spoilage risk for stored produce."""

    required_fields: ClassVar[tuple[str, ...]] = (
        "risk",
        "safe_days",
        "warnings",
        "logistics_action",
    )

    agent_type: Literal["post-harvest"] = "post-harvest"
    # Kept in the oracle's casing ("High"); compare case-insensitively
    risk: str
    safe_days: int = Field(..., ge=0)
    warnings: list[str]
    logistics_action: str
    crop_type: Optional[str] = None
    storage_type: Optional[str] = None

    @field_validator("warnings", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _as_str_list(v)

    @field_validator("risk", mode="before")
    @classmethod
    def known_risk(cls, v: Any) -> Any:
        if not isinstance(v, str):
            raise ValueError("risk must be a string")
        risk = v.strip()
        if risk.lower() in _SEVERE_RISK_TERMS:
            return "High"
        if risk.lower() not in POST_HARVEST_RISKS:
            raise ValueError("risk must be Low, Medium, High or Critical")
        return risk

    @field_validator("safe_days", mode="before")
    @classmethod
    def coerce_days(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("safe_days must be numeric")
        if isinstance(v, str) and v.strip():
            v = v.strip().split()[0]
        try:
            return int(round(float(v)))
        except (TypeError, ValueError, OverflowError):
            raise ValueError(f"safe_days must be numeric, got {v!r}")

    @property
    def is_high_risk(self) -> bool:
        return self.risk.lower() in ("high", "critical")


class GovernmentReportPayload(BasePayload):
    """National food security policy brief."""

    required_fields: ClassVar[tuple[str, ...]] = (
        "executive_summary",
        "critical_risks",
        "regional_hotspots",
        "recommended_interventions",
        "economic_impact_estimate",
    )

    agent_type: Literal["government-reporting"] = "government-reporting"
    executive_summary: str
    critical_risks: list[Any]
    regional_hotspots: list[Any]
    recommended_interventions: list[Any]
    economic_impact_estimate: str
    active_alert_count: int = 0
    critical_alert_count: int = 0

    @field_validator(
        "critical_risks", "regional_hotspots", "recommended_interventions", mode="before"
    )
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _as_list(v)


PredictionPayload = Annotated[
    Union[
        ClimatePayload,
        CropHealthPayload,
        MarketPayload,
        PostHarvestPayload,
        GovernmentReportPayload,
    ],
    Field(discriminator="agent_type"),
]


PAYLOAD_MODELS: dict[AgentType, type[BasePayload]] = {
    AgentType.CLIMATE: ClimatePayload,
    AgentType.CROP_HEALTH: CropHealthPayload,
    AgentType.MARKET: MarketPayload,
    AgentType.POST_HARVEST: PostHarvestPayload,
    AgentType.GOVERNMENT_REPORTING: GovernmentReportPayload,
}


def payload_model_for(agent_type: AgentType) -> type[BasePayload]:
    """Get the payload model for an agent type."""
    return PAYLOAD_MODELS[AgentType(agent_type)]
