"""
Response Normalizer

Turns free-text oracle output into a schema-conformant payload for any
agent type. Never raises:

1. Strip code fences and extract the outermost JSON object.
2. If nothing parses, return the agent's fallback payload.
3. Fill every required field the oracle left out (or set to null) from the
   agent's field defaults.
4. Fields that are present but fail validation are replaced by their
   default and validation is retried once; a second failure falls back.

Both tables below are keyed by AgentType; adding an agent means adding a
row to each, not another try/except.
"""

from __future__ import annotations

import copy
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from core.schemas.errors import MalformedOracleOutputException
from core.schemas.payloads import BasePayload, payload_model_for
from core.schemas.types import AgentType, parse_agent_type

logger = logging.getLogger(__name__)


_MANUAL_REVIEW = "Automated analysis failed, manual review advised"
_NOT_AVAILABLE = "Not available"

# Per-field defaults used when a parsed response omits a required field
FIELD_DEFAULTS: dict[AgentType, dict[str, Any]] = {
    AgentType.CLIMATE: {
        "risk_level": "medium",
        "rainfall_forecast": _NOT_AVAILABLE,
        "temperature_trend": _NOT_AVAILABLE,
        "recommendations": [],
        "warnings": [],
        "summary": "No summary provided",
    },
    AgentType.CROP_HEALTH: {
        "health_status": "unknown",
        "disease_detected": None,
        "pest_detected": None,
        "confidence_score": 0.5,
        "recommendations": [],
        "severity": "low",
    },
    AgentType.MARKET: {
        "trend": "stable",
        "price_prediction": _NOT_AVAILABLE,
        "best_selling_time": _NOT_AVAILABLE,
        "supply_analysis": _NOT_AVAILABLE,
        "demand_analysis": _NOT_AVAILABLE,
        "opportunities": [],
        "recommendations": [],
        "confidence": 0.6,
    },
    AgentType.POST_HARVEST: {
        "risk": "Medium",
        "safe_days": 7,
        "warnings": [],
        "logistics_action": "Inspect stored produce regularly",
    },
    AgentType.GOVERNMENT_REPORTING: {
        "executive_summary": "No summary provided",
        "critical_risks": [],
        "regional_hotspots": [],
        "recommended_interventions": [],
        "economic_impact_estimate": _NOT_AVAILABLE,
    },
}

# Whole-payload substitutes used when the response is not JSON at all.
# Risk-bearing fields sit at a conservative middle value.
FALLBACKS: dict[AgentType, dict[str, Any]] = {
    AgentType.CLIMATE: {
        "risk_level": "medium",
        "rainfall_forecast": f"Unavailable. {_MANUAL_REVIEW}",
        "temperature_trend": f"Unavailable. {_MANUAL_REVIEW}",
        "recommendations": ["Monitor local weather advisories"],
        "warnings": [_MANUAL_REVIEW],
        "summary": _MANUAL_REVIEW,
    },
    AgentType.CROP_HEALTH: {
        "health_status": "unknown",
        "disease_detected": None,
        "pest_detected": None,
        "confidence_score": 0.5,
        "analysis": "Unable to complete full analysis. Manual review advised",
        "recommendations": [
            "Monitor crops regularly",
            "Consult with agricultural extension officer",
        ],
        "severity": "low",
    },
    AgentType.MARKET: {
        "trend": "stable",
        "price_prediction": f"Unavailable. {_MANUAL_REVIEW}",
        "best_selling_time": "Monitor market for optimal timing",
        "supply_analysis": f"Unavailable. {_MANUAL_REVIEW}",
        "demand_analysis": f"Unavailable. {_MANUAL_REVIEW}",
        "opportunities": ["Regular market monitoring recommended"],
        "recommendations": ["Track price changes", "Consider storage options"],
        "confidence": 0.6,
    },
    AgentType.POST_HARVEST: {
        "risk": "Medium",
        "safe_days": 7,
        "warnings": [_MANUAL_REVIEW],
        "logistics_action": "Inspect stored produce and consult an extension officer",
    },
    AgentType.GOVERNMENT_REPORTING: {
        "executive_summary": "Automated report generation failed. Manual review advised",
        "critical_risks": [],
        "regional_hotspots": [],
        "recommended_interventions": ["Review active alerts manually"],
        "economic_impact_estimate": _NOT_AVAILABLE,
    },
}


@dataclass
class NormalizationResult:
    """Outcome of normalizing one oracle response."""
    payload: BasePayload
    used_fallback: bool = False
    repaired_fields: list[str] = field(default_factory=list)
    error: Optional[str] = None


_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


def extract_json(text: str) -> dict[str, Any]:
    """
    Extract the JSON object embedded in oracle text.

    Raises:
        MalformedOracleOutputException: If no JSON object can be parsed
    """
    if not text or not text.strip():
        raise MalformedOracleOutputException("Empty oracle response")

    match = _FENCE_RE.search(text)
    candidate = match.group(1).strip() if match else text.strip()

    try:
        obj = json.loads(candidate)
    except json.JSONDecodeError:
        # Prose around the object, or an unterminated fence
        start = candidate.find("{")
        end = candidate.rfind("}") + 1
        if start < 0 or end <= start:
            raise MalformedOracleOutputException(
                "No JSON object in oracle response",
                details={"excerpt": text[:200]},
            )
        try:
            obj = json.loads(candidate[start:end])
        except json.JSONDecodeError as e:
            raise MalformedOracleOutputException(
                f"Invalid JSON in oracle response: {e}",
                details={"excerpt": text[:200]},
            ) from e

    if not isinstance(obj, dict):
        raise MalformedOracleOutputException(
            f"Oracle response is a JSON {type(obj).__name__}, expected an object"
        )
    return obj


def fallback_payload(agent_type: AgentType) -> BasePayload:
    """Build the fixed fallback payload for an agent."""
    agent_type = parse_agent_type(agent_type)
    data = copy.deepcopy(FALLBACKS[agent_type])
    data["agent_type"] = agent_type.value
    return payload_model_for(agent_type).model_validate(data)


def _fill_missing(data: dict[str, Any], model: type[BasePayload], defaults: dict[str, Any]) -> list[str]:
    filled = []
    for name in model.required_fields:
        default = defaults[name]
        if name not in data or (data[name] is None and default is not None):
            data[name] = copy.deepcopy(default)
            filled.append(name)
    return filled


def _failed_fields(error: ValidationError) -> set[str]:
    return {str(err["loc"][0]) for err in error.errors() if err.get("loc")}


def normalize_with_report(raw_text: Optional[str], agent_type: "AgentType | str") -> NormalizationResult:
    """
    Normalize oracle text into the payload for ``agent_type``.

    Never raises for any ``raw_text``.
    """
    agent_type = parse_agent_type(agent_type)
    model = payload_model_for(agent_type)
    defaults = FIELD_DEFAULTS[agent_type]

    try:
        parsed = extract_json(raw_text or "")
    except MalformedOracleOutputException as e:
        logger.warning("%s: %s; using fallback payload", agent_type.value, e.message)
        return NormalizationResult(
            payload=fallback_payload(agent_type),
            used_fallback=True,
            error=e.message,
        )

    data = dict(parsed)
    data["agent_type"] = agent_type.value
    repaired = _fill_missing(data, model, defaults)

    try:
        payload = model.model_validate(data)
    except ValidationError as first:
        bad = _failed_fields(first)
        for name in sorted(bad):
            if name in defaults:
                data[name] = copy.deepcopy(defaults[name])
            else:
                # Optional or caller-owned field: drop it, the model default applies
                data.pop(name, None)
            if name not in repaired:
                repaired.append(name)
        try:
            payload = model.model_validate(data)
        except ValidationError as second:
            logger.warning(
                "%s: payload still invalid after repair (%s); using fallback payload",
                agent_type.value, sorted(_failed_fields(second)),
            )
            return NormalizationResult(
                payload=fallback_payload(agent_type),
                used_fallback=True,
                repaired_fields=repaired,
                error=str(second),
            )

    if repaired:
        logger.info("%s: defaulted fields %s", agent_type.value, repaired)
    return NormalizationResult(payload=payload, repaired_fields=repaired)


def normalize(raw_text: Optional[str], agent_type: "AgentType | str") -> BasePayload:
    """Normalize oracle text and return only the payload."""
    return normalize_with_report(raw_text, agent_type).payload
