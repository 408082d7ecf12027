"""
Schemas
File: types.py

Purpose: Enumerations shared by every agent, record and alert.
"""

from datetime import timedelta
from enum import Enum


class AgentType(str, Enum):
    """The five prediction agents in the network."""
    CLIMATE = "climate"
    CROP_HEALTH = "crop-health"
    MARKET = "market"
    POST_HARVEST = "post-harvest"
    GOVERNMENT_REPORTING = "government-reporting"


class RiskLevel(str, Enum):
    """Risk level recorded on every PredictionRecord."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AlertSeverity(str, Enum):
    """Severity of a user-facing alert."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertType(str, Enum):
    """Category tag on an alert."""
    CLIMATE = "climate"
    PEST = "pest"
    POST_HARVEST = "post_harvest"
    MARKET = "market"


# Climate and market predictions are advisory for a week
PREDICTION_TTL = timedelta(days=7)

# Region recorded on aggregate reports
NATIONAL_REGION = "National"

# Store tables
TABLE_PREDICTIONS = "agent_predictions"
TABLE_ALERTS = "alerts"
TABLE_CLIMATE_DATA = "climate_data"
TABLE_MARKET_PRICES = "market_prices"


def parse_agent_type(value: "str | AgentType") -> AgentType:
    """
    Parse an agent type, accepting the underscore spellings used by
    older rows (e.g. "government_reporting", "crop_health").

    Raises:
        ValueError: If the value names no known agent
    """
    if isinstance(value, AgentType):
        return value
    normalized = str(value).strip().lower().replace("_", "-")
    if normalized == "government":
        normalized = AgentType.GOVERNMENT_REPORTING.value
    return AgentType(normalized)
