"""
Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Enumerations and constants
from .types import (
    NATIONAL_REGION,
    PREDICTION_TTL,
    TABLE_ALERTS,
    TABLE_CLIMATE_DATA,
    TABLE_MARKET_PRICES,
    TABLE_PREDICTIONS,
    AgentType,
    AlertSeverity,
    AlertType,
    RiskLevel,
    parse_agent_type,
)

# Error models and exceptions
from .errors import (
    DownstreamTriggerException,
    ErrorCodes,
    InvalidInputException,
    MalformedOracleOutputException,
    OracleUnavailableException,
    ShambaError,
    ShambaException,
    StoreException,
    StoreReadException,
    StoreWriteException,
    UnknownAgentException,
)

# Payload variants
from .payloads import (
    PAYLOAD_MODELS,
    BasePayload,
    ClimatePayload,
    CropHealthPayload,
    GovernmentReportPayload,
    MarketPayload,
    PostHarvestPayload,
    PredictionPayload,
    payload_model_for,
)

# Records
from .records import Alert, PredictionRecord

# Escalation actions
from .escalation import AlertSpec, CrossAgentTrigger, EscalationActions

# Agent inputs
from .inputs import (
    INPUT_MODELS,
    AgentInput,
    ClimateInput,
    CropHealthInput,
    GovernmentReportInput,
    MarketInput,
    PostHarvestInput,
)


# Define __all__ for explicit public API
__all__ = [
    # Types
    "AgentType",
    "RiskLevel",
    "AlertSeverity",
    "AlertType",
    "parse_agent_type",
    "PREDICTION_TTL",
    "NATIONAL_REGION",
    "TABLE_PREDICTIONS",
    "TABLE_ALERTS",
    "TABLE_CLIMATE_DATA",
    "TABLE_MARKET_PRICES",
    # Errors
    "ErrorCodes",
    "ShambaError",
    "ShambaException",
    "OracleUnavailableException",
    "MalformedOracleOutputException",
    "StoreException",
    "StoreReadException",
    "StoreWriteException",
    "DownstreamTriggerException",
    "UnknownAgentException",
    "InvalidInputException",
    # Payloads
    "BasePayload",
    "ClimatePayload",
    "CropHealthPayload",
    "MarketPayload",
    "PostHarvestPayload",
    "GovernmentReportPayload",
    "PredictionPayload",
    "PAYLOAD_MODELS",
    "payload_model_for",
    # Records
    "PredictionRecord",
    "Alert",
    # Escalation
    "AlertSpec",
    "CrossAgentTrigger",
    "EscalationActions",
    # Inputs
    "AgentInput",
    "ClimateInput",
    "CropHealthInput",
    "MarketInput",
    "PostHarvestInput",
    "GovernmentReportInput",
    "INPUT_MODELS",
]
