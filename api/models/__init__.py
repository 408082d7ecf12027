"""API request and response models."""

from api.models.requests import AgentRunRequest, DashboardQuery
from api.models.responses import (
    RESULT_KEYS,
    SUCCESS_MESSAGES,
    AgentRunResponse,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "AgentRunRequest",
    "DashboardQuery",
    "HealthResponse",
    "AgentRunResponse",
    "ErrorResponse",
    "RESULT_KEYS",
    "SUCCESS_MESSAGES",
]
