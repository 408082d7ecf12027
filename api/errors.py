"""
API Error Handling

Every failure leaves the API as the envelope
``{"success": false, "error": <message>, "code": <ERROR_CODE>, "details": {...}}``.

Status codes:
- 502: the AI oracle is unavailable
- 400: invalid input, unknown or disabled agent
- 500: anything else (store failures on the dashboard, bugs)
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from agents.base import AgentResult
from api.models.responses import ErrorResponse
from core.schemas import AgentType, ErrorCodes, ShambaException

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "INTERNAL_ERROR"

_STATUS_BY_CODE = {
    ErrorCodes.ORACLE_UNAVAILABLE: 502,
    ErrorCodes.INVALID_INPUT: 400,
    ErrorCodes.UNKNOWN_AGENT: 400,
    ErrorCodes.AGENT_DISABLED: 400,
}


def status_for_code(code: str | None) -> int:
    return _STATUS_BY_CODE.get(code or "", 500)


def error_response(code: str, message: str, details: dict[str, Any] | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, code=code, details=details or {})
    return JSONResponse(status_code=status_for_code(code), content=body.model_dump(mode="json"))


class AgentRunFailed(Exception):
    """Raised by the agent routes when a run returns a failure result."""

    def __init__(self, agent_type: AgentType, result: AgentResult) -> None:
        super().__init__(result.error or "Agent run failed")
        self.agent_type = agent_type
        self.code = result.error_code or INTERNAL_ERROR
        self.message = str(self)
        self.details = dict(result.metadata.get("details") or {})


async def agent_run_failed_handler(request: Request, exc: AgentRunFailed) -> JSONResponse:
    logger.warning("%s run failed (%s): %s", exc.agent_type.value, exc.code, exc.message)
    return error_response(exc.code, exc.message, exc.details)


async def shamba_error_handler(request: Request, exc: ShambaException) -> JSONResponse:
    logger.warning("%s %s failed (%s): %s", request.method, request.url.path, exc.code, exc.message)
    return error_response(exc.code, exc.message, exc.details)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        ErrorCodes.INVALID_INPUT,
        "Request body must be a JSON object",
        {"errors": [str(e.get("msg", "")) for e in exc.errors()]},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(INTERNAL_ERROR, "An unexpected error occurred", {"type": type(exc).__name__})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AgentRunFailed, agent_run_failed_handler)
    app.add_exception_handler(ShambaException, shamba_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
