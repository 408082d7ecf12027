"""
Health Check Route

Simple health check endpoint for liveness checks.
"""

from fastapi import APIRouter, Depends

from api.deps import get_service
from api.models.responses import HealthResponse
from orchestrator import AgentService


router = APIRouter(tags=["health"])


def _health(service: AgentService) -> HealthResponse:
    return HealthResponse(
        ok=True,
        store_backend=service.config.store.backend,
        llm_configured=service.context.llm is not None,
        dispatch_enabled=service.config.dispatch.enabled,
    )


@router.get("/health", response_model=HealthResponse)
def health_check(service: AgentService = Depends(get_service)) -> HealthResponse:
    """
    Health check endpoint.

    Returns service status for liveness checks.
    """
    return _health(service)


@router.get("/", response_model=HealthResponse)
def root(service: AgentService = Depends(get_service)) -> HealthResponse:
    """
    Root endpoint - same as health check.
    """
    return _health(service)
