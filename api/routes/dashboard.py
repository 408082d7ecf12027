"""
Dashboard Route

Aggregation View over the most recent predictions and active alerts.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.deps import get_service
from orchestrator import AgentService, Dashboard


router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=Dashboard)
def get_dashboard(
    limit: int = Query(default=100, ge=1, le=1000, description="Number of recent predictions to aggregate"),
    service: AgentService = Depends(get_service),
) -> Dashboard:
    """Per-agent freshness, counters and collaboration state."""
    return service.dashboard(limit=limit)
