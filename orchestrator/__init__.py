"""
Orchestrator

Wires agents into a runnable service and computes the Aggregation View.

Public API:
- AgentService: Run any agent by type; owns the cross-agent dispatcher
- create_service: Build an AgentService from configuration
- build_dashboard: Per-agent display state from recent records
- Dashboard / AgentStatus: Aggregation View models
- time_ago: Human-readable record age
"""

from orchestrator.service import (
    DEFAULT_DASHBOARD_LIMIT,
    AgentService,
    create_service,
)
from orchestrator.dashboard import (
    AGENT_DISPLAY_NAMES,
    COUNTER_NAMES,
    NO_DATA,
    AgentStatus,
    Dashboard,
    build_dashboard,
    load_records,
    time_ago,
    was_triggered_by_climate,
)


__all__ = [
    # Service
    "AgentService",
    "create_service",
    "DEFAULT_DASHBOARD_LIMIT",
    # Aggregation View
    "Dashboard",
    "AgentStatus",
    "build_dashboard",
    "load_records",
    "time_ago",
    "was_triggered_by_climate",
    "AGENT_DISPLAY_NAMES",
    "COUNTER_NAMES",
    "NO_DATA",
]
