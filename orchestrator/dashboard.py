"""
Aggregation View

Read-only per-agent display state computed from the most recent
PredictionRecords and the number of active alerts. Nothing here writes to
the store or runs an agent.

Per agent:
- last_update: age of the agent's latest record ("5 min ago", "No data")
- one counter (climate predictions, crop-health alerts, post-harvest
  warnings, market insights, government reports)
- triggered_by: set on post-harvest when its latest record was started by
  a climate escalation
- stale: the latest record is past its advisory expiry
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from pydantic import BaseModel, Field, ValidationError

from agents.climate import COLLABORATION_NOTIFIED
from agents.escalation import CLIMATE_TRIGGER_PREFIX
from core.schemas import AgentType, PredictionRecord
from core.schemas.records import as_utc

logger = logging.getLogger(__name__)


NO_DATA = "No data"
CLIMATE_TRIGGER_SOURCE = "Climate Agent"

# Matches both "Climate Risk: ..." and older free-text reasons
_CLIMATE_MARKER = CLIMATE_TRIGGER_PREFIX.rstrip(": ")

AGENT_DISPLAY_NAMES: dict[AgentType, str] = {
    AgentType.CLIMATE: "Climate Risk Prediction",
    AgentType.CROP_HEALTH: "Crop Health Monitor",
    AgentType.POST_HARVEST: "Post-Harvest Prevention",
    AgentType.MARKET: "Market Intelligence",
    AgentType.GOVERNMENT_REPORTING: "Government Reporting",
}

# Counter label shown for each agent
COUNTER_NAMES: dict[AgentType, str] = {
    AgentType.CLIMATE: "predictions",
    AgentType.CROP_HEALTH: "alerts",
    AgentType.POST_HARVEST: "warnings",
    AgentType.MARKET: "insights",
    AgentType.GOVERNMENT_REPORTING: "reports",
}


class AgentStatus(BaseModel):
    """Display state for one agent."""

    agent_type: AgentType
    name: str
    status: str = "active"
    last_update: str = NO_DATA
    last_updated_at: Optional[datetime] = None
    counter: str = Field(..., description="Name of the counter shown for this agent")
    count: int = 0
    triggered_by: Optional[str] = None
    stale: bool = False
    latest_risk_level: Optional[str] = None


class Dashboard(BaseModel):
    """Aggregation View over all agents."""

    generated_at: datetime
    active_alerts: int = 0
    agents: list[AgentStatus] = Field(default_factory=list)

    def status_for(self, agent_type: "AgentType | str") -> AgentStatus:
        key = AgentType(agent_type)
        for status in self.agents:
            if status.agent_type == key:
                return status
        raise KeyError(key.value)


def time_ago(then: Optional[datetime], now: datetime) -> str:
    """
    Human-readable age of a timestamp.

    90 seconds old gives "1 min ago"; None gives "No data".
    """
    if then is None:
        return NO_DATA
    seconds = max(0, int((as_utc(now) - as_utc(then)).total_seconds()))
    if seconds < 60:
        return f"{seconds} sec ago"
    if seconds < 3600:
        return f"{seconds // 60} min ago"
    if seconds < 86400:
        return f"{seconds // 3600} hours ago"
    return f"{seconds // 86400} days ago"


def load_records(rows: Iterable[dict[str, Any]]) -> list[PredictionRecord]:
    """Parse stored rows, skipping any that are not complete records."""
    records = []
    for row in rows:
        try:
            records.append(PredictionRecord.from_row(row))
        except (KeyError, ValueError, ValidationError) as e:
            logger.warning("Skipping unreadable prediction row %s: %s", row.get("id"), e)
    return records


def was_triggered_by_climate(record: PredictionRecord) -> bool:
    """Whether a post-harvest record was started by a climate escalation."""
    payload = record.payload
    extra = payload.model_extra or {}
    reason = payload.trigger_reason or extra.get("triggerReason") or ""
    if _CLIMATE_MARKER in str(reason):
        return True
    return extra.get("collaboration_status") == COLLABORATION_NOTIFIED


def build_dashboard(
    records: Iterable[PredictionRecord],
    active_alert_count: int,
    *,
    now: datetime,
) -> Dashboard:
    """
    Compute per-agent display state.

    Args:
        records: Most recent records across all agents, in any order
        active_alert_count: Number of alerts with is_active = True
        now: Reference time for ages and expiry

    Returns:
        Dashboard with one AgentStatus per agent type
    """
    by_type: dict[AgentType, list[PredictionRecord]] = {t: [] for t in AgentType}
    for record in records:
        by_type[record.agent_type].append(record)

    statuses = []
    for agent_type in AGENT_DISPLAY_NAMES:
        own = sorted(by_type[agent_type], key=lambda r: r.created_at, reverse=True)
        latest = own[0] if own else None

        if agent_type == AgentType.POST_HARVEST:
            count = active_alert_count
        else:
            count = len(own)

        triggered_by = None
        if agent_type == AgentType.POST_HARVEST and latest is not None and was_triggered_by_climate(latest):
            triggered_by = CLIMATE_TRIGGER_SOURCE

        statuses.append(AgentStatus(
            agent_type=agent_type,
            name=AGENT_DISPLAY_NAMES[agent_type],
            last_update=time_ago(latest.created_at if latest else None, now),
            last_updated_at=latest.created_at if latest else None,
            counter=COUNTER_NAMES[agent_type],
            count=count,
            triggered_by=triggered_by,
            stale=latest.is_expired(now) if latest else False,
            latest_risk_level=latest.risk_level.value if latest else None,
        ))

    return Dashboard(
        generated_at=now,
        active_alerts=active_alert_count,
        agents=statuses,
    )
