"""
Schemas
File: records.py

Purpose: Durable entities owned by the store.

- PredictionRecord: the result of one agent invocation
- Alert: a user-facing alert caused by one prediction's escalation

Both map to and from plain store rows via ``to_row`` / ``from_row``.
The row layout matches the ``agent_predictions`` and ``alerts`` tables.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .payloads import PredictionPayload
from .types import AgentType, AlertSeverity, AlertType, RiskLevel, parse_agent_type


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Read naive timestamps (``timestamp`` columns without a zone) as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PredictionRecord(BaseModel):
    """
    Schema-conformant result of one agent invocation.

    Immutable once built. ``id`` is None when the record could not be
    persisted; the caller still receives it as a best-effort answer.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = Field(
        default=None,
        description="Store-assigned identifier (None if not persisted)",
    )
    agent_type: AgentType = Field(..., description="Agent that produced this record")
    region: str = Field(..., description="Free-text locality, 'National' for aggregate reports")
    risk_level: RiskLevel = Field(..., description="Derived once from the payload at creation")
    payload: PredictionPayload = Field(..., description="Agent-specific structured payload")
    created_at: datetime = Field(..., description="Insertion timestamp")
    expires_at: Optional[datetime] = Field(
        default=None,
        description="Advisory staleness horizon; never enforced by deletion",
    )

    @field_validator("created_at", "expires_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @property
    def persisted(self) -> bool:
        """Whether the store accepted this record."""
        return self.id is not None

    @property
    def trigger_reason(self) -> Optional[str]:
        return self.payload.trigger_reason

    def is_expired(self, now: datetime) -> bool:
        """Check whether the record is past its advisory expiry."""
        return self.expires_at is not None and now >= self.expires_at

    def to_row(self) -> dict[str, Any]:
        """Convert to an ``agent_predictions`` row (without id)."""
        return {
            "agent_type": self.agent_type.value,
            "region": self.region,
            "risk_level": self.risk_level.value,
            "prediction_data": self.payload.model_dump(mode="json"),
            "created_at": _iso(self.created_at),
            "expires_at": _iso(self.expires_at),
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "PredictionRecord":
        """
        Build a record from a stored row.

        Raises:
            ValueError / pydantic.ValidationError: If the row is not a
                complete record for its agent type
        """
        agent_type = parse_agent_type(row["agent_type"])
        payload = dict(row.get("prediction_data") or {})
        payload["agent_type"] = agent_type.value
        return cls.model_validate({
            "id": row.get("id"),
            "agent_type": agent_type,
            "region": row.get("region", ""),
            "risk_level": str(row.get("risk_level", "low")).lower(),
            "payload": payload,
            "created_at": row["created_at"],
            "expires_at": row.get("expires_at"),
        })


class Alert(BaseModel):
    """
    User-facing alert.

    Always the consequence of exactly one prediction's escalation; the
    justifying payload is kept in ``details`` for drill-down.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    alert_type: AlertType
    severity: AlertSeverity
    location: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    @field_validator("created_at", "resolved_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    def to_row(self) -> dict[str, Any]:
        """Convert to an ``alerts`` row (without id)."""
        return {
            "alert_type": self.alert_type.value,
            "severity": self.severity.value,
            "location": self.location,
            "message": self.message,
            "details": self.details,
            "is_active": self.is_active,
            "created_at": _iso(self.created_at),
            "resolved_at": _iso(self.resolved_at),
        }

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Alert":
        return cls.model_validate({
            "id": row.get("id"),
            "alert_type": row["alert_type"],
            "severity": row["severity"],
            "location": row.get("location", ""),
            "message": row.get("message", ""),
            "details": row.get("details") or {},
            "is_active": row.get("is_active", True),
            "created_at": row.get("created_at"),
            "resolved_at": row.get("resolved_at"),
        })
