"""
Agent Runner Framework

PredictionAgent implements one agent invocation as a template method:

    parse input -> fetch context -> prompt -> oracle -> normalize -> enrich
    -> decide escalation -> annotate -> insert record -> apply actions

Subclasses supply the agent-specific pieces (context query, prompt,
enrichment, risk derivation). Only an oracle failure (or unusable input)
fails the run; store failures degrade to an empty context or an
unpersisted record.
"""

from __future__ import annotations

import json
from abc import abstractmethod
from datetime import timedelta
from typing import Any, ClassVar, Optional, TYPE_CHECKING

from pydantic import ValidationError

from core.schemas.errors import (
    ErrorCodes,
    InvalidInputException,
    OracleUnavailableException,
    StoreException,
)
from core.schemas.escalation import EscalationActions
from core.schemas.inputs import AgentInput
from core.schemas.payloads import BasePayload
from core.schemas.records import Alert, PredictionRecord
from core.schemas.types import TABLE_ALERTS, TABLE_PREDICTIONS, AgentType, RiskLevel

from .base import AgentCapability, AgentResult, BaseAgent
from .escalation import decide
from .normalizer import normalize_with_report

if TYPE_CHECKING:
    from .context import AgentContext


def rows_to_json(rows: list[dict[str, Any]]) -> str:
    """Render store rows for embedding in a prompt."""
    return json.dumps(rows, default=str, ensure_ascii=False)


class PredictionAgent(BaseAgent):
    """
    Base class for the five prediction agents.

    Class attributes every subclass sets:
        agent_type: Which agent this is
        input_model: Pydantic model for the caller's context input
        system_prompt: System message sent to the oracle
        temperature: Sampling temperature (None uses the configured default)
        ttl: Advisory lifetime of the record (None means no expiry)
    """

    _capabilities = {AgentCapability.LLM, AgentCapability.STORE_READ}

    agent_type: ClassVar[AgentType]
    input_model: ClassVar[type[AgentInput]]
    system_prompt: ClassVar[str]
    temperature: ClassVar[Optional[float]] = None
    ttl: ClassVar[Optional[timedelta]] = None

    # -- hooks -----------------------------------------------------------

    def fetch_context(self, ctx: "AgentContext", inp: AgentInput) -> dict[str, Any]:
        """Read related rows from the store. May raise StoreException."""
        return {}

    @abstractmethod
    def build_prompt(self, inp: AgentInput, context: dict[str, Any]) -> str:
        ...

    def build_messages(self, inp: AgentInput, context: dict[str, Any]) -> list[dict[str, Any]]:
        return [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": self.build_prompt(inp, context)},
        ]

    def enrich(self, payload: BasePayload, inp: AgentInput, context: dict[str, Any]) -> BasePayload:
        """Carry caller-supplied fields into the payload."""
        return payload

    def annotate(self, payload: BasePayload, actions: EscalationActions) -> BasePayload:
        """Record decided escalation on the payload before it is stored."""
        return payload

    @abstractmethod
    def derive_risk(self, payload: BasePayload) -> RiskLevel:
        ...

    def region_of(self, inp: AgentInput) -> str:
        return getattr(inp, "region")

    # -- run -------------------------------------------------------------

    def parse_input(self, context_input: dict[str, Any]) -> AgentInput:
        """
        Validate caller input (presence of required fields only).

        Raises:
            InvalidInputException: If a required field is missing or blank
        """
        try:
            return self.input_model.model_validate(context_input or {})
        except ValidationError as e:
            missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise InvalidInputException(
                f"Invalid input for {self.agent_type.value}: {', '.join(missing)}",
                details={"fields": missing},
            ) from e

    def run(self, ctx: "AgentContext", context_input: dict[str, Any]) -> AgentResult:
        """
        Run the agent once.

        Returns:
            AgentResult with the PredictionRecord, or a failure result
            (ORACLE_UNAVAILABLE or INVALID_INPUT)
        """
        try:
            inp = self.parse_input(context_input)
        except InvalidInputException as e:
            ctx.warning("%s: %s", self.name, e.message)
            return AgentResult.failure(e.message, code=e.code, metadata={"details": e.details})

        region = self.region_of(inp)
        ctx.info("%s run started (region=%s)", self.name, region)

        # (a) context
        try:
            context = self.fetch_context(ctx, inp)
        except StoreException as e:
            ctx.warning("%s: store read failed (%s); continuing without context", self.name, e.message)
            context = {}

        # (b, c) oracle
        if ctx.llm is None:
            error = OracleUnavailableException("No AI oracle configured")
            ctx.error("%s: %s", self.name, error.message)
            return AgentResult.failure(error.message, code=error.code)

        try:
            response = ctx.llm.chat(self.build_messages(inp, context), temperature=self.temperature)
        except OracleUnavailableException as e:
            ctx.error("%s: oracle unavailable: %s", self.name, e.message)
            return AgentResult.failure(e.message, code=e.code, metadata={"details": e.details})

        # (d) normalize
        report = normalize_with_report(response.content, self.agent_type)
        if report.used_fallback:
            ctx.warning("%s: malformed oracle output, fallback payload used", self.name)
        payload = self.enrich(report.payload, inp, context)

        # (f) decide before writing so the stored payload reflects it
        actions = decide(self.agent_type, payload, region=region)
        payload = self.annotate(payload, actions)

        # (e) record
        now = ctx.now()
        record = PredictionRecord(
            agent_type=self.agent_type,
            region=region,
            risk_level=self.derive_risk(payload),
            payload=payload,
            created_at=now,
            expires_at=now + self.ttl if self.ttl else None,
        )
        record = self._persist(ctx, record)

        # (f) apply
        alerts = self._apply_alert(ctx, record, actions)
        triggered = self._apply_trigger(ctx, actions)

        ctx.info(
            "%s run completed (risk=%s, persisted=%s, alerts=%d, triggered=%s)",
            self.name, record.risk_level.value, record.persisted, len(alerts), triggered,
        )

        return AgentResult(
            output=record,
            alerts=alerts,
            metadata={
                "agent_type": self.agent_type.value,
                "fallback_used": report.used_fallback,
                "repaired_fields": list(report.repaired_fields),
                "persisted": record.persisted,
                "triggered": triggered,
                "model": response.model,
                "latency_ms": response.latency_ms,
            },
        )

    # -- side effects ----------------------------------------------------

    def _persist(self, ctx: "AgentContext", record: PredictionRecord) -> PredictionRecord:
        try:
            row = ctx.store.insert(TABLE_PREDICTIONS, record.to_row())
        except StoreException as e:
            ctx.warning("%s: prediction not persisted (%s)", self.name, e.message)
            return record
        return record.model_copy(update={"id": str(row["id"])})

    def _apply_alert(
        self,
        ctx: "AgentContext",
        record: PredictionRecord,
        actions: EscalationActions,
    ) -> list[Alert]:
        planned = actions.alert
        if planned is None:
            return []

        alert = Alert(
            alert_type=planned.alert_type,
            severity=planned.severity,
            location=record.region,
            message=planned.message,
            details=record.payload.model_dump(mode="json"),
            created_at=record.created_at,
        )
        try:
            row = ctx.store.insert(TABLE_ALERTS, alert.to_row())
        except StoreException as e:
            ctx.warning("%s: alert not persisted (%s)", self.name, e.message)
            return [alert]

        ctx.info("%s: %s alert raised: %s", self.name, planned.severity.value, planned.message)
        return [alert.model_copy(update={"id": str(row["id"])})]

    def _apply_trigger(self, ctx: "AgentContext", actions: EscalationActions) -> Optional[str]:
        trigger = actions.cross_agent_trigger
        if trigger is None:
            return None
        try:
            ctx.dispatcher.dispatch(trigger.target, dict(trigger.input))
        except Exception as e:
            # Dispatch is fire-and-forget; the originating run is unaffected
            ctx.error(
                "%s: DownstreamTriggerFailed (%s): %s",
                self.name, ErrorCodes.DOWNSTREAM_TRIGGER_FAILED, e,
            )
            return None
        return trigger.target.value
