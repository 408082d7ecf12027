"""
Error taxonomy for the agent network.

ErrorCodes are the stable strings callers see. ShambaException subclasses
carry one code each and collect structured details; ShambaError is the
same information as a model for places that pass errors around instead
of raising them.

Only an unavailable oracle (or unusable input) fails an agent run. Store
failures, malformed oracle text and failed downstream triggers are
absorbed by the runner and logged.
"""

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorCodes:
    ORACLE_UNAVAILABLE = "ORACLE_UNAVAILABLE"
    MALFORMED_ORACLE_OUTPUT = "MALFORMED_ORACLE_OUTPUT"

    STORE_READ_FAILED = "STORE_READ_FAILED"
    STORE_WRITE_FAILED = "STORE_WRITE_FAILED"

    DOWNSTREAM_TRIGGER_FAILED = "DOWNSTREAM_TRIGGER_FAILED"
    UNKNOWN_AGENT = "UNKNOWN_AGENT"
    AGENT_DISABLED = "AGENT_DISABLED"

    INVALID_INPUT = "INVALID_INPUT"


class ShambaError(BaseModel):
    """Serializable form of a ShambaException."""

    model_config = ConfigDict(extra="forbid")

    code: str = Field(..., examples=[ErrorCodes.ORACLE_UNAVAILABLE])
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
    retryable: bool = False

    def to_exception(self) -> "ShambaException":
        return ShambaException(self.message, self.code, dict(self.details), self.retryable)


class ShambaException(Exception):
    """
    Base exception for agent network errors.

    Subclasses fix ``default_code`` and ``default_retryable`` and may name
    a ``context_key`` (table, provider, target) whose value is copied into
    ``details`` when given.
    """

    default_code: ClassVar[str] = "SHAMBA_ERROR"
    default_retryable: ClassVar[bool] = False
    context_key: ClassVar[Optional[str]] = None

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        retryable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = dict(details or {})
        self.retryable = self.default_retryable if retryable is None else retryable

    @classmethod
    def with_context(
        cls,
        context: Optional[str],
        details: Optional[dict[str, Any]],
    ) -> dict[str, Any]:
        merged = dict(details or {})
        if context and cls.context_key:
            merged[cls.context_key] = context
        return merged

    def to_error_model(self) -> ShambaError:
        return ShambaError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class OracleUnavailableException(ShambaException):
    """The AI oracle call failed or timed out."""

    default_code = ErrorCodes.ORACLE_UNAVAILABLE
    default_retryable = True
    context_key = "provider"

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=self.with_context(provider, details))


class MalformedOracleOutputException(ShambaException):
    """Oracle text held no usable JSON object (handled by the normalizer)."""

    default_code = ErrorCodes.MALFORMED_ORACLE_OUTPUT


class StoreException(ShambaException):
    default_retryable = True
    context_key = "table"

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=self.with_context(table, details))


class StoreReadException(StoreException):
    default_code = ErrorCodes.STORE_READ_FAILED


class StoreWriteException(StoreException):
    default_code = ErrorCodes.STORE_WRITE_FAILED


class DownstreamTriggerException(ShambaException):
    """A dispatched cross-agent run failed; reported, never raised to the caller."""

    default_code = ErrorCodes.DOWNSTREAM_TRIGGER_FAILED
    context_key = "target"

    def __init__(
        self,
        message: str,
        target: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=self.with_context(target, details))


class UnknownAgentException(ShambaException):
    default_code = ErrorCodes.UNKNOWN_AGENT

    def __init__(self, agent_type: str) -> None:
        super().__init__(f"Unknown agent type: {agent_type}", details={"agent_type": agent_type})


class InvalidInputException(ShambaException):
    """Caller input is missing a required field."""

    default_code = ErrorCodes.INVALID_INPUT
