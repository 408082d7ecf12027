"""
Agent contract.

An agent is anything with a name, an AgentType and a ``run(ctx, input)``
that returns an AgentResult. The five prediction agents build on
PredictionAgent (agents.runner); BaseAgent is the minimal base for
anything else registered alongside them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Protocol, TYPE_CHECKING, runtime_checkable

from core.schemas.types import AgentType

if TYPE_CHECKING:
    from core.schemas.records import Alert, PredictionRecord

    from .context import AgentContext


class AgentCapability(str, Enum):
    """What an agent needs or does, as listed by GET /capabilities."""
    LLM = "llm"                # consults the AI oracle
    STORE_READ = "store_read"  # reads context rows before prompting
    VISION = "vision"          # accepts an image reference
    TRIGGERS = "triggers"      # may start another agent


@dataclass
class AgentResult:
    """
    Outcome of one agent run.

    On success ``output`` is the PredictionRecord, possibly unpersisted
    (``output.persisted`` False) when the store write failed, and
    ``alerts`` holds the alerts the run raised. On failure ``output`` is
    None and ``error_code`` is one of ErrorCodes.
    """
    output: Optional["PredictionRecord"]
    alerts: list["Alert"] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failure(
        cls,
        error: str,
        code: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> "AgentResult":
        return cls(output=None, success=False, error=error, error_code=code, metadata=metadata or {})


@runtime_checkable
class Agent(Protocol):

    @property
    def name(self) -> str:
        ...

    @property
    def agent_type(self) -> AgentType:
        ...

    def run(self, ctx: "AgentContext", context_input: dict[str, Any]) -> AgentResult:
        ...


class BaseAgent(ABC):
    """
    Minimal Agent implementation.

    Subclasses set ``agent_type`` and usually ``_name`` and
    ``_capabilities``; a ``name`` passed to the constructor wins over
    ``_name``, which wins over the class name.
    """

    _name: ClassVar[Optional[str]] = None
    _capabilities: ClassVar[set[AgentCapability]] = set()
    agent_type: AgentType

    def __init__(self, *, name: Optional[str] = None) -> None:
        self._name_override = name

    @property
    def name(self) -> str:
        return self._name_override or self._name or type(self).__name__

    @property
    def capabilities(self) -> set[AgentCapability]:
        return set(self._capabilities)

    @abstractmethod
    def run(self, ctx: "AgentContext", context_input: dict[str, Any]) -> AgentResult:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, agent_type={self.agent_type.value!r})"
