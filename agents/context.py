"""
Agent Context

Everything an agent run touches from the outside world: the AI oracle,
the record store, the trigger dispatcher, configuration and the clock.
Agents never build these themselves, so tests swap in a mock oracle, an
in-memory store and a frozen clock.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, TYPE_CHECKING

from core.store import InMemoryStore, Store, create_store

from .dispatcher import NullDispatcher

if TYPE_CHECKING:
    from concurrent.futures import Future

    from core.config import RuntimeConfig
    from core.config.runtime import LLMConfig
    from core.llm import LLMClient
    from core.schemas.types import AgentType


AGENT_LOGGER = "shamba.agents"


class Clock(Protocol):
    def now(self) -> datetime:
        """Current UTC time."""
        ...


class RealClock:
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FrozenClock:
    """Clock that stays put until moved with ``set_time``."""

    def __init__(self, frozen_time: Optional[datetime] = None) -> None:
        self._time = frozen_time or datetime(2026, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._time

    def set_time(self, time: datetime) -> None:
        self._time = time


class TriggerDispatcher(Protocol):
    """Anything that can start a downstream agent without blocking the caller."""

    def dispatch(self, target: "AgentType", context_input: dict[str, Any]) -> Optional["Future"]:
        ...


@dataclass
class AgentContext:
    """
    Dependencies handed to ``Agent.run``.

    ``llm`` is None when no oracle is configured; agent runs then fail
    with ORACLE_UNAVAILABLE instead of raising at construction time.

    Usage:
        ctx = AgentContext.create(RuntimeConfig.from_env())
        result = ClimateAgent().run(ctx, {"region": "Nakuru"})
    """

    llm: Optional["LLMClient"] = None
    store: Store = field(default_factory=InMemoryStore)
    dispatcher: TriggerDispatcher = field(default_factory=NullDispatcher)
    config: Optional["RuntimeConfig"] = None
    clock: Clock = field(default_factory=RealClock)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(AGENT_LOGGER))

    @classmethod
    def create(
        cls,
        config: "RuntimeConfig",
        *,
        store: Optional[Store] = None,
        dispatcher: Optional[TriggerDispatcher] = None,
        clock: Optional[Clock] = None,
    ) -> "AgentContext":
        """
        Build a context from configuration.

        The oracle is only built when the provider has a key (or is the
        mock); the store comes from ``config.store`` unless given.
        """
        logger = logging.getLogger(AGENT_LOGGER)
        if config.debug:
            logger.setLevel(logging.DEBUG)

        has_key = bool(config.llm.api_key) or config.llm.provider == "mock"
        return cls(
            llm=_build_llm(config.llm) if has_key else None,
            store=store if store is not None else create_store(config.store),
            dispatcher=dispatcher if dispatcher is not None else NullDispatcher(),
            config=config,
            clock=clock or RealClock(),
            logger=logger,
        )

    @classmethod
    def create_mock(
        cls,
        *,
        llm_responses: Optional[list[str]] = None,
        store: Optional[Store] = None,
        dispatcher: Optional[TriggerDispatcher] = None,
        clock: Optional[Clock] = None,
    ) -> "AgentContext":
        """Offline context: MockProvider oracle, in-memory store, frozen clock."""
        from core.llm import LLMClient, MockProvider

        clock = clock or FrozenClock()
        return cls(
            llm=LLMClient(MockProvider(responses=llm_responses)),
            store=store if store is not None else InMemoryStore(clock=clock.now),
            dispatcher=dispatcher if dispatcher is not None else NullDispatcher(),
            clock=clock,
        )

    def now(self) -> datetime:
        return self.clock.now()

    def info(self, msg: str, *args: Any) -> None:
        self.logger.info(msg, *args)

    def warning(self, msg: str, *args: Any) -> None:
        self.logger.warning(msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        self.logger.error(msg, *args)

    def with_llm_override(self, llm_config: "LLMConfig") -> "AgentContext":
        """Copy sharing store, dispatcher and clock but with its own oracle."""
        return dataclasses.replace(self, llm=_build_llm(llm_config))


def _build_llm(llm_config: "LLMConfig") -> "LLMClient":
    from core.llm import DecodingPolicy, create_llm_client

    return create_llm_client(
        llm_config.provider,
        model=llm_config.model,
        endpoint=llm_config.base_url,
        api_key=llm_config.api_key,
        timeout=llm_config.timeout,
        proxy=llm_config.proxy,
        default_policy=DecodingPolicy(
            temperature=llm_config.temperature,
            max_tokens=llm_config.max_tokens,
        ),
    )
