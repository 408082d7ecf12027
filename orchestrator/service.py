"""
Agent Service

Runs any agent by type against a shared AgentContext and owns the
cross-agent dispatcher, so a climate escalation started through the
service re-enters the service for the downstream post-harvest run.

Key features:
- Registry-based agent selection (configured name, else highest priority)
- Per-agent LLM overrides from AgentsConfig
- Dispatch disabled by config falls back to NullDispatcher
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Optional

from agents import AgentContext, CrossAgentDispatcher, NullDispatcher, get_registry
from agents.base import AgentResult
from agents.registry import AgentRegistry
from core.config import AgentConfig, RuntimeConfig
from core.schemas import (
    TABLE_ALERTS,
    TABLE_PREDICTIONS,
    AgentType,
    ErrorCodes,
    UnknownAgentException,
    parse_agent_type,
)
from core.schemas.errors import DownstreamTriggerException

from orchestrator.dashboard import Dashboard, build_dashboard, load_records


logger = logging.getLogger(__name__)


# Map agent types to AgentsConfig attribute names
_AGENT_CONFIG_KEYS = {
    AgentType.CLIMATE: "climate",
    AgentType.CROP_HEALTH: "crop_health",
    AgentType.MARKET: "market",
    AgentType.POST_HARVEST: "post_harvest",
    AgentType.GOVERNMENT_REPORTING: "government",
}

DEFAULT_DASHBOARD_LIMIT = 100


class AgentService:
    """
    Entry point for running agents.

    Usage:
        service = AgentService(RuntimeConfig.from_env())
        result = service.run(AgentType.CLIMATE, {"region": "Nakuru"})
        ...
        service.close()
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        *,
        context: Optional[AgentContext] = None,
        registry: Optional[AgentRegistry] = None,
        on_trigger_failure: Optional[Callable[[DownstreamTriggerException], None]] = None,
    ) -> None:
        """
        Args:
            config: Runtime configuration (context.config, else defaults)
            context: Base context; built from config if omitted
            registry: Agent registry (global registry if omitted)
            on_trigger_failure: Hook called with each DownstreamTriggerException
        """
        if config is None:
            config = context.config if context is not None and context.config else RuntimeConfig()
        self.config = config
        self._registry = registry or get_registry()

        if config.dispatch.enabled:
            self._dispatcher: Any = CrossAgentDispatcher(
                self.run,
                max_workers=config.dispatch.max_workers,
                on_failure=on_trigger_failure,
            )
        else:
            self._dispatcher = NullDispatcher()

        base = context if context is not None else AgentContext.create(config)
        self._context = dataclasses.replace(base, dispatcher=self._dispatcher, config=config)

    @property
    def context(self) -> AgentContext:
        return self._context

    @property
    def dispatcher(self) -> Any:
        return self._dispatcher

    @property
    def registry(self) -> AgentRegistry:
        return self._registry

    def agent_config(self, agent_type: AgentType) -> Optional[AgentConfig]:
        return self.config.agents.for_agent(_AGENT_CONFIG_KEYS[agent_type])

    def _resolve_ctx(self, agent_type: AgentType) -> AgentContext:
        """Return the context with the agent's LLM override applied, if configured."""
        agent_cfg = self.agent_config(agent_type)
        if agent_cfg is None or agent_cfg.llm_override is None:
            return self._context
        return self._context.with_llm_override(agent_cfg.llm_override)

    def _agent_name(self, agent_type: AgentType, override: Optional[str]) -> Optional[str]:
        if override:
            return override
        agent_cfg = self.agent_config(agent_type)
        if agent_cfg is not None and self._registry.has_agent(agent_cfg.name):
            return agent_cfg.name
        return None

    def run(
        self,
        agent_type: "AgentType | str",
        context_input: Optional[dict[str, Any]] = None,
        *,
        agent_name: Optional[str] = None,
    ) -> AgentResult:
        """
        Run one agent.

        Args:
            agent_type: Agent to run ("government" and underscore spellings accepted)
            context_input: Caller input for the agent
            agent_name: Specific registered implementation to use

        Returns:
            AgentResult (failed on oracle unavailability, bad input or a
            disabled agent)

        Raises:
            UnknownAgentException: If no agent serves the type
        """
        if isinstance(agent_type, AgentType):
            key = agent_type
        else:
            key = _parse_or_unknown(agent_type)

        agent_cfg = self.agent_config(key)
        if agent_cfg is not None and not agent_cfg.enabled:
            logger.warning("Agent %s is disabled; run refused", key.value)
            return AgentResult.failure(f"Agent {key.value} is disabled", code=ErrorCodes.AGENT_DISABLED)

        ctx = self._resolve_ctx(key)
        agent = self._registry.get_agent(key, ctx, name=self._agent_name(key, agent_name))
        logger.debug("Running %s for %s", agent.name, key.value)
        return agent.run(ctx, dict(context_input or {}))

    def dashboard(self, *, limit: int = DEFAULT_DASHBOARD_LIMIT) -> Dashboard:
        """
        Build the Aggregation View from the store.

        Raises:
            StoreReadException: If the store cannot be read
        """
        store = self._context.store
        rows = store.select(TABLE_PREDICTIONS, order_by="created_at", limit=limit)
        active = store.select(TABLE_ALERTS, filters={"is_active": True})
        return build_dashboard(load_records(rows), len(active), now=self._context.now())

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Wait for dispatched downstream runs (tests and shutdown only)."""
        return self._dispatcher.wait_idle(timeout)

    def close(self, wait: bool = True) -> None:
        """Stop the dispatcher and release its threads."""
        self._dispatcher.shutdown(wait=wait)

    def __enter__(self) -> "AgentService":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()


def _parse_or_unknown(value: str) -> AgentType:
    try:
        return parse_agent_type(value)
    except ValueError:
        raise UnknownAgentException(str(value)) from None


def create_service(
    config: Optional[RuntimeConfig] = None,
    *,
    context: Optional[AgentContext] = None,
    **kwargs: Any,
) -> AgentService:
    """Create an AgentService from config (environment if omitted)."""
    if config is None and context is None:
        config = RuntimeConfig.from_env()
    return AgentService(config, context=context, **kwargs)
