"""
Agent Registry

Maps each AgentType to the implementations that can serve it. Every agent
module registers itself on import; AgentService then resolves a type (or
a configured implementation name) to a fresh agent per run.

When several implementations serve one type the highest priority wins,
and among equal priorities the earliest registration.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TYPE_CHECKING

from core.schemas.errors import UnknownAgentException
from core.schemas.types import AgentType, parse_agent_type

from .base import Agent, AgentCapability

if TYPE_CHECKING:
    from .context import AgentContext


AgentFactory = Callable[["AgentContext"], Agent]


@dataclass(frozen=True)
class AgentEntry:
    """One registered implementation."""
    name: str
    agent_type: AgentType
    factory: AgentFactory = field(repr=False)
    version: str = "v1"
    capabilities: frozenset[AgentCapability] = frozenset()
    priority: int = 0

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "capabilities": sorted(c.value for c in self.capabilities),
            "priority": self.priority,
        }


def _resolve_type(agent_type: "AgentType | str") -> AgentType:
    try:
        return parse_agent_type(agent_type)
    except ValueError:
        raise UnknownAgentException(str(agent_type)) from None


class AgentRegistry:
    """
    Name-keyed table of agent implementations.

    Usage:
        registry = AgentRegistry()
        registry.register(AgentType.CLIMATE, "ClimateAgent", lambda ctx: ClimateAgent())
        agent = registry.get_agent("climate", ctx)
    """

    def __init__(self) -> None:
        self._entries: dict[str, AgentEntry] = {}

    def register(
        self,
        agent_type: "AgentType | str",
        name: str,
        factory: AgentFactory,
        *,
        version: str = "v1",
        capabilities: Optional[set[AgentCapability]] = None,
        priority: int = 0,
    ) -> AgentEntry:
        """Add an implementation; a repeated name replaces the earlier entry."""
        entry = AgentEntry(
            name=name,
            agent_type=_resolve_type(agent_type),
            factory=factory,
            version=version,
            capabilities=frozenset(capabilities or ()),
            priority=priority,
        )
        self._entries.pop(name, None)
        self._entries[name] = entry
        return entry

    def list_agents(self, agent_type: "AgentType | str | None" = None) -> list[AgentEntry]:
        """Entries for one type in selection order, or every entry."""
        if agent_type is None:
            return list(self._entries.values())
        key = _resolve_type(agent_type)
        matches = [e for e in self._entries.values() if e.agent_type == key]
        return sorted(matches, key=lambda e: e.priority, reverse=True)

    def get_entry(self, agent_type: "AgentType | str") -> AgentEntry:
        """
        The preferred implementation of a type.

        Raises:
            UnknownAgentException: Unknown type, or nothing registered for it
        """
        matches = self.list_agents(agent_type)
        if not matches:
            raise UnknownAgentException(_resolve_type(agent_type).value)
        return matches[0]

    def get_agent(
        self,
        agent_type: "AgentType | str",
        ctx: "AgentContext",
        *,
        name: Optional[str] = None,
    ) -> Agent:
        """Build an agent, by explicit implementation name when given."""
        if name:
            return self.get_agent_by_name(name, ctx)
        return self.get_entry(agent_type).factory(ctx)

    def get_agent_by_name(self, name: str, ctx: "AgentContext") -> Agent:
        entry = self._entries.get(name)
        if entry is None:
            raise UnknownAgentException(name)
        return entry.factory(ctx)

    def has_agent(self, name: str) -> bool:
        return name in self._entries

    def has_type(self, agent_type: "AgentType | str") -> bool:
        try:
            return bool(self.list_agents(agent_type))
        except UnknownAgentException:
            return False


_global_registry = AgentRegistry()


def get_registry() -> AgentRegistry:
    """The process-wide registry the agent modules register into."""
    return _global_registry


def register_agent(
    agent_type: AgentType,
    name: str,
    factory: AgentFactory,
    **kwargs: Any,
) -> AgentEntry:
    """Register into the global registry (used at agent module import)."""
    return get_registry().register(agent_type, name, factory, **kwargs)


def get_agent(agent_type: "AgentType | str", ctx: "AgentContext", **kwargs: Any) -> Agent:
    """Build an agent from the global registry."""
    return get_registry().get_agent(agent_type, ctx, **kwargs)
