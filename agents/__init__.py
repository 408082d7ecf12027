"""
Agents Module

The five prediction agents and the machinery they share:

- BaseAgent / PredictionAgent: the agent contract and the run template
- AgentContext: dependency injection (oracle, store, dispatcher, clock)
- AgentRegistry: lookup of agents by AgentType
- Response Normalizer: raw oracle text to a complete payload
- Escalation Policy: payload to alert / cross-agent trigger
- CrossAgentDispatcher: non-blocking downstream runs

Importing this package registers every agent with the global registry.

Usage:
    from agents import AgentContext, get_agent
    from core.schemas import AgentType

    ctx = AgentContext.create_mock(llm_responses=['{"risk_level": "low"}'])
    agent = get_agent(AgentType.CLIMATE, ctx)
    result = agent.run(ctx, {"region": "Nakuru"})
"""

# Base classes
from .base import (
    Agent,
    AgentCapability,
    AgentResult,
    BaseAgent,
)

# Context
from .context import (
    AgentContext,
    Clock,
    FrozenClock,
    RealClock,
    TriggerDispatcher,
)

# Registry
from .registry import (
    AgentEntry,
    AgentRegistry,
    get_agent,
    get_registry,
    register_agent,
)

# Normalizer and escalation
from .normalizer import NormalizationResult, extract_json, fallback_payload, normalize, normalize_with_report
from .escalation import decide

# Dispatch
from .dispatcher import CrossAgentDispatcher, NullDispatcher

# Runner framework
from .runner import PredictionAgent

# Agents (registered on import)
from .climate import ClimateAgent
from .crop_health import CropHealthAgent
from .market import MarketAgent
from .post_harvest import PostHarvestAgent
from .government import GovernmentReportAgent


__all__ = [
    # Base
    "Agent",
    "AgentCapability",
    "AgentResult",
    "BaseAgent",
    "PredictionAgent",

    # Context
    "AgentContext",
    "Clock",
    "FrozenClock",
    "RealClock",
    "TriggerDispatcher",

    # Registry
    "AgentEntry",
    "AgentRegistry",
    "get_agent",
    "get_registry",
    "register_agent",

    # Normalizer / escalation
    "NormalizationResult",
    "extract_json",
    "fallback_payload",
    "normalize",
    "normalize_with_report",
    "decide",

    # Dispatch
    "CrossAgentDispatcher",
    "NullDispatcher",

    # Agents
    "ClimateAgent",
    "CropHealthAgent",
    "MarketAgent",
    "PostHarvestAgent",
    "GovernmentReportAgent",
]
