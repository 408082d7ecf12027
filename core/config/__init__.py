"""
Runtime configuration for the agent network.
"""

from .runtime import (
    AgentConfig,
    AgentsConfig,
    DispatchConfig,
    LLMConfig,
    RuntimeConfig,
    StoreConfig,
)

__all__ = [
    "RuntimeConfig",
    "LLMConfig",
    "StoreConfig",
    "DispatchConfig",
    "AgentConfig",
    "AgentsConfig",
]
