"""
AI oracle access for the agents.

LLMClient wraps one provider adapter (Gemini by default, OpenAI or an
OpenAI-compatible gateway, Anthropic, or the offline mock) behind a single
``chat`` call that raises OracleUnavailableException on any failure.
"""

from typing import Any, Optional

from .client import LLMClient, LLMResponse, Message
from .policy import DecodingPolicy, policy_to_provider_args
from .providers import (
    PROVIDER_DEFAULT_MODELS,
    PROVIDER_ENV_KEYS,
    PROVIDERS,
    AnthropicProvider,
    GoogleProvider,
    LLMProvider,
    MockProvider,
    OpenAIProvider,
    SDKProvider,
    create_provider,
    get_configured_providers,
    split_system,
)


def create_llm_client(
    provider: str,
    *,
    model: Optional[str] = None,
    endpoint: Optional[str] = None,
    default_policy: Optional[DecodingPolicy] = None,
    **options: Any,
) -> LLMClient:
    """
    Build an LLMClient from configuration values.

    ``endpoint`` points the openai provider at a gateway; the remaining
    options (api_key, timeout, proxy) go to the adapter, which ignores the
    ones it does not support. Unset (None) options are left to the adapter
    defaults.

    Example:
        create_llm_client("openai", endpoint="https://ai.gateway.example/v1",
                          model="google/gemini-2.5-flash", api_key="...")
    """
    if endpoint:
        options["base_url"] = endpoint
    options = {k: v for k, v in options.items() if v is not None}
    return LLMClient(create_provider(provider, model, **options), default_policy=default_policy)


__all__ = [
    # Client
    "LLMClient",
    "LLMResponse",
    "Message",
    "create_llm_client",
    # Policy
    "DecodingPolicy",
    "policy_to_provider_args",
    # Providers
    "LLMProvider",
    "SDKProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GoogleProvider",
    "MockProvider",
    "PROVIDERS",
    "PROVIDER_ENV_KEYS",
    "PROVIDER_DEFAULT_MODELS",
    "create_provider",
    "get_configured_providers",
    "split_system",
]
