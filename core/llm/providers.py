"""
Oracle Provider Adapters

One adapter per vendor SDK, all speaking role/content message lists:

- openai: OpenAI, or any OpenAI-compatible gateway (base_url + gateway model id)
- anthropic: Claude
- google: Gemini (the default oracle)
- mock: canned replies for tests and offline runs

SDK clients are built lazily so importing this module never needs a key.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Any, Callable, ClassVar, Optional

import httpx

from .client import LLMResponse, Message
from .policy import DecodingPolicy, policy_to_provider_args


def split_system(messages: list[Message]) -> tuple[str, list[Message]]:
    """Pull system messages out for SDKs that take them as a separate field."""
    system = [m["content"] for m in messages if m["role"] == "system"]
    rest = [m for m in messages if m["role"] != "system"]
    return "\n".join(system), rest


class LLMProvider(ABC):
    """Adapter interface: ``chat`` sends messages and returns an LLMResponse."""

    name: ClassVar[str]
    model: str

    @abstractmethod
    def chat(self, messages: list[Message], *, policy: DecodingPolicy) -> LLMResponse:
        ...


class SDKProvider(LLMProvider):
    """
    Shared plumbing for vendor SDK adapters.

    Subclasses declare ``env_key`` and ``default_model`` and implement
    ``_build_client`` and ``chat``. Adapters never retry; the agent run
    fails fast and the caller decides.
    """

    env_key: ClassVar[str]
    default_model: ClassVar[str]
    options: ClassVar[frozenset[str]] = frozenset({"api_key", "timeout"})

    def __init__(
        self,
        model: Optional[str] = None,
        *,
        api_key: Optional[str] = None,
        timeout: float = 60.0,
        base_url: Optional[str] = None,
        proxy: Optional[str] = None,
    ) -> None:
        self.model = model or self.default_model
        self._api_key = api_key or os.getenv(self.env_key)
        self._timeout = timeout
        self._base_url = base_url
        self._proxy = proxy
        self._client: Any = None

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def _http_client(self) -> Optional[httpx.Client]:
        if not self._proxy:
            return None
        return httpx.Client(proxy=self._proxy, timeout=self._timeout)

    @abstractmethod
    def _build_client(self) -> Any:
        ...


class OpenAIProvider(SDKProvider):
    name = "openai"
    env_key = "OPENAI_API_KEY"
    default_model = "gpt-4o-mini"
    options = frozenset({"api_key", "timeout", "base_url", "proxy"})

    def _build_client(self) -> Any:
        from openai import OpenAI

        return OpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout,
            max_retries=0,
            http_client=self._http_client(),
        )

    def chat(self, messages: list[Message], *, policy: DecodingPolicy) -> LLMResponse:
        args = policy_to_provider_args(policy, self.name)
        if policy.json_mode:
            args["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(model=self.model, messages=messages, **args)

        choice = response.choices[0]
        usage = response.usage
        return LLMResponse(
            content=choice.message.content or "",
            model=response.model,
            provider=self.name,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            finish_reason=choice.finish_reason or "stop",
            raw_response=response.model_dump(),
        )


class AnthropicProvider(SDKProvider):
    name = "anthropic"
    env_key = "ANTHROPIC_API_KEY"
    default_model = "claude-sonnet-4-20250514"
    options = frozenset({"api_key", "timeout", "proxy"})

    def _build_client(self) -> Any:
        from anthropic import Anthropic

        kwargs: dict[str, Any] = {"api_key": self._api_key, "timeout": self._timeout, "max_retries": 0}
        http_client = self._http_client()
        if http_client is not None:
            kwargs["http_client"] = http_client
        return Anthropic(**kwargs)

    def chat(self, messages: list[Message], *, policy: DecodingPolicy) -> LLMResponse:
        system, turns = split_system(messages)
        args = policy_to_provider_args(policy, self.name)
        if system:
            args["system"] = system

        response = self.client.messages.create(model=self.model, messages=turns, **args)

        text = "".join(getattr(block, "text", "") for block in response.content)
        return LLMResponse(
            content=text,
            model=response.model,
            provider=self.name,
            input_tokens=response.usage.input_tokens if response.usage else 0,
            output_tokens=response.usage.output_tokens if response.usage else 0,
            finish_reason=response.stop_reason or "stop",
            raw_response=response.model_dump(),
        )


class GoogleProvider(SDKProvider):
    name = "google"
    env_key = "GOOGLE_API_KEY"
    default_model = "gemini-2.5-flash"

    def _build_client(self) -> Any:
        from google import genai
        from google.genai import types

        # HttpOptions.timeout is in milliseconds
        return genai.Client(
            api_key=self._api_key,
            http_options=types.HttpOptions(timeout=int(self._timeout * 1000)),
        )

    def chat(self, messages: list[Message], *, policy: DecodingPolicy) -> LLMResponse:
        from google.genai import types

        system, turns = split_system(messages)
        contents = [
            types.Content(
                role="user" if m["role"] == "user" else "model",
                parts=[types.Part(text=m["content"])],
            )
            for m in turns
        ]
        config = policy_to_provider_args(policy, self.name)
        if system:
            config["system_instruction"] = system
        if policy.json_mode:
            config["response_mime_type"] = "application/json"

        response = self.client.models.generate_content(
            model=self.model,
            contents=contents,
            config=types.GenerateContentConfig(**config),
        )

        usage = getattr(response, "usage_metadata", None)
        return LLMResponse(
            content=response.text or "",
            model=self.model,
            provider=self.name,
            input_tokens=getattr(usage, "prompt_token_count", 0) or 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) or 0,
        )


class MockProvider(LLMProvider):
    """
    Offline provider.

    Answers from ``response_fn(messages, policy)`` when given, otherwise
    cycles through ``responses`` ("{}" when empty). ``error`` is raised on
    every call instead. Each call is recorded in ``calls``.
    """

    name = "mock"

    def __init__(
        self,
        model: str = "mock-model",
        *,
        responses: Optional[list[str]] = None,
        response_fn: Optional[Callable[[list[Message], DecodingPolicy], str]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.model = model
        self.responses = list(responses or [])
        self.response_fn = response_fn
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def chat(self, messages: list[Message], *, policy: DecodingPolicy) -> LLMResponse:
        self.calls.append({"messages": messages, "policy": policy})
        if self.error is not None:
            raise self.error

        if self.response_fn is not None:
            content = self.response_fn(messages, policy)
        elif self.responses:
            content = self.responses[(len(self.calls) - 1) % len(self.responses)]
        else:
            content = "{}"

        return LLMResponse(content=content, model=self.model, provider=self.name)


PROVIDERS: dict[str, type[SDKProvider]] = {
    cls.name: cls for cls in (OpenAIProvider, AnthropicProvider, GoogleProvider)
}

PROVIDER_ENV_KEYS: dict[str, str] = {name: cls.env_key for name, cls in PROVIDERS.items()}
PROVIDER_DEFAULT_MODELS: dict[str, str] = {name: cls.default_model for name, cls in PROVIDERS.items()}


def get_configured_providers() -> list[dict[str, str]]:
    """Providers whose API key is present in the environment."""
    return [
        {"provider": name, "default_model": cls.default_model}
        for name, cls in PROVIDERS.items()
        if os.getenv(cls.env_key)
    ]


def create_provider(provider_name: str, model: Optional[str] = None, **kwargs: Any) -> LLMProvider:
    """
    Build a provider adapter by name.

    Options a provider does not support (base_url for Gemini, say) are
    dropped rather than rejected, so one LLMConfig fits every provider.

    Raises:
        ValueError: If the provider name is unknown
    """
    name = provider_name.lower()
    if name == MockProvider.name:
        mock_options = {k: v for k, v in kwargs.items() if k in ("responses", "response_fn", "error")}
        return MockProvider(model or "mock-model", **mock_options)

    cls = PROVIDERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown provider: {provider_name}")
    return cls(model, **{k: v for k, v in kwargs.items() if k in cls.options})
