"""
AI Oracle Client

Every agent reaches its language model through LLMClient. The client owns
the default decoding policy, applies an agent's temperature, times the
call and turns every provider failure into OracleUnavailableException so
agents have exactly one error to handle. A blank completion is an answer,
not a failure: it is returned as is and the normalizer falls back.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional, TYPE_CHECKING

from core.schemas.errors import OracleUnavailableException

from .policy import DecodingPolicy

if TYPE_CHECKING:
    from .providers import LLMProvider

logger = logging.getLogger(__name__)


Message = dict[str, Any]


@dataclass
class LLMResponse:
    """One completion as returned by a provider adapter."""
    content: str
    model: str
    provider: str
    input_tokens: int = 0
    output_tokens: int = 0
    finish_reason: str = "stop"
    latency_ms: int = 0
    raw_response: Optional[dict[str, Any]] = field(default=None, repr=False)

    @property
    def is_blank(self) -> bool:
        return not (self.content or "").strip()


class LLMClient:
    """
    The AI oracle as seen by agents.

    Usage:
        client = LLMClient(create_provider("google", api_key="..."))
        reply = client.chat(
            [{"role": "system", "content": "..."}, {"role": "user", "content": "..."}],
            temperature=0.3,
        )
        reply.content  # raw text, parsed by agents.normalizer
    """

    def __init__(
        self,
        provider: "LLMProvider",
        *,
        default_policy: Optional[DecodingPolicy] = None,
    ) -> None:
        self.provider = provider
        self.default_policy = default_policy or DecodingPolicy()

    @property
    def label(self) -> str:
        """provider/model, used in logs and capability listings."""
        return f"{self.provider.name}/{self.provider.model}"

    def chat(
        self,
        messages: list[Message],
        *,
        policy: Optional[DecodingPolicy] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        """
        Send one chat request.

        Args:
            messages: Role/content dicts, system message first
            policy: Replaces the default policy for this call
            temperature: Overrides the policy's temperature (None keeps it)

        Returns:
            LLMResponse; content may be blank

        Raises:
            OracleUnavailableException: Provider error or timeout
        """
        effective = (policy or self.default_policy).with_temperature(temperature)

        started = time.monotonic()
        try:
            response = self.provider.chat(messages, policy=effective)
        except OracleUnavailableException:
            raise
        except Exception as e:
            logger.error("Oracle %s failed: %s: %s", self.label, type(e).__name__, e)
            raise OracleUnavailableException(
                f"AI oracle error: {e}",
                provider=self.provider.name,
                details={"model": self.provider.model, "error_type": type(e).__name__},
            ) from e
        response.latency_ms = int((time.monotonic() - started) * 1000)

        if response.is_blank:
            logger.warning("Oracle %s returned a blank completion", self.label)

        logger.debug(
            "Oracle %s answered in %dms (%d in / %d out tokens)",
            self.label, response.latency_ms, response.input_tokens, response.output_tokens,
        )
        return response

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        temperature: Optional[float] = None,
    ) -> str:
        """Single system + user exchange; returns the reply text."""
        response = self.chat(
            [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            temperature=temperature,
        )
        return response.content
