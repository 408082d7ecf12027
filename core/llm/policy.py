"""
Decoding policy for oracle calls.

Agents only choose a temperature (climate 0.7, crop health 0.3 and so
on); token limits, nucleus sampling and JSON mode come from the
configured default policy.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Optional


@dataclass(frozen=True)
class DecodingPolicy:
    """
    Sampling controls for one oracle call.

    json_mode asks providers that support it for a bare JSON object. The
    normalizer copes with prose-wrapped JSON either way.
    """
    temperature: float = 0.7
    max_tokens: int = 4096
    top_p: float = 1.0
    seed: Optional[int] = None
    json_mode: bool = True
    stop_sequences: tuple[str, ...] = ()

    def with_temperature(self, temperature: Optional[float]) -> "DecodingPolicy":
        """Copy with a different temperature; None returns self."""
        if temperature is None:
            return self
        return replace(self, temperature=temperature)


# Per provider: keyword for the token limit, keyword for stop sequences,
# and whether top_p/seed are accepted.
_PROVIDER_KEYWORDS: dict[str, tuple[str, str, bool]] = {
    "openai": ("max_tokens", "stop", True),
    "anthropic": ("max_tokens", "stop_sequences", False),
    "google": ("max_output_tokens", "stop_sequences", True),
}


def policy_to_provider_args(policy: DecodingPolicy, provider: str = "openai") -> dict[str, Any]:
    """
    Translate a policy into SDK keyword arguments.

    Unknown provider names get the OpenAI spelling, which is what
    OpenAI-compatible gateways expect.
    """
    tokens_kw, stop_kw, sampling = _PROVIDER_KEYWORDS.get(provider, _PROVIDER_KEYWORDS["openai"])

    args: dict[str, Any] = {"temperature": policy.temperature, tokens_kw: policy.max_tokens}
    if sampling:
        args["top_p"] = policy.top_p
        if policy.seed is not None:
            args["seed"] = policy.seed
    if policy.stop_sequences:
        args[stop_kw] = list(policy.stop_sequences)
    return args
