"""
Runtime configuration.

Settings come from three layers, later ones winning: dataclass defaults,
a YAML or JSON file (``from_yaml`` / ``from_dict``), and SHAMBA_*
environment variables (``from_env`` / ``with_env_overrides``). A ``.env``
file in the working directory is loaded into the environment on import.

Environment variables:
    SHAMBA_LLM_PROVIDER       oracle provider (google, openai, anthropic, mock)
    SHAMBA_LLM_MODEL          model name
    SHAMBA_LLM_API_KEY        key; otherwise {PROVIDER}_API_KEY is read
    SHAMBA_LLM_BASE_URL       OpenAI-compatible gateway URL
    SHAMBA_LLM_PROXY          outbound proxy for OpenAI/Anthropic calls
    SHAMBA_STORE_BACKEND      "memory" or "supabase"
    SUPABASE_URL              Supabase project URL
    SUPABASE_SERVICE_ROLE_KEY Supabase service key
    SHAMBA_DISPATCH_WORKERS   worker threads for cross-agent triggers
    SHAMBA_DEBUG              1/true/yes/on enables debug logging
"""

from __future__ import annotations

import copy
import os
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Optional

from dotenv import load_dotenv

load_dotenv()

SECRET_KEYS = frozenset({"api_key"})


def _parse_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


# (variable, section or None for top level, attribute, parser)
_ENV_OVERRIDES: list[tuple[str, Optional[str], str, Callable[[str], Any]]] = [
    ("SHAMBA_LLM_PROVIDER", "llm", "provider", str),
    ("SHAMBA_LLM_MODEL", "llm", "model", str),
    ("SHAMBA_LLM_API_KEY", "llm", "api_key", str),
    ("SHAMBA_LLM_BASE_URL", "llm", "base_url", str),
    ("SHAMBA_LLM_PROXY", "llm", "proxy", str),
    ("SHAMBA_STORE_BACKEND", "store", "backend", str),
    ("SUPABASE_URL", "store", "url", str),
    ("SUPABASE_SERVICE_ROLE_KEY", "store", "api_key", str),
    ("SHAMBA_DISPATCH_WORKERS", "dispatch", "max_workers", int),
    ("SHAMBA_DEBUG", None, "debug", _parse_bool),
]


@dataclass
class LLMConfig:
    """
    AI oracle settings.

    A missing ``api_key`` is looked up as {PROVIDER}_API_KEY, so
    ``LLMConfig(provider="openai")`` picks up OPENAI_API_KEY.
    """
    provider: str = "google"
    model: str = "gemini-2.5-flash"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    proxy: Optional[str] = None
    temperature: float = 0.7
    max_tokens: int = 4096
    timeout: float = 60.0

    def __post_init__(self):
        if self.api_key is None:
            self.api_key = os.getenv(f"{self.provider.upper()}_API_KEY")


@dataclass
class StoreConfig:
    """Record store; ``backend`` is "memory" (default) or "supabase"."""
    backend: str = "memory"
    url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = 15.0


@dataclass
class DispatchConfig:
    enabled: bool = True
    max_workers: int = 4


@dataclass
class AgentConfig:
    """
    Per-agent settings.

    ``name`` selects the registered implementation; ``llm_override``
    points this one agent at a different oracle.
    """
    name: str
    enabled: bool = True
    llm_override: Optional[LLMConfig] = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any], *, default_name: str) -> "AgentConfig":
        conf = dict(data)
        conf.setdefault("name", default_name)
        if isinstance(conf.get("llm_override"), dict):
            conf["llm_override"] = LLMConfig(**conf["llm_override"])
        return cls(**conf)


@dataclass
class AgentsConfig:
    """One AgentConfig per agent, under the agent's key with underscores."""
    climate: AgentConfig = field(default_factory=lambda: AgentConfig(name="ClimateAgent"))
    crop_health: AgentConfig = field(default_factory=lambda: AgentConfig(name="CropHealthAgent"))
    market: AgentConfig = field(default_factory=lambda: AgentConfig(name="MarketAgent"))
    post_harvest: AgentConfig = field(default_factory=lambda: AgentConfig(name="PostHarvestAgent"))
    government: AgentConfig = field(default_factory=lambda: AgentConfig(name="GovernmentReportAgent"))

    def for_agent(self, key: str) -> Optional[AgentConfig]:
        """Config for ``key``; "crop-health" and "crop_health" are the same key."""
        attr = key.replace("-", "_")
        if attr not in {f.name for f in fields(self)}:
            return None
        return getattr(self, attr)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AgentsConfig":
        agents = cls()
        for key, conf in data.items():
            current = agents.for_agent(key)
            # Unknown agent keys are ignored
            if current is None or not isinstance(conf, dict):
                continue
            setattr(agents, key.replace("-", "_"), AgentConfig.from_dict(conf, default_name=current.name))
        return agents


def _section(cls: type, data: Any) -> Any:
    return cls(**data) if data else cls()


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _redact(v) for k, v in value.items() if k not in SECRET_KEYS}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


@dataclass
class RuntimeConfig:
    """Complete configuration for the agent network."""
    llm: LLMConfig = field(default_factory=LLMConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    dispatch: DispatchConfig = field(default_factory=DispatchConfig)
    agents: AgentsConfig = field(default_factory=AgentsConfig)
    debug: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def env_overrides() -> dict[str, Any]:
        """Nested dict of the values set in the environment; the only place env vars are read."""
        overrides: dict[str, Any] = {}
        for var, section, attr, parse in _ENV_OVERRIDES:
            raw = os.getenv(var)
            if not raw:
                continue
            target = overrides if section is None else overrides.setdefault(section, {})
            target[attr] = parse(raw)
        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        return cls.from_dict(cls.env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        import yaml

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            return cls.from_dict(yaml.safe_load(f) or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Build from a (possibly partial) nested dict; missing sections keep defaults."""
        return cls(
            llm=_section(LLMConfig, data.get("llm")),
            store=_section(StoreConfig, data.get("store")),
            dispatch=_section(DispatchConfig, data.get("dispatch")),
            agents=AgentsConfig.from_dict(data.get("agents") or {}),
            debug=bool(data.get("debug", False)),
            extra=data.get("extra", {}),
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Copy of this config with environment values laid over it.

        Returns ``self`` unchanged when no variable is set, so a config
        loaded from a file keeps its identity in tests.
        """
        overrides = self.env_overrides()
        if not overrides:
            return self

        merged = copy.deepcopy(self)
        for key, value in overrides.items():
            if isinstance(value, dict):
                section = getattr(merged, key)
                for attr, item in value.items():
                    setattr(section, attr, item)
            else:
                setattr(merged, key, value)
        return merged

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view with every ``api_key`` removed."""
        return _redact(asdict(self))

