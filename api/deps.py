"""
Shared AgentService for the API, built once from the config file and
environment.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path

from core.config.runtime import RuntimeConfig
from orchestrator import AgentService

logger = logging.getLogger(__name__)

_service: AgentService | None = None
_service_lock = threading.Lock()


def config_search_paths() -> list[Path]:
    """Candidate JSON config files, first match wins."""
    return [
        Path.cwd() / "shamba.json",
        Path.cwd() / ".shamba.json",
        Path.home() / ".config" / "shamba" / "config.json",
    ]


def load_runtime_config() -> RuntimeConfig:
    """
    First readable file from ``config_search_paths()`` (defaults if none),
    with SHAMBA_* environment variables laid over it.

    A file that exists but does not parse is logged and skipped.
    """
    for path in config_search_paths():
        if not path.exists():
            continue
        try:
            data = json.loads(path.read_text())
        except (OSError, ValueError) as e:
            logger.warning("Skipping unreadable config %s: %s", path, e)
            continue
        logger.info("Loaded config from %s", path)
        return RuntimeConfig.from_dict(data).with_env_overrides()
    return RuntimeConfig().with_env_overrides()


def get_service() -> AgentService:
    """
    Get the process-wide AgentService, creating it on first use.

    The service owns the cross-agent dispatcher, so it is shared by every
    request rather than built per call.
    """
    global _service
    with _service_lock:
        if _service is None:
            config = load_runtime_config()
            if config.llm.api_key is None and config.llm.provider != "mock":
                logger.warning(
                    "No api_key resolved for LLM provider %r; agent runs will fail "
                    "with ORACLE_UNAVAILABLE. Set SHAMBA_LLM_API_KEY or the provider "
                    "env var (e.g. GOOGLE_API_KEY) in .env.",
                    config.llm.provider,
                )
            _service = AgentService(config)
        return _service


def set_service(service: AgentService | None) -> None:
    """Replace the shared service (tests); None closes and clears it."""
    global _service
    with _service_lock:
        previous, _service = _service, service
    if previous is not None and previous is not service:
        previous.close(wait=True)
