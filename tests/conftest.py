"""
Shared fixtures for the agent network tests.

Puts the project root and tests/ on sys.path (so ``fixtures`` imports as a
package), strips SHAMBA_* and provider credentials from the environment,
and hands out a frozen clock, an in-memory store and factories for mock
contexts and services.
"""

import sys
from pathlib import Path

import pytest

_TESTS_ROOT = Path(__file__).resolve().parent

for _path in (_TESTS_ROOT.parent, _TESTS_ROOT):
    if str(_path) not in sys.path:
        sys.path.insert(0, str(_path))


from agents import AgentContext, FrozenClock  # noqa: E402
from core.config import RuntimeConfig  # noqa: E402
from core.llm import LLMClient  # noqa: E402
from core.store import InMemoryStore  # noqa: E402
from orchestrator import AgentService  # noqa: E402

from fixtures import BASE_TIME, routing_provider  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep real credentials and SHAMBA_* settings out of tests."""
    for var in [
        "SHAMBA_LLM_PROVIDER",
        "SHAMBA_LLM_MODEL",
        "SHAMBA_LLM_API_KEY",
        "SHAMBA_LLM_BASE_URL",
        "SHAMBA_LLM_PROXY",
        "SHAMBA_STORE_BACKEND",
        "SHAMBA_DISPATCH_WORKERS",
        "SHAMBA_DEBUG",
        "SUPABASE_URL",
        "SUPABASE_SERVICE_ROLE_KEY",
        "OPENAI_API_KEY",
        "ANTHROPIC_API_KEY",
        "GOOGLE_API_KEY",
    ]:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def clock():
    """A frozen clock at 2026-01-01T00:00:00Z."""
    return FrozenClock(BASE_TIME)


@pytest.fixture
def store(clock):
    """An empty in-memory store stamping rows with the frozen clock."""
    return InMemoryStore(clock=clock.now)


@pytest.fixture
def make_ctx(store, clock):
    """Factory for a mock context with a routing oracle.

    Usage:
        ctx = make_ctx({AgentType.CLIMATE: climate_response("high")})
    """
    def _make(responses=None, *, provider=None, **kwargs):
        provider = provider or routing_provider(responses or {})
        kwargs.setdefault("store", store)
        kwargs.setdefault("clock", clock)
        return AgentContext(llm=LLMClient(provider), **kwargs)
    return _make


@pytest.fixture
def make_service(store, clock):
    """Factory for an AgentService over a mock context; closed after the test."""
    created = []

    def _make(responses=None, *, provider=None, config=None, context=None, **kwargs):
        if context is None:
            provider = provider or routing_provider(responses or {})
            context = AgentContext(llm=LLMClient(provider), store=store, clock=clock)
        service = AgentService(config or RuntimeConfig(), context=context, **kwargs)
        created.append(service)
        return service

    yield _make

    for service in created:
        service.close()


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: waits on background dispatch threads")
