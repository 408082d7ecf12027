"""
Tests for runtime configuration loading.
"""

import json

import pytest

from api.deps import load_runtime_config
from core.config import LLMConfig, RuntimeConfig, StoreConfig


class TestDefaults:

    def test_default_sections(self):
        config = RuntimeConfig()

        assert config.llm.provider == "google"
        assert config.llm.model == "gemini-2.5-flash"
        assert config.store.backend == "memory"
        assert config.dispatch.enabled is True
        assert config.dispatch.max_workers == 4
        assert config.debug is False

    def test_default_agent_names(self):
        agents = RuntimeConfig().agents

        assert agents.climate.name == "ClimateAgent"
        assert agents.crop_health.name == "CropHealthAgent"
        assert agents.market.name == "MarketAgent"
        assert agents.post_harvest.name == "PostHarvestAgent"
        assert agents.government.name == "GovernmentReportAgent"

    def test_for_agent_accepts_hyphens(self):
        agents = RuntimeConfig().agents

        assert agents.for_agent("crop-health") is agents.crop_health
        assert agents.for_agent("post_harvest") is agents.post_harvest
        assert agents.for_agent("weather") is None


class TestLLMConfig:

    def test_reads_provider_key_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        assert LLMConfig(provider="openai").api_key == "sk-test"

    def test_explicit_key_wins(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "from-env")

        assert LLMConfig(api_key="explicit").api_key == "explicit"

    def test_missing_key_is_none(self):
        assert LLMConfig(provider="anthropic").api_key is None


class TestFromDict:

    def test_partial_data(self):
        config = RuntimeConfig.from_dict({"store": {"backend": "supabase", "url": "https://x"}})

        assert config.store.backend == "supabase"
        assert config.store.url == "https://x"
        assert config.llm.provider == "google"

    def test_agent_settings(self):
        config = RuntimeConfig.from_dict({
            "agents": {
                "crop-health": {
                    "enabled": False,
                    "llm_override": {"provider": "openai", "model": "gpt-4o", "api_key": "k"},
                },
                "unknown_agent": {"enabled": False},
            }
        })

        crop = config.agents.crop_health
        assert crop.name == "CropHealthAgent"
        assert crop.enabled is False
        assert isinstance(crop.llm_override, LLMConfig)
        assert crop.llm_override.model == "gpt-4o"
        assert config.agents.climate.enabled is True

    def test_dispatch_settings(self):
        config = RuntimeConfig.from_dict({"dispatch": {"enabled": False, "max_workers": 2}, "debug": True})

        assert config.dispatch.enabled is False
        assert config.dispatch.max_workers == 2
        assert config.debug is True


class TestEnvironment:

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SHAMBA_LLM_PROVIDER", "openai")
        monkeypatch.setenv("SHAMBA_LLM_MODEL", "gpt-4o-mini")
        monkeypatch.setenv("SHAMBA_LLM_BASE_URL", "https://gateway.example/v1")
        monkeypatch.setenv("SHAMBA_LLM_PROXY", "http://proxy.local:3128")
        monkeypatch.setenv("SHAMBA_STORE_BACKEND", "supabase")
        monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
        monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service")
        monkeypatch.setenv("SHAMBA_DISPATCH_WORKERS", "8")
        monkeypatch.setenv("SHAMBA_DEBUG", "yes")

        config = RuntimeConfig.from_env()

        assert config.llm.provider == "openai"
        assert config.llm.model == "gpt-4o-mini"
        assert config.llm.base_url == "https://gateway.example/v1"
        assert config.llm.proxy == "http://proxy.local:3128"
        assert config.store == StoreConfig(
            backend="supabase", url="https://demo.supabase.co", api_key="service"
        )
        assert config.dispatch.max_workers == 8
        assert config.debug is True

    def test_overrides_applied_on_copy(self, monkeypatch):
        base = RuntimeConfig.from_dict({"llm": {"model": "from-file"}, "store": {"timeout": 3.0}})
        monkeypatch.setenv("SHAMBA_LLM_MODEL", "from-env")

        merged = base.with_env_overrides()

        assert merged.llm.model == "from-env"
        assert merged.store.timeout == 3.0
        assert base.llm.model == "from-file"

    def test_no_overrides_returns_same_config(self):
        config = RuntimeConfig()
        assert config.with_env_overrides() is config


class TestFiles:

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "shamba.yaml"
        path.write_text(
            "llm:\n"
            "  provider: anthropic\n"
            "  model: claude-sonnet-4-5\n"
            "agents:\n"
            "  market:\n"
            "    enabled: false\n"
        )

        config = RuntimeConfig.from_yaml(path)

        assert config.llm.provider == "anthropic"
        assert config.agents.market.enabled is False
        assert config.agents.market.name == "MarketAgent"

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "nope.yaml")

    def test_load_runtime_config_from_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "shamba.json").write_text(json.dumps({"dispatch": {"max_workers": 2}}))
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SHAMBA_DEBUG", "true")

        config = load_runtime_config()

        assert config.dispatch.max_workers == 2
        assert config.debug is True

    def test_load_runtime_config_skips_broken_file(self, tmp_path, monkeypatch):
        (tmp_path / "shamba.json").write_text("{not json")
        (tmp_path / ".shamba.json").write_text(json.dumps({"debug": True}))
        monkeypatch.chdir(tmp_path)

        assert load_runtime_config().debug is True


def test_to_dict_omits_secrets():
    config = RuntimeConfig(
        llm=LLMConfig(api_key="secret"),
        store=StoreConfig(backend="supabase", api_key="service"),
    )

    data = config.to_dict()

    assert "api_key" not in data["llm"]
    assert "api_key" not in data["store"]
    assert data["store"]["backend"] == "supabase"
    assert "secret" not in json.dumps(data)


def test_to_dict_redacts_agent_overrides():
    config = RuntimeConfig.from_dict({
        "agents": {"market": {"llm_override": {"provider": "openai", "api_key": "override-secret"}}},
    })

    data = config.to_dict()

    assert data["agents"]["market"]["llm_override"]["provider"] == "openai"
    assert "override-secret" not in json.dumps(data)
