"""
Tests for agent registration and lookup.
"""

import pytest

from agents import (
    ClimateAgent,
    CropHealthAgent,
    GovernmentReportAgent,
    MarketAgent,
    PostHarvestAgent,
    get_registry,
)
from agents.base import AgentCapability, AgentResult, BaseAgent
from agents.registry import AgentRegistry
from core.schemas import AgentType, UnknownAgentException


class StubAgent(BaseAgent):
    _name = "StubClimate"
    _capabilities = {AgentCapability.LLM}
    agent_type = AgentType.CLIMATE

    def run(self, ctx, context_input):
        return AgentResult(output=None)


@pytest.fixture
def registry():
    return AgentRegistry()


class TestRegistry:

    def test_register_and_get(self, registry, make_ctx):
        registry.register(AgentType.CLIMATE, "StubClimate", lambda ctx: StubAgent())

        agent = registry.get_agent(AgentType.CLIMATE, make_ctx())

        assert isinstance(agent, StubAgent)
        assert registry.has_agent("StubClimate")
        assert registry.has_type("climate")

    def test_priority_selects_preferred(self, registry, make_ctx):
        registry.register(AgentType.CLIMATE, "Low", lambda ctx: StubAgent(name="Low"), priority=1)
        registry.register(AgentType.CLIMATE, "High", lambda ctx: StubAgent(name="High"), priority=50)

        assert registry.get_agent("climate", make_ctx()).name == "High"
        assert registry.get_entry(AgentType.CLIMATE).name == "High"

    def test_explicit_name(self, registry, make_ctx):
        registry.register(AgentType.CLIMATE, "Low", lambda ctx: StubAgent(name="Low"), priority=1)
        registry.register(AgentType.CLIMATE, "High", lambda ctx: StubAgent(name="High"), priority=50)

        assert registry.get_agent(AgentType.CLIMATE, make_ctx(), name="Low").name == "Low"

    def test_reregistering_replaces(self, registry):
        registry.register(AgentType.CLIMATE, "Stub", lambda ctx: StubAgent(), version="v1")
        registry.register(AgentType.MARKET, "Stub", lambda ctx: StubAgent(), version="v2")

        assert not registry.has_type(AgentType.CLIMATE)
        assert [e.version for e in registry.list_agents()] == ["v2"]

    def test_accepts_underscore_spellings(self, registry):
        registry.register("government_reporting", "Gov", lambda ctx: StubAgent())

        assert registry.get_entry("government").agent_type == AgentType.GOVERNMENT_REPORTING

    def test_unknown_type(self, registry, make_ctx):
        with pytest.raises(UnknownAgentException):
            registry.get_agent("weather", make_ctx())
        assert not registry.has_type("weather")

    def test_known_type_with_no_agents(self, registry, make_ctx):
        with pytest.raises(UnknownAgentException, match="market"):
            registry.get_agent(AgentType.MARKET, make_ctx())

    def test_unknown_name(self, registry, make_ctx):
        with pytest.raises(UnknownAgentException):
            registry.get_agent_by_name("Nobody", make_ctx())

    def test_list_by_type(self, registry):
        registry.register(AgentType.CLIMATE, "A", lambda ctx: StubAgent())
        registry.register(AgentType.MARKET, "B", lambda ctx: StubAgent())

        assert [e.name for e in registry.list_agents(AgentType.MARKET)] == ["B"]
        assert len(registry.list_agents()) == 2


class TestGlobalRegistry:

    @pytest.mark.parametrize("agent_type,cls", [
        (AgentType.CLIMATE, ClimateAgent),
        (AgentType.CROP_HEALTH, CropHealthAgent),
        (AgentType.MARKET, MarketAgent),
        (AgentType.POST_HARVEST, PostHarvestAgent),
        (AgentType.GOVERNMENT_REPORTING, GovernmentReportAgent),
    ])
    def test_every_agent_registered(self, make_ctx, agent_type, cls):
        agent = get_registry().get_agent(agent_type, make_ctx())

        assert isinstance(agent, cls)
        assert agent.agent_type == agent_type
        assert AgentCapability.LLM in agent.capabilities

    def test_only_climate_triggers(self):
        triggering = {
            e.agent_type for e in get_registry().list_agents()
            if AgentCapability.TRIGGERS in e.capabilities
        }
        assert triggering == {AgentType.CLIMATE}

    def test_crop_health_accepts_images(self):
        entry = get_registry().get_entry(AgentType.CROP_HEALTH)
        assert AgentCapability.VISION in entry.capabilities
