"""
Tests for the five prediction agents.

Each agent is run directly against a mock oracle and the in-memory store:
context reads, prompt contents, payload enrichment, risk derivation,
escalation side effects and degraded behavior when the oracle or store
fails.
"""

import json
from datetime import timedelta

import pytest

from agents import (
    AgentContext,
    ClimateAgent,
    CropHealthAgent,
    GovernmentReportAgent,
    MarketAgent,
    PostHarvestAgent,
)
from agents.climate import COLLABORATION_NOTIFIED
from core.llm import MockProvider
from core.schemas import (
    TABLE_ALERTS,
    TABLE_PREDICTIONS,
    AgentType,
    ErrorCodes,
    PredictionRecord,
    RiskLevel,
)

from fixtures import (
    BASE_TIME,
    FailingStore,
    climate_response,
    crop_health_response,
    government_response,
    market_response,
    post_harvest_response,
    seed_climate,
    seed_market,
    user_prompt,
)


class RecordingDispatcher:
    """Dispatcher that records triggers instead of running them."""

    def __init__(self, error=None):
        self.dispatched = []
        self.error = error

    def dispatch(self, target, context_input):
        if self.error is not None:
            raise self.error
        self.dispatched.append((target, context_input))
        return None


def calls_of(ctx):
    return ctx.llm.provider.calls


# =============================================================================
# Climate
# =============================================================================

class TestClimateAgent:

    def test_low_risk_forecast(self, make_ctx, store):
        ctx = make_ctx({AgentType.CLIMATE: climate_response("low")})

        result = ClimateAgent().run(ctx, {"region": "Kiambu"})

        assert result.success
        record = result.output
        assert record.agent_type == AgentType.CLIMATE
        assert record.region == "Kiambu"
        assert record.risk_level == RiskLevel.LOW
        assert record.persisted
        assert record.created_at == BASE_TIME
        assert record.expires_at == BASE_TIME + timedelta(days=7)
        assert result.alerts == []
        assert store.count(TABLE_PREDICTIONS) == 1
        assert store.count(TABLE_ALERTS) == 0

    def test_prompt_carries_recent_readings(self, make_ctx, store):
        seed_climate(store, "Kiambu", count=7)
        seed_climate(store, "Nakuru", count=1)
        ctx = make_ctx({AgentType.CLIMATE: climate_response()})

        ClimateAgent().run(ctx, {"region": "Kiambu", "requestType": "seasonal"})

        call = calls_of(ctx)[0]
        prompt = user_prompt(call)
        assert "Region: Kiambu" in prompt
        assert "Request Type: seasonal" in prompt
        readings = json.loads(prompt.split("Recent Climate Data: ")[1].split("\n")[0])
        assert [r["temperature"] for r in readings] == [26.0, 25.0, 24.0, 23.0, 22.0]
        assert call["policy"].temperature == 0.7

    def test_high_risk_escalates(self, make_ctx, store):
        dispatcher = RecordingDispatcher()
        ctx = make_ctx(
            {AgentType.CLIMATE: climate_response("high", summary="Heavy rain expected")},
            dispatcher=dispatcher,
        )

        result = ClimateAgent().run(ctx, {"region": "Kiambu"})

        assert result.output.risk_level == RiskLevel.HIGH
        assert result.output.payload.collaboration_status == COLLABORATION_NOTIFIED
        assert result.metadata["triggered"] == "post-harvest"

        assert len(result.alerts) == 1
        alert = result.alerts[0]
        assert alert.severity.value == "warning"
        assert alert.location == "Kiambu"
        assert alert.message == "Heavy rain expected"
        assert alert.details["risk_level"] == "high"
        assert store.count(TABLE_ALERTS) == 1

        assert dispatcher.dispatched == [(AgentType.POST_HARVEST, {
            "crop_type": "Maize",
            "storage_type": "Silo",
            "trigger_reason": "Climate Risk: Heavy rain expected",
            "region": "Kiambu",
        })]

    def test_stored_payload_reflects_collaboration(self, make_ctx, store):
        ctx = make_ctx({AgentType.CLIMATE: climate_response("critical")}, dispatcher=RecordingDispatcher())

        ClimateAgent().run(ctx, {"region": "Kiambu"})

        row = store.select(TABLE_PREDICTIONS)[0]
        assert row["prediction_data"]["collaboration_status"] == COLLABORATION_NOTIFIED
        assert row["risk_level"] == "critical"

    def test_dispatch_failure_does_not_fail_run(self, make_ctx):
        ctx = make_ctx(
            {AgentType.CLIMATE: climate_response("critical")},
            dispatcher=RecordingDispatcher(error=RuntimeError("queue full")),
        )

        result = ClimateAgent().run(ctx, {"region": "Kiambu"})

        assert result.success
        assert result.metadata["triggered"] is None
        assert len(result.alerts) == 1

    def test_missing_region(self, make_ctx, store):
        ctx = make_ctx({AgentType.CLIMATE: climate_response()})

        result = ClimateAgent().run(ctx, {"region": "   "})

        assert not result.success
        assert result.error_code == ErrorCodes.INVALID_INPUT
        assert calls_of(ctx) == []
        assert store.count(TABLE_PREDICTIONS) == 0


# =============================================================================
# Crop health
# =============================================================================

class TestCropHealthAgent:

    def test_healthy_crop(self, make_ctx):
        ctx = make_ctx({AgentType.CROP_HEALTH: crop_health_response()})

        result = CropHealthAgent().run(ctx, {"location": "Nakuru", "cropType": "Maize"})

        record = result.output
        assert record.region == "Nakuru"
        assert record.risk_level == RiskLevel.LOW
        assert record.expires_at is None
        assert record.payload.crop_type == "Maize"
        assert record.payload.location == "Nakuru"
        assert result.alerts == []

    def test_image_sent_as_extra_message(self, make_ctx):
        ctx = make_ctx({AgentType.CROP_HEALTH: crop_health_response()})

        CropHealthAgent().run(ctx, {
            "location": "Nakuru",
            "cropType": "Maize",
            "imageUrl": "https://img.example/leaf.jpg",
        })

        call = calls_of(ctx)[0]
        messages = call["messages"]
        assert len(messages) == 3
        assert messages[-1] == {
            "role": "user",
            "content": "Analyze this crop image: https://img.example/leaf.jpg",
        }
        assert call["policy"].temperature == 0.5

    def test_no_image_is_noted_in_prompt(self, make_ctx):
        ctx = make_ctx({AgentType.CROP_HEALTH: crop_health_response()})

        CropHealthAgent().run(ctx, {"location": "Nakuru", "cropType": "Maize"})

        call = calls_of(ctx)[0]
        assert len(call["messages"]) == 2
        assert "No image provided" in user_prompt(call)

    def test_high_severity_pest_alert(self, make_ctx):
        ctx = make_ctx({AgentType.CROP_HEALTH: crop_health_response(
            "diseased", "high", pest_detected="Fall armyworm",
        )})

        result = CropHealthAgent().run(ctx, {"location": "Nakuru", "cropType": "Maize"})

        assert result.output.risk_level == RiskLevel.HIGH
        alert = result.alerts[0]
        assert alert.alert_type.value == "pest"
        assert alert.severity.value == "warning"
        assert alert.message == "Fall armyworm detected in Maize"
        assert alert.location == "Nakuru"

    def test_critical_status(self, make_ctx):
        ctx = make_ctx({AgentType.CROP_HEALTH: crop_health_response(
            "critical", "medium", disease_detected="Maize lethal necrosis",
        )})

        result = CropHealthAgent().run(ctx, {"location": "Bomet", "cropType": "Maize"})

        assert result.output.risk_level == RiskLevel.CRITICAL
        assert result.alerts[0].severity.value == "critical"
        assert result.alerts[0].message == "Mould spreading detected for Maize"
        assert result.alerts[0].severity.value == "critical"


# =============================================================================
# Market
# =============================================================================

class TestMarketAgent:

    def test_prompt_carries_recent_prices(self, make_ctx, store):
        seed_market(store, "Maize", count=12)
        seed_market(store, "Beans", count=2)
        ctx = make_ctx({AgentType.MARKET: market_response()})

        MarketAgent().run(ctx, {"commodity": "Maize", "location": "Nairobi"})

        prompt = user_prompt(calls_of(ctx)[0])
        prices = json.loads(prompt.split("Recent Price Data: ")[1].split("\n")[0])
        assert len(prices) == 10
        assert prices[0]["price_per_kg"] == 51.0
        assert {p["commodity"] for p in prices} == {"Maize"}

    def test_rising_prices_raise_info_alert(self, make_ctx):
        ctx = make_ctx({AgentType.MARKET: market_response("increasing", confidence=0.85)})

        result = MarketAgent().run(ctx, {"commodity": "Maize", "location": "Nairobi"})

        assert result.output.risk_level == RiskLevel.LOW
        assert result.output.payload.commodity == "Maize"
        alert = result.alerts[0]
        assert alert.severity.value == "info"
        assert alert.alert_type.value == "market"
        assert "Maize" in alert.message

    def test_low_confidence_stays_quiet(self, make_ctx):
        ctx = make_ctx({AgentType.MARKET: market_response("increasing", confidence=0.7)})

        result = MarketAgent().run(ctx, {"commodity": "Maize", "location": "Nairobi"})

        assert result.alerts == []

    def test_percentage_confidence(self, make_ctx):
        ctx = make_ctx({AgentType.MARKET: market_response("increasing", confidence="85%")})

        result = MarketAgent().run(ctx, {"commodity": "Maize", "location": "Nairobi"})

        assert result.output.payload.confidence == pytest.approx(0.85)
        assert len(result.alerts) == 1

    def test_falling_prices_are_medium_risk(self, make_ctx):
        ctx = make_ctx({AgentType.MARKET: market_response("Decreasing")})

        result = MarketAgent().run(ctx, {"commodity": "Maize", "location": "Nairobi"})

        assert result.output.risk_level == RiskLevel.MEDIUM
        assert result.alerts == []


# =============================================================================
# Post-harvest
# =============================================================================

class TestPostHarvestAgent:

    INPUT = {"region": "Kiambu", "cropType": "Maize", "storageType": "Silo"}

    def test_prompt_uses_latest_reading(self, make_ctx, store):
        seed_climate(store, "Kiambu", count=3)
        ctx = make_ctx({AgentType.POST_HARVEST: post_harvest_response()})

        PostHarvestAgent().run(ctx, self.INPUT)

        prompt = user_prompt(calls_of(ctx)[0])
        assert "Maize stored using Silo storage in Kiambu" in prompt
        assert "Temperature: 22.0°C" in prompt
        assert "Humidity: 78.0%" in prompt
        assert "requested because of" not in prompt

    def test_unknown_conditions_without_readings(self, make_ctx):
        ctx = make_ctx({AgentType.POST_HARVEST: post_harvest_response()})

        PostHarvestAgent().run(ctx, self.INPUT)

        prompt = user_prompt(calls_of(ctx)[0])
        assert "Temperature: unknown°C" in prompt
        assert "Humidity: unknown%" in prompt

    def test_trigger_reason_in_prompt_and_payload(self, make_ctx):
        ctx = make_ctx({AgentType.POST_HARVEST: post_harvest_response("High", warnings=["Aflatoxin"])})

        result = PostHarvestAgent().run(ctx, dict(self.INPUT, triggerReason="Climate Risk: floods"))

        assert "requested because of: Climate Risk: floods" in user_prompt(calls_of(ctx)[0])
        payload = result.output.payload
        assert payload.trigger_reason == "Climate Risk: floods"
        assert payload.crop_type == "Maize"
        assert payload.storage_type == "Silo"
        assert result.output.risk_level == RiskLevel.HIGH
        assert result.alerts[0].message == "Aflatoxin detected for Maize"

    def test_safe_days_text_is_parsed(self, make_ctx):
        ctx = make_ctx({AgentType.POST_HARVEST: post_harvest_response(safe_days="10 days")})

        result = PostHarvestAgent().run(ctx, self.INPUT)

        assert result.output.payload.safe_days == 10
        assert result.output.risk_level == RiskLevel.LOW

    def test_critical_risk_is_recorded_as_critical(self, make_ctx):
        ctx = make_ctx({AgentType.POST_HARVEST: post_harvest_response("Critical", 1, ["Mould spreading"])})

        result = PostHarvestAgent().run(ctx, self.INPUT)

        assert result.metadata["fallback_used"] is False
        assert result.output.payload.risk == "Critical"
        assert result.output.risk_level == RiskLevel.CRITICAL


# =============================================================================
# Government reporting
# =============================================================================

class TestGovernmentReportAgent:

    def _seed_alerts(self, store, count, severity="warning", is_active=True):
        for i in range(count):
            store.insert(TABLE_ALERTS, {
                "alert_type": "climate",
                "severity": severity,
                "location": f"Region {i}",
                "message": "test",
                "is_active": is_active,
            })

    def test_counts_active_alerts(self, make_ctx, store):
        self._seed_alerts(store, 2, severity="critical")
        self._seed_alerts(store, 1)
        self._seed_alerts(store, 4, is_active=False)
        ctx = make_ctx({AgentType.GOVERNMENT_REPORTING: government_response()})

        result = GovernmentReportAgent().run(ctx, {})

        payload = result.output.payload
        assert payload.active_alert_count == 3
        assert payload.critical_alert_count == 2
        assert result.output.region == "National"
        assert result.output.risk_level == RiskLevel.LOW
        prompt = user_prompt(calls_of(ctx)[0])
        assert "Active Alerts: 3" in prompt
        assert "Critical Alerts: 2" in prompt

    def test_many_alerts_is_high_risk(self, make_ctx, store):
        self._seed_alerts(store, 6)
        ctx = make_ctx({AgentType.GOVERNMENT_REPORTING: government_response()})

        result = GovernmentReportAgent().run(ctx, {})

        assert result.output.risk_level == RiskLevel.HIGH
        assert result.alerts == []

    def test_prompt_includes_recent_activity(self, make_ctx, store):
        seed_market(store, "Maize", count=12)
        ctx = make_ctx({
            AgentType.CLIMATE: climate_response("medium", summary="Dry spell"),
            AgentType.GOVERNMENT_REPORTING: government_response(),
        })
        ClimateAgent().run(ctx, {"region": "Kitui"})

        GovernmentReportAgent().run(ctx, {})

        prompt = user_prompt(calls_of(ctx)[-1])
        assert "Dry spell" in prompt
        market = json.loads(prompt.split("Market Prices: ")[1].split("\n")[0])
        assert len(market) == 10


# =============================================================================
# Failure handling shared by every agent
# =============================================================================

RUNS = [
    (ClimateAgent, {"region": "Kiambu"}),
    (CropHealthAgent, {"location": "Nakuru", "cropType": "Maize"}),
    (MarketAgent, {"commodity": "Maize", "location": "Nairobi"}),
    (PostHarvestAgent, {"region": "Kiambu", "cropType": "Maize", "storageType": "Silo"}),
    (GovernmentReportAgent, {}),
]


@pytest.mark.parametrize("agent_cls,context_input", RUNS)
class TestFailureHandling:

    def test_oracle_failure_writes_nothing(self, make_ctx, store, agent_cls, context_input):
        ctx = make_ctx(provider=MockProvider(error=ConnectionError("gateway down")))

        result = agent_cls().run(ctx, context_input)

        assert not result.success
        assert result.output is None
        assert result.error_code == ErrorCodes.ORACLE_UNAVAILABLE
        assert store.count(TABLE_PREDICTIONS) == 0
        assert store.count(TABLE_ALERTS) == 0

    @pytest.mark.parametrize("reply", ["", "   \n"])
    def test_empty_oracle_reply_uses_fallback(self, make_ctx, store, agent_cls, context_input, reply):
        ctx = make_ctx(provider=MockProvider(responses=[reply]))

        result = agent_cls().run(ctx, context_input)

        assert result.success
        assert result.metadata["fallback_used"] is True
        assert result.output.persisted
        assert store.count(TABLE_PREDICTIONS) == 1

    def test_no_oracle_configured(self, store, clock, agent_cls, context_input):
        result = agent_cls().run(AgentContext(store=store, clock=clock), context_input)

        assert result.error_code == ErrorCodes.ORACLE_UNAVAILABLE

    def test_garbage_reply_uses_fallback(self, make_ctx, store, agent_cls, context_input):
        ctx = make_ctx(provider=MockProvider(responses=["The model is overloaded, sorry."]))

        result = agent_cls().run(ctx, context_input)

        assert result.success
        assert result.metadata["fallback_used"] is True
        assert result.output.persisted
        row = store.select(TABLE_PREDICTIONS)[0]
        assert PredictionRecord.from_row(row).payload.model_dump() == result.output.payload.model_dump()

    def test_store_read_failure_continues(self, make_ctx, clock, agent_cls, context_input):
        failing = FailingStore(fail_reads=True, clock=clock.now)
        ctx = make_ctx(provider=MockProvider(responses=["{}"]), store=failing)

        result = agent_cls().run(ctx, context_input)

        assert result.success
        assert result.output.persisted

    def test_store_write_failure_returns_unpersisted_record(
        self, make_ctx, clock, agent_cls, context_input
    ):
        failing = FailingStore(fail_writes=True, clock=clock.now)
        ctx = make_ctx(provider=MockProvider(responses=["{}"]), store=failing)

        result = agent_cls().run(ctx, context_input)

        assert result.success
        assert result.output is not None
        assert result.output.id is None
        assert result.metadata["persisted"] is False
        assert failing.failed_writes[0][0] == TABLE_PREDICTIONS
