"""
Test fixtures package for the agent network tests.

Organized into layers:
- oracle_fixtures.py: Oracle response builders and a routing MockProvider
- store_fixtures.py: Seed rows, a failing store and a record factory

Usage:
    from fixtures import climate_response, routing_provider

    def test_something():
        provider = routing_provider({AgentType.CLIMATE: climate_response("high")})
"""

from .oracle_fixtures import (
    agent_of,
    climate_response,
    crop_health_response,
    government_response,
    market_response,
    post_harvest_response,
    routing_provider,
    user_prompt,
)

from .store_fixtures import (
    BASE_TIME,
    FailingStore,
    climate_row,
    make_record,
    market_row,
    seed_climate,
    seed_market,
)

__all__ = [
    # Oracle
    "agent_of",
    "climate_response",
    "crop_health_response",
    "government_response",
    "market_response",
    "post_harvest_response",
    "routing_provider",
    "user_prompt",
    # Store
    "BASE_TIME",
    "FailingStore",
    "climate_row",
    "make_record",
    "market_row",
    "seed_climate",
    "seed_market",
]
