"""Shared fixtures for the Fortune Valley test suite."""

from __future__ import annotations

import numpy as np
import pytest

from fortune_valley.domain.enums import RiskLevel
from fortune_valley.domain.values import (
    CityLotDefinition,
    InvestmentDefinition,
    VolatilityRange,
)
from fortune_valley.infrastructure.config import GameConfig, RestaurantConfig, RivalConfig
from fortune_valley.infrastructure.event_bus import EventBus, EventStore
from fortune_valley.services.city import LotMarket
from fortune_valley.services.ledger import Ledger
from fortune_valley.services.restaurant import IncomeSource

# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def store(bus: EventBus) -> EventStore:
    """Records every event published on ``bus``."""
    s = EventStore()
    bus.subscribe_all(s.append)
    return s


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


# ---------------------------------------------------------------------------
# Definition fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def bond() -> InvestmentDefinition:
    """12%/yr, compounded monthly every 30 ticks, no volatility."""
    return InvestmentDefinition(
        display_name="Test Bond",
        risk_level=RiskLevel.LOW,
        annual_return_rate=0.12,
        compounding_frequency_ticks=30,
        compounds_per_year=12,
        minimum_deposit=100.0,
    )


@pytest.fixture
def stock() -> InvestmentDefinition:
    """Volatile investment that can lose value."""
    return InvestmentDefinition(
        display_name="Test Stock",
        risk_level=RiskLevel.HIGH,
        annual_return_rate=0.24,
        volatility_range=VolatilityRange(-2.0, 3.0),
        compounding_frequency_ticks=10,
        compounds_per_year=12,
        minimum_deposit=50.0,
    )


@pytest.fixture
def lots() -> tuple[CityLotDefinition, ...]:
    return (
        CityLotDefinition("Corner Shop", base_cost=1000.0, income_bonus=5.0),
        CityLotDefinition("Park View", base_cost=1500.0, income_bonus=8.0),
        CityLotDefinition("Harbor", base_cost=2000.0, income_bonus=10.0),
    )


@pytest.fixture
def restaurant_config() -> RestaurantConfig:
    return RestaurantConfig()


@pytest.fixture
def rival_config() -> RivalConfig:
    return RivalConfig()


@pytest.fixture
def small_config(lots: tuple[CityLotDefinition, ...], bond: InvestmentDefinition) -> GameConfig:
    """Three-lot city with one deterministic investment."""
    return GameConfig(lots=lots, investments=(bond,), seed=7)


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def ledger(bus: EventBus) -> Ledger:
    return Ledger(1000.0, bus, account_id="player")


@pytest.fixture
def income_source(restaurant_config: RestaurantConfig, ledger: Ledger, bus: EventBus) -> IncomeSource:
    return IncomeSource(restaurant_config, ledger, bus)


@pytest.fixture
def market(
    lots: tuple[CityLotDefinition, ...],
    bus: EventBus,
    income_source: IncomeSource,
) -> LotMarket:
    return LotMarket(lots, bus, income_source)
