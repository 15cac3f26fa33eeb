"""Tests for InvestmentBook and Position."""

from __future__ import annotations

import numpy as np
import pytest

from fortune_valley.domain.enums import RiskLevel
from fortune_valley.domain.events import (
    IncomeGenerated,
    InvestmentCompounded,
    InvestmentOpened,
    InvestmentSold,
)
from fortune_valley.domain.exceptions import InsufficientFunds, InvalidAmount, PositionNotFound
from fortune_valley.domain.values import InvestmentDefinition, VolatilityRange
from fortune_valley.infrastructure.event_bus import EventBus, EventStore
from fortune_valley.services.investments import InvestmentBook
from fortune_valley.services.ledger import Ledger


@pytest.fixture
def book(
    ledger: Ledger,
    bond: InvestmentDefinition,
    stock: InvestmentDefinition,
    bus: EventBus,
    rng: np.random.Generator,
) -> InvestmentBook:
    return InvestmentBook(ledger, (bond, stock), bus, rng)


class TestOpen:

    def test_open_moves_money_into_position(
        self, book: InvestmentBook, ledger: Ledger, bond: InvestmentDefinition, store: EventStore
    ) -> None:
        position = book.open(bond, 400.0)
        assert ledger.balance == pytest.approx(600.0)
        assert position.principal == position.current_value == 400.0
        assert position.ticks_held == 0
        assert position.ticks_since_last_compound == 0
        assert isinstance(store.latest, InvestmentOpened)

    def test_below_minimum_rejected(
        self, book: InvestmentBook, ledger: Ledger, bond: InvestmentDefinition
    ) -> None:
        with pytest.raises(InvalidAmount):
            book.open(bond, 99.0)
        assert ledger.balance == 1000.0
        assert book.positions == []

    def test_non_positive_rejected(self, book: InvestmentBook, bond: InvestmentDefinition) -> None:
        with pytest.raises(InvalidAmount):
            book.open(bond, 0.0)

    def test_unaffordable_rejected(
        self, book: InvestmentBook, ledger: Ledger, bond: InvestmentDefinition
    ) -> None:
        with pytest.raises(InsufficientFunds):
            book.open(bond, 1500.0)
        assert ledger.balance == 1000.0
        assert book.lifetime_investment_count == 0

    def test_positions_never_merged(self, book: InvestmentBook, bond: InvestmentDefinition) -> None:
        first = book.open(bond, 200.0)
        book.tick(15)
        second = book.open(bond, 300.0)
        assert first.position_id != second.position_id
        assert len(book.positions) == 2
        book.tick(15)
        assert first.compound_count == 1
        assert second.compound_count == 0
        assert second.ticks_since_last_compound == 15


class TestCompounding:

    def test_one_period_at_twelve_percent(
        self, book: InvestmentBook, bond: InvestmentDefinition
    ) -> None:
        position = book.open(bond, 1000.0)
        book.tick(29)
        assert position.current_value == pytest.approx(1000.0)
        book.tick(1)
        assert position.current_value == pytest.approx(1010.0)
        assert position.ticks_since_last_compound == 0

    def test_catch_up_applies_every_elapsed_period(
        self, book: InvestmentBook, bond: InvestmentDefinition, store: EventStore
    ) -> None:
        position = book.open(bond, 1000.0)
        applied = book.tick(65)
        assert applied == 2
        assert position.compound_count == 2
        assert position.ticks_since_last_compound == 5
        assert position.ticks_held == 65
        assert position.current_value == pytest.approx(1020.1)
        assert len(store.query(event_type=InvestmentCompounded)) == 2

    def test_monotonic_without_negative_volatility(
        self, book: InvestmentBook, bond: InvestmentDefinition
    ) -> None:
        position = book.open(bond, 500.0)
        previous = position.current_value
        for _ in range(200):
            book.tick(1)
            assert position.current_value >= previous
            previous = position.current_value

    def test_degenerate_range_does_not_draw(self, ledger: Ledger, bus: EventBus) -> None:
        definition = InvestmentDefinition(
            "Fixed", annual_return_rate=0.12, volatility_range=VolatilityRange(1.0, 1.0),
            compounding_frequency_ticks=1, minimum_deposit=0.0,
        )

        class ExplodingRng:
            def uniform(self, *args, **kwargs):
                raise AssertionError("no draw expected")

        book = InvestmentBook(ledger, (definition,), bus, ExplodingRng())  # type: ignore[arg-type]
        position = book.open(definition, 100.0)
        book.tick(1)
        assert position.current_value == pytest.approx(101.0)

    def test_degenerate_range_multiplier_is_one(self, ledger: Ledger, bus: EventBus) -> None:
        definition = InvestmentDefinition(
            "Pinned", risk_level=RiskLevel.HIGH, annual_return_rate=0.12,
            volatility_range=VolatilityRange(2.0, 2.0),
            compounding_frequency_ticks=30, compounds_per_year=12, minimum_deposit=0.0,
        )
        book = InvestmentBook(ledger, (definition,), bus, np.random.default_rng(0))
        position = book.open(definition, 1000.0)
        book.tick(30)
        assert position.current_value == pytest.approx(1010.0)

    def test_low_risk_ignores_volatility_range(
        self, ledger: Ledger, bus: EventBus, store: EventStore, rng: np.random.Generator
    ) -> None:
        definition = InvestmentDefinition(
            "Steady", risk_level=RiskLevel.LOW, annual_return_rate=0.12,
            volatility_range=VolatilityRange(0.0, 3.0),
            compounding_frequency_ticks=30, compounds_per_year=12, minimum_deposit=0.0,
        )
        book = InvestmentBook(ledger, (definition,), bus, rng)
        position = book.open(definition, 1000.0)
        book.tick(30)
        assert position.current_value == pytest.approx(1010.0)
        compounded = store.query(event_type=InvestmentCompounded)
        assert [e.volatility_multiplier for e in compounded] == [1.0]  # type: ignore[attr-defined]

    def test_value_floored_at_zero(self, ledger: Ledger, bus: EventBus) -> None:
        crash = InvestmentDefinition(
            "Crash", risk_level=RiskLevel.HIGH, annual_return_rate=0.5, compounds_per_year=1,
            volatility_range=VolatilityRange(-200.0, -100.0),
            compounding_frequency_ticks=1, minimum_deposit=0.0,
        )
        book = InvestmentBook(ledger, (crash,), bus)
        position = book.open(crash, 100.0)
        book.tick(3)
        assert position.current_value == 0.0

    def test_volatile_values_stay_non_negative(
        self, book: InvestmentBook, stock: InvestmentDefinition
    ) -> None:
        position = book.open(stock, 500.0)
        for _ in range(50):
            book.tick(10)
            assert position.current_value >= 0.0

    def test_seeded_rng_is_reproducible(
        self, bus: EventBus, stock: InvestmentDefinition
    ) -> None:
        values = []
        for _ in range(2):
            ledger = Ledger(1000.0, bus)
            book = InvestmentBook(ledger, (stock,), bus, np.random.default_rng(123))
            position = book.open(stock, 500.0)
            book.tick(100)
            values.append(position.current_value)
        assert values[0] == values[1]

    def test_peak_portfolio_value_tracked(
        self, book: InvestmentBook, bond: InvestmentDefinition
    ) -> None:
        position = book.open(bond, 1000.0)
        book.tick(30)
        book.sell(position.position_id)
        assert book.total_portfolio_value == 0.0
        assert book.peak_portfolio_value == pytest.approx(1010.0)


class TestSell:

    def test_sell_immediately_has_zero_gain(
        self, book: InvestmentBook, ledger: Ledger, bond: InvestmentDefinition
    ) -> None:
        position = book.open(bond, 300.0)
        record = book.sell(position.position_id)
        assert record.realized_gain == 0.0
        assert record.proceeds == 300.0
        assert ledger.balance == pytest.approx(1000.0)

    def test_sell_credits_current_value(
        self, book: InvestmentBook, ledger: Ledger, bond: InvestmentDefinition, store: EventStore
    ) -> None:
        position = book.open(bond, 1000.0)
        book.tick(30)
        record = book.sell(position.position_id)
        assert ledger.balance == pytest.approx(1010.0)
        assert record.realized_gain == pytest.approx(10.0)
        assert record.ticks_held == 30
        assert record.sold_at_tick == 30
        assert book.realized_gain == pytest.approx(10.0)
        assert book.sell_history == [record]
        assert isinstance(store.latest, InvestmentSold)

    def test_sale_proceeds_are_not_income(
        self, book: InvestmentBook, bond: InvestmentDefinition, store: EventStore
    ) -> None:
        position = book.open(bond, 1000.0)
        book.tick(30)
        book.sell(position.position_id)
        assert store.query(event_type=IncomeGenerated) == []

    def test_unknown_position(self, book: InvestmentBook) -> None:
        with pytest.raises(PositionNotFound):
            book.sell("pos-404")

    def test_sold_position_cannot_be_sold_again(
        self, book: InvestmentBook, bond: InvestmentDefinition
    ) -> None:
        position = book.open(bond, 200.0)
        book.sell(position.position_id)
        with pytest.raises(PositionNotFound):
            book.sell(position.position_id)

    def test_worthless_position_sells_for_nothing(self, ledger: Ledger, bus: EventBus) -> None:
        crash = InvestmentDefinition(
            "Crash", risk_level=RiskLevel.HIGH, annual_return_rate=0.5, compounds_per_year=1,
            volatility_range=VolatilityRange(-200.0, -100.0),
            compounding_frequency_ticks=1, minimum_deposit=0.0,
        )
        book = InvestmentBook(ledger, (crash,), bus)
        position = book.open(crash, 100.0)
        book.tick(1)
        record = book.sell(position.position_id)
        assert record.proceeds == 0.0
        assert record.realized_gain == pytest.approx(-100.0)
        assert ledger.balance == pytest.approx(900.0)


class TestAggregates:

    def test_unrealized_vs_realized(self, book: InvestmentBook, bond: InvestmentDefinition) -> None:
        sold = book.open(bond, 400.0)
        kept = book.open(bond, 500.0)
        book.tick(30)
        book.sell(sold.position_id)
        assert book.realized_gain == pytest.approx(4.0)
        assert book.unrealized_gain == pytest.approx(5.0)
        assert book.total_principal == pytest.approx(500.0)
        assert kept.position_id in [p.position_id for p in book.positions]
        assert book.lifetime_investment_count == 2
        assert book.lifetime_principal_invested == pytest.approx(900.0)

    def test_projected_value_ignores_volatility(
        self, book: InvestmentBook, stock: InvestmentDefinition
    ) -> None:
        expected = 100.0 * (1 + 0.02) ** 3
        assert book.projected_value(stock, 100.0, 35) == pytest.approx(expected)

    def test_portfolio_summary(self, book: InvestmentBook, bond: InvestmentDefinition) -> None:
        assert "No active investments" in book.portfolio_summary()
        book.open(bond, 200.0)
        assert "Portfolio: 1 investment(s)" in book.portfolio_summary()

    def test_reset_clears_everything(self, book: InvestmentBook, bond: InvestmentDefinition) -> None:
        position = book.open(bond, 200.0)
        book.sell(position.position_id)
        book.open(bond, 200.0)
        book.reset()
        assert book.positions == []
        assert book.sell_history == []
        assert book.lifetime_investment_count == 0
        assert book.open(bond, 100.0).position_id == "pos-1"
