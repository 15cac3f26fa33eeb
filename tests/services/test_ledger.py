"""Tests for the single-pool Ledger."""

from __future__ import annotations

import math

import pytest

from fortune_valley.domain.events import BalanceChanged, IncomeGenerated
from fortune_valley.domain.exceptions import InsufficientFunds, InvalidAmount
from fortune_valley.infrastructure.event_bus import EventBus, EventStore
from fortune_valley.services.ledger import Ledger


class TestCredit:

    def test_credit_increases_balance(self, ledger: Ledger) -> None:
        ledger.credit(250.0, "restaurant")
        assert ledger.balance == pytest.approx(1250.0)

    def test_credit_publishes_balance_only(self, ledger: Ledger, store: EventStore) -> None:
        ledger.credit(50.0, "sell:Test Bond")
        changed = store.query(event_type=BalanceChanged)
        assert len(changed) == 1
        assert changed[0].new_balance == pytest.approx(1050.0)  # type: ignore[attr-defined]
        assert changed[0].delta == pytest.approx(50.0)  # type: ignore[attr-defined]
        assert changed[0].source_id == "player"
        assert store.query(event_type=IncomeGenerated) == []

    def test_earn_publishes_income(self, ledger: Ledger, store: EventStore) -> None:
        ledger.earn(50.0, "restaurant")
        income = store.query(event_type=IncomeGenerated)
        assert ledger.balance == pytest.approx(1050.0)
        assert len(store.query(event_type=BalanceChanged)) == 1
        assert len(income) == 1
        assert income[0].source_tag == "restaurant"  # type: ignore[attr-defined]
        assert income[0].amount == pytest.approx(50.0)  # type: ignore[attr-defined]

    @pytest.mark.parametrize("amount", [0.0, -5.0, math.nan, math.inf])
    def test_invalid_credit_rejected(self, ledger: Ledger, amount: float) -> None:
        with pytest.raises(InvalidAmount):
            ledger.credit(amount)
        assert ledger.balance == 1000.0


class TestDebit:

    def test_debit_decreases_balance(self, ledger: Ledger, store: EventStore) -> None:
        ledger.debit(400.0, "lot")
        assert ledger.balance == pytest.approx(600.0)
        event = store.latest
        assert isinstance(event, BalanceChanged)
        assert event.delta == pytest.approx(-400.0)

    def test_overdraft_fails_without_state_change(self, bus: EventBus, store: EventStore) -> None:
        ledger = Ledger(500.0, bus)
        store.clear()
        with pytest.raises(InsufficientFunds) as exc_info:
            ledger.debit(600.0, "lot")
        assert ledger.balance == 500.0
        assert exc_info.value.shortfall == pytest.approx(100.0)
        assert len(store) == 0

    def test_exact_balance_can_be_spent(self, ledger: Ledger) -> None:
        ledger.debit(1000.0)
        assert ledger.balance == 0.0

    def test_non_positive_debit_rejected(self, ledger: Ledger) -> None:
        with pytest.raises(InvalidAmount):
            ledger.debit(0.0)

    def test_can_afford(self, ledger: Ledger) -> None:
        assert ledger.can_afford(1000.0)
        assert not ledger.can_afford(1000.01)


class TestInvariants:

    @pytest.mark.parametrize("amount", [0.01, 1.0, 333.33, 1e6])
    def test_credit_then_debit_restores_balance(self, ledger: Ledger, amount: float) -> None:
        ledger.credit(amount)
        ledger.debit(amount)
        assert ledger.balance == pytest.approx(1000.0)

    def test_balance_never_negative(self, ledger: Ledger) -> None:
        for amount in (300.0, 300.0, 300.0, 300.0, 300.0):
            try:
                ledger.debit(amount)
            except InsufficientFunds:
                pass
            assert ledger.balance >= 0.0
        assert ledger.balance == pytest.approx(100.0)

    def test_reset_publishes_starting_balance(self, ledger: Ledger, store: EventStore) -> None:
        ledger.debit(999.0)
        ledger.reset(750.0)
        assert ledger.balance == 750.0
        event = store.latest
        assert isinstance(event, BalanceChanged)
        assert event.delta == 750.0

    def test_negative_starting_balance_rejected(self, bus: EventBus) -> None:
        with pytest.raises(InvalidAmount):
            Ledger(-1.0, bus)

    def test_account_id_tags_events(self, bus: EventBus, store: EventStore) -> None:
        rival = Ledger(10.0, bus, account_id="rival")
        rival.credit(5.0)
        assert all(e.source_id == "rival" for e in store.query())
