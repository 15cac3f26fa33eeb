"""Tests for the end-of-game decision and reflection builders."""

from __future__ import annotations

import pytest

from fortune_valley.domain.enums import GameOutcome, Owner
from fortune_valley.domain.summary import GameSummary
from fortune_valley.domain.values import InvestmentDefinition, LotPurchaseRecord, SellRecord
from fortune_valley.infrastructure.event_bus import EventBus
from fortune_valley.services.city import LotMarket
from fortune_valley.services.investments import InvestmentBook
from fortune_valley.services.ledger import Ledger
from fortune_valley.services.restaurant import IncomeSource
from fortune_valley.services.summary import (
    build_headline,
    build_investment_insight,
    build_key_decisions,
    build_opportunity_cost_insight,
    build_summary,
    build_what_if_message,
)


def _summary(**overrides) -> GameSummary:
    base = dict(outcome=GameOutcome.LOST, days_played=150, final_balance=200.0, total_lots=3)
    base.update(overrides)
    return GameSummary(**base)


class TestKeyDecisions:

    def test_no_investments_noted(self) -> None:
        notes = build_key_decisions(_summary())
        assert notes[0].startswith("You didn't use investments")

    def test_large_gains_credited_for_win(self) -> None:
        notes = build_key_decisions(
            _summary(outcome=GameOutcome.WON, investment_count=2, realized_gain=800.0)
        )
        assert "$800 in investment gains helped you win" in notes[0]

    def test_losses_explained(self) -> None:
        notes = build_key_decisions(_summary(investment_count=1, unrealized_gain=-40.0))
        assert "lost $40" in notes[0]

    def test_fast_victory_and_slow_defeat(self) -> None:
        fast = build_key_decisions(_summary(outcome=GameOutcome.WON, days_played=60))
        slow = build_key_decisions(_summary(days_played=400))
        assert "Fast victory! Efficient use of resources." in fast
        assert "The rival outpaced you over time." in slow

    def test_best_sell_reported(self) -> None:
        sells = (
            SellRecord("pos-1", "Tech Stock", 500.0, 700.0, 200.0, 90, sold_at_tick=120),
            SellRecord("pos-2", "Bond", 500.0, 520.0, 20.0, 60, sold_at_tick=80),
        )
        notes = build_key_decisions(
            _summary(investment_count=2, realized_gain=220.0, sell_history=sells)
        )
        assert "Best sell: Tech Stock on Day 120 (+$200, 40%)" in notes

    def test_never_more_than_five(self) -> None:
        sells = (SellRecord("pos-1", "Stock", 100.0, 400.0, 300.0, 10, sold_at_tick=5),)
        notes = build_key_decisions(
            _summary(
                investment_count=1,
                realized_gain=300.0,
                days_played=500,
                player_lots=1,
                rival_lots=2,
                sell_history=sells,
            )
        )
        assert len(notes) <= 5
        assert "The rival bought lots faster than you." in notes


class TestReflections:

    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            ({"outcome": GameOutcome.WON, "investment_count": 1, "realized_gain": 300.0}, "Smart Investor!"),
            ({"outcome": GameOutcome.WON, "days_played": 50}, "Speed Run!"),
            ({"outcome": GameOutcome.WON}, "You Won!"),
            ({}, "Try Investing Next Time!"),
            ({"investment_count": 1, "rival_lots": 3}, "The Rival Was Too Fast!"),
            ({"investment_count": 1, "rival_lots": 2}, "Keep Trying!"),
        ],
    )
    def test_headline(self, overrides: dict, expected: str) -> None:
        assert build_headline(_summary(**overrides)) == expected

    def test_investment_insight_percentages(self) -> None:
        text = build_investment_insight(
            _summary(investment_count=1, principal_invested=1000.0, realized_gain=100.0)
        )
        assert "earned $100 (+10%) over 150 days" in text

    def test_investment_insight_without_investing(self) -> None:
        assert "didn't invest" in build_investment_insight(_summary())

    def test_opportunity_cost_uses_first_player_lot(self) -> None:
        purchases = (
            LotPurchaseRecord("a", "Rival Plot", Owner.RIVAL, 800.0, 4.0, 20),
            LotPurchaseRecord("b", "Corner Shop", Owner.PLAYER, 1000.0, 5.0, 50),
        )
        text = build_opportunity_cost_insight(_summary(lot_purchases=purchases, spent_on_lots=1000.0))
        assert text == (
            "You bought Corner Shop on Day 50. Its income bonus earned you ~$500 over the game."
        )

    def test_opportunity_cost_without_lots(self) -> None:
        assert "didn't buy any lots" in build_opportunity_cost_insight(_summary())

    def test_what_if_variants(self) -> None:
        assert "invested some money" in build_what_if_message(_summary(outcome=GameOutcome.WON))
        assert "bond early on" in build_what_if_message(_summary())
        growing = _summary(investment_count=1, unrealized_gain=30.0)
        assert "growing" in build_what_if_message(growing)


class TestBuildSummary:

    def test_snapshot_of_live_components(
        self,
        ledger: Ledger,
        bond: InvestmentDefinition,
        bus: EventBus,
        market: LotMarket,
        income_source: IncomeSource,
    ) -> None:
        ledger.credit(1000.0)
        book = InvestmentBook(ledger, (bond,), bus)
        position = book.open(bond, 1000.0)
        book.tick(30)
        market.attempt_purchase("corner_shop", Owner.PLAYER, ledger)
        income_source.on_tick(1)

        summary = build_summary(GameOutcome.LOST, 30, ledger, book, market, income_source)

        assert summary.days_played == 30
        assert summary.final_balance == pytest.approx(15.0)
        assert summary.unrealized_gain == pytest.approx(10.0)
        assert summary.portfolio_value == pytest.approx(position.current_value)
        assert summary.player_lots == 1
        assert summary.spent_on_lots == 1000.0
        assert summary.restaurant_income == pytest.approx(10.0)
        assert summary.lot_income == pytest.approx(5.0)
        assert summary.headline == "Keep Trying!"
        assert summary.investment_count == 1
        assert summary.key_decisions == ()
