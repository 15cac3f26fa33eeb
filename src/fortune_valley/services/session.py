"""Game session: composition root and player-facing facade.

``GameSession`` builds every simulation component around one injected
:class:`EventBus`, registers them with the clock in their fixed tick order,
and exposes the player's actions.  Components raise domain exceptions; the
session turns those into :class:`ActionResult` values so that no expected
failure escapes to the caller as a crash.

Usage::

    session = GameSession(GameConfig.default(seed=7))
    session.invest("Government Bond", 500)
    session.advance(90)
    result = session.buy_lot("corner_cafe")
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import numpy as np

from fortune_valley.domain.enums import GameOutcome, Owner
from fortune_valley.domain.events import GameEnded, GameStarted, SummaryReady
from fortune_valley.domain.exceptions import FortuneValleyError, GameNotOver
from fortune_valley.domain.summary import GameSummary
from fortune_valley.domain.values import ActionResult, InvestmentDefinition
from fortune_valley.infrastructure.config import GameConfig
from fortune_valley.infrastructure.event_bus import EventBus
from fortune_valley.services.city import LotMarket
from fortune_valley.services.clock import SimulationClock
from fortune_valley.services.history import PortfolioHistoryTracker
from fortune_valley.services.investments import InvestmentBook
from fortune_valley.services.ledger import Ledger
from fortune_valley.services.restaurant import IncomeSource
from fortune_valley.services.rival import RivalAgent
from fortune_valley.services.summary import build_summary

logger = logging.getLogger(__name__)

PLAYER_ACCOUNT = "player"


class GameSession:
    """One playable game.

    Parameters
    ----------
    config:
        Authored configuration; validated here.
    event_bus:
        Bus shared by all components.  A fresh one is created if omitted.
    rng:
        Random source for investment volatility.  Defaults to
        ``numpy.random.default_rng(config.seed)``, rebuilt by every
        :meth:`new_game` so a seeded game replays identically.  An injected
        generator is owned by the caller and is never reseeded; later games
        continue its stream.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        event_bus: EventBus | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._config = config or GameConfig.default()
        self._config.validate()
        self._bus = event_bus or EventBus()
        self._injected_rng = rng

        self._ledger = Ledger(self._config.starting_balance, self._bus, PLAYER_ACCOUNT)
        self._income = IncomeSource(self._config.restaurant, self._ledger, self._bus)
        self._book = InvestmentBook(
            self._ledger, self._config.investments, self._bus, self._fresh_rng()
        )
        self._market = LotMarket(self._config.lots, self._bus, self._income)
        self._rival = RivalAgent(self._config.rival, self._market, self._bus)
        self._history = PortfolioHistoryTracker(
            self._ledger,
            self._book,
            snapshot_interval=self._config.history_interval,
            max_points=self._config.max_history_points,
        )
        self._clock = SimulationClock(
            self._bus,
            participants=[self._income, self._book, self._rival, self._history],
            is_terminal=lambda: self._market.outcome.is_terminal,
        )
        self._summary: GameSummary | None = None
        self._bus.subscribe(GameEnded, self._on_game_ended)
        self.new_game()

    # -- components -----------------------------------------------------------

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def restaurant(self) -> IncomeSource:
        return self._income

    @property
    def investments(self) -> InvestmentBook:
        return self._book

    @property
    def market(self) -> LotMarket:
        return self._market

    @property
    def rival(self) -> RivalAgent:
        return self._rival

    @property
    def clock(self) -> SimulationClock:
        return self._clock

    @property
    def history(self) -> PortfolioHistoryTracker:
        return self._history

    # -- state ----------------------------------------------------------------

    @property
    def current_tick(self) -> int:
        return self._clock.current_tick

    @property
    def outcome(self) -> GameOutcome:
        return self._market.outcome

    @property
    def is_over(self) -> bool:
        return self.outcome.is_terminal

    @property
    def net_worth(self) -> float:
        return self._ledger.balance + self._book.total_portfolio_value

    @property
    def summary(self) -> GameSummary | None:
        """Frozen results; ``None`` until the game has ended."""
        return self._summary

    def require_summary(self) -> GameSummary:
        """Return the summary or raise :class:`GameNotOver`."""
        if self._summary is None:
            raise GameNotOver(
                f"game is still in progress at tick {self.current_tick}",
                details={"tick": self.current_tick},
            )
        return self._summary

    def status(self) -> dict[str, Any]:
        """Plain snapshot of the live game for dashboards."""
        return {
            "tick": self.current_tick,
            "outcome": self.outcome.value,
            "balance": self._ledger.balance,
            "portfolio_value": self._book.total_portfolio_value,
            "net_worth": self.net_worth,
            "restaurant_level": self._income.level,
            "income_per_tick": self._income.income_per_tick + self._income.lot_bonus_per_tick,
            "open_positions": len(self._book.positions),
            "player_lots": self._market.player_lot_count,
            "rival_lots": self._market.rival_lot_count,
            "available_lots": self._market.available_lot_count,
            "rival_balance": self._rival.balance,
            "rival_ticks_until_attempt": self._rival.ticks_until_attempt,
            "rival_target": self._rival.targeted_lot_id,
        }

    # -- lifecycle ------------------------------------------------------------

    def new_game(self) -> None:
        """Reset all runtime state and reseed volatility.  Safe at any tick boundary."""
        self._summary = None
        self._clock.reset()
        self._ledger.reset(self._config.starting_balance)
        self._income.reset()
        self._book.reset(rng=self._fresh_rng())
        self._market.reset()
        self._rival.reset()
        self._history.reset()
        logger.info("New game started with balance %.2f", self._config.starting_balance)
        self._bus.publish(
            GameStarted(source_id="session", starting_balance=self._config.starting_balance)
        )

    def _fresh_rng(self) -> np.random.Generator:
        if self._injected_rng is not None:
            return self._injected_rng
        return np.random.default_rng(self._config.seed)

    def advance(self, ticks: int = 1) -> int:
        return self._clock.advance(ticks)

    def run_until_terminal(self, max_ticks: int) -> int:
        return self._clock.run_until_terminal(max_ticks)

    # -- player actions -------------------------------------------------------

    def invest(self, investment: str | InvestmentDefinition, amount: float) -> ActionResult:
        """Open a position; ``value`` is the new :class:`Position`."""
        if isinstance(investment, InvestmentDefinition):
            definition: InvestmentDefinition | None = investment
        else:
            definition = self._book.find_definition(investment)
        if definition is None:
            return self._reject("invest", "InvestmentNotFound", f"unknown investment '{investment}'")
        return self._perform(
            "invest",
            lambda: self._book.open(definition, amount),
            f"Invested ${amount:,.0f} in {definition.display_name}",
        )

    def sell(self, position_id: str) -> ActionResult:
        """Sell a position; ``value`` is the :class:`SellRecord`."""
        return self._perform("sell", lambda: self._book.sell(position_id), f"Sold {position_id}")

    def buy_lot(self, lot_id: str) -> ActionResult:
        """Buy a lot for the player; ``value`` is the purchase record."""
        return self._perform(
            "buy_lot",
            lambda: self._market.attempt_purchase(lot_id, Owner.PLAYER, self._ledger),
            f"Bought {lot_id}",
        )

    def upgrade_restaurant(self) -> ActionResult:
        """Upgrade the restaurant; ``value`` is the new level."""
        return self._perform("upgrade_restaurant", self._income.upgrade, "Restaurant upgraded")

    # -- internals ------------------------------------------------------------

    def _perform(self, action: str, operation: Callable[[], Any], message: str) -> ActionResult:
        if self.is_over:
            return self._reject(action, "GameOver", "the game has already ended")
        try:
            value = operation()
        except FortuneValleyError as exc:
            return self._reject(action, exc.reason, str(exc))
        return ActionResult.ok(value=value, message=message)

    def _reject(self, action: str, reason: str, message: str) -> ActionResult:
        logger.info("Rejected %s: %s (%s)", action, reason, message)
        return ActionResult.failed(reason=reason, message=message)

    def _on_game_ended(self, event: GameEnded) -> None:
        if self._summary is not None:
            return
        self._summary = build_summary(
            outcome=event.outcome,
            days_played=self._clock.current_tick,
            ledger=self._ledger,
            book=self._book,
            market=self._market,
            income=self._income,
        )
        self._bus.publish(SummaryReady(source_id="session", summary=self._summary))
