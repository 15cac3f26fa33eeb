"""Scripted player strategies for unattended runs.

A strategy looks at the session once per tick, before the clock advances,
and issues player actions through the session facade.  They exist for the
command line and for end-to-end tests; the interactive game drives the
session directly.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from fortune_valley.domain.values import CityLotDefinition
from fortune_valley.services.session import GameSession

logger = logging.getLogger(__name__)


class PlayerStrategy(ABC):
    """Decides the player's actions for the current tick."""

    name: str = "base"

    @abstractmethod
    def act(self, session: GameSession) -> None:
        """Issue zero or more actions on *session*."""

    @staticmethod
    def cheapest_lot(session: GameSession) -> CityLotDefinition | None:
        lots = sorted(session.market.available_lots(), key=lambda lot: lot.base_cost)
        return lots[0] if lots else None


class IdleStrategy(PlayerStrategy):
    """Never acts; the rival gets the whole city."""

    name = "idle"

    def act(self, session: GameSession) -> None:
        return None


class SaverStrategy(PlayerStrategy):
    """Keeps cash, upgrades the restaurant when it pays back quickly, and
    buys the cheapest lot as soon as it is affordable."""

    name = "saver"

    def __init__(self, max_payback_ticks: int = 120) -> None:
        self._max_payback = max_payback_ticks

    def act(self, session: GameSession) -> None:
        lot = self.cheapest_lot(session)
        if lot is not None and session.ledger.can_afford(lot.base_cost):
            session.buy_lot(lot.lot_id)
            return
        self._maybe_upgrade(session)

    def _maybe_upgrade(self, session: GameSession) -> bool:
        restaurant = session.restaurant
        cost = restaurant.upgrade_cost()
        payback = restaurant.upgrade_payback_ticks()
        if cost is None or payback is None or payback > self._max_payback:
            return False
        if not session.ledger.can_afford(cost):
            return False
        return session.upgrade_restaurant().success


class InvestorStrategy(SaverStrategy):
    """Like :class:`SaverStrategy`, but parks spare cash in an investment and
    sells everything once the proceeds cover the next lot."""

    name = "investor"

    def __init__(
        self,
        investment_name: str = "Government Bond",
        reserve: float = 200.0,
        max_payback_ticks: int = 120,
    ) -> None:
        super().__init__(max_payback_ticks)
        self._investment_name = investment_name
        self._reserve = reserve

    def act(self, session: GameSession) -> None:
        ledger = session.ledger
        book = session.investments
        lot = self.cheapest_lot(session)

        if lot is not None:
            if ledger.can_afford(lot.base_cost):
                session.buy_lot(lot.lot_id)
                return
            if book.positions and ledger.balance + book.total_portfolio_value >= lot.base_cost:
                for position in book.positions:
                    session.sell(position.position_id)
                session.buy_lot(lot.lot_id)
                return

        if self._maybe_upgrade(session):
            return

        definition = book.find_definition(self._investment_name)
        if definition is None:
            return
        surplus = ledger.balance - self._reserve
        if surplus >= max(definition.minimum_deposit, 1.0):
            session.invest(definition, surplus)


STRATEGIES: dict[str, type[PlayerStrategy]] = {
    IdleStrategy.name: IdleStrategy,
    SaverStrategy.name: SaverStrategy,
    InvestorStrategy.name: InvestorStrategy,
}


def create_strategy(name: str) -> PlayerStrategy:
    try:
        return STRATEGIES[name]()
    except KeyError:
        raise ValueError(
            f"unknown strategy '{name}', choose from {sorted(STRATEGIES)}"
        ) from None


def play(session: GameSession, strategy: PlayerStrategy, max_ticks: int) -> int:
    """Let *strategy* play until the game ends or *max_ticks* have run.

    Returns
    -------
    int
        Ticks executed.
    """
    executed = 0
    while executed < max_ticks and not session.is_over:
        strategy.act(session)
        if session.is_over:
            break
        executed += session.advance(1)
    logger.info(
        "Strategy %s stopped at tick %d (%s)", strategy.name, session.current_tick, session.outcome.value
    )
    return executed
