"""Restaurant income source.

Produces the player's per-tick income: the restaurant's own level-based
income plus the summed income bonus of every lot the player owns.
"""

from __future__ import annotations

import logging
import math

from fortune_valley.domain.events import RestaurantUpgraded
from fortune_valley.domain.exceptions import AtMaxLevel, InsufficientFunds
from fortune_valley.infrastructure.config import RestaurantConfig
from fortune_valley.infrastructure.event_bus import EventBus
from fortune_valley.services.ledger import Ledger

logger = logging.getLogger(__name__)

RESTAURANT_TAG = "restaurant"
LOT_INCOME_TAG = "lot_income"


class IncomeSource:
    """Level-based restaurant income credited to the player ledger each tick.

    Parameters
    ----------
    config:
        Income table (base income, multipliers, upgrade costs).
    ledger:
        The player's ledger; receives income and pays for upgrades.
    event_bus:
        Session bus for ``RestaurantUpgraded`` notifications.
    """

    def __init__(self, config: RestaurantConfig, ledger: Ledger, event_bus: EventBus) -> None:
        self._config = config
        self._ledger = ledger
        self._bus = event_bus
        self._level = 1
        self._lot_bonuses: dict[str, float] = {}
        self._total_earned = 0.0
        self._total_bonus_earned = 0.0

    # -- read-only state ------------------------------------------------------

    @property
    def level(self) -> int:
        return self._level

    @property
    def max_level(self) -> int:
        return self._config.max_level

    @property
    def income_per_tick(self) -> float:
        return self.income_for_level(self._level)

    @property
    def lot_bonus_per_tick(self) -> float:
        return sum(self._lot_bonuses.values())

    @property
    def total_earned(self) -> float:
        """Restaurant income credited since the last reset."""
        return self._total_earned

    @property
    def total_bonus_earned(self) -> float:
        """Lot income bonus credited since the last reset."""
        return self._total_bonus_earned

    def income_for_level(self, level: int) -> float:
        return self._config.income_for_level(level)

    def upgrade_cost(self, level: int | None = None) -> float | None:
        """Cost to upgrade from *level* (default: current); ``None`` if unavailable."""
        return self._config.upgrade_cost(self._level if level is None else level)

    def can_upgrade(self) -> bool:
        return self._config.can_upgrade(self._level)

    # -- mutations ------------------------------------------------------------

    def upgrade(self) -> int:
        """Pay for and apply one level upgrade.

        Returns
        -------
        int
            The new level.

        Raises
        ------
        AtMaxLevel
            If no further upgrade exists.
        InsufficientFunds
            If the ledger cannot cover the upgrade cost.
        """
        cost = self.upgrade_cost()
        if cost is None:
            raise AtMaxLevel(
                f"restaurant is already at level {self._level}", level=self._level
            )
        if not self._ledger.can_afford(cost):
            raise InsufficientFunds(
                f"upgrade to level {self._level + 1} costs {cost:.2f}",
                required=cost,
                available=self._ledger.balance,
            )
        if cost > 0:
            self._ledger.debit(cost, "restaurant_upgrade")
        self._level += 1
        logger.debug("Restaurant upgraded to level %d for %.2f", self._level, cost)
        self._bus.publish(
            RestaurantUpgraded(
                source_id="restaurant",
                level=self._level,
                cost=cost,
                income_per_tick=self.income_per_tick,
            )
        )
        return self._level

    def register_lot_bonus(self, lot_id: str, amount: float) -> None:
        """Add a player-owned lot's per-tick bonus to the income stream."""
        self._lot_bonuses[lot_id] = amount

    def on_tick(self, tick: int) -> None:
        income = self.income_per_tick
        if income > 0:
            self._ledger.earn(income, RESTAURANT_TAG)
            self._total_earned += income
        bonus = self.lot_bonus_per_tick
        if bonus > 0:
            self._ledger.earn(bonus, LOT_INCOME_TAG)
            self._total_bonus_earned += bonus

    def reset(self) -> None:
        self._level = 1
        self._lot_bonuses.clear()
        self._total_earned = 0.0
        self._total_bonus_earned = 0.0

    # -- explanations ---------------------------------------------------------

    def upgrade_payback_ticks(self) -> int | None:
        """Ticks until the next upgrade pays for itself, or ``None``."""
        cost = self.upgrade_cost()
        if cost is None:
            return None
        gain = self.income_for_level(self._level + 1) - self.income_per_tick
        if gain <= 0:
            return None
        return math.ceil(cost / gain)

    def explain_upgrade(self) -> str:
        cost = self.upgrade_cost()
        payback = self.upgrade_payback_ticks()
        if cost is None or payback is None:
            return "Your restaurant is at maximum level!"
        current = self.income_per_tick
        following = self.income_for_level(self._level + 1)
        return (
            f"Upgrade cost: ${cost:.0f}\n"
            f"Income increase: ${current:.0f} -> ${following:.0f} per day\n"
            f"Payback period: ~{payback} days\n"
            f"After payback, you'll earn ${following - current:.0f} extra every day forever!"
        )

    def performance_summary(self) -> str:
        return (
            f"Restaurant Level {self._level}\n"
            f"Income: ${self.income_per_tick:.0f} per day\n"
            f"Total earned: ${self._total_earned:.0f}"
        )
