"""Rival agent that races the player for city lots.

The rival earns a fixed income every tick and, on a schedule that speeds up
as the city fills, buys the cheapest lot it can afford while keeping a cash
buffer.  A warning with the likely target is published ahead of every
attempt so the player has time to react.
"""

from __future__ import annotations

import logging

from fortune_valley.domain.enums import Owner
from fortune_valley.domain.events import OwnershipChanged, RivalPurchaseAttempted, RivalWarning
from fortune_valley.domain.exceptions import FortuneValleyError
from fortune_valley.domain.values import CityLotDefinition
from fortune_valley.infrastructure.config import RivalConfig
from fortune_valley.infrastructure.event_bus import EventBus
from fortune_valley.services.city import LotMarket
from fortune_valley.services.ledger import Ledger

logger = logging.getLogger(__name__)

RIVAL_ACCOUNT = "rival"


class RivalAgent:
    """Scheduled lot buyer with its own private ledger.

    Parameters
    ----------
    config:
        Rival economy and schedule.
    market:
        The city's lot market; all purchases go through it.
    event_bus:
        Session bus for warnings and purchase attempts.
    """

    def __init__(self, config: RivalConfig, market: LotMarket, event_bus: EventBus) -> None:
        self._config = config
        self._market = market
        self._bus = event_bus
        self._ledger = Ledger(config.starting_money, event_bus, account_id=RIVAL_ACCOUNT)
        self._ticks_since_attempt = 0
        self._targeted_lot_id: str | None = None
        self._warned_this_cycle = False
        self._bus.subscribe(OwnershipChanged, self._on_ownership_changed)

    # -- read-only state ------------------------------------------------------

    @property
    def config(self) -> RivalConfig:
        return self._config

    @property
    def balance(self) -> float:
        return self._ledger.balance

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def ticks_since_purchase_attempt(self) -> int:
        return self._ticks_since_attempt

    @property
    def targeted_lot_id(self) -> str | None:
        """Lot announced in the latest warning, cleared by each attempt."""
        return self._targeted_lot_id

    def current_interval(self) -> int:
        return self._config.effective_interval(self._market.progress())

    @property
    def ticks_until_attempt(self) -> int:
        return max(0, self.current_interval() - self._ticks_since_attempt)

    # -- tick -----------------------------------------------------------------

    def on_tick(self, tick: int) -> None:
        if self._config.income_per_tick > 0:
            self._ledger.earn(self._config.income_per_tick, "rival_income")
        self._ticks_since_attempt += 1

        interval = self.current_interval()
        remaining = interval - self._ticks_since_attempt
        # At most one warning per cycle, even when a purchase shrinks the
        # interval past the exact warning tick.
        if 0 < remaining <= self._config.warning_ticks and not self._warned_this_cycle:
            self._issue_warning(remaining)

        if self._ticks_since_attempt >= interval:
            self._ticks_since_attempt = 0
            self._attempt_purchase(tick)

    def reset(self) -> None:
        self._ledger.reset(self._config.starting_money)
        self._ticks_since_attempt = 0
        self._targeted_lot_id = None
        self._warned_this_cycle = False

    def status(self) -> str:
        target = self._targeted_lot_id or "undecided"
        return (
            f"Rival balance: ${self.balance:.0f}\n"
            f"Next purchase attempt in {self.ticks_until_attempt} days "
            f"(target: {target})"
        )

    # -- lot selection --------------------------------------------------------

    def _cheapest_first(self) -> list[CityLotDefinition]:
        # sorted() is stable, so equal costs keep authored order.
        return sorted(self._market.available_lots(), key=lambda lot: lot.base_cost)

    def pick_affordable_lot(self) -> CityLotDefinition | None:
        """Cheapest unowned lot the rival can buy right now with its buffer."""
        for lot in self._cheapest_first():
            if self.balance >= lot.base_cost + self._config.purchase_buffer:
                return lot
        return None

    def pick_target_lot(self) -> CityLotDefinition | None:
        """Lot the rival expects to afford when the warning period runs out."""
        candidates = self._cheapest_first()
        if not candidates:
            return None
        estimated = self.balance + self._config.income_per_tick * self._config.warning_ticks
        for lot in candidates:
            if lot.base_cost <= estimated + self._config.purchase_buffer:
                return lot
        return candidates[0]

    # -- internals ------------------------------------------------------------

    def _issue_warning(self, remaining: int) -> None:
        target = self.pick_target_lot()
        self._targeted_lot_id = target.lot_id if target is not None else None
        self._warned_this_cycle = True
        logger.debug("Rival warning: %d ticks, target %s", remaining, self._targeted_lot_id)
        self._bus.publish(
            RivalWarning(
                source_id=RIVAL_ACCOUNT,
                ticks_remaining=remaining,
                target_lot_id=self._targeted_lot_id,
            )
        )

    def _attempt_purchase(self, tick: int) -> None:
        self._targeted_lot_id = None
        self._warned_this_cycle = False
        lot = self.pick_affordable_lot()
        success = False
        if lot is None:
            logger.debug("Rival found no affordable lot at tick %d (balance %.2f)", tick, self.balance)
        else:
            try:
                self._market.attempt_purchase(
                    lot.lot_id,
                    Owner.RIVAL,
                    self._ledger,
                    buffer=self._config.purchase_buffer,
                )
                success = True
            except FortuneValleyError as exc:
                logger.debug("Rival purchase of %s failed: %s", lot.lot_id, exc)
        self._bus.publish(
            RivalPurchaseAttempted(
                source_id=RIVAL_ACCOUNT,
                lot_id=lot.lot_id if lot is not None else None,
                success=success,
                balance=self.balance,
                tick=tick,
            )
        )

    def _on_ownership_changed(self, event: OwnershipChanged) -> None:
        if event.new_owner is Owner.PLAYER and event.lot_id == self._targeted_lot_id:
            target = self.pick_target_lot()
            self._targeted_lot_id = target.lot_id if target is not None else None
            logger.debug("Player took the rival's target; new target %s", self._targeted_lot_id)
