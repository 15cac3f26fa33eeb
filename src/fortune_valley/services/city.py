"""City lot market and the authority on win/lose.

Lots are bought exactly once: after a lot leaves ``Owner.NONE`` its owner
never changes.  The market is the only component that decides the game's
terminal outcome, and it announces it with a single ``GameEnded``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fortune_valley.domain.enums import GameOutcome, Owner
from fortune_valley.domain.events import GameEnded, OwnershipChanged, TickAdvanced
from fortune_valley.domain.exceptions import (
    InsufficientFunds,
    LotAlreadyOwned,
    LotNotFound,
)
from fortune_valley.domain.values import CityLotDefinition, LotPurchaseRecord
from fortune_valley.infrastructure.event_bus import EventBus
from fortune_valley.services.ledger import Ledger
from fortune_valley.services.restaurant import IncomeSource

logger = logging.getLogger(__name__)


class LotMarket:
    """Ownership registry for the city's lots.

    Parameters
    ----------
    lots:
        Authored lots, in authored order.
    event_bus:
        Session bus.  The market listens to ``TickAdvanced`` to stamp
        purchases and publishes ``OwnershipChanged`` / ``GameEnded``.
    income_source:
        Receives the income bonus of every lot the player buys.
    """

    def __init__(
        self,
        lots: Sequence[CityLotDefinition],
        event_bus: EventBus,
        income_source: IncomeSource | None = None,
    ) -> None:
        self._lots: dict[str, CityLotDefinition] = {lot.lot_id: lot for lot in lots}
        self._order = [lot.lot_id for lot in lots]
        self._bus = event_bus
        self._income_source = income_source
        self._owners: dict[str, Owner] = {lot_id: Owner.NONE for lot_id in self._order}
        self._purchase_ticks: dict[str, int] = {}
        self._purchases: list[LotPurchaseRecord] = []
        self._outcome = GameOutcome.IN_PROGRESS
        self._tick = 0
        self._bus.subscribe(TickAdvanced, self._on_tick_advanced)

    # -- lookups --------------------------------------------------------------

    @property
    def lots(self) -> list[CityLotDefinition]:
        """All lots in authored order."""
        return [self._lots[lot_id] for lot_id in self._order]

    @property
    def total_lots(self) -> int:
        return len(self._order)

    def get_lot(self, lot_id: str) -> CityLotDefinition:
        lot = self._lots.get(lot_id)
        if lot is None:
            raise LotNotFound(f"unknown lot '{lot_id}'", lot_id=lot_id)
        return lot

    def owner_of(self, lot_id: str) -> Owner:
        self.get_lot(lot_id)
        return self._owners[lot_id]

    def purchase_tick(self, lot_id: str) -> int | None:
        return self._purchase_ticks.get(lot_id)

    def available_lots(self) -> list[CityLotDefinition]:
        """Unowned lots in authored order."""
        return [self._lots[i] for i in self._order if self._owners[i] is Owner.NONE]

    def count(self, owner: Owner) -> int:
        return sum(1 for o in self._owners.values() if o is owner)

    @property
    def player_lot_count(self) -> int:
        return self.count(Owner.PLAYER)

    @property
    def rival_lot_count(self) -> int:
        return self.count(Owner.RIVAL)

    @property
    def available_lot_count(self) -> int:
        return self.count(Owner.NONE)

    @property
    def player_income_bonus(self) -> float:
        return sum(
            self._lots[i].income_bonus for i, o in self._owners.items() if o is Owner.PLAYER
        )

    @property
    def purchases(self) -> list[LotPurchaseRecord]:
        """Every successful purchase in the order it happened."""
        return list(self._purchases)

    @property
    def outcome(self) -> GameOutcome:
        return self._outcome

    def progress(self) -> float:
        """Share of the city already claimed, in ``[0, 1]``."""
        if not self._order:
            return 0.0
        return (self.player_lot_count + self.rival_lot_count) / self.total_lots

    def ownership_map(self) -> dict[str, Owner]:
        return {lot_id: self._owners[lot_id] for lot_id in self._order}

    # -- purchase / terminal check --------------------------------------------

    def attempt_purchase(
        self,
        lot_id: str,
        buyer: Owner,
        wallet: Ledger,
        buffer: float = 0.0,
    ) -> LotPurchaseRecord:
        """Buy *lot_id* for *buyer*, paying from *wallet*.

        The wallet must hold ``base_cost + buffer``; only ``base_cost`` is
        debited.

        Raises
        ------
        LotNotFound
            If *lot_id* is not part of the city.
        LotAlreadyOwned
            If the lot already has an owner.
        InsufficientFunds
            If the wallet cannot cover cost plus buffer.
        """
        if buyer is Owner.NONE:
            raise ValueError("buyer must be PLAYER or RIVAL")
        lot = self.get_lot(lot_id)
        current = self._owners[lot_id]
        if current is not Owner.NONE:
            raise LotAlreadyOwned(
                f"{lot.display_name} is already owned by {current.value}",
                lot_id=lot_id,
                owner=current,
            )
        required = lot.base_cost + buffer
        if wallet.balance < required:
            raise InsufficientFunds(
                f"{lot.display_name} costs {lot.base_cost:.2f}",
                required=required,
                available=wallet.balance,
                details={"lot_id": lot_id, "buffer": buffer},
            )
        if lot.base_cost > 0:
            wallet.debit(lot.base_cost, f"lot:{lot_id}")

        self._owners[lot_id] = buyer
        self._purchase_ticks[lot_id] = self._tick
        record = LotPurchaseRecord(
            lot_id=lot_id,
            lot_name=lot.display_name,
            owner=buyer,
            cost=lot.base_cost,
            income_bonus=lot.income_bonus,
            purchased_at_tick=self._tick,
        )
        self._purchases.append(record)
        if buyer is Owner.PLAYER and self._income_source is not None:
            self._income_source.register_lot_bonus(lot_id, lot.income_bonus)

        logger.debug(
            "%s bought %s for %.2f at tick %d", buyer.value, lot_id, lot.base_cost, self._tick
        )
        self._bus.publish(
            OwnershipChanged(
                source_id="city",
                lot_id=lot_id,
                new_owner=buyer,
                cost=lot.base_cost,
                tick=self._tick,
            )
        )
        self.check_win_lose()
        return record

    def check_win_lose(self) -> GameOutcome:
        """Evaluate the terminal condition.

        Idempotent: once terminal, the outcome is returned unchanged and no
        further ``GameEnded`` is published.
        """
        if self._outcome.is_terminal:
            return self._outcome

        player = self.player_lot_count
        rival = self.rival_lot_count
        total = self.total_lots
        if total == 0:
            return self._outcome

        if player == total:
            outcome = GameOutcome.WON
        elif rival == total:
            outcome = GameOutcome.LOST
        elif player + rival == total:
            outcome = GameOutcome.WON if player > rival else GameOutcome.LOST
        else:
            return self._outcome

        self._outcome = outcome
        logger.info(
            "Game over at tick %d: %s (player %d, rival %d)", self._tick, outcome.value, player, rival
        )
        self._bus.publish(
            GameEnded(
                source_id="city",
                outcome=outcome,
                tick=self._tick,
                player_lots=player,
                rival_lots=rival,
            )
        )
        return outcome

    def reset(self) -> None:
        for lot_id in self._order:
            self._owners[lot_id] = Owner.NONE
        self._purchase_ticks.clear()
        self._purchases.clear()
        self._outcome = GameOutcome.IN_PROGRESS
        self._tick = 0

    # -- explanations ---------------------------------------------------------

    def explain_purchase(self, lot_id: str, balance: float) -> str:
        lot = self.get_lot(lot_id)
        if balance >= lot.base_cost:
            afford = "You can afford this!"
        else:
            afford = f"You need ${lot.base_cost - balance:.0f} more."
        if lot.income_bonus > 0:
            bonus = (
                f"Owning this gives you ${lot.income_bonus:.0f} extra per day.\n"
                f"It will pay for itself in ~{lot.payback_ticks} days."
            )
        else:
            bonus = "This lot has no income bonus."
        return f"{lot.display_name} - ${lot.base_cost:.0f}\n{afford}\n{bonus}"

    def city_summary(self) -> str:
        return (
            "City Status:\n"
            f"- Your lots: {self.player_lot_count}\n"
            f"- Rival's lots: {self.rival_lot_count}\n"
            f"- Available: {self.available_lot_count}\n"
            f"- Your lot income: ${self.player_income_bonus:.0f}/day"
        )

    # -- internals ------------------------------------------------------------

    def _on_tick_advanced(self, event: TickAdvanced) -> None:
        self._tick = event.tick
