"""Single-pool currency ledger.

The ledger is the only place money lives.  Every mutation goes through
:meth:`Ledger.credit`, :meth:`Ledger.debit` or :meth:`Ledger.reset`, each of
which publishes a ``BalanceChanged`` notification on the injected bus.
Income goes through :meth:`Ledger.earn`, which also publishes
``IncomeGenerated``.
Debits are all-or-nothing: a debit that cannot be covered raises
``InsufficientFunds`` and leaves the balance untouched.
"""

from __future__ import annotations

import logging
import math

from fortune_valley.domain.events import BalanceChanged, IncomeGenerated
from fortune_valley.domain.exceptions import InsufficientFunds, InvalidAmount
from fortune_valley.infrastructure.event_bus import EventBus

logger = logging.getLogger(__name__)


def _check_amount(amount: float, action: str) -> None:
    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmount(f"{action} amount must be positive, got {amount}", amount=amount)


class Ledger:
    """Balance of one account.

    Parameters
    ----------
    starting_balance:
        Initial balance (must be >= 0).
    event_bus:
        Session bus on which balance notifications are published.
    account_id:
        Name used as ``source_id`` on published events (``"player"`` or
        ``"rival"``).
    """

    def __init__(
        self,
        starting_balance: float,
        event_bus: EventBus,
        account_id: str = "player",
    ) -> None:
        if starting_balance < 0:
            raise InvalidAmount(
                f"starting balance must be >= 0, got {starting_balance}",
                amount=starting_balance,
            )
        self._balance = float(starting_balance)
        self._bus = event_bus
        self._account_id = account_id

    @property
    def balance(self) -> float:
        return self._balance

    @property
    def account_id(self) -> str:
        return self._account_id

    def can_afford(self, amount: float) -> bool:
        return self._balance >= amount

    def credit(self, amount: float, source_tag: str = "") -> None:
        """Add *amount* to the balance.

        Raises
        ------
        InvalidAmount
            If *amount* is not a positive finite number.
        """
        _check_amount(amount, "credit")
        self._balance += amount
        logger.debug(
            "%s: credit %.2f (%s) -> %.2f", self._account_id, amount, source_tag, self._balance
        )
        self._bus.publish(
            BalanceChanged(source_id=self._account_id, new_balance=self._balance, delta=amount)
        )

    def earn(self, amount: float, source_tag: str) -> None:
        """Credit *amount* as income and publish ``IncomeGenerated``.

        Plain :meth:`credit` is for money coming back from the player's own
        assets (sale proceeds); only earnings go through here.
        """
        self.credit(amount, source_tag)
        self._bus.publish(
            IncomeGenerated(source_id=self._account_id, amount=amount, source_tag=source_tag)
        )

    def debit(self, amount: float, reason_tag: str = "") -> None:
        """Remove *amount* from the balance.

        Raises
        ------
        InvalidAmount
            If *amount* is not a positive finite number.
        InsufficientFunds
            If the balance cannot cover *amount*; the balance is unchanged.
        """
        _check_amount(amount, "debit")
        if self._balance < amount:
            raise InsufficientFunds(
                f"{self._account_id} cannot pay {amount:.2f} for {reason_tag or 'debit'} "
                f"(balance {self._balance:.2f})",
                required=amount,
                available=self._balance,
                details={"reason_tag": reason_tag},
            )
        self._balance -= amount
        logger.debug(
            "%s: debit %.2f (%s) -> %.2f", self._account_id, amount, reason_tag, self._balance
        )
        self._bus.publish(
            BalanceChanged(source_id=self._account_id, new_balance=self._balance, delta=-amount)
        )

    def reset(self, starting_balance: float) -> None:
        """Reinitialise the balance for a new game."""
        if starting_balance < 0:
            raise InvalidAmount(
                f"starting balance must be >= 0, got {starting_balance}",
                amount=starting_balance,
            )
        self._balance = float(starting_balance)
        self._bus.publish(
            BalanceChanged(
                source_id=self._account_id,
                new_balance=self._balance,
                delta=self._balance,
            )
        )

    def __repr__(self) -> str:
        return f"Ledger(account_id={self._account_id!r}, balance={self._balance:.2f})"
