"""Investment book: open positions, per-tick compounding, and sales.

Every call to :meth:`InvestmentBook.open` creates an independent
:class:`Position`, even when the player already holds the same investment;
positions are never merged, so each keeps its own principal, value and
compounding counter.

Volatility is drawn from an injected ``numpy.random.Generator`` so that a
seeded session replays identically.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from fortune_valley.domain.enums import RiskLevel
from fortune_valley.domain.events import (
    InvestmentCompounded,
    InvestmentOpened,
    InvestmentSold,
)
from fortune_valley.domain.exceptions import InvalidAmount, PositionNotFound
from fortune_valley.domain.values import InvestmentDefinition, SellRecord
from fortune_valley.infrastructure.event_bus import EventBus
from fortune_valley.services import compounding
from fortune_valley.services.ledger import Ledger

logger = logging.getLogger(__name__)


# ===================================================================== #
#  Position                                                              #
# ===================================================================== #

@dataclass
class Position:
    """A single open investment.  Owned and mutated by :class:`InvestmentBook`."""

    position_id: str
    definition: InvestmentDefinition
    principal: float
    current_value: float
    opened_at_tick: int = 0
    ticks_held: int = 0
    ticks_since_last_compound: int = 0
    compound_count: int = 0

    @property
    def total_gain(self) -> float:
        return self.current_value - self.principal

    @property
    def percentage_return(self) -> float:
        if self.principal <= 0:
            return 0.0
        return (self.current_value / self.principal - 1.0) * 100.0

    @property
    def ticks_until_compound(self) -> int:
        return self.definition.compounding_frequency_ticks - self.ticks_since_last_compound

    def explain(self) -> str:
        if self.compound_count == 0:
            return (
                f"Your ${self.principal:.2f} hasn't compounded yet. It will grow after "
                f"{self.definition.compounding_frequency_ticks} days."
            )
        verb = "gained" if self.total_gain >= 0 else "lost"
        return (
            f"Your ${self.principal:.2f} has {verb} ${abs(self.total_gain):.2f} "
            f"({self.percentage_return:.1f}%) after {self.ticks_held} days and "
            f"{self.compound_count} compound events."
        )


# ===================================================================== #
#  Investment Book                                                       #
# ===================================================================== #

class InvestmentBook:
    """Holds the player's open positions and their sell history.

    Parameters
    ----------
    ledger:
        The player's ledger.  Openings debit it; sales credit it.
    catalog:
        Investment definitions offered to the player.
    event_bus:
        Session bus for investment notifications.
    rng:
        Random source for volatility draws.  Defaults to an unseeded
        ``numpy.random.default_rng()``.
    """

    def __init__(
        self,
        ledger: Ledger,
        catalog: Sequence[InvestmentDefinition],
        event_bus: EventBus,
        rng: np.random.Generator | None = None,
    ) -> None:
        self._ledger = ledger
        self._catalog = tuple(catalog)
        self._bus = event_bus
        self._rng = rng if rng is not None else np.random.default_rng()
        self._positions: dict[str, Position] = {}
        self._sell_history: list[SellRecord] = []
        self._next_id = 1
        self._tick = 0
        self._lifetime_count = 0
        self._lifetime_principal = 0.0
        self._peak_value = 0.0

    # -- catalog / positions --------------------------------------------------

    @property
    def catalog(self) -> tuple[InvestmentDefinition, ...]:
        return self._catalog

    def find_definition(self, display_name: str) -> InvestmentDefinition | None:
        for definition in self._catalog:
            if definition.display_name == display_name:
                return definition
        return None

    @property
    def positions(self) -> list[Position]:
        """Open positions in the order they were opened."""
        return list(self._positions.values())

    def get_position(self, position_id: str) -> Position | None:
        return self._positions.get(position_id)

    @property
    def sell_history(self) -> list[SellRecord]:
        return list(self._sell_history)

    # -- aggregates -----------------------------------------------------------

    @property
    def total_portfolio_value(self) -> float:
        return sum(p.current_value for p in self._positions.values())

    @property
    def total_principal(self) -> float:
        return sum(p.principal for p in self._positions.values())

    @property
    def unrealized_gain(self) -> float:
        return self.total_portfolio_value - self.total_principal

    @property
    def realized_gain(self) -> float:
        return sum(r.realized_gain for r in self._sell_history)

    @property
    def lifetime_investment_count(self) -> int:
        return self._lifetime_count

    @property
    def lifetime_principal_invested(self) -> float:
        return self._lifetime_principal

    @property
    def peak_portfolio_value(self) -> float:
        return self._peak_value

    # -- operations -----------------------------------------------------------

    def open(self, definition: InvestmentDefinition, amount: float) -> Position:
        """Move *amount* from the ledger into a new position.

        Raises
        ------
        InvalidAmount
            If *amount* is not positive or is below the minimum deposit.
        InsufficientFunds
            If the ledger cannot cover *amount*.
        """
        if amount <= 0:
            raise InvalidAmount(f"investment amount must be positive, got {amount}", amount=amount)
        if amount < definition.minimum_deposit:
            raise InvalidAmount(
                f"{definition.display_name} needs at least "
                f"${definition.minimum_deposit:.0f}, got ${amount:.0f}",
                amount=amount,
                details={"minimum_deposit": definition.minimum_deposit},
            )
        self._ledger.debit(amount, f"invest:{definition.display_name}")

        position = Position(
            position_id=f"pos-{self._next_id}",
            definition=definition,
            principal=amount,
            current_value=amount,
            opened_at_tick=self._tick,
        )
        self._next_id += 1
        self._positions[position.position_id] = position
        self._lifetime_count += 1
        self._lifetime_principal += amount
        self._update_peak()

        logger.debug(
            "Opened %s: %.2f in %s", position.position_id, amount, definition.display_name
        )
        self._bus.publish(
            InvestmentOpened(
                source_id="investments",
                position_id=position.position_id,
                investment_name=definition.display_name,
                principal=amount,
            )
        )
        return position

    def tick(self, ticks: int = 1) -> int:
        """Advance every open position by *ticks*.

        A position whose counter covers several compounding periods gets one
        compounding event per elapsed period.

        Returns
        -------
        int
            Number of compounding events applied.
        """
        if ticks <= 0:
            return 0
        self._tick += ticks
        applied = 0
        for position in list(self._positions.values()):
            position.ticks_held += ticks
            position.ticks_since_last_compound += ticks
            frequency = position.definition.compounding_frequency_ticks
            events = position.ticks_since_last_compound // frequency
            position.ticks_since_last_compound -= events * frequency
            for _ in range(events):
                self._compound(position)
                applied += 1
        if applied:
            self._update_peak()
        return applied

    def on_tick(self, tick: int) -> None:
        self.tick(1)

    def sell(self, position_id: str) -> SellRecord:
        """Liquidate a position back into the ledger.

        Raises
        ------
        PositionNotFound
            If *position_id* is unknown or already sold.
        """
        position = self._positions.get(position_id)
        if position is None:
            raise PositionNotFound(
                f"no open position '{position_id}'", position_id=position_id
            )
        proceeds = position.current_value
        if proceeds > 0:
            self._ledger.credit(proceeds, f"sell:{position.definition.display_name}")
        del self._positions[position_id]

        record = SellRecord(
            position_id=position_id,
            investment_name=position.definition.display_name,
            principal=position.principal,
            proceeds=proceeds,
            realized_gain=proceeds - position.principal,
            ticks_held=position.ticks_held,
            sold_at_tick=self._tick,
        )
        self._sell_history.append(record)
        logger.debug(
            "Sold %s for %.2f (gain %.2f)", position_id, proceeds, record.realized_gain
        )
        self._bus.publish(
            InvestmentSold(
                source_id="investments",
                position_id=position_id,
                investment_name=record.investment_name,
                proceeds=proceeds,
                realized_gain=record.realized_gain,
            )
        )
        return record

    def projected_value(
        self, definition: InvestmentDefinition, principal: float, ticks: int
    ) -> float:
        return compounding.projected_value(definition, principal, ticks)

    def reset(self, rng: np.random.Generator | None = None) -> None:
        """Drop every position and counter for a new game.

        Parameters
        ----------
        rng:
            Replacement random source.  ``None`` keeps drawing from the
            current generator.
        """
        if rng is not None:
            self._rng = rng
        self._positions.clear()
        self._sell_history.clear()
        self._next_id = 1
        self._tick = 0
        self._lifetime_count = 0
        self._lifetime_principal = 0.0
        self._peak_value = 0.0

    # -- explanations ---------------------------------------------------------

    def portfolio_summary(self) -> str:
        if not self._positions:
            return "No active investments. Start investing to grow your money!"
        principal = self.total_principal
        pct = (self.unrealized_gain / principal * 100.0) if principal > 0 else 0.0
        lines = [
            f"Portfolio: {len(self._positions)} investment(s)",
            f"Total invested: ${principal:.0f}",
            f"Current value: ${self.total_portfolio_value:.0f}",
            f"Total gain/loss: ${self.unrealized_gain:.0f} ({pct:.1f}%)",
            "",
        ]
        for p in self._positions.values():
            sign = "+" if p.total_gain >= 0 else ""
            lines.append(
                f"- {p.definition.display_name}: ${p.current_value:.0f} ({sign}{p.total_gain:.0f})"
            )
        return "\n".join(lines)

    def compare_with_saving(
        self, definition: InvestmentDefinition, amount: float, ticks: int
    ) -> str:
        projected = self.projected_value(definition, amount, ticks)
        return (
            f"If you invest ${amount:.0f} in {definition.display_name}:\n"
            f"- After {ticks} days: ~${projected:.0f}\n"
            f"- Potential gain: ~${projected - amount:.0f}\n\n"
            f"If you keep ${amount:.0f} in your wallet:\n"
            f"- After {ticks} days: ${amount:.0f}\n"
            "- Gain: $0\n\n"
            "The trade-off: Invested money is locked up and can't buy lots immediately."
        )

    # -- internals ------------------------------------------------------------

    def _draw_multiplier(self, definition: InvestmentDefinition) -> float:
        vol = definition.volatility_range
        # Low-risk products grow at exactly their stated rate.
        if definition.risk_level is RiskLevel.LOW or vol.is_degenerate:
            return 1.0
        return float(self._rng.uniform(vol.low, vol.high))

    def _compound(self, position: Position) -> None:
        multiplier = self._draw_multiplier(position.definition)
        previous = position.current_value
        growth = 1.0 + position.definition.rate_per_period * multiplier
        position.current_value = max(0.0, previous * growth)
        position.compound_count += 1
        logger.debug(
            "%s compounded: %.2f -> %.2f (x%.3f)",
            position.position_id,
            previous,
            position.current_value,
            multiplier,
        )
        self._bus.publish(
            InvestmentCompounded(
                source_id="investments",
                position_id=position.position_id,
                investment_name=position.definition.display_name,
                previous_value=previous,
                new_value=position.current_value,
                volatility_multiplier=multiplier,
            )
        )

    def _update_peak(self) -> None:
        self._peak_value = max(self._peak_value, self.total_portfolio_value)
