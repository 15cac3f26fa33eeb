"""Domain events for the Fortune Valley economy engine.

Every event is a frozen dataclass inheriting from ``DomainEvent``.  Each
notification kind has its own event class, so the event type *is* the topic:
subscribers register for ``BalanceChanged`` or ``OwnershipChanged`` on the
session's :class:`~fortune_valley.infrastructure.event_bus.EventBus` and
never see unrelated traffic.

All events carry a ``timestamp`` and a ``source_id`` identifying the
originating component (``"player"`` / ``"rival"`` for ledgers).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from .enums import GameOutcome, Owner

# ---------------------------------------------------------------------------
# Base event
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainEvent:
    """Base class for all domain events."""

    timestamp: float = field(default_factory=time.time)
    source_id: str = ""


# ---------------------------------------------------------------------------
# Session / clock events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class GameStarted(DomainEvent):
    """A new game began; all runtime state was reset."""

    starting_balance: float = 0.0


@dataclass(frozen=True)
class TickAdvanced(DomainEvent):
    """The simulation clock advanced by one tick."""

    tick: int = 0


@dataclass(frozen=True)
class GameEnded(DomainEvent):
    """Terminal notification; emitted at most once per session."""

    outcome: GameOutcome = GameOutcome.IN_PROGRESS
    tick: int = 0
    player_lots: int = 0
    rival_lots: int = 0


@dataclass(frozen=True)
class SummaryReady(DomainEvent):
    """The read-only game summary was frozen after ``GameEnded``."""

    summary: Any = None


# ---------------------------------------------------------------------------
# Ledger events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BalanceChanged(DomainEvent):
    """A ledger balance changed through credit, debit, or reset."""

    new_balance: float = 0.0
    delta: float = 0.0


@dataclass(frozen=True)
class IncomeGenerated(DomainEvent):
    """Money was credited to a ledger."""

    amount: float = 0.0
    source_tag: str = ""


# ---------------------------------------------------------------------------
# Restaurant events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RestaurantUpgraded(DomainEvent):
    """The restaurant reached a new level."""

    level: int = 1
    cost: float = 0.0
    income_per_tick: float = 0.0


# ---------------------------------------------------------------------------
# Investment events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvestmentOpened(DomainEvent):
    """A new position was opened."""

    position_id: str = ""
    investment_name: str = ""
    principal: float = 0.0


@dataclass(frozen=True)
class InvestmentCompounded(DomainEvent):
    """One compounding event was applied to a position."""

    position_id: str = ""
    investment_name: str = ""
    previous_value: float = 0.0
    new_value: float = 0.0
    volatility_multiplier: float = 1.0


@dataclass(frozen=True)
class InvestmentSold(DomainEvent):
    """A position was liquidated back into the ledger."""

    position_id: str = ""
    investment_name: str = ""
    proceeds: float = 0.0
    realized_gain: float = 0.0


# ---------------------------------------------------------------------------
# City / rival events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OwnershipChanged(DomainEvent):
    """A lot was bought and now has a permanent owner."""

    lot_id: str = ""
    new_owner: Owner = Owner.NONE
    cost: float = 0.0
    tick: int = 0


@dataclass(frozen=True)
class RivalWarning(DomainEvent):
    """The rival will attempt a purchase in ``ticks_remaining`` ticks."""

    ticks_remaining: int = 0
    target_lot_id: str | None = None


@dataclass(frozen=True)
class RivalPurchaseAttempted(DomainEvent):
    """The rival's purchase interval elapsed and it tried to buy a lot."""

    lot_id: str | None = None
    success: bool = False
    balance: float = 0.0
    tick: int = 0
