"""Domain exceptions for the Fortune Valley economy engine.

All domain-specific exceptions inherit from ``FortuneValleyError`` so
callers can catch the full family with a single ``except`` clause when needed.

Every error except ``ConfigurationError`` describes an *expected*,
recoverable condition: the operation that raised it left no partial state
behind and the simulation can keep ticking.
"""

from __future__ import annotations

from typing import Any


class FortuneValleyError(Exception):
    """Base exception for all Fortune Valley domain errors."""

    def __init__(self, message: str = "", details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}

    @property
    def reason(self) -> str:
        """Short machine-friendly reason code (the class name)."""
        return type(self).__name__


class InsufficientFunds(FortuneValleyError):
    """Raised when a debit, purchase, or upgrade exceeds the available funds."""

    def __init__(
        self,
        message: str = "Insufficient funds",
        required: float = 0.0,
        available: float = 0.0,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.required = required
        self.available = available

    @property
    def shortfall(self) -> float:
        """How much money is missing to complete the operation."""
        return max(0.0, self.required - self.available)


class InvalidAmount(FortuneValleyError):
    """Raised for non-positive (or non-finite) amounts, or deposits below minimum."""

    def __init__(
        self,
        message: str = "Invalid amount",
        amount: float = 0.0,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.amount = amount


class AtMaxLevel(FortuneValleyError):
    """Raised when upgrading an income source that is already at its cap."""

    def __init__(
        self,
        message: str = "Already at maximum level",
        level: int = 0,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.level = level


class LotAlreadyOwned(FortuneValleyError):
    """Raised when a purchase targets a lot that already has an owner."""

    def __init__(
        self,
        message: str = "Lot already owned",
        lot_id: str = "",
        owner: Any = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.lot_id = lot_id
        self.owner = owner


class LotNotFound(FortuneValleyError):
    """Raised when a lot id is not part of the city catalog."""

    def __init__(
        self,
        message: str = "Lot not found",
        lot_id: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.lot_id = lot_id


class PositionNotFound(FortuneValleyError):
    """Raised when selling an unknown or already-closed position."""

    def __init__(
        self,
        message: str = "Position not found",
        position_id: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.position_id = position_id


class GameNotOver(FortuneValleyError):
    """Raised when the game summary is requested before a terminal outcome."""


class ConfigurationError(FortuneValleyError, ValueError):
    """Raised at load time for malformed authored configuration.

    Also a ``ValueError`` so generic validation callers keep working.
    """

    def __init__(
        self,
        message: str = "Invalid configuration",
        field_name: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field_name = field_name
