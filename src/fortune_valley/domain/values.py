"""Value objects for the Fortune Valley economy engine.

All types here are frozen dataclasses -- immutable, compared by value.
Authored definitions (investments, lots) are validated on construction so a
malformed catalog is rejected when it is loaded, never mid-session.
Records (sales, lot purchases, action results) are snapshots that are safe to
hand to presentation code or to an external narrator.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

from .enums import Owner, RiskLevel
from .exceptions import ConfigurationError

MAX_ANNUAL_RETURN_RATE = 0.5


def _require(condition: bool, message: str, field_name: str) -> None:
    if not condition:
        raise ConfigurationError(message, field_name=field_name)


# ---------------------------------------------------------------------------
# VolatilityRange
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VolatilityRange:
    """Multiplier range applied to a period's expected return.

    ``(1.0, 1.0)`` means no volatility.  ``(0.5, 1.5)`` means the realised
    return can land anywhere between half and one and a half times the
    expected return; negative bounds allow losing periods.
    """

    low: float = 1.0
    high: float = 1.0

    def __post_init__(self) -> None:
        _require(
            math.isfinite(self.low) and math.isfinite(self.high),
            f"volatility bounds must be finite, got ({self.low}, {self.high})",
            "volatility_range",
        )
        _require(
            self.low <= self.high,
            f"volatility range is inverted: ({self.low}, {self.high})",
            "volatility_range",
        )

    @property
    def is_degenerate(self) -> bool:
        """True when there is nothing to draw (both bounds equal)."""
        return self.low == self.high


# ---------------------------------------------------------------------------
# InvestmentDefinition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InvestmentDefinition:
    """An investment type the player can put money into (e.g. a bond).

    ``compounding_frequency_ticks`` paces *when* compounding fires, while
    ``compounds_per_year`` paces *how large* each period's rate is.  The two
    knobs are independent.
    """

    display_name: str
    risk_level: RiskLevel = RiskLevel.LOW
    annual_return_rate: float = 0.05
    volatility_range: VolatilityRange = field(default_factory=VolatilityRange)
    compounding_frequency_ticks: int = 30
    compounds_per_year: int = 12
    minimum_deposit: float = 100.0
    description: str = ""

    def __post_init__(self) -> None:
        _require(bool(self.display_name), "display_name must not be empty", "display_name")
        _require(
            0.0 <= self.annual_return_rate <= MAX_ANNUAL_RETURN_RATE,
            f"annual_return_rate must be in [0, {MAX_ANNUAL_RETURN_RATE}], "
            f"got {self.annual_return_rate}",
            "annual_return_rate",
        )
        _require(
            self.compounding_frequency_ticks > 0,
            f"compounding_frequency_ticks must be > 0, got {self.compounding_frequency_ticks}",
            "compounding_frequency_ticks",
        )
        _require(
            self.compounds_per_year > 0,
            f"compounds_per_year must be > 0, got {self.compounds_per_year}",
            "compounds_per_year",
        )
        _require(
            self.minimum_deposit >= 0.0,
            f"minimum_deposit must be >= 0, got {self.minimum_deposit}",
            "minimum_deposit",
        )

    @property
    def rate_per_period(self) -> float:
        """Expected return of a single compounding event."""
        return self.annual_return_rate / self.compounds_per_year

    def explain(self) -> str:
        """Student-friendly explanation of this investment type."""
        risk_desc = {
            RiskLevel.LOW: "very safe but grows slowly",
            RiskLevel.MEDIUM: "moderately risky with better potential returns",
            RiskLevel.HIGH: "risky - could gain a lot or lose money",
        }[self.risk_level]
        lines = [f"{self.display_name}: {self.description}".rstrip(": ")]
        lines.append(f"This investment is {risk_desc}.")
        lines.append(f"Expected return: ~{self.annual_return_rate * 100:.1f}% per year.")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# CityLotDefinition
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CityLotDefinition:
    """A purchasable city parcel.

    If ``lot_id`` is left empty it is derived from ``display_name``
    (lower-cased, spaces replaced by underscores).
    """

    display_name: str
    base_cost: float = 1000.0
    income_bonus: float = 5.0
    grid_position: tuple[int, int] = (0, 0)
    lot_id: str = ""
    description: str = ""

    def __post_init__(self) -> None:
        if not self.lot_id:
            object.__setattr__(
                self, "lot_id", self.display_name.strip().replace(" ", "_").lower()
            )
        if not isinstance(self.grid_position, tuple):
            object.__setattr__(self, "grid_position", tuple(self.grid_position))
        _require(bool(self.lot_id), "lot needs a lot_id or a display_name", "lot_id")
        _require(
            self.base_cost >= 0.0,
            f"base_cost must be >= 0, got {self.base_cost} for lot '{self.lot_id}'",
            "base_cost",
        )
        _require(
            self.income_bonus >= 0.0,
            f"income_bonus must be >= 0, got {self.income_bonus} for lot '{self.lot_id}'",
            "income_bonus",
        )

    @property
    def payback_ticks(self) -> int | None:
        """Ticks of income bonus needed to earn back the purchase price."""
        if self.income_bonus <= 0:
            return None
        return math.ceil(self.base_cost / self.income_bonus)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SellRecord:
    """One liquidated position, kept for end-of-game reporting."""

    position_id: str
    investment_name: str
    principal: float
    proceeds: float
    realized_gain: float
    ticks_held: int
    sold_at_tick: int = 0

    @property
    def percentage_return(self) -> float:
        if self.principal <= 0:
            return 0.0
        return (self.proceeds / self.principal - 1.0) * 100.0


@dataclass(frozen=True)
class LotPurchaseRecord:
    """When and for how much a lot changed hands."""

    lot_id: str
    lot_name: str
    owner: Owner
    cost: float
    income_bonus: float
    purchased_at_tick: int


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a player action: success flag plus a reason on failure.

    ``value`` carries the useful payload of a successful action (the new
    position, the sale proceeds, the new restaurant level, ...).
    """

    success: bool
    reason: str = ""
    message: str = ""
    value: Any = None

    @classmethod
    def ok(cls, value: Any = None, message: str = "") -> ActionResult:
        return cls(success=True, value=value, message=message)

    @classmethod
    def failed(cls, reason: str, message: str = "") -> ActionResult:
        return cls(success=False, reason=reason, message=message)

    def __bool__(self) -> bool:
        return self.success
