"""Configuration dataclasses for the Fortune Valley economy engine.

Each config is a frozen ``dataclass`` with a ``validate()`` method that
raises :class:`~fortune_valley.domain.exceptions.ConfigurationError` (a
``ValueError``) on invalid combinations.  Authored data is loaded once at
session start and never mutated afterwards; ``from_dict`` always validates,
so a malformed file is rejected at load time rather than mid-session.

``GameConfig.default()`` reproduces the tuning of the original game.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import numpy as np
import yaml

from fortune_valley.domain.enums import RiskLevel
from fortune_valley.domain.exceptions import ConfigurationError
from fortune_valley.domain.values import (
    CityLotDefinition,
    InvestmentDefinition,
    VolatilityRange,
)


def _filtered(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    valid_keys = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in valid_keys}


# ===================================================================== #
#  Restaurant Configuration                                              #
# ===================================================================== #

@dataclass(frozen=True)
class RestaurantConfig:
    """Income table for the player's restaurant.

    Attributes
    ----------
    base_income_per_tick:
        Income generated per tick at level 1.
    max_level:
        Highest reachable level.
    upgrade_costs:
        Cost to go from level ``i + 1`` to ``i + 2`` (index 0 = cost to
        reach level 2).
    income_multipliers:
        Income multiplier per level (index 0 = level 1).
    """

    base_income_per_tick: float = 10.0
    max_level: int = 5
    upgrade_costs: tuple[float, ...] = (500.0, 1500.0, 4000.0, 10000.0)
    income_multipliers: tuple[float, ...] = (1.0, 1.5, 2.25, 3.5, 5.0)

    def __post_init__(self) -> None:
        # frozen=True prevents normal assignment; lists from JSON become tuples.
        object.__setattr__(self, "upgrade_costs", tuple(self.upgrade_costs))
        object.__setattr__(self, "income_multipliers", tuple(self.income_multipliers))

    def validate(self) -> None:
        if self.base_income_per_tick < 0:
            raise ConfigurationError(
                f"base_income_per_tick must be >= 0, got {self.base_income_per_tick}",
                field_name="base_income_per_tick",
            )
        if self.max_level < 1:
            raise ConfigurationError(
                f"max_level must be >= 1, got {self.max_level}", field_name="max_level"
            )
        if len(self.income_multipliers) < self.max_level:
            raise ConfigurationError(
                f"income_multipliers needs {self.max_level} entries, "
                f"got {len(self.income_multipliers)}",
                field_name="income_multipliers",
            )
        if len(self.upgrade_costs) < self.max_level - 1:
            raise ConfigurationError(
                f"upgrade_costs needs {self.max_level - 1} entries, "
                f"got {len(self.upgrade_costs)}",
                field_name="upgrade_costs",
            )
        if any(c < 0 for c in self.upgrade_costs):
            raise ConfigurationError(
                "upgrade_costs must all be >= 0", field_name="upgrade_costs"
            )
        if any(m < 0 for m in self.income_multipliers):
            raise ConfigurationError(
                "income_multipliers must all be >= 0", field_name="income_multipliers"
            )

    # -- table lookups --------------------------------------------------------

    def income_for_level(self, level: int) -> float:
        """Income per tick at *level*; out-of-range levels clamp to the table."""
        index = min(max(level - 1, 0), len(self.income_multipliers) - 1)
        return self.base_income_per_tick * self.income_multipliers[index]

    def upgrade_cost(self, level: int) -> float | None:
        """Cost to go from *level* to ``level + 1``; ``None`` when unavailable."""
        if level >= self.max_level:
            return None
        index = level - 1
        if index < 0 or index >= len(self.upgrade_costs):
            return None
        return self.upgrade_costs[index]

    def can_upgrade(self, level: int) -> bool:
        return self.upgrade_cost(level) is not None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["upgrade_costs"] = list(self.upgrade_costs)
        data["income_multipliers"] = list(self.income_multipliers)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RestaurantConfig:
        cfg = cls(**_filtered(cls, data))
        cfg.validate()
        return cfg


# ===================================================================== #
#  Rival Configuration                                                   #
# ===================================================================== #

@dataclass(frozen=True)
class AggressionCurve:
    """Piecewise-linear map from game progress ``[0, 1]`` to a purchase
    frequency multiplier.

    Higher multipliers shorten the rival's purchase interval.  Progress
    outside ``[0, 1]`` is clamped; between keyframes values are linearly
    interpolated.

    Attributes
    ----------
    keyframes:
        ``(progress, multiplier)`` pairs sorted by progress.
    """

    keyframes: tuple[tuple[float, float], ...] = ((0.0, 1.0), (1.0, 1.5))

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "keyframes",
            tuple((float(p), float(m)) for p, m in self.keyframes),
        )

    def validate(self) -> None:
        if not self.keyframes:
            raise ConfigurationError(
                "aggression curve needs at least one keyframe", field_name="keyframes"
            )
        progresses = [p for p, _ in self.keyframes]
        if progresses != sorted(progresses):
            raise ConfigurationError(
                "aggression curve keyframes must be sorted by progress",
                field_name="keyframes",
            )
        if any(m <= 0 for _, m in self.keyframes):
            raise ConfigurationError(
                "aggression multipliers must be > 0", field_name="keyframes"
            )

    def evaluate(self, progress: float) -> float:
        """Return the multiplier at *progress* (clamped to ``[0, 1]``)."""
        clamped = min(max(progress, 0.0), 1.0)
        xs = np.array([p for p, _ in self.keyframes], dtype=np.float64)
        ys = np.array([m for _, m in self.keyframes], dtype=np.float64)
        return float(np.interp(clamped, xs, ys))

    @classmethod
    def linear(cls, start: float, end: float) -> AggressionCurve:
        """Straight line from *start* at progress 0 to *end* at progress 1."""
        return cls(keyframes=((0.0, start), (1.0, end)))

    @classmethod
    def constant(cls, value: float = 1.0) -> AggressionCurve:
        return cls(keyframes=((0.0, value), (1.0, value)))


@dataclass(frozen=True)
class RivalConfig:
    """Economy and behaviour of the rival lot buyer.

    Attributes
    ----------
    starting_money:
        Rival balance at game start.
    income_per_tick:
        Rival income credited every tick.
    purchase_interval_ticks:
        Base number of ticks between purchase attempts.
    warning_ticks:
        How far ahead of an attempt the warning is raised.  Must be smaller
        than the interval.
    purchase_buffer:
        Money the rival keeps on top of a lot's cost before buying it.
    aggression_curve:
        Progress-to-multiplier curve used when *scale_by_progress* is on.
    scale_by_progress:
        If ``False`` the configured interval is used verbatim.
    min_interval_ticks:
        Floor for the scaled interval.
    """

    starting_money: float = 500.0
    income_per_tick: float = 8.0
    purchase_interval_ticks: int = 60
    warning_ticks: int = 30
    purchase_buffer: float = 100.0
    aggression_curve: AggressionCurve = field(default_factory=AggressionCurve)
    scale_by_progress: bool = True
    min_interval_ticks: int = 10

    def validate(self) -> None:
        if self.starting_money < 0:
            raise ConfigurationError(
                f"starting_money must be >= 0, got {self.starting_money}",
                field_name="starting_money",
            )
        if self.income_per_tick < 0:
            raise ConfigurationError(
                f"income_per_tick must be >= 0, got {self.income_per_tick}",
                field_name="income_per_tick",
            )
        if self.purchase_interval_ticks < 1:
            raise ConfigurationError(
                f"purchase_interval_ticks must be >= 1, got {self.purchase_interval_ticks}",
                field_name="purchase_interval_ticks",
            )
        if not (0 <= self.warning_ticks < self.purchase_interval_ticks):
            raise ConfigurationError(
                f"warning_ticks must be in [0, {self.purchase_interval_ticks}), "
                f"got {self.warning_ticks}",
                field_name="warning_ticks",
            )
        if self.purchase_buffer < 0:
            raise ConfigurationError(
                f"purchase_buffer must be >= 0, got {self.purchase_buffer}",
                field_name="purchase_buffer",
            )
        if self.min_interval_ticks < 1:
            raise ConfigurationError(
                f"min_interval_ticks must be >= 1, got {self.min_interval_ticks}",
                field_name="min_interval_ticks",
            )
        self.aggression_curve.validate()

    def effective_interval(self, progress: float) -> int:
        """Ticks between purchase attempts at the given game *progress*."""
        if not self.scale_by_progress:
            return self.purchase_interval_ticks
        multiplier = self.aggression_curve.evaluate(progress)
        return max(
            self.min_interval_ticks,
            round(self.purchase_interval_ticks / multiplier),
        )

    def explain(self) -> str:
        return (
            f"Your rival earns ${self.income_per_tick:.0f} per day.\n"
            f"They attempt to buy a lot every ~{self.purchase_interval_ticks} days.\n"
            "As they get stronger, they'll buy faster!\n"
            f"You'll get a {self.warning_ticks}-day warning before they purchase."
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["aggression_curve"] = [list(k) for k in self.aggression_curve.keyframes]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RivalConfig:
        filtered = _filtered(cls, data)
        curve = filtered.get("aggression_curve")
        if curve is not None and not isinstance(curve, AggressionCurve):
            filtered["aggression_curve"] = AggressionCurve(
                keyframes=tuple(tuple(k) for k in curve)
            )
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  Authored catalogs                                                     #
# ===================================================================== #

def default_investments() -> tuple[InvestmentDefinition, ...]:
    """The four investment options of the original game."""
    return (
        InvestmentDefinition(
            display_name="Savings Account",
            description="Bank savings with a small, guaranteed return.",
            risk_level=RiskLevel.LOW,
            annual_return_rate=0.03,
            compounding_frequency_ticks=30,
            compounds_per_year=12,
            minimum_deposit=50.0,
        ),
        InvestmentDefinition(
            display_name="Government Bond",
            description="Lend money to the city and get steady interest.",
            risk_level=RiskLevel.LOW,
            annual_return_rate=0.05,
            compounding_frequency_ticks=30,
            compounds_per_year=12,
            minimum_deposit=100.0,
        ),
        InvestmentDefinition(
            display_name="Index Fund",
            description="A basket of many companies; ups and downs even out.",
            risk_level=RiskLevel.MEDIUM,
            annual_return_rate=0.10,
            volatility_range=VolatilityRange(0.5, 1.5),
            compounding_frequency_ticks=30,
            compounds_per_year=12,
            minimum_deposit=200.0,
        ),
        InvestmentDefinition(
            display_name="Tech Stock",
            description="Shares in a single fast-growing company.",
            risk_level=RiskLevel.HIGH,
            annual_return_rate=0.20,
            volatility_range=VolatilityRange(-1.0, 3.0),
            compounding_frequency_ticks=15,
            compounds_per_year=24,
            minimum_deposit=250.0,
        ),
    )


def default_lots() -> tuple[CityLotDefinition, ...]:
    """The seven city lots of the original game."""
    return (
        CityLotDefinition("Corner Cafe", base_cost=800.0, income_bonus=4.0, grid_position=(0, 0)),
        CityLotDefinition("Main Street Shop", base_cost=1000.0, income_bonus=5.0, grid_position=(1, 0)),
        CityLotDefinition("Park Plaza", base_cost=1200.0, income_bonus=6.0, grid_position=(2, 0)),
        CityLotDefinition("Riverside Lot", base_cost=1500.0, income_bonus=8.0, grid_position=(0, 1)),
        CityLotDefinition("Market Square", base_cost=2000.0, income_bonus=10.0, grid_position=(1, 1)),
        CityLotDefinition("Harbor Warehouse", base_cost=2500.0, income_bonus=12.0, grid_position=(2, 1)),
        CityLotDefinition("Hilltop Estate", base_cost=3000.0, income_bonus=15.0, grid_position=(1, 2)),
    )


def investment_from_dict(data: dict[str, Any]) -> InvestmentDefinition:
    filtered = _filtered(InvestmentDefinition, data)
    if "risk_level" in filtered and not isinstance(filtered["risk_level"], RiskLevel):
        try:
            filtered["risk_level"] = RiskLevel(str(filtered["risk_level"]).lower())
        except ValueError as exc:
            raise ConfigurationError(
                f"unknown risk_level '{filtered['risk_level']}'", field_name="risk_level"
            ) from exc
    vol = filtered.get("volatility_range")
    if vol is not None and not isinstance(vol, VolatilityRange):
        if isinstance(vol, dict):
            filtered["volatility_range"] = VolatilityRange(**vol)
        else:
            low, high = vol
            filtered["volatility_range"] = VolatilityRange(float(low), float(high))
    return InvestmentDefinition(**filtered)


def investment_to_dict(definition: InvestmentDefinition) -> dict[str, Any]:
    data = asdict(definition)
    data["risk_level"] = definition.risk_level.value
    data["volatility_range"] = [
        definition.volatility_range.low,
        definition.volatility_range.high,
    ]
    return data


def lot_from_dict(data: dict[str, Any]) -> CityLotDefinition:
    filtered = _filtered(CityLotDefinition, data)
    if "grid_position" in filtered:
        filtered["grid_position"] = tuple(int(v) for v in filtered["grid_position"])
    return CityLotDefinition(**filtered)


def lot_to_dict(lot: CityLotDefinition) -> dict[str, Any]:
    data = asdict(lot)
    data["grid_position"] = list(lot.grid_position)
    return data


# ===================================================================== #
#  Game Configuration                                                    #
# ===================================================================== #

@dataclass(frozen=True)
class GameConfig:
    """Everything authored for one session.

    Attributes
    ----------
    starting_balance:
        Player ledger balance at game start.
    restaurant:
        Restaurant income table.
    rival:
        Rival economy and behaviour.
    investments:
        Investment catalog offered to the player.
    lots:
        City lots, in authored order (used for rival tie-breaks).
    seed:
        Seed for the volatility random source.  ``None`` = non-deterministic.
    history_interval:
        Ticks between portfolio history snapshots.
    max_history_points:
        Oldest snapshots are dropped beyond this count.
    """

    starting_balance: float = 1000.0
    restaurant: RestaurantConfig = field(default_factory=RestaurantConfig)
    rival: RivalConfig = field(default_factory=RivalConfig)
    investments: tuple[InvestmentDefinition, ...] = field(default_factory=default_investments)
    lots: tuple[CityLotDefinition, ...] = field(default_factory=default_lots)
    seed: int | None = None
    history_interval: int = 5
    max_history_points: int = 500

    def __post_init__(self) -> None:
        object.__setattr__(self, "investments", tuple(self.investments))
        object.__setattr__(self, "lots", tuple(self.lots))

    @classmethod
    def default(cls, seed: int | None = None) -> GameConfig:
        return cls(seed=seed)

    def validate(self) -> None:
        if self.starting_balance < 0:
            raise ConfigurationError(
                f"starting_balance must be >= 0, got {self.starting_balance}",
                field_name="starting_balance",
            )
        self.restaurant.validate()
        self.rival.validate()
        if not self.lots:
            raise ConfigurationError("the city needs at least one lot", field_name="lots")
        lot_ids = [lot.lot_id for lot in self.lots]
        duplicates = sorted({i for i in lot_ids if lot_ids.count(i) > 1})
        if duplicates:
            raise ConfigurationError(
                f"duplicate lot ids: {duplicates}", field_name="lots"
            )
        names = [d.display_name for d in self.investments]
        if len(set(names)) != len(names):
            raise ConfigurationError(
                "investment display names must be unique", field_name="investments"
            )
        if self.seed is not None and self.seed < 0:
            raise ConfigurationError(f"seed must be >= 0, got {self.seed}", field_name="seed")
        if self.history_interval < 1:
            raise ConfigurationError(
                f"history_interval must be >= 1, got {self.history_interval}",
                field_name="history_interval",
            )
        if self.max_history_points < 1:
            raise ConfigurationError(
                f"max_history_points must be >= 1, got {self.max_history_points}",
                field_name="max_history_points",
            )

    def investment(self, display_name: str) -> InvestmentDefinition:
        """Look up a catalog entry by its display name."""
        for definition in self.investments:
            if definition.display_name == display_name:
                return definition
        raise KeyError(display_name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "starting_balance": self.starting_balance,
            "restaurant": self.restaurant.to_dict(),
            "rival": self.rival.to_dict(),
            "investments": [investment_to_dict(d) for d in self.investments],
            "lots": [lot_to_dict(lot) for lot in self.lots],
            "seed": self.seed,
            "history_interval": self.history_interval,
            "max_history_points": self.max_history_points,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameConfig:
        filtered = _filtered(cls, data)
        if isinstance(filtered.get("restaurant"), dict):
            filtered["restaurant"] = RestaurantConfig.from_dict(filtered["restaurant"])
        if isinstance(filtered.get("rival"), dict):
            filtered["rival"] = RivalConfig.from_dict(filtered["rival"])
        if "investments" in filtered:
            filtered["investments"] = tuple(
                d if isinstance(d, InvestmentDefinition) else investment_from_dict(d)
                for d in filtered["investments"]
            )
        if "lots" in filtered:
            filtered["lots"] = tuple(
                lot if isinstance(lot, CityLotDefinition) else lot_from_dict(lot)
                for lot in filtered["lots"]
            )
        cfg = cls(**filtered)
        cfg.validate()
        return cfg


# ===================================================================== #
#  Loaders                                                               #
# ===================================================================== #

def load_config_from_json(json_str: str) -> GameConfig:
    """Parse a JSON document into a validated :class:`GameConfig`."""
    raw = json.loads(json_str)
    if not isinstance(raw, dict):
        raise ConfigurationError("Top-level JSON must be an object")
    return GameConfig.from_dict(raw)


def load_config_from_yaml(yaml_str: str) -> GameConfig:
    """Parse a YAML document into a validated :class:`GameConfig`."""
    raw = yaml.safe_load(yaml_str) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError("Top-level YAML must be a mapping")
    return GameConfig.from_dict(raw)


def load_config(path: str | Path) -> GameConfig:
    """Load a config file, choosing the parser from the file suffix."""
    p = Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        return load_config_from_yaml(text)
    return load_config_from_json(text)
