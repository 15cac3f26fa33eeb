"""Domain layer for the Fortune Valley economy engine.

Re-exports all public domain types so that consumers can write::

    from fortune_valley.domain import InvestmentDefinition, Owner, BalanceChanged
"""

# -- Enumerations -------------------------------------------------------------
from .enums import GameOutcome, Owner, RiskLevel

# -- Value Objects ------------------------------------------------------------
from .values import (
    ActionResult,
    CityLotDefinition,
    InvestmentDefinition,
    LotPurchaseRecord,
    SellRecord,
    VolatilityRange,
)

# -- Domain Events ------------------------------------------------------------
from .events import (
    BalanceChanged,
    DomainEvent,
    GameEnded,
    GameStarted,
    IncomeGenerated,
    InvestmentCompounded,
    InvestmentOpened,
    InvestmentSold,
    OwnershipChanged,
    RestaurantUpgraded,
    RivalPurchaseAttempted,
    RivalWarning,
    SummaryReady,
    TickAdvanced,
)

# -- Summary ------------------------------------------------------------------
from .summary import GameSummary

# -- Exceptions ---------------------------------------------------------------
from .exceptions import (
    AtMaxLevel,
    ConfigurationError,
    FortuneValleyError,
    GameNotOver,
    InsufficientFunds,
    InvalidAmount,
    LotAlreadyOwned,
    LotNotFound,
    PositionNotFound,
)

__all__ = [
    # enums
    "GameOutcome",
    "Owner",
    "RiskLevel",
    # values
    "ActionResult",
    "CityLotDefinition",
    "InvestmentDefinition",
    "LotPurchaseRecord",
    "SellRecord",
    "VolatilityRange",
    # events
    "BalanceChanged",
    "DomainEvent",
    "GameEnded",
    "GameStarted",
    "IncomeGenerated",
    "InvestmentCompounded",
    "InvestmentOpened",
    "InvestmentSold",
    "OwnershipChanged",
    "RestaurantUpgraded",
    "RivalPurchaseAttempted",
    "RivalWarning",
    "SummaryReady",
    "TickAdvanced",
    # summary
    "GameSummary",
    # exceptions
    "AtMaxLevel",
    "ConfigurationError",
    "FortuneValleyError",
    "GameNotOver",
    "InsufficientFunds",
    "InvalidAmount",
    "LotAlreadyOwned",
    "LotNotFound",
    "PositionNotFound",
]
