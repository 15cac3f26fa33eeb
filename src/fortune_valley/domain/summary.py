"""End-of-game summary snapshot.

A :class:`GameSummary` is frozen once the game reaches a terminal outcome.
It is the only thing external consumers (the console, the exporters, a
narrator) need to read after the game; it holds no references to live
simulation objects.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .enums import GameOutcome, Owner
from .values import LotPurchaseRecord, SellRecord

MAX_KEY_DECISIONS = 5


@dataclass(frozen=True)
class GameSummary:
    """Read-only results of one finished game.

    ``realized_gain`` and ``unrealized_gain`` are kept separate:
    the first comes from sold positions, the second from positions still
    open when the game ended.
    """

    outcome: GameOutcome
    days_played: int
    final_balance: float
    realized_gain: float = 0.0
    unrealized_gain: float = 0.0
    portfolio_value: float = 0.0
    sell_history: tuple[SellRecord, ...] = ()
    lot_ownership: Mapping[str, Owner] = field(default_factory=dict)
    lot_purchases: tuple[LotPurchaseRecord, ...] = ()
    player_lots: int = 0
    rival_lots: int = 0
    total_lots: int = 0
    restaurant_level: int = 1
    restaurant_income: float = 0.0
    lot_income: float = 0.0
    spent_on_lots: float = 0.0
    investment_count: int = 0
    principal_invested: float = 0.0
    peak_portfolio_value: float = 0.0
    key_decisions: tuple[str, ...] = ()
    headline: str = ""
    investment_insight: str = ""
    opportunity_cost_insight: str = ""
    what_if_message: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "sell_history", tuple(self.sell_history))
        object.__setattr__(self, "lot_purchases", tuple(self.lot_purchases))
        object.__setattr__(self, "key_decisions", tuple(self.key_decisions[:MAX_KEY_DECISIONS]))
        object.__setattr__(
            self, "lot_ownership", MappingProxyType(dict(self.lot_ownership))
        )

    @property
    def is_win(self) -> bool:
        return self.outcome is GameOutcome.WON

    @property
    def total_investment_gains(self) -> float:
        return self.realized_gain + self.unrealized_gain

    @property
    def net_worth(self) -> float:
        return self.final_balance + self.portfolio_value

    @property
    def player_purchases(self) -> tuple[LotPurchaseRecord, ...]:
        return tuple(p for p in self.lot_purchases if p.owner is Owner.PLAYER)

    def readable_summary(self) -> str:
        """Plain-language recap of the game."""
        outcome = "Victory!" if self.is_win else "Defeat"
        if self.total_investment_gains > 0:
            investing = (
                f"Your investments earned you ${self.total_investment_gains:,.0f} "
                "through compound interest!"
            )
        else:
            investing = "You didn't benefit from compound interest this game."
        return (
            f"{outcome}\n\n"
            f"Game lasted {self.days_played} days.\n"
            f"You owned {self.player_lots} lots, rival owned {self.rival_lots} lots.\n\n"
            f"Final Net Worth: ${self.net_worth:,.0f}\n"
            f"Restaurant Income: ${self.restaurant_income:,.0f}\n"
            f"{investing}"
        )
