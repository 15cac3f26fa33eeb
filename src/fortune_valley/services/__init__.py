"""Service layer for the Fortune Valley economy engine.

Re-exports the simulation components for convenient top-level access::

    from fortune_valley.services import (
        Ledger, IncomeSource, InvestmentBook, Position,
        LotMarket, RivalAgent, SimulationClock,
        PortfolioHistoryTracker, GameSession, build_summary,
    )
"""

from fortune_valley.services.city import LotMarket
from fortune_valley.services.clock import SimulationClock, TickParticipant
from fortune_valley.services.history import PortfolioHistoryTracker
from fortune_valley.services.investments import InvestmentBook, Position
from fortune_valley.services.ledger import Ledger
from fortune_valley.services.restaurant import IncomeSource
from fortune_valley.services.rival import RivalAgent
from fortune_valley.services.session import GameSession
from fortune_valley.services.strategies import (
    IdleStrategy,
    InvestorStrategy,
    PlayerStrategy,
    SaverStrategy,
    create_strategy,
    play,
)
from fortune_valley.services.summary import (
    build_headline,
    build_investment_insight,
    build_key_decisions,
    build_opportunity_cost_insight,
    build_summary,
    build_what_if_message,
)

__all__ = [
    "GameSession",
    "IdleStrategy",
    "IncomeSource",
    "InvestmentBook",
    "InvestorStrategy",
    "Ledger",
    "LotMarket",
    "PortfolioHistoryTracker",
    "Position",
    "RivalAgent",
    "PlayerStrategy",
    "SaverStrategy",
    "SimulationClock",
    "TickParticipant",
    "build_headline",
    "build_investment_insight",
    "build_key_decisions",
    "build_opportunity_cost_insight",
    "build_summary",
    "build_what_if_message",
    "create_strategy",
    "play",
]
