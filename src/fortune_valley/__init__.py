"""Fortune Valley economy engine.

Currency ledger, restaurant income, compounding investments, a city-lot
market and a rival buyer, driven by a discrete tick clock for an
educational idle-strategy game about saving and investing.
"""

__version__ = "0.1.0"

from fortune_valley.infrastructure.config import GameConfig, load_config
from fortune_valley.services.session import GameSession

__all__ = [
    "GameConfig",
    "GameSession",
    "load_config",
]
