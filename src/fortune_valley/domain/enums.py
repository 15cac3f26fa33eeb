"""Domain enumerations for the Fortune Valley economy engine.

These enums capture the fixed vocabularies used across the domain layer:
investment risk levels, lot owners, and the outcome of a game session.
"""

from enum import Enum


class RiskLevel(Enum):
    """Risk profile of an investment definition."""

    LOW = "low"  # steady, predictable growth
    MEDIUM = "medium"
    HIGH = "high"  # volatile, can lose value


class Owner(Enum):
    """Who holds a city lot."""

    NONE = "none"
    PLAYER = "player"
    RIVAL = "rival"


class GameOutcome(Enum):
    """Terminal state of a session, as decided by the lot market."""

    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not GameOutcome.IN_PROGRESS
