"""Periodic wealth snapshots for the portfolio chart."""

from __future__ import annotations

from collections import deque

import numpy as np
from numpy.typing import NDArray

from fortune_valley.services.investments import InvestmentBook
from fortune_valley.services.ledger import Ledger


class PortfolioHistoryTracker:
    """Records total wealth and unrealized investment gain every few ticks.

    Parameters
    ----------
    ledger:
        The player's ledger.
    book:
        The player's investment book.
    snapshot_interval:
        Ticks between snapshots.
    max_points:
        Oldest snapshots are dropped past this many.
    """

    def __init__(
        self,
        ledger: Ledger,
        book: InvestmentBook,
        snapshot_interval: int = 5,
        max_points: int = 500,
    ) -> None:
        if snapshot_interval < 1:
            raise ValueError(f"snapshot_interval must be >= 1, got {snapshot_interval}")
        self._ledger = ledger
        self._book = book
        self._interval = snapshot_interval
        self._ticks: deque[int] = deque(maxlen=max_points)
        self._wealth: deque[float] = deque(maxlen=max_points)
        self._net_gain: deque[float] = deque(maxlen=max_points)

    @property
    def ticks(self) -> NDArray[np.int64]:
        return np.asarray(self._ticks, dtype=np.int64)

    @property
    def total_wealth(self) -> NDArray[np.float64]:
        return np.asarray(self._wealth, dtype=np.float64)

    @property
    def net_gain(self) -> NDArray[np.float64]:
        return np.asarray(self._net_gain, dtype=np.float64)

    def __len__(self) -> int:
        return len(self._wealth)

    def take_snapshot(self, tick: int = 0) -> None:
        self._ticks.append(tick)
        self._wealth.append(self._ledger.balance + self._book.total_portfolio_value)
        self._net_gain.append(self._book.unrealized_gain)

    def on_tick(self, tick: int) -> None:
        if tick % self._interval == 0:
            self.take_snapshot(tick)

    def peak_wealth(self) -> float:
        return float(self.total_wealth.max()) if self._wealth else 0.0

    def reset(self) -> None:
        """Clear history and record the starting point."""
        self._ticks.clear()
        self._wealth.clear()
        self._net_gain.clear()
        self.take_snapshot(0)
