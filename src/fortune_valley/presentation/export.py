"""Export utilities for finished games.

Supports JSON and YAML summaries (for an external narrator or coach) and
CSV tables of the sell history and the wealth history.
"""

from __future__ import annotations

import csv
from pathlib import Path

from fortune_valley.domain.summary import GameSummary
from fortune_valley.infrastructure.serialization import to_json, to_yaml
from fortune_valley.services.history import PortfolioHistoryTracker

SELL_COLUMNS = [
    "position_id",
    "investment_name",
    "principal",
    "proceeds",
    "realized_gain",
    "percentage_return",
    "ticks_held",
    "sold_at_tick",
]


def _prepare(path: str | Path) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    return out


# ---------------------------------------------------------------------------
# JSON / YAML
# ---------------------------------------------------------------------------

def export_json(summary: GameSummary, path: str | Path) -> None:
    """Write *summary* to a JSON file.

    Parameters
    ----------
    summary:
        The frozen game summary.
    path:
        File path for the JSON output.
    """
    _prepare(path).write_text(to_json(summary), encoding="utf-8")


def export_yaml(summary: GameSummary, path: str | Path) -> None:
    _prepare(path).write_text(to_yaml(summary), encoding="utf-8")


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def export_csv(summary: GameSummary, path: str | Path) -> None:
    """Write the sell history of *summary* to a CSV file, one row per sale.

    An empty history still produces the header row.
    """
    out = _prepare(path)
    with open(out, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(SELL_COLUMNS)
        for r in summary.sell_history:
            writer.writerow([
                r.position_id,
                r.investment_name,
                f"{r.principal:.2f}",
                f"{r.proceeds:.2f}",
                f"{r.realized_gain:.2f}",
                f"{r.percentage_return:.2f}",
                r.ticks_held,
                r.sold_at_tick,
            ])


def export_history_csv(history: PortfolioHistoryTracker, path: str | Path) -> None:
    """Write the wealth snapshots as ``tick,total_wealth,net_gain`` rows."""
    out = _prepare(path)
    with open(out, "w", newline="", encoding="utf-8") as fh:
        writer = csv.writer(fh)
        writer.writerow(["tick", "total_wealth", "net_gain"])
        for tick, wealth, gain in zip(history.ticks, history.total_wealth, history.net_gain):
            writer.writerow([int(tick), f"{wealth:.2f}", f"{gain:.2f}"])


# ---------------------------------------------------------------------------
# All
# ---------------------------------------------------------------------------

def export_all(
    summary: GameSummary,
    directory: str | Path,
    history: PortfolioHistoryTracker | None = None,
) -> list[Path]:
    """Write every export format into *directory* and return the paths."""
    base = Path(directory)
    paths = [base / "summary.json", base / "summary.yaml", base / "sells.csv"]
    export_json(summary, paths[0])
    export_yaml(summary, paths[1])
    export_csv(summary, paths[2])
    if history is not None:
        paths.append(base / "wealth.csv")
        export_history_csv(history, paths[-1])
    return paths
