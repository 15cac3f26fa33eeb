"""Rich-based console dashboard with a plain-text mode.

:class:`ConsoleDashboard` renders the live game status and the final
summary with ``rich`` tables, colour and a wealth sparkline.  Passing
``use_rich=False`` switches to simple ``print()``-based output that works
when the output is piped into a file or another program.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any

import numpy as np
from rich.console import Console as RichConsole
from rich.table import Table as RichTable

from fortune_valley.domain.enums import Owner
from fortune_valley.domain.summary import GameSummary

# ---------------------------------------------------------------------------
# Sparkline helpers
# ---------------------------------------------------------------------------

_SPARK_CHARS = " " + "▁▂▃▄▅▆▇█"

_OWNER_STYLE = {
    Owner.PLAYER: "green",
    Owner.RIVAL: "red",
    Owner.NONE: "dim",
}


def _sparkline(values: Sequence[float], width: int = 60) -> str:
    """Return a Unicode sparkline for a wealth series.

    Series longer than *width* are averaged into *width* buckets, so a
    ten-year game still fits on one terminal line.
    """
    series = np.asarray(values, dtype=np.float64)
    if series.size == 0:
        return ""
    if series.size > width:
        series = np.array([bucket.mean() for bucket in np.array_split(series, width)])

    lo, hi = series.min(), series.max()
    levels = len(_SPARK_CHARS) - 1
    if hi == lo:
        scaled = np.zeros(series.size, dtype=np.int64)
    else:
        scaled = ((series - lo) / (hi - lo) * levels).astype(np.int64)
    return "".join(_SPARK_CHARS[i] for i in np.clip(scaled, 0, levels))


def _money(value: float) -> str:
    return f"-${-value:,.0f}" if value < 0 else f"${value:,.0f}"


# ---------------------------------------------------------------------------
# ConsoleDashboard
# ---------------------------------------------------------------------------

class ConsoleDashboard:
    """Console presentation layer for game status and summaries.

    Parameters
    ----------
    use_rich:
        Render with ``rich`` (default) or as plain text.
    file:
        Output stream.  Defaults to ``sys.stdout``.
    """

    def __init__(self, use_rich: bool = True, file: Any = None) -> None:
        self._file = file or sys.stdout
        self._use_rich = use_rich
        self._console = RichConsole(file=self._file) if use_rich else None

    def _plain_print(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("file", self._file)
        print(*args, **kwargs)

    # -- public API --------------------------------------------------------

    def print_status(self, status: dict[str, Any]) -> None:
        """Print a one-table snapshot of ``GameSession.status()``."""
        rows = [
            ("Day", str(status["tick"])),
            ("Balance", _money(status["balance"])),
            ("Portfolio", _money(status["portfolio_value"])),
            ("Net worth", _money(status["net_worth"])),
            ("Income / day", _money(status["income_per_tick"])),
            ("Restaurant level", str(status["restaurant_level"])),
            ("Lots (you / rival / free)",
             f"{status['player_lots']} / {status['rival_lots']} / {status['available_lots']}"),
            ("Rival balance", _money(status["rival_balance"])),
            ("Rival buys in", f"{status['rival_ticks_until_attempt']} days"),
        ]
        if self._console is not None:
            table = RichTable(title="Fortune Valley", show_header=False)
            table.add_column("Field", style="bold")
            table.add_column("Value", justify="right")
            for name, value in rows:
                table.add_row(name, value)
            self._console.print(table)
        else:
            width = max(len(name) for name, _ in rows)
            for name, value in rows:
                self._plain_print(f"  {name:<{width}}  {value}")

    def print_wealth(self, wealth: Sequence[float], width: int = 60) -> None:
        """Print a sparkline of total wealth over time."""
        if len(wealth) == 0:
            self._plain_print("[no wealth history]")
            return
        spark = _sparkline(wealth, width)
        stats = (
            f"  start={_money(wealth[0])}  end={_money(wealth[-1])}  "
            f"peak={_money(max(wealth))}  points={len(wealth)}"
        )
        if self._console is not None:
            self._console.print("[bold]Wealth[/bold]")
            self._console.print(spark, style="cyan")
            self._console.print(stats)
        else:
            self._plain_print("Wealth")
            self._plain_print(spark)
            self._plain_print(stats)

    def print_summary(self, summary: GameSummary) -> None:
        """Print the end-of-game recap."""
        if self._console is not None:
            self._print_summary_rich(summary)
        else:
            self._print_summary_plain(summary)

    # -- rich rendering ----------------------------------------------------

    def _print_summary_rich(self, s: GameSummary) -> None:
        assert self._console is not None
        colour = "green" if s.is_win else "red"
        self._console.print()
        self._console.print(f"[bold {colour}]{s.headline or s.outcome.value.upper()}[/]")

        table = RichTable(title=f"Game over after {s.days_played} days")
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")
        for name, value in self._summary_rows(s):
            table.add_row(name, value)
        self._console.print(table)

        lots = RichTable(title="City")
        lots.add_column("Lot")
        lots.add_column("Owner")
        for lot_id, owner in s.lot_ownership.items():
            lots.add_row(lot_id, f"[{_OWNER_STYLE[owner]}]{owner.value}[/]")
        self._console.print(lots)

        if s.key_decisions:
            self._console.print("[bold]Key decisions[/bold]")
            for note in s.key_decisions:
                self._console.print(f"  - {note}")
        for text in (s.investment_insight, s.opportunity_cost_insight, s.what_if_message):
            if text:
                self._console.print(f"[italic]{text}[/italic]")
        self._console.print()

    # -- plain rendering ---------------------------------------------------

    def _print_summary_plain(self, s: GameSummary) -> None:
        self._plain_print()
        self._plain_print(s.headline or s.outcome.value.upper())
        self._plain_print(f"Game over after {s.days_played} days")
        self._plain_print("-" * 40)
        for name, value in self._summary_rows(s):
            self._plain_print(f"  {name:<24} {value:>14}")
        self._plain_print("-" * 40)
        for lot_id, owner in s.lot_ownership.items():
            self._plain_print(f"  {lot_id:<24} {owner.value:>14}")
        if s.key_decisions:
            self._plain_print("Key decisions:")
            for note in s.key_decisions:
                self._plain_print(f"  - {note}")
        for text in (s.investment_insight, s.opportunity_cost_insight, s.what_if_message):
            if text:
                self._plain_print(text)
        self._plain_print()

    @staticmethod
    def _summary_rows(s: GameSummary) -> list[tuple[str, str]]:
        return [
            ("Outcome", s.outcome.value),
            ("Final balance", _money(s.final_balance)),
            ("Net worth", _money(s.net_worth)),
            ("Lots (you / rival)", f"{s.player_lots} / {s.rival_lots}"),
            ("Restaurant income", _money(s.restaurant_income)),
            ("Lot income", _money(s.lot_income)),
            ("Spent on lots", _money(s.spent_on_lots)),
            ("Investments opened", str(s.investment_count)),
            ("Principal invested", _money(s.principal_invested)),
            ("Realized gain", _money(s.realized_gain)),
            ("Unrealized gain", _money(s.unrealized_gain)),
            ("Peak portfolio", _money(s.peak_portfolio_value)),
        ]
