"""Command-line interface for the Fortune Valley economy engine.

Entry point
-----------
The ``main()`` function is registered as a console script in
``pyproject.toml``::

    [project.scripts]
    fortune-valley = "fortune_valley.cli:main"

Usage examples::

    fortune-valley run --strategy investor --seed 7
    fortune-valley run --config city.yaml --ticks 2000 --output ./results
    fortune-valley info
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING, Any

from fortune_valley.services.strategies import STRATEGIES

if TYPE_CHECKING:
    from fortune_valley.infrastructure.config import GameConfig

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="fortune-valley",
        description="Fortune Valley -- run the economy simulation from the terminal.",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        default=False,
        help="Show version and exit.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity. (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available subcommands")

    # -- run ---------------------------------------------------------------
    run_parser = subparsers.add_parser(
        "run",
        help="Play a game with a scripted strategy.",
        description="Run one game until it ends or the tick cap is reached.",
    )
    run_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON or YAML game config.  Defaults to the built-in city.",
    )
    run_parser.add_argument(
        "--ticks",
        type=int,
        default=3650,
        help="Maximum number of days to simulate. (default: 3650)",
    )
    run_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for investment volatility.",
    )
    run_parser.add_argument(
        "--strategy",
        type=str,
        default="investor",
        choices=sorted(STRATEGIES),
        help="Scripted player strategy. (default: investor)",
    )
    run_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Directory for summary.json, summary.yaml, sells.csv and wealth.csv.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        default=False,
        help="Plain-text output instead of rich tables.",
    )

    # -- info --------------------------------------------------------------
    info_parser = subparsers.add_parser(
        "info",
        help="Show version and the configured catalog.",
    )
    info_parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="JSON or YAML game config.  Defaults to the built-in city.",
    )

    return parser


def _load(path: str | None, seed: int | None = None) -> GameConfig:
    from dataclasses import replace

    from fortune_valley.infrastructure.config import GameConfig, load_config

    config = load_config(path) if path else GameConfig.default()
    if seed is not None:
        config = replace(config, seed=seed)
        config.validate()
    return config


def _cmd_run(args: argparse.Namespace) -> int:
    """Handle the ``run`` subcommand."""
    from fortune_valley.presentation.console import ConsoleDashboard
    from fortune_valley.presentation.export import export_all
    from fortune_valley.services.session import GameSession
    from fortune_valley.services.strategies import create_strategy, play

    config = _load(args.config, args.seed)
    session = GameSession(config)
    strategy = create_strategy(args.strategy)
    dashboard = ConsoleDashboard(use_rich=not args.plain)

    play(session, strategy, args.ticks)

    dashboard.print_status(session.status())
    dashboard.print_wealth(session.history.total_wealth.tolist())

    summary = session.summary
    if summary is None:
        print(f"Game still in progress after {session.current_tick} days.", file=sys.stderr)
        return 2

    dashboard.print_summary(summary)
    if args.output:
        paths = export_all(summary, args.output, history=session.history)
        for path in paths:
            print(f"Wrote {path}")
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    """Handle the ``info`` subcommand."""
    from fortune_valley import __version__

    config = _load(args.config)

    print(f"Fortune Valley v{__version__}")
    print()
    print(f"Starting balance: ${config.starting_balance:,.0f}")
    print(
        f"Restaurant: ${config.restaurant.base_income_per_tick:,.0f}/day, "
        f"{config.restaurant.max_level} levels"
    )
    print()
    print("Investments:")
    for d in config.investments:
        vol = d.volatility_range
        print(
            f"  {d.display_name} -- {d.risk_level.value}, {d.annual_return_rate:.0%}/yr, "
            f"volatility {vol.low:g}..{vol.high:g}, every {d.compounding_frequency_ticks} days, "
            f"min ${d.minimum_deposit:,.0f}"
        )
    print()
    print("Lots:")
    for lot in config.lots:
        print(
            f"  {lot.lot_id} -- {lot.display_name}, ${lot.base_cost:,.0f}, "
            f"+${lot.income_bonus:,.0f}/day"
        )
    print()
    print(config.rival.explain())
    print()
    print("Strategies: " + ", ".join(sorted(STRATEGIES)))
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  Defaults to ``sys.argv[1:]``.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.version:
        from fortune_valley import __version__
        print(f"fortune-valley {__version__}")
        sys.exit(0)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    handlers: dict[str, Any] = {
        "run": _cmd_run,
        "info": _cmd_info,
    }

    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        exit_code = handler(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        exit_code = 130
    except Exception as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
