"""Command-line interface for the stockcast runtime."""

from __future__ import annotations

import argparse
import sys

from stockcast.config import Settings, parse_symbols
from stockcast.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Next-day forecasts and BUY/SELL/HOLD calls from daily bars"
    )
    parser.add_argument("--symbols", type=str, help="Comma-separated symbols")
    parser.add_argument("--data-dir", type=str, help="CSV historical data directory")
    parser.add_argument("--events-dir", type=str, help="Run outputs directory")
    parser.add_argument("--days", type=int, help="Backtest window in bars")
    parser.add_argument("--seed", type=int, help="Seed for the prediction noise source")
    parser.add_argument("--workers", type=int, help="Analyze symbols on a thread pool")
    parser.add_argument("--exchange-suffix", type=str, help="Suffix appended to bare symbols")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level",
    )
    parser.add_argument(
        "--no-report",
        action="store_true",
        help="Skip writing the HTML run report",
    )
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.symbols:
        overrides["symbols"] = parse_symbols(args.symbols, settings.symbols)
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    if args.days is not None:
        overrides["prediction_days"] = args.days
    if args.seed is not None:
        overrides["random_seed"] = args.seed
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.exchange_suffix is not None:
        overrides["exchange_suffix"] = args.exchange_suffix
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.no_report:
        overrides["write_report"] = False
    return settings.with_overrides(**overrides)


def main() -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args()
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
