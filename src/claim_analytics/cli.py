"""
Command-line report for the Claim Analytics Engine.

Usage:
    claim-analytics claims.xlsx
    claim-analytics claims.csv --json --date-from 2024-01-01 --filter Region=North
    claim-analytics claims.csv --trend claim --config settings.json

Exit Codes:
    0   OK
    1   INPUT_INVALID - File missing, unreadable, empty or bad arguments
"""

import argparse
import logging
from datetime import date
from pathlib import Path

from . import __version__
from .config import AnalyticsSettings
from .core.exceptions import ClaimAnalyticsError
from .core.models import FilterSpec, TrendMetric
from .engine import ClaimAnalyticsEngine
from .reporting.summary import SummaryFormatter
from .utils.file_loader import load_rows

APP_NAME = "claim-analytics"

logger = logging.getLogger(__name__)


def parse_filters(values: list[str]) -> dict[str, frozenset[str]]:
    """Turn repeated ``DIMENSION=VALUE`` arguments into allowed-value sets."""
    selected: dict[str, set[str]] = {}
    for item in values:
        dimension, sep, value = item.partition("=")
        if not sep or not dimension.strip():
            raise argparse.ArgumentTypeError(f"Expected DIMENSION=VALUE, got {item!r}")
        selected.setdefault(dimension.strip(), set()).add(value.strip())
    return {dimension: frozenset(found) for dimension, found in selected.items()}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """CLI argument parsing."""
    p = argparse.ArgumentParser(prog=APP_NAME, description="Summarize a claims file.")
    p.add_argument("input", help="Path to a CSV or Excel claims file.")
    p.add_argument("--config", default="", help="Optional: path to settings JSON.")
    p.add_argument("--json", action="store_true", help="Print JSON instead of text.")
    p.add_argument("--date-from", type=date.fromisoformat, default=None, help="YYYY-MM-DD")
    p.add_argument("--date-to", type=date.fromisoformat, default=None, help="YYYY-MM-DD")
    p.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="DIMENSION=VALUE",
        help="Restrict a dimension to a value; repeat to allow several.",
    )
    p.add_argument(
        "--trend",
        choices=[metric.value for metric in TrendMetric],
        default=None,
        help="Include month-over-month trends for this metric (JSON output).",
    )
    p.add_argument("--log-level", default="WARNING", help="DEBUG, INFO, WARNING, ERROR")
    return p.parse_args(argv)


def configure_logging(level: str) -> None:
    """Configure console logging."""
    lvl = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=lvl, format="%(levelname)s %(name)s %(message)s")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    configure_logging(args.log_level)
    logger.info("%s v%s", APP_NAME, __version__)

    try:
        settings = (
            AnalyticsSettings.from_json_file(args.config)
            if args.config
            else AnalyticsSettings()
        )
        spec = FilterSpec(
            date_from=args.date_from,
            date_to=args.date_to,
            categories=parse_filters(args.filter),
        )
        engine = ClaimAnalyticsEngine(settings)
        engine.load(load_rows(Path(args.input)))
        view = engine.apply_filters(spec)
    except (ClaimAnalyticsError, argparse.ArgumentTypeError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1

    trends = engine.trends(args.trend) if args.trend else None
    formatter = SummaryFormatter(view.kpis, view.pivots, trends, settings.digit_grouping)
    print(formatter.to_json() if args.json else formatter.to_text())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
