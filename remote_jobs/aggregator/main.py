"""
Aggregator Service - Main Entry Point

This is the command-line interface for the aggregator service. It runs the
ingestion once at start-up and then on a fixed interval, or just once.

Usage:
    python -m remote_jobs.aggregator.main [OPTIONS]

Options:
    --once               Run a single ingestion pass and exit
    --interval HOURS     Hours between runs in loop mode (default: 4)
    --config PATH        Sources YAML file (default: config/sources.yml)
    --source NAME        Only run this source (repeatable)
    --dry-run            Keep postings in memory instead of the database
    --verbose            Enable debug logging
    --help               Show this message and exit

Examples:
    # Run every source once against the database in DATABASE_URL:
    python -m remote_jobs.aggregator.main --once

    # Try the RemoteOK source without touching the database:
    python -m remote_jobs.aggregator.main --once --dry-run --source RemoteOK

Exit Codes:
    0: Success
    1: At least one source failed in the last run
    2: Fatal error (configuration, database connection, etc.)
"""

import argparse
import logging
import os
import signal
import sys
from contextlib import nullcontext
from datetime import datetime, timedelta, timezone
from typing import Optional

from dotenv import load_dotenv

from .adapters import build_adapters
from .coordinator import RunCoordinator, RunStats
from .db_storage import InMemoryJobStore, JobStorageError, PostgresJobStore
from .retry import CancellationToken, RetryExecutor
from .source_config import SourceConfig, load_sources_config

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_HOURS = 4.0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description="Aggregate remote job postings into a deduplicated store",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single ingestion pass and exit",
    )

    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        metavar="HOURS",
        help="Hours between runs (overrides SCRAPE_INTERVAL_HOURS env var)",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to the sources YAML file",
    )

    parser.add_argument(
        "--source",
        action="append",
        default=None,
        dest="sources",
        metavar="NAME",
        help="Only run the named source (repeatable)",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        dest="dry_run",
        help="Keep postings in memory instead of writing to the database",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(argv)


def resolve_interval(cli_value: Optional[float]) -> float:
    """Pick the loop interval in hours: CLI flag > env var > default."""
    if cli_value is not None:
        interval = cli_value
    else:
        raw = os.getenv("SCRAPE_INTERVAL_HOURS", str(DEFAULT_INTERVAL_HOURS))
        try:
            interval = float(raw)
        except ValueError:
            raise ValueError(f"SCRAPE_INTERVAL_HOURS must be a positive number, got '{raw}'") from None

    if interval <= 0:
        raise ValueError(f"Interval must be a positive number of hours, got {interval}")
    return interval


def select_sources(sources: list[SourceConfig], names: Optional[list[str]]) -> list[SourceConfig]:
    """Restrict sources to the requested names, keeping configured order."""
    if not names:
        return sources

    wanted = {name.lower() for name in names}
    known = {source.name.lower() for source in sources}
    unknown = wanted - known
    if unknown:
        raise ValueError(f"Unknown source(s): {', '.join(sorted(unknown))}")

    return [source for source in sources if source.name.lower() in wanted]


def install_signal_handlers(token: CancellationToken) -> None:
    """Cancel the token on SIGINT/SIGTERM so waits end promptly."""

    def _handler(signum, frame) -> None:
        logger.info("Shutdown signal received. Finishing current run...")
        token.cancel()

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _handler)


def run_loop(coordinator: RunCoordinator, token: CancellationToken, interval_hours: float) -> RunStats:
    """
    Run at start-up and then every `interval_hours` until cancelled.

    Returns:
        Statistics of the last run
    """
    logger.info(
        "Starting continuous loop (interval: %s h). Press Ctrl+C to stop.",
        interval_hours,
    )

    while True:
        stats = coordinator.run_once()
        if token.cancelled:
            break

        next_run = datetime.now(tz=timezone.utc) + timedelta(hours=interval_hours)
        logger.info("Next run at %s", next_run.strftime("%Y-%m-%d %H:%M:%S UTC"))

        if token.wait(interval_hours * 3600):
            break

    logger.info("Shutting down gracefully.")
    return stats


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the aggregator service.

    Returns:
        Exit code (0 = success, 1 = source failures, 2 = fatal error)
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        sources = select_sources(load_sources_config(args.config), args.sources)
        interval = None if args.once else resolve_interval(args.interval)
        store = InMemoryJobStore() if args.dry_run else PostgresJobStore()
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return 2

    adapters = build_adapters(sources)
    if not adapters:
        logger.error("No enabled sources to run")
        return 2

    token = CancellationToken()
    install_signal_handlers(token)
    executor = RetryExecutor(cancel_token=token)

    try:
        with nullcontext(store) if args.dry_run else store:
            coordinator = RunCoordinator(adapters, store, executor)
            if args.once:
                stats = coordinator.run_once()
            else:
                stats = run_loop(coordinator, token, interval)
    except JobStorageError as e:
        logger.error(f"Fatal database error: {e}")
        return 2

    return 0 if stats.succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
