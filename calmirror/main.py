"""Command-line entry point."""

import argparse
import logging
import sys
from typing import Optional, Sequence

from calmirror.config import get_settings

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "info") -> None:
    """Configure root logging to stdout."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # googleapiclient logs every discovery fetch at INFO
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="calendar-mirror",
        description="Mirror events from one Google calendar into another",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["sync", "authorize"],
        default="sync",
        help="sync (default) runs one mirroring pass; authorize stores an OAuth token",
    )
    parser.add_argument("--dry-run", action="store_true", help="Show actions without modifying calendars")
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Keep running and sync every SCHEDULE_INTERVAL_MINUTES",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)
    if args.dry_run:
        settings.dry_run = True

    if args.command == "authorize":
        from calmirror.auth.google import CredentialsError, authorize

        try:
            authorize(settings)
        except CredentialsError as e:
            logger.error(str(e))
            return 1
        return 0

    if args.schedule:
        from calmirror.jobs.scheduler import run_scheduler

        run_scheduler()
        return 0

    from calmirror.jobs.sync_job import run_sync

    try:
        run_sync(settings)
    except Exception as e:
        logger.critical(f"Sync aborted: {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
