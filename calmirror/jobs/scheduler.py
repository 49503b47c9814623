"""APScheduler setup for running the sync in the foreground."""

import logging
from datetime import datetime

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from calmirror.config import get_settings, get_timezone

logger = logging.getLogger(__name__)

_scheduler: BlockingScheduler | None = None


def setup_scheduler() -> BlockingScheduler:
    """Set up the scheduler with the periodic sync job (not started)."""
    global _scheduler

    settings = get_settings()
    tz = get_timezone(settings)

    _scheduler = BlockingScheduler(timezone=tz)

    # Runs never overlap: a run still in progress causes the next one to be skipped
    _scheduler.add_job(
        "calmirror.jobs.sync_job:run_scheduled_sync",
        trigger=IntervalTrigger(minutes=settings.schedule_interval_minutes, timezone=tz),
        id="periodic_sync",
        name="Periodic Calendar Mirror",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now(tz),
    )

    return _scheduler


def run_scheduler() -> None:
    """Run the periodic sync until interrupted."""
    scheduler = setup_scheduler()
    logger.info(
        f"Background scheduler started, syncing every "
        f"{get_settings().schedule_interval_minutes} minutes"
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Background scheduler stopped")
    finally:
        shutdown_scheduler()


def shutdown_scheduler() -> None:
    """Shutdown the scheduler."""
    global _scheduler

    if _scheduler:
        if _scheduler.running:
            _scheduler.shutdown(wait=False)
        _scheduler = None


def get_scheduler() -> BlockingScheduler | None:
    """Get the current scheduler instance."""
    return _scheduler
