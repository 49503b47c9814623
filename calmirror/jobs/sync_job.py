"""Single mirroring run."""

import logging
import time
from datetime import datetime
from typing import Optional

from calmirror.config import Settings, get_exclusion_config, get_settings, get_timezone
from calmirror.sync.gateway import CalendarGateway, CalendarNotFoundError
from calmirror.sync.models import CalendarHandle, ReconcileResult, RunContext
from calmirror.sync.reconciler import reconcile
from calmirror.sync.window import compute_window

logger = logging.getLogger(__name__)


def build_gateway(settings: Settings) -> CalendarGateway:
    """Create the Google Calendar gateway for the stored OAuth token."""
    from calmirror.auth.google import get_valid_credentials
    from calmirror.sync.google_calendar import GoogleCalendarClient

    credentials = get_valid_credentials(settings)
    return GoogleCalendarClient(credentials, tz=get_timezone(settings))


def _resolve(gateway: CalendarGateway, calendar_id: str, role: str) -> CalendarHandle:
    handle = gateway.resolve_calendar(calendar_id)
    if handle is None:
        logger.critical(f"Error: {role.capitalize()} calendar not found: {calendar_id}")
        raise CalendarNotFoundError(calendar_id, role)
    return handle


def run_sync(
    settings: Optional[Settings] = None,
    gateway: Optional[CalendarGateway] = None,
    now: Optional[datetime] = None,
    dry_run: Optional[bool] = None,
) -> ReconcileResult:
    """
    Run one clear-and-recreate sync from the source to the destination calendar.

    Both calendars are resolved before anything is touched; a missing
    calendar raises CalendarNotFoundError and nothing is deleted or created.
    """
    settings = settings or get_settings()
    tz = get_timezone(settings)
    if dry_run is None:
        dry_run = settings.dry_run

    if not settings.destination_calendar_id:
        logger.critical("Error: DESTINATION_CALENDAR_ID is not configured")
        raise CalendarNotFoundError("", "destination")

    if gateway is None:
        gateway = build_gateway(settings)

    source_cal = _resolve(gateway, settings.source_calendar_id, "source")
    dest_cal = _resolve(gateway, settings.destination_calendar_id, "destination")

    context = RunContext(
        user_email=gateway.get_current_user_email(),
        timezone=tz,
        dry_run=dry_run,
    )

    window = compute_window(settings.past_days, settings.future_days, now or datetime.now(tz))

    started = time.time()
    logger.info(
        f"Starting calendar sync (Clear & Re-create strategy) from '{source_cal.name}' "
        f"to '{dest_cal.name}'{' [dry-run]' if dry_run else ''}."
    )
    logger.info(f"Syncing events from {window.start.isoformat()} to {window.end.isoformat()}")

    result = reconcile(
        source_cal,
        dest_cal,
        window,
        get_exclusion_config(settings),
        settings.sync_marker,
        gateway=gateway,
        context=context,
    )

    duration = time.time() - started
    logger.info(f"Sync complete in {duration:.2f}s!")
    logger.info(
        f"Summary: Created: {result.created} events, "
        f"Deleted Old Synced: {result.deleted} events."
    )
    eligible = result.source_count - result.excluded
    if result.failures or (not dry_run and result.created != eligible):
        logger.warning(
            f"{len(result.failures)} operation(s) failed; "
            f"{eligible} eligible source events, {result.created} created"
        )

    return result


def run_scheduled_sync() -> None:
    """Scheduler entry point: one run whose fatal errors are logged, not raised."""
    try:
        run_sync()
    except Exception as e:
        logger.exception(f"Scheduled sync failed: {e}")
