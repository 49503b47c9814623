"""Clear-and-recreate reconciliation between a source and destination calendar."""

import logging

from calmirror.sync.gateway import CalendarGateway
from calmirror.sync.models import (
    CalendarHandle,
    EventRecord,
    ExclusionConfig,
    OperationAction,
    OperationOutcome,
    ReconcileResult,
    RunContext,
    SyncWindow,
)
from calmirror.sync.policy import ExclusionReason, exclusion_reason, matched_keyword

logger = logging.getLogger(__name__)


def has_marker(title: str | None, marker: str) -> bool:
    """Check whether an event title carries the sync marker."""
    if not title or not marker:
        return False
    return marker in title


def mirrored_title(title: str, marker: str) -> str:
    return f"{title} {marker}"


def reconcile(
    source_cal: CalendarHandle,
    dest_cal: CalendarHandle,
    window: SyncWindow,
    policy: ExclusionConfig,
    marker: str,
    *,
    gateway: CalendarGateway,
    context: RunContext | None = None,
) -> ReconcileResult:
    """
    Mirror eligible source events into the destination calendar.

    Runs two sequential passes over the window:
    1. Delete every destination event whose title contains the marker.
    2. Re-create one destination event per eligible source event.

    Per-event failures are recorded as outcomes and never abort a pass.
    Listing failures propagate.
    """
    if not marker:
        raise ValueError("Sync marker must not be empty")

    context = context or RunContext()
    result = ReconcileResult(dry_run=context.dry_run)

    logger.info("Step 1: Deleting previously synced events from destination calendar within the range...")
    _cleanup_pass(dest_cal, window, marker, gateway, context, result)
    logger.info(f"Deleted {result.deleted} previously synced events from destination calendar.")

    logger.info("Step 2: Creating/Re-creating events in destination calendar...")
    _creation_pass(source_cal, dest_cal, window, policy, marker, gateway, context, result)

    for failure in result.failures:
        logger.warning(f"Failed to {failure.action.value} '{failure.title}': {failure.error}")

    return result


def _cleanup_pass(
    dest_cal: CalendarHandle,
    window: SyncWindow,
    marker: str,
    gateway: CalendarGateway,
    context: RunContext,
    result: ReconcileResult,
) -> None:
    existing = gateway.list_events(dest_cal, window.start, window.end, context.user_email)
    logger.info(f"Found {len(existing)} events in destination calendar within the range")

    for event in existing:
        if not has_marker(event.title, marker):
            continue

        if context.dry_run:
            result.planned_actions.append(f"delete:{event.title}:{event.start.isoformat()}")
            logger.info(f"  [dry-run] Would delete '{event.title}'")
            continue

        try:
            gateway.delete_event(dest_cal, event)
            result.outcomes.append(OperationOutcome.success(OperationAction.DELETE, event.title))
            logger.info(f"  DELETED EVENT: '{event.title}'")
        except Exception as e:
            logger.error(f"  ERROR deleting old synced event '{event.title}': {e}")
            result.outcomes.append(OperationOutcome.failure(OperationAction.DELETE, event.title, e))


def _creation_pass(
    source_cal: CalendarHandle,
    dest_cal: CalendarHandle,
    window: SyncWindow,
    policy: ExclusionConfig,
    marker: str,
    gateway: CalendarGateway,
    context: RunContext,
    result: ReconcileResult,
) -> None:
    source_events = gateway.list_events(source_cal, window.start, window.end, context.user_email)
    result.source_count = len(source_events)
    logger.info(f"Processing {len(source_events)} raw events from source calendar within the date range.")

    for event in source_events:
        logger.debug(
            f"  Source event: '{event.title}' (id={event.event_id}, all_day={event.is_all_day}, "
            f"start={event.start.isoformat()}, my_status={event.attendee_status.value}, "
            f"overall_status={event.overall_status.value if event.overall_status else 'n/a'})"
        )

        reason = exclusion_reason(event, policy)
        if reason is not None:
            result.excluded += 1
            _log_exclusion(event, reason, policy)
            continue

        outcome = _create_mirror(event, dest_cal, marker, gateway, context, result)
        if outcome is not None:
            result.outcomes.append(outcome)


def _log_exclusion(event: EventRecord, reason: ExclusionReason, policy: ExclusionConfig) -> None:
    if reason == ExclusionReason.KEYWORD_MATCH:
        keyword = matched_keyword(event, policy)
        logger.info(f"  Event '{event.title}' EXCLUDED: {reason.value} ({keyword!r})")
    else:
        logger.info(f"  Event '{event.title}' EXCLUDED: {reason.value}")


def _create_mirror(
    event: EventRecord,
    dest_cal: CalendarHandle,
    marker: str,
    gateway: CalendarGateway,
    context: RunContext,
    result: ReconcileResult,
) -> OperationOutcome | None:
    """Create one mirrored copy, returning its outcome (None in dry-run)."""
    title = mirrored_title(event.title, marker)

    if context.dry_run:
        result.planned_actions.append(f"create:{title}:{event.start.isoformat()}")
        logger.info(f"  [dry-run] Would create '{title}'")
        return None

    try:
        if event.is_all_day:
            gateway.create_all_day_event(
                dest_cal,
                title,
                event.start.date(),
                event.end.date(),
                description=event.description,
            )
        else:
            gateway.create_event(
                dest_cal,
                title,
                event.start,
                event.end,
                description=event.description,
            )
    except Exception as e:
        logger.error(f"  ERROR creating event '{event.title}': {e}")
        return OperationOutcome.failure(OperationAction.CREATE, event.title, e)

    logger.info(f"  CREATED EVENT: '{title}'")
    return OperationOutcome.success(OperationAction.CREATE, title)
