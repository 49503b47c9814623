"""Exclusion rules deciding which source events are mirrored."""

from enum import Enum
from typing import Optional

from calmirror.sync.models import AttendeeStatus, EventRecord, ExclusionConfig, OverallStatus

DECLINED_STATUSES = frozenset({AttendeeStatus.NO, AttendeeStatus.DECLINED})


class ExclusionReason(str, Enum):
    ATTENDEE_DECLINED = "attendee status is 'declined' or 'no'"
    EVENT_CANCELED = "overall event status is 'canceled'"
    KEYWORD_MATCH = "all-day event title matches an excluded keyword"


def is_declined(event: EventRecord) -> bool:
    return event.attendee_status in DECLINED_STATUSES


def is_canceled(event: EventRecord) -> bool:
    # No overall status available: check skipped
    if event.overall_status is None:
        return False
    return event.overall_status == OverallStatus.CANCELED


def matched_keyword(event: EventRecord, config: ExclusionConfig) -> Optional[str]:
    """
    Return the first configured keyword found in an all-day event's title.

    Matching is a case-insensitive substring test, so "home" also matches
    "Homeopathy". Timed events never match.
    """
    if not event.is_all_day or not event.title:
        return None

    lower_title = event.title.lower()
    for keyword in config.keywords:
        if keyword in lower_title:
            return keyword
    return None


def exclusion_reason(event: EventRecord, config: ExclusionConfig) -> Optional[ExclusionReason]:
    """Return why an event is excluded, or None if it is eligible."""
    if is_declined(event):
        return ExclusionReason.ATTENDEE_DECLINED
    if is_canceled(event):
        return ExclusionReason.EVENT_CANCELED
    if matched_keyword(event, config) is not None:
        return ExclusionReason.KEYWORD_MATCH
    return None


def is_excluded(event: EventRecord, config: ExclusionConfig) -> bool:
    """Determine if a source event must not be mirrored."""
    return exclusion_reason(event, config) is not None
