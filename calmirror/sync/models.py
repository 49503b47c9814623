"""Data model for calendar mirroring."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from enum import Enum
from typing import Any, Iterable, Optional


class AttendeeStatus(Enum):
    """The running user's response to an event."""

    OWNER = "owner"
    YES = "yes"
    MAYBE = "maybe"
    NO = "no"
    DECLINED = "declined"
    INVITED = "invited"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "AttendeeStatus":
        """Normalize a raw status string; absent or unrecognized values map to UNKNOWN."""
        normalized = str(raw or "").strip().lower()
        return _ATTENDEE_ALIASES.get(normalized, cls.UNKNOWN)


_ATTENDEE_ALIASES = {
    "owner": AttendeeStatus.OWNER,
    "yes": AttendeeStatus.YES,
    "accepted": AttendeeStatus.YES,
    "maybe": AttendeeStatus.MAYBE,
    "tentative": AttendeeStatus.MAYBE,
    "no": AttendeeStatus.NO,
    "declined": AttendeeStatus.DECLINED,
    "invited": AttendeeStatus.INVITED,
    "needsaction": AttendeeStatus.INVITED,
}


class OverallStatus(Enum):
    """Status of the event itself, independent of any attendee."""

    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CANCELED = "canceled"
    UNKNOWN = "unknown"

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "OverallStatus":
        normalized = str(raw or "").strip().lower()
        if normalized == "cancelled":
            # Google Calendar spelling
            return cls.CANCELED
        for status in cls:
            if status.value == normalized:
                return status
        return cls.UNKNOWN


@dataclass(frozen=True)
class SyncWindow:
    """Closed time range used for both cleanup and fetch queries."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Window end {self.end} is before start {self.start}")


@dataclass(frozen=True)
class EventRecord:
    """
    Read-only view of a source or destination event.

    overall_status is None when the calendar could not report an overall
    status for the event; the cancellation check is skipped in that case.
    """

    title: str
    start: datetime
    end: datetime
    description: str = ""
    is_all_day: bool = False
    attendee_status: AttendeeStatus = AttendeeStatus.UNKNOWN
    overall_status: Optional[OverallStatus] = None
    event_id: str = ""
    raw: Optional[dict] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ExclusionConfig:
    """Lowercase keyword substrings checked against all-day event titles."""

    keywords: tuple[str, ...] = ()

    @classmethod
    def from_keywords(cls, keywords: Iterable[str]) -> "ExclusionConfig":
        normalized = tuple(
            k.strip().lower() for k in keywords if k and k.strip()
        )
        return cls(keywords=normalized)


@dataclass(frozen=True)
class RunContext:
    """Values resolved once per run and passed explicitly to the reconciler."""

    user_email: str = ""
    timezone: Optional[tzinfo] = None
    dry_run: bool = False


@dataclass(frozen=True)
class CalendarHandle:
    """A resolved calendar."""

    calendar_id: str
    name: str = ""


class OperationAction(str, Enum):
    DELETE = "delete"
    CREATE = "create"


@dataclass(frozen=True)
class OperationOutcome:
    """Result of a single-event delete or create."""

    action: OperationAction
    title: str
    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls, action: OperationAction, title: str) -> "OperationOutcome":
        return cls(action=action, title=title, ok=True)

    @classmethod
    def failure(cls, action: OperationAction, title: str, error: Any) -> "OperationOutcome":
        return cls(action=action, title=title, ok=False, error=str(error))


@dataclass
class ReconcileResult:
    """Aggregated outcome of one reconciliation run."""

    outcomes: list[OperationOutcome] = field(default_factory=list)
    source_count: int = 0
    excluded: int = 0
    dry_run: bool = False
    planned_actions: list[str] = field(default_factory=list)

    def _successes(self, action: OperationAction) -> int:
        return sum(1 for o in self.outcomes if o.action == action and o.ok)

    @property
    def created(self) -> int:
        return self._successes(OperationAction.CREATE)

    @property
    def deleted(self) -> int:
        return self._successes(OperationAction.DELETE)

    @property
    def failures(self) -> list[OperationOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def to_dict(self) -> dict:
        return {
            "created": self.created,
            "deleted": self.deleted,
            "excluded": self.excluded,
            "source_count": self.source_count,
            "errors": [f"{o.action.value}:{o.title}:{o.error}" for o in self.failures],
            "dry_run": self.dry_run,
            "planned_actions": self.planned_actions if self.dry_run else None,
        }
