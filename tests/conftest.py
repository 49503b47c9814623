"""Pytest configuration and fixtures."""

import os
import uuid
from dataclasses import replace
from datetime import date, datetime, time, timezone
from typing import Optional

import pytest

# Set test environment variables before imports
os.environ["SOURCE_CALENDAR_ID"] = "source@example.com"
os.environ["DESTINATION_CALENDAR_ID"] = "mirror@group.calendar.google.com"
os.environ["GOOGLE_TOKEN_FILE"] = "/tmp/calmirror-test-token.json"
os.environ["TIMEZONE"] = "UTC"

from calmirror.sync.models import (  # noqa: E402
    AttendeeStatus,
    CalendarHandle,
    EventRecord,
    OverallStatus,
)


class FakeGateway:
    """In-memory calendar store implementing the gateway interface."""

    def __init__(self, user_email: str = "me@example.com"):
        self.user_email = user_email
        self.calendars: dict[str, list[EventRecord]] = {}
        self.calls: list[tuple] = []
        self.fail_create_titles: set[str] = set()
        self.fail_delete_titles: set[str] = set()
        self.fail_list_calendars: set[str] = set()

    def add_calendar(self, calendar_id: str) -> CalendarHandle:
        self.calendars.setdefault(calendar_id, [])
        return CalendarHandle(calendar_id=calendar_id, name=calendar_id)

    def add_event(self, calendar_id: str, event: EventRecord) -> EventRecord:
        if not event.event_id:
            event = replace(event, event_id=uuid.uuid4().hex)
        self.calendars.setdefault(calendar_id, []).append(event)
        return event

    def events(self, calendar_id: str) -> list[EventRecord]:
        return list(self.calendars.get(calendar_id, []))

    def titles(self, calendar_id: str) -> list[str]:
        return sorted(e.title for e in self.calendars.get(calendar_id, []))

    # Gateway interface

    def resolve_calendar(self, calendar_id: str) -> Optional[CalendarHandle]:
        self.calls.append(("resolve", calendar_id))
        if calendar_id not in self.calendars:
            return None
        return CalendarHandle(calendar_id=calendar_id, name=f"Calendar {calendar_id}")

    def list_events(self, handle, start, end, user_email=""):
        self.calls.append(("list", handle.calendar_id))
        if handle.calendar_id in self.fail_list_calendars:
            raise RuntimeError(f"listing {handle.calendar_id} failed")
        return [
            e for e in self.calendars.get(handle.calendar_id, [])
            if e.start <= end and e.end >= start
        ]

    def create_event(self, handle, title, start, end, description=""):
        self.calls.append(("create", title))
        if title in self.fail_create_titles:
            raise RuntimeError("quota exceeded")
        event = self.add_event(
            handle.calendar_id,
            EventRecord(title=title, start=start, end=end, description=description),
        )
        return {"id": event.event_id}

    def create_all_day_event(self, handle, title, start_date, end_date, description=""):
        self.calls.append(("create_all_day", title))
        if title in self.fail_create_titles:
            raise RuntimeError("quota exceeded")
        event = self.add_event(
            handle.calendar_id,
            EventRecord(
                title=title,
                start=datetime.combine(start_date, time.min, tzinfo=timezone.utc),
                end=datetime.combine(end_date, time.min, tzinfo=timezone.utc),
                description=description,
                is_all_day=True,
            ),
        )
        return {"id": event.event_id}

    def delete_event(self, handle, event):
        self.calls.append(("delete", event.title))
        if event.title in self.fail_delete_titles:
            raise RuntimeError("backend error")
        self.calendars[handle.calendar_id] = [
            e for e in self.calendars[handle.calendar_id] if e.event_id != event.event_id
        ]
        return True

    def get_current_user_email(self) -> str:
        return self.user_email


def make_event(
    title: str = "Team Sync",
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    description: str = "",
    is_all_day: bool = False,
    attendee_status: AttendeeStatus = AttendeeStatus.YES,
    overall_status: Optional[OverallStatus] = OverallStatus.CONFIRMED,
    day: date = date(2026, 10, 20),
) -> EventRecord:
    """Build an EventRecord with sensible defaults."""
    if is_all_day:
        start = start or datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = end or datetime.combine(date.fromordinal(day.toordinal() + 1), time.min, tzinfo=timezone.utc)
    else:
        start = start or datetime.combine(day, time(10, 0), tzinfo=timezone.utc)
        end = end or datetime.combine(day, time(11, 0), tzinfo=timezone.utc)
    return EventRecord(
        title=title,
        start=start,
        end=end,
        description=description,
        is_all_day=is_all_day,
        attendee_status=attendee_status,
        overall_status=overall_status,
    )


@pytest.fixture
def gateway():
    """Gateway with an empty source and destination calendar."""
    fake = FakeGateway()
    fake.add_calendar("source@example.com")
    fake.add_calendar("mirror@group.calendar.google.com")
    return fake


@pytest.fixture
def source_cal():
    return CalendarHandle(calendar_id="source@example.com", name="Source")


@pytest.fixture
def dest_cal():
    return CalendarHandle(calendar_id="mirror@group.calendar.google.com", name="Mirror")


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; tests that change env need a fresh read."""
    from calmirror.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
