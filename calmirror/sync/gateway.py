"""Calendar gateway interface used by the reconciler."""

from datetime import date, datetime
from typing import Optional, Protocol

from calmirror.sync.models import CalendarHandle, EventRecord


class CalendarNotFoundError(LookupError):
    """A configured calendar could not be resolved."""

    def __init__(self, calendar_id: str, role: str = "calendar"):
        self.calendar_id = calendar_id
        self.role = role
        super().__init__(f"{role.capitalize()} calendar not found: {calendar_id}")


class CalendarGateway(Protocol):
    """Operations the reconciler needs from a calendar store."""

    def resolve_calendar(self, calendar_id: str) -> Optional[CalendarHandle]:
        ...

    def list_events(
        self, handle: CalendarHandle, start: datetime, end: datetime, user_email: str = ""
    ) -> list[EventRecord]:
        ...

    def create_event(
        self,
        handle: CalendarHandle,
        title: str,
        start: datetime,
        end: datetime,
        description: str = "",
    ) -> dict:
        ...

    def create_all_day_event(
        self,
        handle: CalendarHandle,
        title: str,
        start_date: date,
        end_date: date,
        description: str = "",
    ) -> dict:
        ...

    def delete_event(self, handle: CalendarHandle, event: EventRecord) -> bool:
        ...

    def get_current_user_email(self) -> str:
        ...
