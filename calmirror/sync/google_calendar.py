"""Google Calendar API wrapper."""

import logging
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from calmirror.sync.models import (
    AttendeeStatus,
    CalendarHandle,
    EventRecord,
    OverallStatus,
)

logger = logging.getLogger(__name__)


class GoogleCalendarClient:
    """Wrapper around Google Calendar API."""

    def __init__(self, credentials: Credentials, tz: Optional[tzinfo] = None):
        """Initialize with OAuth credentials."""
        self.credentials = credentials
        self.service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        self.tz = tz or timezone.utc

    # ------------------------------------------------------------------
    # Calendars
    # ------------------------------------------------------------------

    def get_calendar(self, calendar_id: str) -> Optional[dict]:
        """Get calendar metadata."""
        try:
            return self.service.calendars().get(calendarId=calendar_id).execute()
        except HttpError as e:
            if e.resp.status == 404:
                return None
            raise

    def resolve_calendar(self, calendar_id: str) -> Optional[CalendarHandle]:
        """Resolve a calendar id to a handle, or None if it does not exist."""
        if not calendar_id:
            return None
        calendar = self.get_calendar(calendar_id)
        if not calendar:
            return None
        return CalendarHandle(
            calendar_id=calendar.get("id", calendar_id),
            name=calendar.get("summary", calendar_id),
        )

    def get_current_user_email(self) -> str:
        """Email of the authorized account (the id of its primary calendar)."""
        try:
            primary = self.get_calendar("primary")
        except HttpError as e:
            logger.warning(f"Could not determine current user email: {e}")
            return ""
        return (primary or {}).get("id", "").strip().lower()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def list_raw_events(
        self,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
        max_results: int = 2500,
    ) -> list[dict]:
        """
        List event instances overlapping a time range.

        Recurring series are expanded into single instances and cancelled
        instances are not returned.
        """
        request_params = {
            "calendarId": calendar_id,
            "timeMin": time_min.isoformat(),
            "timeMax": time_max.isoformat(),
            "maxResults": max_results,
            "singleEvents": True,
            "showDeleted": False,
        }

        all_events = []
        page_token = None

        while True:
            if page_token:
                request_params["pageToken"] = page_token

            result = self.service.events().list(**request_params).execute()
            all_events.extend(result.get("items", []))

            page_token = result.get("nextPageToken")
            if not page_token:
                break

        return all_events

    def list_events(
        self,
        handle: CalendarHandle,
        start: datetime,
        end: datetime,
        user_email: str = "",
    ) -> list[EventRecord]:
        """List events overlapping [start, end] as read-only records."""
        records = []
        for item in self.list_raw_events(handle.calendar_id, start, end):
            record = self.to_event_record(item, user_email)
            if record is not None:
                records.append(record)
        return records

    def create_event(
        self,
        handle: CalendarHandle,
        title: str,
        start: datetime,
        end: datetime,
        description: str = "",
    ) -> dict:
        """Create a timed event."""
        body = {
            "summary": title,
            "description": description or "",
            "start": self._date_time_field(start),
            "end": self._date_time_field(end),
        }
        return self.insert_event(handle.calendar_id, body)

    def create_all_day_event(
        self,
        handle: CalendarHandle,
        title: str,
        start_date: date,
        end_date: date,
        description: str = "",
    ) -> dict:
        """Create an all-day event. end_date is exclusive, as Google expects."""
        if end_date <= start_date:
            raise ValueError(f"All-day event end {end_date} must be after start {start_date}")
        body = {
            "summary": title,
            "description": description or "",
            "start": {"date": start_date.isoformat()},
            "end": {"date": end_date.isoformat()},
        }
        return self.insert_event(handle.calendar_id, body)

    def insert_event(
        self,
        calendar_id: str,
        event_data: dict,
        send_notifications: bool = False,
    ) -> dict:
        """Insert an event body on a calendar."""
        return self.service.events().insert(
            calendarId=calendar_id,
            body=event_data,
            sendNotifications=send_notifications,
        ).execute()

    def delete_event(self, handle: CalendarHandle, event: EventRecord) -> bool:
        """Delete an event. Already-deleted events count as deleted."""
        if not event.event_id:
            raise ValueError(f"Event '{event.title}' has no id")
        try:
            self.service.events().delete(
                calendarId=handle.calendar_id,
                eventId=event.event_id,
                sendNotifications=False,
            ).execute()
            return True
        except HttpError as e:
            if e.resp.status == 404:
                # Already deleted
                return True
            if e.resp.status == 410:
                # Event was deleted (gone)
                return True
            raise

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def get_my_attendee_status(event: dict, user_email: str = "") -> Optional[str]:
        """
        Raw response status of the authorized user, or None if unknown.

        Events the user organizes report "owner".
        """
        normalized_email = (user_email or "").strip().lower()

        organizer = event.get("organizer", {})
        if organizer.get("self"):
            return "owner"
        if normalized_email and organizer.get("email", "").lower() == normalized_email:
            return "owner"

        for attendee in event.get("attendees", []):
            if attendee.get("self"):
                return attendee.get("responseStatus")
            if normalized_email and attendee.get("email", "").lower() == normalized_email:
                return attendee.get("responseStatus")

        return None

    @staticmethod
    def get_overall_status(event: dict) -> Optional[str]:
        """Raw event status, or None when the event carries none."""
        return event.get("status")

    def to_event_record(self, event: dict, user_email: str = "") -> Optional[EventRecord]:
        """Convert an API event into an EventRecord; None if it has no usable times."""
        start = event.get("start", {})
        end = event.get("end", {})
        is_all_day = "date" in start

        try:
            if is_all_day:
                start_dt = self._parse_date(start["date"])
                end_dt = self._parse_date(end.get("date", start["date"]))
            else:
                start_dt = self._parse_date_time(start["dateTime"])
                end_dt = self._parse_date_time(end.get("dateTime", start["dateTime"]))
        except (KeyError, ValueError) as e:
            logger.warning(f"Skipping event {event.get('id')} with unreadable times: {e}")
            return None

        overall_raw = self.get_overall_status(event)

        return EventRecord(
            event_id=event.get("id", ""),
            title=event.get("summary", ""),
            description=event.get("description", ""),
            start=start_dt,
            end=end_dt,
            is_all_day=is_all_day,
            attendee_status=AttendeeStatus.from_raw(self.get_my_attendee_status(event, user_email)),
            overall_status=OverallStatus.from_raw(overall_raw) if overall_raw is not None else None,
            raw=event,
        )

    def _parse_date(self, value: str) -> datetime:
        return datetime.combine(date.fromisoformat(value), time.min, tzinfo=self.tz)

    def _parse_date_time(self, value: str) -> datetime:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=self.tz)
        return parsed.astimezone(self.tz)

    def _date_time_field(self, value: datetime) -> dict:
        if value.tzinfo is None:
            value = value.replace(tzinfo=self.tz)
        field = {"dateTime": value.isoformat()}
        tz_name = getattr(value.tzinfo, "key", None)
        if tz_name:
            field["timeZone"] = tz_name
        return field
