"""Sync window calculation."""

from datetime import datetime, time, timedelta

from calmirror.sync.models import SyncWindow

END_OF_DAY = time(23, 59, 59, 999000)


def compute_window(past_days: int, future_days: int, now: datetime) -> SyncWindow:
    """
    Derive the absolute window from relative day offsets.

    Bounds are calendar days in now's timezone: start is midnight of
    now - past_days, end is 23:59:59.999 of now + future_days.
    """
    if past_days < 0 or future_days < 0:
        raise ValueError(
            f"Day offsets must be non-negative (past_days={past_days}, future_days={future_days})"
        )

    today = now.date()
    start_day = today - timedelta(days=past_days)
    end_day = today + timedelta(days=future_days)

    return SyncWindow(
        start=datetime.combine(start_day, time.min, tzinfo=now.tzinfo),
        end=datetime.combine(end_day, END_OF_DAY, tzinfo=now.tzinfo),
    )
