"""Calendar windows computed in the dashboard's configured timezone.

All returned datetimes are aware UTC, ready to compare against stored
timestamps. Weeks start on Monday.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo

from visitor_dashboard.core.config import settings

END_OF_DAY = time(23, 59, 59, 999000)


def _zone(tz: tzinfo | None) -> tzinfo:
    return tz or settings.tz


def local_today(now: datetime | None = None, tz: tzinfo | None = None) -> date:
    tz = _zone(tz)
    now = now or datetime.now(timezone.utc)
    return now.astimezone(tz).date()


def day_start(day: date, tz: tzinfo | None = None) -> datetime:
    """Local 00:00:00.000 of ``day``, in UTC."""
    return datetime.combine(day, time.min, tzinfo=_zone(tz)).astimezone(timezone.utc)


def day_end(day: date, tz: tzinfo | None = None) -> datetime:
    """Local 23:59:59.999 of ``day``, in UTC."""
    return datetime.combine(day, END_OF_DAY, tzinfo=_zone(tz)).astimezone(timezone.utc)


def week_start(day: date) -> date:
    # weekday(): Monday == 0 ... Sunday == 6
    return day - timedelta(days=day.weekday())


def month_start(day: date) -> date:
    return day.replace(day=1)


def next_month_start(day: date) -> date:
    first = month_start(day)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def stats_windows(now: datetime | None = None, tz: tzinfo | None = None) -> dict[str, tuple[datetime, datetime]]:
    """Half-open ``[start, end)`` windows for the today/week/month counters."""
    today = local_today(now, tz)
    tomorrow = today + timedelta(days=1)
    return {
        "today": (day_start(today, tz), day_start(tomorrow, tz)),
        "week": (day_start(week_start(today), tz), day_start(tomorrow, tz)),
        "month": (day_start(month_start(today), tz), day_start(next_month_start(today), tz)),
    }


def trailing_window_start(days: int, now: datetime | None = None, tz: tzinfo | None = None) -> datetime:
    """Local midnight ``days`` days before today."""
    return day_start(local_today(now, tz) - timedelta(days=days), tz)
