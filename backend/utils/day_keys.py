"""Calendar-day bucketing in a fixed reference timezone.

Charts group snapshots by the local calendar day they were taken on,
not by the UTC date of the stored timestamp.
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo


def local_date(ts: datetime, tz: ZoneInfo) -> date:
    """Return the calendar date of ``ts`` in ``tz``.

    Naive timestamps are treated as UTC (SQLite returns them naive).
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(tz).date()


def day_key(ts: datetime, tz: ZoneInfo) -> str:
    """Format ``ts`` as ``YYYY-MM-DD`` in ``tz``."""
    return local_date(ts, tz).isoformat()


def start_of_local_day_utc(day: date, tz: ZoneInfo) -> datetime:
    """Return the UTC instant at which ``day`` begins in ``tz``."""
    return datetime(day.year, day.month, day.day, tzinfo=tz).astimezone(timezone.utc)


def build_day_keys(today: date, window_days: int) -> list[str]:
    """Day keys from ``today - window_days`` through ``today`` inclusive.

    Works on calendar dates rather than adding 24h to instants, so DST
    transitions and month lengths never skip or repeat a day.
    """
    keys: dict[str, None] = {}
    for offset in range(window_days, -1, -1):
        keys[(today - timedelta(days=offset)).isoformat()] = None
    return list(keys)
