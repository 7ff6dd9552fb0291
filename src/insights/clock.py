"""Day arithmetic shared by the time-based insight components.

``now`` is captured once per engine run and passed down, so every component
in a run measures against the same instant.
"""

from __future__ import annotations

from datetime import date, datetime, timezone


def as_utc(value: datetime) -> datetime:
    """Return an aware datetime; naive values are assumed to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole days elapsed from ``start`` to ``end``.

    Two datetimes are compared by elapsed time, counting only complete 24h
    periods (truncated toward zero).  If either side is a plain date, both
    are compared as calendar dates, using ``end``'s own local date.

    Returns a negative number when ``start`` is after ``end``.
    """
    if isinstance(start, datetime) and isinstance(end, datetime):
        elapsed = (as_utc(end) - as_utc(start)).total_seconds()
        return int(elapsed / 86400)
    return (_calendar_date(end) - _calendar_date(start)).days


def _calendar_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value
