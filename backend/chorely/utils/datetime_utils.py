"""
Datetime utilities.

The database stores naive UTC datetimes. Everything entering the domain layer is
normalised with ``to_naive_utc`` so that comparisons never mix aware and naive values.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

# UTC timezone constant
UTC = timezone.utc


def now_utc() -> datetime:
    """
    Get current UTC datetime as a naive value (the storage convention).

    Replaces datetime.utcnow() which is deprecated in Python 3.12+.
    """
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Convert an aware datetime to naive UTC; naive values are assumed to be UTC already.

    Examples:
        >>> to_naive_utc(datetime(2024, 1, 20, 9, 0, tzinfo=timezone(timedelta(hours=9))))
        datetime.datetime(2024, 1, 20, 0, 0)
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min)


def start_of_week(value: datetime) -> datetime:
    """Monday 00:00 of the week containing ``value``."""
    monday: date = value.date() - timedelta(days=value.weekday())
    return datetime.combine(monday, time.min)
