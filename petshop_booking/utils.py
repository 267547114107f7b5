"""Calendar helpers shared across the booking engine."""

from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def is_same_day(first: DateLike, second: DateLike) -> bool:
    """Calendar-day equality; no timezone conversion is applied.

    Examples:
        >>> is_same_day(datetime(2025, 3, 18, 9), date(2025, 3, 18))
        True
        >>> is_same_day(datetime(2025, 3, 18, 23), datetime(2025, 3, 19, 0))
        False
    """
    return _as_date(first) == _as_date(second)


def is_weekend(value: DateLike) -> bool:
    """Saturday or Sunday."""
    return _as_date(value).weekday() >= 5


def is_past_date(value: DateLike, today: Optional[date] = None) -> bool:
    """True for any day strictly before ``today`` (defaults to the local date)."""
    today = today or date.today()
    return _as_date(value) < today


def is_bookable_date(value: DateLike, today: Optional[date] = None) -> bool:
    """The shop takes bookings on weekdays from today onwards."""
    return not is_weekend(value) and not is_past_date(value, today)
