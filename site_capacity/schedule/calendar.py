"""
Calendar-day arithmetic for schedule dates.

Schedule dates are plain calendar days. Arithmetic is done on proleptic
Gregorian ordinals so differences and offsets never involve time zones.
"""

from datetime import date, datetime, timedelta
from typing import Iterator, Union

DayLike = Union[date, datetime, str]


def parse_day(value: DayLike) -> date:
    """
    Convert an ISO date string, datetime or date to a date.

    Time components (``2026-03-01T08:00:00``) are dropped.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if 'T' in text:
            text = text.split('T', 1)[0]
        try:
            return date.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid calendar date: {value!r}") from None
    raise TypeError(f"Expected date or ISO string, got {type(value).__name__}")


def format_day(day: date) -> str:
    """Render a date as an ISO string (YYYY-MM-DD)."""
    return day.isoformat()


def from_ordinal(ordinal: int) -> date:
    return date.fromordinal(ordinal)


def days_between(start: date, finish: date) -> int:
    """Whole calendar days from start to finish (negative if finish is earlier)."""
    return finish.toordinal() - start.toordinal()


def add_days(day: date, days: int) -> date:
    if days == 0:
        return day
    return day + timedelta(days=days)


def iter_days(start: date, finish: date) -> Iterator[date]:
    """Yield every calendar day in [start, finish] inclusive."""
    for ordinal in range(start.toordinal(), finish.toordinal() + 1):
        yield date.fromordinal(ordinal)
