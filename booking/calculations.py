"""Helper functions for date parsing and day arithmetic."""

from datetime import date, datetime, time, timedelta
from dateutil.relativedelta import relativedelta
from typing import Optional, Union

from .errors import MalformedDateError

DayLike = Union[date, datetime, str]


def parse_day(value: DayLike) -> date:
    """
    Parse a calendar day.

    Accepts date/datetime objects and ISO strings. Anything after a 'T'
    or a space is ignored, so '2024-06-10T00:00:00Z' and
    '2024-06-10 09:00:00' both give 2024-06-10.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise MalformedDateError(f"Not a date: {value!r}")
    day_part = value.strip().split("T")[0].split(" ")[0]
    try:
        return date.fromisoformat(day_part)
    except ValueError:
        raise MalformedDateError(f"Invalid date: {value!r}") from None


def parse_time(value: Union[time, str]) -> time:
    """Parse a time of day given as 'HH:MM' or 'HH:MM:SS'."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise MalformedDateError(f"Not a time: {value!r}")
    try:
        return time.fromisoformat(value.strip())
    except ValueError:
        raise MalformedDateError(f"Invalid time: {value!r}") from None


def at_time(day: date, value: Optional[Union[time, str]], default: time = time.min) -> datetime:
    """Anchor a day at a time of day (midnight unless given)."""
    moment = parse_time(value) if value else default
    return datetime.combine(day, moment)


def day_bounds(day: date) -> tuple:
    """Return the [start, end) datetimes covering a calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def days_between(start: date, end: date) -> int:
    """Whole days from start to end (negative if end is earlier)."""
    return (end - start).days


def month_start(day: date) -> date:
    """First day of the month containing day."""
    return day.replace(day=1)


def add_months(day: date, months: int) -> date:
    """First day of the month `months` after the month containing day."""
    return month_start(day) + relativedelta(months=months)


def format_hour(hour: int) -> str:
    """Format an hour as an 'HH:00' slot label."""
    return f"{hour:02d}:00"
