"""Calendar cells and hour slots offered by the booking calendars."""

import calendar
from datetime import date, time, timedelta
from typing import List, Optional

from .calculations import DayLike, format_hour, month_start, parse_day
from .context import AvailabilityContext
from .maintenance import is_within_maintenance

GRID_CELLS = 42  # 6 weeks


def month_days(month: date) -> List[date]:
    """All dates of the month containing `month`."""
    first = month_start(month)
    _, count = calendar.monthrange(first.year, first.month)
    return [first + timedelta(days=offset) for offset in range(count)]


def calendar_grid(month: date) -> List[Optional[date]]:
    """
    Six-week grid for a month view, weeks starting on Sunday.

    Cells outside the month are None.
    """
    first = month_start(month)
    # date.weekday(): Monday=0; shift so Sunday=0
    lead = (first.weekday() + 1) % 7
    cursor = first - timedelta(days=lead)
    cells: List[Optional[date]] = []
    for _ in range(GRID_CELLS):
        cells.append(cursor if cursor.month == first.month else None)
        cursor += timedelta(days=1)
    return cells


def generate_hours(min_hour: Optional[int] = None) -> List[str]:
    """Hour slots from min_hour (default midnight) through 23:00."""
    start = min_hour if min_hour is not None else 0
    return [format_hour(h) for h in range(start, 24)]


def pickup_min_hour(pickup: date, context: AvailabilityContext) -> Optional[int]:
    """
    Earliest pickup hour for a day, if restricted.

    - Today: at least lead hours from now, rounded up to the next full
      hour. Returns 24 (no slots) once that passes the end of the day.
    - The day the vehicle becomes free again: from the free moment,
      rounded up to the next full hour.
    """
    if pickup == context.today:
        earliest = context.now + timedelta(hours=context.pickup_lead_hours)
        if earliest.date() > pickup:
            return 24
        if earliest.time() > time(earliest.hour):
            return earliest.hour + 1
        return earliest.hour
    marker = context.next_available
    if marker is not None and pickup == marker.date():
        return marker.hour + 1 if marker.minute > 0 else marker.hour
    return None


def pickup_hours(pickup: DayLike, context: AvailabilityContext) -> List[str]:
    """Pickup hours for a day, minus slots inside a maintenance window."""
    day = parse_day(pickup)
    return [
        hour
        for hour in generate_hours(pickup_min_hour(day, context))
        if not is_within_maintenance(day, context.windows, at=hour)
    ]


def return_hours(return_day: DayLike, context: AvailabilityContext) -> List[str]:
    """Return hours for a day, minus slots inside a maintenance window."""
    day = parse_day(return_day)
    return [
        hour
        for hour in generate_hours()
        if not is_within_maintenance(day, context.windows, at=hour)
    ]
