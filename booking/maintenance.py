"""Maintenance windows appended after every rental for turnaround."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Union

from .calculations import at_time, day_bounds
from .config import settings
from .interval import Interval


@dataclass(frozen=True)
class MaintenanceWindow:
    """Exclusion period [start, end) after a rental ends."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def overlaps_day(self, day: date) -> bool:
        day_start, day_end = day_bounds(day)
        return self.start < day_end and self.end > day_start


def window_for(
    interval: Interval, buffer_hours: int = settings.rules.maintenance_buffer_hours
) -> MaintenanceWindow:
    """Window starting at the interval's end and lasting buffer_hours."""
    return MaintenanceWindow(
        start=interval.end, end=interval.end + timedelta(hours=buffer_hours)
    )


def build_windows(
    intervals: Iterable[Interval],
    buffer_hours: int = settings.rules.maintenance_buffer_hours,
) -> List[MaintenanceWindow]:
    """One maintenance window per interval."""
    return [window_for(interval, buffer_hours) for interval in intervals]


def is_within_maintenance(
    moment: Union[date, datetime],
    windows: Iterable[MaintenanceWindow],
    at: Optional[str] = None,
) -> bool:
    """
    Check a moment against maintenance windows.

    - datetime, or date plus an explicit `at` time: exact comparison,
      used when offering hour slots.
    - bare date: the whole calendar day is blocked if any window
      touches it, used for day cells.
    """
    if isinstance(moment, datetime):
        return any(w.contains(moment) for w in windows)
    if at is not None:
        exact = at_time(moment, at)
        return any(w.contains(exact) for w in windows)
    return any(w.overlaps_day(moment) for w in windows)
