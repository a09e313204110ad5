"""Interval model: reservation records normalized to datetime ranges."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, List

from .calculations import at_time, parse_day, parse_time
from .config import settings
from .errors import MalformedDateError
from .reservation import Reservation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    """A reservation's blocked range, inclusive at day granularity."""

    start: datetime
    end: datetime

    @property
    def start_day(self) -> date:
        return self.start.date()

    @property
    def end_day(self) -> date:
        return self.end.date()

    def covers(self, day: date) -> bool:
        """True if the calendar day falls within the interval."""
        return self.start_day <= day <= self.end_day


def to_interval(reservation: Reservation, default_end_time: time) -> Interval:
    """
    Normalize one reservation.

    Dates become midnight-anchored datetimes, then the explicit time of
    day is applied. A missing end time falls back to default_end_time.
    """
    start_day = parse_day(reservation.start_date)
    end_day = parse_day(reservation.end_date)
    if end_day < start_day:
        raise MalformedDateError(
            f"End {reservation.end_date!r} is before start {reservation.start_date!r}"
        )
    start = at_time(start_day, reservation.start_time)
    end = at_time(end_day, reservation.end_time, default=default_end_time)
    return Interval(start=start, end=end)


def build_intervals(
    reservations: Iterable[Reservation],
    vehicle_id: str,
    default_end_time: str = settings.rules.default_return_time,
) -> List[Interval]:
    """
    Build the sorted interval list for one vehicle.

    Reservations for other vehicles are skipped. Malformed records are
    logged and dropped, never raised.
    """
    end_time = parse_time(default_end_time)
    intervals = []
    for reservation in reservations:
        if reservation.vehicle_id != vehicle_id:
            continue
        try:
            intervals.append(to_interval(reservation, end_time))
        except MalformedDateError as e:
            logger.warning("Dropping malformed reservation %r: %s", reservation, e)
    return sorted(intervals, key=lambda i: (i.start, i.end))
