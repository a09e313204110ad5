"""AvailabilityContext: one vehicle's reservation snapshot at an instant."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from .config import settings
from .future_booking import earliest_future_start, next_available_after
from .interval import Interval, build_intervals
from .maintenance import MaintenanceWindow, build_windows
from .reservation import Reservation


@dataclass(frozen=True)
class AvailabilityContext:
    """
    Everything the evaluator needs besides the day and the selection.

    `now` is the evaluation instant; nothing in the engine reads the
    wall clock. `complete` is False when the snapshot fetch failed and
    the fail-closed policy is active.
    """

    vehicle_id: str
    intervals: Tuple[Interval, ...]
    windows: Tuple[MaintenanceWindow, ...]
    now: datetime
    next_available: Optional[datetime] = None
    min_stay_days: int = settings.rules.min_rental_days
    pickup_lead_hours: int = settings.rules.pickup_lead_hours
    complete: bool = True

    @property
    def today(self) -> date:
        return self.now.date()

    @property
    def future_start(self) -> Optional[date]:
        return earliest_future_start(self.intervals, self.today)

    @classmethod
    def from_reservations(
        cls,
        vehicle_id: str,
        reservations: Iterable[Reservation],
        now: datetime,
        next_available: Optional[datetime] = None,
        complete: bool = True,
        rules=settings.rules,
    ) -> "AvailabilityContext":
        """
        Build the context for one vehicle.

        The "free again" marker is derived from the reservations unless
        the caller already knows it.
        """
        intervals = tuple(
            build_intervals(reservations, vehicle_id, rules.default_return_time)
        )
        windows = tuple(build_windows(intervals, rules.maintenance_buffer_hours))
        if next_available is None:
            next_available = next_available_after(
                intervals, now, rules.maintenance_buffer_hours
            )
        return cls(
            vehicle_id=vehicle_id,
            intervals=intervals,
            windows=windows,
            now=now,
            next_available=next_available,
            min_stay_days=rules.min_rental_days,
            pickup_lead_hours=rules.pickup_lead_hours,
            complete=complete,
        )
