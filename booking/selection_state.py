"""SelectionState dataclass for the two-sided pickup/return selection."""

from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from .calculations import days_between


@dataclass(frozen=True)
class SelectionState:
    """A booking form's pickup and return choice for one vehicle."""

    vehicle_id: Optional[str] = None
    pickup_date: Optional[date] = None
    pickup_time: Optional[str] = None
    return_date: Optional[date] = None
    return_time: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return None not in (
            self.vehicle_id,
            self.pickup_date,
            self.pickup_time,
            self.return_date,
            self.return_time,
        )

    @property
    def rental_days(self) -> Optional[int]:
        """Whole days between pickup and return, if both are set."""
        if self.pickup_date is None or self.return_date is None:
            return None
        return days_between(self.pickup_date, self.return_date)

    def without_return(self) -> "SelectionState":
        return replace(self, return_date=None, return_time=None)

    def to_dict(self) -> dict:
        return {
            "vehicleId": self.vehicle_id,
            "pickupDate": self.pickup_date.isoformat() if self.pickup_date else None,
            "pickupTime": self.pickup_time,
            "returnDate": self.return_date.isoformat() if self.return_date else None,
            "returnTime": self.return_time,
        }
