"""DayState dataclass for an evaluated calendar day."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .block_reason import BlockReason


@dataclass(frozen=True)
class DayState:
    """Availability of one day for one endpoint of a booking."""

    day: Optional[date]
    is_blocked: bool = False
    is_already_reserved: bool = False
    is_in_selected_range: bool = False
    is_pickup_endpoint: bool = False
    is_return_endpoint: bool = False
    violates_min_stay: bool = False
    reason: Optional[BlockReason] = None
    message: Optional[str] = None

    @property
    def is_selectable(self) -> bool:
        return not self.is_blocked and not self.violates_min_stay

    def to_dict(self) -> dict:
        """JSON-friendly representation (camelCase keys for the UI)."""
        return {
            "date": self.day.isoformat() if self.day else None,
            "isBlocked": self.is_blocked,
            "isAlreadyReserved": self.is_already_reserved,
            "isInSelectedRange": self.is_in_selected_range,
            "isPickupEndpoint": self.is_pickup_endpoint,
            "isReturnEndpoint": self.is_return_endpoint,
            "violatesMinStay": self.violates_min_stay,
            "reason": self.reason.name if self.reason else None,
            "message": self.message,
        }
