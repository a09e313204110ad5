"""Reservation class for booking records read from the snapshot."""
from typing import Optional

from .block_reason import ReservationKind


class Reservation:
    """A booking of one vehicle, as stored by the persistence layer."""

    def __init__(
            self,
            vehicle_id: str,
            start_date: str,
            end_date: str,
            start_time: Optional[str] = None,
            end_time: Optional[str] = None,
            kind: ReservationKind = ReservationKind.CONFIRMED,
    ):
        self.vehicle_id = vehicle_id
        self.start_date = start_date
        self.end_date = end_date
        self.start_time = start_time
        self.end_time = end_time
        self.kind = kind

    @property
    def label(self) -> str:
        """Human-readable date range."""
        return f"{self.start_date} -> {self.end_date}"

    def __repr__(self) -> str:
        return (
            f"Reservation({self.vehicle_id!r}, {self.start_date!r}, "
            f"{self.end_date!r}, kind={self.kind.value})"
        )
