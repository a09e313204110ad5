"""
Vehicle rental availability engine.

This package decides which calendar days can be picked up or returned:
- BlockReason / EndpointRole / ReservationKind: enumerations
- Reservation: booking record from the snapshot
- Interval, MaintenanceWindow: normalized reservation ranges
- AvailabilityContext: one vehicle's snapshot at an instant
- evaluate_day: the day availability rules
- SelectionController: pickup/return selection state machine
- is_month_fully_blocked / advance_month: calendar auto-advance
- load_reservations / save_reservation: YAML snapshot I/O
"""

from .block_reason import BlockReason, EndpointRole, ReservationKind
from .reservation import Reservation
from .interval import Interval, build_intervals
from .maintenance import MaintenanceWindow, window_for, build_windows, is_within_maintenance
from .future_booking import earliest_future_start, next_available_after
from .day_state import DayState
from .selection_state import SelectionState
from .context import AvailabilityContext
from .evaluator import evaluate_day, evaluate_days
from .selection import SelectionController, SelectionResult
from .calendar_grid import calendar_grid, month_days, generate_hours, pickup_hours, return_hours
from .month_advancer import evaluate_month, is_month_fully_blocked, advance_month
from .loader import (
    ReservationSnapshot,
    load_reservations,
    save_reservation,
    fetch_snapshot,
    file_fetcher,
    list_vehicle_ids,
)
from .errors import (
    BookingEngineError,
    MalformedDateError,
    NoVehicleSelectedError,
    InconsistentSelectionError,
    SnapshotUnavailableError,
)

__all__ = [
    "BlockReason",
    "EndpointRole",
    "ReservationKind",
    "Reservation",
    "Interval",
    "build_intervals",
    "MaintenanceWindow",
    "window_for",
    "build_windows",
    "is_within_maintenance",
    "earliest_future_start",
    "next_available_after",
    "DayState",
    "SelectionState",
    "AvailabilityContext",
    "evaluate_day",
    "evaluate_days",
    "SelectionController",
    "SelectionResult",
    "calendar_grid",
    "month_days",
    "generate_hours",
    "pickup_hours",
    "return_hours",
    "evaluate_month",
    "is_month_fully_blocked",
    "advance_month",
    "ReservationSnapshot",
    "load_reservations",
    "save_reservation",
    "fetch_snapshot",
    "file_fetcher",
    "list_vehicle_ids",
    "BookingEngineError",
    "MalformedDateError",
    "NoVehicleSelectedError",
    "InconsistentSelectionError",
    "SnapshotUnavailableError",
]
