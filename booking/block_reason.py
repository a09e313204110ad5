"""Enums for day blocking reasons, endpoint roles and reservation kinds."""

from enum import Enum


class BlockReason(Enum):
    """Why a calendar day cannot be chosen. Lower value = higher precedence."""

    INVALID_DATE = 0  # Day could not be parsed
    PAST = 1
    AVAILABILITY_UNKNOWN = 2  # Reservation snapshot failed to load
    ALREADY_RESERVED = 3  # Inside a reservation or its maintenance window
    BEFORE_NEXT_AVAILABLE = 4
    BEFORE_PICKUP = 5
    BLOCKED_BY_FUTURE_RESERVATION = 6
    MINIMUM_STAY = 7  # Advisory only, never blocks

    @property
    def is_advisory(self) -> bool:
        return self is BlockReason.MINIMUM_STAY


class EndpointRole(Enum):
    """Which side of the booking a day is being evaluated for."""

    PICKUP = "pickup"
    RETURN = "return"


class ReservationKind(Enum):
    """Reservation lifecycle kinds. Both kinds block selection."""

    CONFIRMED = "confirmed"
    PENDING_HOLD = "pending_hold"
