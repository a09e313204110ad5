"""Exceptions raised by the availability engine."""


class BookingEngineError(Exception):
    """Base class for availability engine errors."""


class MalformedDateError(BookingEngineError, ValueError):
    """A reservation or selection date/time could not be parsed."""


class NoVehicleSelectedError(BookingEngineError):
    """Evaluation was requested before a vehicle context exists."""


class InconsistentSelectionError(BookingEngineError):
    """Pickup/return ordering or minimum-stay invariant was violated."""


class SnapshotUnavailableError(BookingEngineError):
    """The reservation snapshot for a vehicle could not be fetched."""
