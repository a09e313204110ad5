"""
Selection controller for the pickup/return booking form.

Owns the SelectionState and is the only place it changes. Transitions:

- select_pickup: a new pickup date clears the return date and both
  times; re-confirming the same date keeps the return only if it is
  still a valid return for that pickup.
- select_return: refused when the day is blocked or shorter than the
  minimum stay; the refused DayState explains why.
- reset: clears everything, for a new vehicle.
- refresh: swaps in a newer reservation snapshot and drops choices it
  invalidates.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from .block_reason import EndpointRole, ReservationKind
from .calculations import DayLike, days_between, parse_time
from .calendar_grid import pickup_hours, return_hours
from .context import AvailabilityContext
from .day_state import DayState
from .errors import InconsistentSelectionError, MalformedDateError, NoVehicleSelectedError
from .evaluator import evaluate_day
from .reservation import Reservation
from .selection_state import SelectionState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of a selection attempt."""

    accepted: bool
    day_state: DayState


def _normalize_time(value: str) -> Optional[str]:
    try:
        return parse_time(value).strftime("%H:%M")
    except MalformedDateError as e:
        logger.warning("Ignoring unreadable time %r: %s", value, e)
        return None


class SelectionController:
    """Invariant-preserving owner of one booking form's selection."""

    def __init__(self, context: Optional[AvailabilityContext] = None):
        self._context = context
        self._state = SelectionState(vehicle_id=context.vehicle_id if context else None)

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def context(self) -> Optional[AvailabilityContext]:
        return self._context

    def _require_context(self) -> AvailabilityContext:
        if self._context is None or self._state.vehicle_id is None:
            raise NoVehicleSelectedError("Select a vehicle before choosing dates")
        return self._context

    def evaluate(self, day: DayLike, role: EndpointRole) -> DayState:
        """Evaluate a day against the current selection."""
        return evaluate_day(day, self._require_context(), self._state, role)

    # -------------------------------------------------------------------------
    # Pickup
    # -------------------------------------------------------------------------

    def select_pickup(self, day: DayLike, time: Optional[str] = None) -> SelectionResult:
        """Choose the pickup date (and optionally its hour)."""
        day_state = self.evaluate(day, EndpointRole.PICKUP)
        if day_state.is_blocked:
            logger.debug("Pickup %s refused: %s", day, day_state.reason)
            return SelectionResult(False, day_state)

        new_pickup = day_state.day
        if new_pickup != self._state.pickup_date:
            self._state = replace(
                self._state,
                pickup_date=new_pickup,
                pickup_time=None,
                return_date=None,
                return_time=None,
            )
            logger.debug("Pickup set to %s; return cleared", new_pickup)
        elif self._state.return_date is not None and not self._return_still_valid():
            self._state = self._state.without_return()
            logger.debug("Return cleared: no longer valid for pickup %s", new_pickup)

        if time is not None:
            self.select_pickup_time(time)
        return SelectionResult(True, self.evaluate(new_pickup, EndpointRole.PICKUP))

    def available_pickup_hours(self) -> List[str]:
        """Hour slots for the chosen pickup date ([] if none chosen)."""
        context = self._require_context()
        if self._state.pickup_date is None:
            return []
        return pickup_hours(self._state.pickup_date, context)

    def select_pickup_time(self, time: str) -> bool:
        """Set the pickup hour if it is one of the offered slots."""
        slot = _normalize_time(time)
        if slot is None or slot not in self.available_pickup_hours():
            logger.debug("Pickup time %r not available", time)
            return False
        self._state = replace(self._state, pickup_time=slot)
        return True

    # -------------------------------------------------------------------------
    # Return
    # -------------------------------------------------------------------------

    def select_return(self, day: DayLike, time: Optional[str] = None) -> SelectionResult:
        """Choose the return date (and optionally its hour)."""
        day_state = self.evaluate(day, EndpointRole.RETURN)
        if self._state.pickup_date is None:
            logger.debug("Return %s refused: no pickup chosen", day)
            return SelectionResult(False, day_state)
        if day_state.is_blocked or day_state.violates_min_stay:
            logger.debug("Return %s refused: %s", day, day_state.reason)
            return SelectionResult(False, day_state)

        self._state = replace(self._state, return_date=day_state.day, return_time=None)
        self._check_invariant()
        if time is not None:
            self.select_return_time(time)
        return SelectionResult(True, self.evaluate(day_state.day, EndpointRole.RETURN))

    def available_return_hours(self) -> List[str]:
        """Hour slots for the chosen return date ([] if none chosen)."""
        context = self._require_context()
        if self._state.return_date is None:
            return []
        return return_hours(self._state.return_date, context)

    def select_return_time(self, time: str) -> bool:
        """Set the return hour if it is one of the offered slots."""
        slot = _normalize_time(time)
        if slot is None or slot not in self.available_return_hours():
            logger.debug("Return time %r not available", time)
            return False
        self._state = replace(self._state, return_time=slot)
        return True

    # -------------------------------------------------------------------------
    # Vehicle and snapshot changes
    # -------------------------------------------------------------------------

    def reset(self, vehicle_id: str, context: Optional[AvailabilityContext] = None) -> None:
        """
        Start over for a vehicle.

        The current snapshot is kept only if it belongs to that vehicle.
        """
        if context is None and self._context is not None:
            if self._context.vehicle_id == vehicle_id:
                context = self._context
        self._context = context
        self._state = SelectionState(vehicle_id=vehicle_id)
        logger.debug("Selection reset for vehicle %s", vehicle_id)

    def refresh(self, context: AvailabilityContext) -> None:
        """Swap in a newer snapshot for the same vehicle and revalidate."""
        if context.vehicle_id != self._state.vehicle_id:
            self.reset(context.vehicle_id, context)
            return
        self._context = context
        pickup = self._state.pickup_date
        if pickup is not None and self.evaluate(pickup, EndpointRole.PICKUP).is_blocked:
            self._state = SelectionState(vehicle_id=context.vehicle_id)
            logger.info("Pickup %s no longer available; selection cleared", pickup)
        elif self._state.return_date is not None and not self._return_still_valid():
            self._state = self._state.without_return()
            logger.info("Return no longer available; return cleared")
        self._check_invariant()

    # -------------------------------------------------------------------------
    # Invariants and submission
    # -------------------------------------------------------------------------

    def _return_still_valid(self) -> bool:
        day_state = self.evaluate(self._state.return_date, EndpointRole.RETURN)
        return day_state.is_selectable

    def _check_invariant(self) -> None:
        """Drop the return choice if it breaks ordering or minimum stay."""
        pickup, return_day = self._state.pickup_date, self._state.return_date
        if pickup is None or return_day is None:
            return
        min_stay = self._require_context().min_stay_days
        if return_day <= pickup or days_between(pickup, return_day) < min_stay:
            error = InconsistentSelectionError(
                f"Return {return_day} invalid for pickup {pickup} (min {min_stay} days)"
            )
            logger.error("Resetting return: %s", error)
            self._state = self._state.without_return()

    @property
    def is_complete(self) -> bool:
        return self._state.is_complete

    def to_reservation(self) -> Reservation:
        """
        Booking request for the current selection.

        Raises:
            InconsistentSelectionError: if the selection is incomplete.
        """
        if not self._state.is_complete:
            raise InconsistentSelectionError("Pickup and return must both be chosen")
        return Reservation(
            vehicle_id=self._state.vehicle_id,
            start_date=self._state.pickup_date.isoformat(),
            end_date=self._state.return_date.isoformat(),
            start_time=self._state.pickup_time,
            end_time=self._state.return_time,
            kind=ReservationKind.PENDING_HOLD,
        )
