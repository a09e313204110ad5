"""
Day availability evaluator.

A single evaluator serves both calendars; the endpoint role decides
which rules apply. Rules in precedence order (first match is the
reported reason):

1. PAST                 - day before today
2. AVAILABILITY_UNKNOWN - snapshot failed to load (fail-closed policy)
3. ALREADY_RESERVED     - inside a reservation or its maintenance window
4. BEFORE_NEXT_AVAILABLE - before the "free again" marker, when that
                          marker is today or earlier
5. BEFORE_PICKUP        - return on or before pickup (return only)
6. BLOCKED_BY_FUTURE_RESERVATION - return would cross the next booking
                          (return only)
7. MINIMUM_STAY         - return too close to pickup (return only,
                          advisory: flags the day without blocking it)
"""

import logging
from datetime import date
from typing import List, Optional

from .block_reason import BlockReason, EndpointRole
from .calculations import DayLike, days_between, parse_day
from .context import AvailabilityContext
from .day_state import DayState
from .errors import MalformedDateError, NoVehicleSelectedError
from .maintenance import is_within_maintenance
from .selection_state import SelectionState

logger = logging.getLogger(__name__)


def is_reserved(day: date, context: AvailabilityContext) -> bool:
    """Day is inside a reservation or touched by a maintenance window."""
    if any(interval.covers(day) for interval in context.intervals):
        return True
    return is_within_maintenance(day, context.windows)


def is_before_next_available(day: date, context: AvailabilityContext) -> bool:
    if context.next_available is None:
        return False
    marker = context.next_available.date()
    return marker <= context.today and day < marker


def crosses_future_reservation(
    day: date, pickup: date, context: AvailabilityContext
) -> bool:
    """A rental from pickup to day would run into the next booking."""
    future_start = context.future_start
    if future_start is None or pickup >= future_start:
        return False
    return day >= future_start


def reason_message(reason: BlockReason, context: AvailabilityContext) -> str:
    """Human-readable explanation for a block reason."""
    if reason is BlockReason.BLOCKED_BY_FUTURE_RESERVATION:
        future_start = context.future_start
        if future_start:
            return f"Vehicle is booked from {future_start:%d %B %Y}"
        return "Vehicle is booked"
    if reason is BlockReason.BEFORE_NEXT_AVAILABLE and context.next_available:
        return f"Vehicle is available from {context.next_available:%d %B %Y %H:%M}"
    if reason is BlockReason.MINIMUM_STAY:
        return f"Minimum rental period is {context.min_stay_days} days"
    messages = {
        BlockReason.INVALID_DATE: "Date could not be read",
        BlockReason.PAST: "Date is in the past",
        BlockReason.AVAILABILITY_UNKNOWN: "Availability could not be loaded",
        BlockReason.ALREADY_RESERVED: "Date is already booked",
        BlockReason.BEFORE_NEXT_AVAILABLE: "Vehicle is not yet available",
        BlockReason.BEFORE_PICKUP: "Return must be after pickup",
    }
    return messages[reason]


def _evaluate(
    day: date,
    context: AvailabilityContext,
    selection: SelectionState,
    role: EndpointRole,
) -> DayState:
    pickup = parse_day(selection.pickup_date) if selection.pickup_date else None
    return_day = parse_day(selection.return_date) if selection.return_date else None
    for_return = role is EndpointRole.RETURN and pickup is not None

    reserved = is_reserved(day, context)
    violates_min_stay = (
        for_return
        and day > pickup
        and days_between(pickup, day) < context.min_stay_days
    )
    checks = [
        (day < context.today, BlockReason.PAST),
        (not context.complete, BlockReason.AVAILABILITY_UNKNOWN),
        (reserved, BlockReason.ALREADY_RESERVED),
        (is_before_next_available(day, context), BlockReason.BEFORE_NEXT_AVAILABLE),
        (for_return and day <= pickup, BlockReason.BEFORE_PICKUP),
        (
            for_return and crosses_future_reservation(day, pickup, context),
            BlockReason.BLOCKED_BY_FUTURE_RESERVATION,
        ),
        (violates_min_stay, BlockReason.MINIMUM_STAY),
    ]
    reason = next((r for fired, r in checks if fired), None)
    is_blocked = any(fired for fired, r in checks if not r.is_advisory)

    return DayState(
        day=day,
        is_blocked=is_blocked,
        is_already_reserved=reserved,
        is_in_selected_range=bool(
            pickup and return_day and pickup < day < return_day
        ),
        is_pickup_endpoint=day == pickup,
        is_return_endpoint=day == return_day,
        violates_min_stay=violates_min_stay,
        reason=reason,
        message=reason_message(reason, context) if reason else None,
    )


def evaluate_day(
    day: DayLike,
    context: Optional[AvailabilityContext],
    selection: Optional[SelectionState] = None,
    role: EndpointRole = EndpointRole.PICKUP,
) -> DayState:
    """
    Evaluate one calendar day for the pickup or return endpoint.

    Pure function of its inputs. A day (or selection date) that cannot
    be parsed yields a blocked INVALID_DATE state instead of raising,
    so one bad value cannot break a whole calendar.

    Raises:
        NoVehicleSelectedError: if there is no vehicle context.
    """
    if context is None or not context.vehicle_id:
        raise NoVehicleSelectedError("Cannot evaluate availability without a vehicle")
    if selection is None:
        selection = SelectionState(vehicle_id=context.vehicle_id)

    try:
        return _evaluate(parse_day(day), context, selection, role)
    except MalformedDateError as e:
        logger.warning("Blocking unreadable day %r: %s", day, e)
        return DayState(
            day=day if isinstance(day, date) else None,
            is_blocked=True,
            reason=BlockReason.INVALID_DATE,
            message=reason_message(BlockReason.INVALID_DATE, context),
        )


def evaluate_days(
    days: List[DayLike],
    context: AvailabilityContext,
    selection: Optional[SelectionState] = None,
    role: EndpointRole = EndpointRole.PICKUP,
) -> List[DayState]:
    """Evaluate several days against the same snapshot and selection."""
    return [evaluate_day(day, context, selection, role) for day in days]
