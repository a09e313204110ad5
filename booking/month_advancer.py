"""Auto-advance for calendars whose month shows nothing selectable."""

import logging
from datetime import date
from typing import List, Optional

from .block_reason import EndpointRole
from .calculations import add_months, month_start
from .calendar_grid import month_days
from .config import settings
from .context import AvailabilityContext
from .day_state import DayState
from .evaluator import evaluate_day
from .selection_state import SelectionState

logger = logging.getLogger(__name__)


def evaluate_month(
    month: date,
    context: AvailabilityContext,
    selection: Optional[SelectionState] = None,
    role: EndpointRole = EndpointRole.PICKUP,
) -> List[DayState]:
    """DayState for every date of the month."""
    return [evaluate_day(day, context, selection, role) for day in month_days(month)]


def is_month_fully_blocked(
    month: date,
    context: AvailabilityContext,
    selection: Optional[SelectionState] = None,
    role: EndpointRole = EndpointRole.PICKUP,
) -> bool:
    """True only if every date of the month is blocked."""
    states = evaluate_month(month, context, selection, role)
    return bool(states) and all(s.is_blocked for s in states)


def advance_month(
    month: date,
    context: AvailabilityContext,
    selection: Optional[SelectionState] = None,
    role: EndpointRole = EndpointRole.PICKUP,
    max_months: int = settings.rules.month_advance_cap,
) -> date:
    """
    First month, starting at `month`, with a day that is not blocked.

    Steps forward at most max_months times; if every month checked is
    fully blocked, the furthest month reached is returned.
    """
    current = month_start(month)
    for _ in range(max_months):
        if not is_month_fully_blocked(current, context, selection, role):
            return current
        current = add_months(current, 1)
    logger.info(
        "Vehicle %s: no free day found within %d months of %s",
        context.vehicle_id, max_months, month_start(month).isoformat(),
    )
    return current
