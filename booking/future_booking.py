"""Lookups over upcoming reservations: next booking start, next free moment."""

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from .config import settings
from .interval import Interval


def earliest_future_start(intervals: Iterable[Interval], today: date) -> Optional[date]:
    """Earliest start day strictly after today, or None."""
    starts = [i.start_day for i in intervals if i.start_day > today]
    return min(starts) if starts else None


def _chains(intervals: List[Interval], buffer: timedelta) -> List[tuple]:
    """
    Group intervals into back-to-back chains.

    A reservation joins the current chain when it starts no later than
    the day after the chain's previous rental (plus buffer) ends.
    Returns (chain_start, free_at) pairs.
    """
    chains: List[tuple] = []
    for interval in sorted(intervals, key=lambda i: i.start):
        free_at = interval.end + buffer
        if chains:
            chain_start, chain_free = chains[-1]
            if interval.start_day <= chain_free.date() + timedelta(days=1):
                chains[-1] = (chain_start, max(chain_free, free_at))
                continue
        chains.append((interval.start, free_at))
    return chains


def next_available_after(
    intervals: Iterable[Interval],
    now: datetime,
    buffer_hours: int = settings.rules.maintenance_buffer_hours,
) -> Optional[datetime]:
    """
    When the vehicle becomes free again after its ongoing rentals.

    Returns the end (including maintenance) of the chain of consecutive
    reservations that is running at `now`, or None if the vehicle is
    not currently rented out.
    """
    for chain_start, free_at in _chains(list(intervals), timedelta(hours=buffer_hours)):
        if chain_start <= now < free_at:
            return free_at
    return None
