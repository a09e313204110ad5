#!/usr/bin/env python3
"""Tests for month evaluation and calendar auto-advance."""
import logging
from datetime import date, datetime

from booking import (
    EndpointRole,
    Reservation,
    SelectionState,
    advance_month,
    evaluate_month,
    is_month_fully_blocked,
)

from conftest import make_context


def booked_through(end, now=datetime(2024, 5, 20, 10, 0)):
    """car-1 booked from 2024-06-01 through `end`."""
    return make_context([Reservation("car-1", "2024-06-01", end)], now)


class TestIsMonthFullyBlocked:
    """Tests for is_month_fully_blocked."""

    def test_fully_reserved_month(self):
        """A month inside one reservation is fully blocked."""
        assert is_month_fully_blocked(date(2024, 6, 1), booked_through("2024-06-30"))

    def test_month_with_free_day(self):
        """07-01 is lost to maintenance, 07-02 is free."""
        context = booked_through("2024-06-30")
        assert not is_month_fully_blocked(date(2024, 7, 1), context)
        states = evaluate_month(date(2024, 7, 1), context)
        assert states[0].is_blocked
        assert not states[1].is_blocked

    def test_past_month(self):
        """A month entirely in the past is fully blocked."""
        context = booked_through("2024-06-30", now=datetime(2024, 6, 1, 10, 0))
        assert is_month_fully_blocked(date(2024, 5, 1), context)

    def test_current_month_with_free_days(self):
        """The current month with free days is not blocked."""
        assert not is_month_fully_blocked(date(2024, 5, 1), booked_through("2024-06-30"))

    def test_evaluate_month_covers_every_day(self):
        """Every date of the month is evaluated."""
        states = evaluate_month(date(2024, 2, 14), booked_through("2024-06-30"))
        assert len(states) == 29
        assert states[0].day == date(2024, 2, 1)


class TestAdvanceMonth:
    """Tests for advance_month."""

    def test_stays_on_month_with_free_day(self):
        """A month with a free day is kept."""
        assert advance_month(date(2024, 5, 20), booked_through("2024-06-30")) == date(2024, 5, 1)

    def test_skips_fully_blocked_month(self):
        """A fully blocked month is skipped."""
        assert advance_month(date(2024, 6, 1), booked_through("2024-06-30")) == date(2024, 7, 1)

    def test_cap_returns_furthest_month(self, caplog):
        """When the cap runs out the furthest month is returned and logged."""
        context = booked_through("2024-12-31")
        with caplog.at_level(logging.INFO, logger="booking.month_advancer"):
            result = advance_month(date(2024, 6, 1), context, max_months=3)
        assert result == date(2024, 9, 1)
        assert "no free day found within 3 months" in caplog.text

    def test_zero_cap(self):
        """A zero cap never moves."""
        context = booked_through("2024-12-31")
        assert advance_month(date(2024, 6, 1), context, max_months=0) == date(2024, 6, 1)

    def test_default_cap_finds_next_year(self):
        """The default cap reaches into the next year."""
        context = booked_through("2024-12-31")
        assert advance_month(date(2024, 6, 1), context) == date(2025, 1, 1)

    def test_return_role(self):
        """With a pickup before the booking, later months cross it."""
        context = booked_through("2024-06-30")
        chosen = SelectionState(vehicle_id="car-1", pickup_date=date(2024, 5, 25))
        result = advance_month(date(2024, 6, 1), context, chosen, EndpointRole.RETURN, max_months=2)
        assert result == date(2024, 8, 1)
