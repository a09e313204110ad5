"""Shared fixtures for the booking engine tests."""
from datetime import datetime

import pytest

from booking import AvailabilityContext, Reservation


def make_context(reservations, now, vehicle_id="car-1", **kwargs):
    """AvailabilityContext for car-1 built with the default rules."""
    return AvailabilityContext.from_reservations(vehicle_id, reservations, now=now, **kwargs)


@pytest.fixture
def june_rental():
    """car-1 rented 2024-06-10 through 2024-06-15, returned at 17:00."""
    return [Reservation("car-1", "2024-06-10", "2024-06-15")]


@pytest.fixture
def june_context(june_rental):
    return make_context(june_rental, datetime(2024, 6, 1, 10, 0))


@pytest.fixture
def july_booking_context():
    """Next booking starts 2024-07-10; evaluated on 2024-06-20."""
    reservations = [Reservation("car-1", "2024-07-10", "2024-07-10")]
    return make_context(reservations, datetime(2024, 6, 20, 10, 0))
