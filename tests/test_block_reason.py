#!/usr/bin/env python3
"""Tests for BlockReason, EndpointRole and ReservationKind enums."""
from booking import BlockReason, EndpointRole, ReservationKind


def test_block_reason_precedence_order():
    """Lower value = reported first when several rules fire."""
    assert BlockReason.PAST.value < BlockReason.ALREADY_RESERVED.value
    assert BlockReason.ALREADY_RESERVED.value < BlockReason.BEFORE_NEXT_AVAILABLE.value
    assert BlockReason.BEFORE_NEXT_AVAILABLE.value < BlockReason.BEFORE_PICKUP.value
    assert BlockReason.BEFORE_PICKUP.value < BlockReason.BLOCKED_BY_FUTURE_RESERVATION.value
    assert BlockReason.BLOCKED_BY_FUTURE_RESERVATION.value < BlockReason.MINIMUM_STAY.value


def test_only_minimum_stay_is_advisory():
    """Minimum stay flags a day without blocking it."""
    advisory = [r for r in BlockReason if r.is_advisory]
    assert advisory == [BlockReason.MINIMUM_STAY]


def test_roles_and_kinds_parse_from_strings():
    """Roles and kinds round-trip through their stored values."""
    assert EndpointRole("return") is EndpointRole.RETURN
    assert ReservationKind("pending_hold") is ReservationKind.PENDING_HOLD
