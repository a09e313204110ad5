#!/usr/bin/env python3
"""
Unified CLI for vehicle rental availability.

Commands:
  vehicles  - List vehicles found in the reservation snapshot
  calendar  - Show a month of pickup or return availability
  day       - Explain the availability of one day
  hours     - List the hour slots offered for a day
  book      - Validate a pickup/return choice and record it
"""

import argparse
import sys
from datetime import date, datetime
from pathlib import Path
from tabulate import tabulate
from typing import Dict, List, Optional

from booking import (
    AvailabilityContext,
    DayState,
    EndpointRole,
    SelectionController,
    SelectionState,
    advance_month,
    calendar_grid,
    evaluate_day,
    evaluate_month,
    fetch_snapshot,
    file_fetcher,
    is_month_fully_blocked,
    list_vehicle_ids,
    pickup_hours,
    return_hours,
    save_reservation,
)
from booking.calculations import month_start, parse_day
from booking.config import settings
from booking.errors import SnapshotUnavailableError

WEEKDAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

# =============================================================================
# Formatting helpers
# =============================================================================


def format_cell(state: Optional[DayState]) -> str:
    """
    Format one calendar cell.

    '12'   selectable      '12 X' already reserved
    '12 -' blocked         '12 !' shorter than the minimum stay
    '[12]' pickup/return   '12 ~' inside the selected range
    """
    if state is None or state.day is None:
        return ""
    label = str(state.day.day)
    if state.is_pickup_endpoint or state.is_return_endpoint:
        return f"[{label}]"
    if state.is_already_reserved:
        return f"{label} X"
    if state.is_blocked:
        return f"{label} -"
    if state.violates_min_stay:
        return f"{label} !"
    if state.is_in_selected_range:
        return f"{label} ~"
    return label


def make_grid_rows(
    cells: List[Optional[date]], states: Dict[date, DayState]
) -> List[List[str]]:
    """Split a 42-cell grid into week rows, dropping empty trailing weeks."""
    rows = []
    for week_start in range(0, len(cells), 7):
        week = cells[week_start:week_start + 7]
        if not any(week):
            continue
        rows.append([format_cell(states.get(day)) if day else "" for day in week])
    return rows


def make_blocked_table(states: List[DayState]) -> List[List[str]]:
    """Rows explaining every day that carries a reason."""
    return [
        [s.day.isoformat(), s.reason.name, s.message]
        for s in states
        if s.reason is not None
    ]


def format_flag(value: bool) -> str:
    return "yes" if value else "no"


# =============================================================================
# Context helpers
# =============================================================================


def parse_now(value: Optional[str]) -> datetime:
    """Evaluation instant from --now (ISO datetime or date), else the clock."""
    if not value:
        return datetime.now()
    return datetime.fromisoformat(value)


def build_context(args, vehicle_id: str) -> AvailabilityContext:
    """Fetch the vehicle's snapshot and build its availability context."""
    snapshot = fetch_snapshot(
        file_fetcher(args.reservations_file),
        vehicle_id,
        policy=args.policy,
    )
    return AvailabilityContext.from_reservations(
        vehicle_id,
        snapshot.reservations,
        now=parse_now(args.now),
        complete=snapshot.complete,
    )


def build_selection(args, vehicle_id: str) -> SelectionState:
    """Selection given on the command line with --pickup / --return."""
    return SelectionState(
        vehicle_id=vehicle_id,
        pickup_date=parse_day(args.pickup) if args.pickup else None,
        return_date=parse_day(args.return_date) if args.return_date else None,
    )


# =============================================================================
# Vehicles command
# =============================================================================


def cmd_vehicles(args):
    """List vehicles found in the reservation snapshot."""
    vehicle_ids = list_vehicle_ids(args.reservations_file)
    if not vehicle_ids:
        print("No reservations found.")
        return 0
    for vehicle_id in vehicle_ids:
        print(vehicle_id)
    return 0


# =============================================================================
# Calendar command
# =============================================================================


def cmd_calendar(args):
    """Show a month of pickup or return availability."""
    context = build_context(args, args.vehicle_id)
    selection = build_selection(args, args.vehicle_id)
    role = EndpointRole(args.role)

    month = parse_day(args.month + "-01") if args.month else month_start(context.today)
    if args.advance:
        advanced = advance_month(
            month, context, selection, role, max_months=settings.rules.month_advance_cap
        )
        if advanced != month:
            print(f"Advanced from {month:%B %Y}: every day was blocked")
        month = advanced

    states = evaluate_month(month, context, selection, role)
    by_day = {s.day: s for s in states}

    print(f"Vehicle: {args.vehicle_id}  ({role.value} calendar)")
    print(f"Month: {month:%B %Y}  (as of {context.now:%Y-%m-%d %H:%M})")
    if not context.complete:
        print("Warning: reservations could not be loaded; all days blocked")
    if context.next_available:
        print(f"Free again: {context.next_available:%Y-%m-%d %H:%M}")
    print()
    print(tabulate(make_grid_rows(calendar_grid(month), by_day), headers=WEEKDAY_HEADERS, tablefmt="simple"))
    print()

    if is_month_fully_blocked(month, context, selection, role):
        print("FULLY BLOCKED")
        print()

    if args.verbose:
        rows = make_blocked_table(states)
        if rows:
            print(tabulate(rows, headers=["Date", "Reason", "Message"], tablefmt="simple"))

    return 0


# =============================================================================
# Day command
# =============================================================================


def cmd_day(args):
    """Explain the availability of one day."""
    context = build_context(args, args.vehicle_id)
    selection = build_selection(args, args.vehicle_id)
    role = EndpointRole(args.role)
    state = evaluate_day(args.date, context, selection, role)

    rows = [
        ["Date", state.day.isoformat() if state.day else args.date],
        ["Blocked", format_flag(state.is_blocked)],
        ["Already reserved", format_flag(state.is_already_reserved)],
        ["In selected range", format_flag(state.is_in_selected_range)],
        ["Below minimum stay", format_flag(state.violates_min_stay)],
        ["Reason", state.reason.name if state.reason else "-"],
        ["Message", state.message or "-"],
    ]
    print(f"Vehicle: {args.vehicle_id}  ({role.value})")
    print(tabulate(rows, tablefmt="plain"))
    return 0


# =============================================================================
# Hours command
# =============================================================================


def cmd_hours(args):
    """List the hour slots offered for a day."""
    context = build_context(args, args.vehicle_id)
    if args.role == EndpointRole.PICKUP.value:
        hours = pickup_hours(args.date, context)
    else:
        hours = return_hours(args.date, context)

    print(f"Vehicle: {args.vehicle_id}  ({args.role} hours on {args.date})")
    if not hours:
        print("No hours available.")
        return 0
    print(", ".join(hours))
    return 0


# =============================================================================
# Book command
# =============================================================================


def cmd_book(args):
    """Validate a pickup/return choice and record it as a pending hold."""
    if args.reservations_file.exists():
        context = build_context(args, args.vehicle_id)
    else:
        context = AvailabilityContext.from_reservations(
            args.vehicle_id, [], now=parse_now(args.now)
        )
    controller = SelectionController(context)

    pickup = controller.select_pickup(args.pickup_date, args.pickup_time)
    if not pickup.accepted:
        print(f"Error: pickup {args.pickup_date} not available: {pickup.day_state.message}")
        return 1
    if controller.state.pickup_time is None:
        print(f"Error: pickup time {args.pickup_time} not available")
        print(f"Available: {', '.join(controller.available_pickup_hours()) or '-'}")
        return 1

    ret = controller.select_return(args.return_date_arg, args.return_time)
    if not ret.accepted:
        print(f"Error: return {args.return_date_arg} not available: {ret.day_state.message}")
        return 1
    if controller.state.return_time is None:
        print(f"Error: return time {args.return_time} not available")
        print(f"Available: {', '.join(controller.available_return_hours()) or '-'}")
        return 1

    reservation = controller.to_reservation()
    state = controller.state
    print(f"Adding reservation to {args.reservations_file}:")
    print(f"  Vehicle: {reservation.vehicle_id}")
    print(f"  Pickup:  {state.pickup_date} {state.pickup_time}")
    print(f"  Return:  {state.return_date} {state.return_time}")
    print(f"  Days:    {state.rental_days}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_reservation(args.reservations_file, reservation)
    print("Reservation saved.")
    return 0


# =============================================================================
# Main
# =============================================================================


def add_context_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("vehicle_id", type=str, help="Vehicle id")
    parser.add_argument(
        "--now",
        type=str,
        help="Evaluation instant, ISO format (default: current time)",
    )


def add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--role",
        choices=[r.value for r in EndpointRole],
        default=EndpointRole.PICKUP.value,
        help="Which calendar to evaluate (default: pickup)",
    )
    parser.add_argument("--pickup", type=str, help="Chosen pickup date (YYYY-MM-DD)")
    parser.add_argument(
        "--return", dest="return_date", type=str, help="Chosen return date (YYYY-MM-DD)"
    )


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Vehicle rental availability",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s reservations.yaml vehicles
  %(prog)s reservations.yaml calendar car-1 --month 2024-06
  %(prog)s reservations.yaml calendar car-1 --role return --pickup 2024-07-01
  %(prog)s reservations.yaml day car-1 2024-07-12 --role return --pickup 2024-07-01
  %(prog)s reservations.yaml hours car-1 2024-06-16
  %(prog)s reservations.yaml book car-1 2024-07-01 10:00 2024-07-05 17:00
""",
    )
    parser.add_argument(
        "reservations_file",
        type=Path,
        help="Path to reservation snapshot YAML file",
    )
    parser.add_argument(
        "--policy",
        choices=["open", "closed"],
        default=settings.storage.fetch_failure_policy,
        help="What to do when reservations cannot be read (default: %(default)s)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("vehicles", help="List vehicles in the snapshot")

    # Calendar subcommand
    calendar_parser = subparsers.add_parser("calendar", help="Show a month of availability")
    add_context_arguments(calendar_parser)
    add_selection_arguments(calendar_parser)
    calendar_parser.add_argument("--month", type=str, help="Month to show (YYYY-MM)")
    calendar_parser.add_argument(
        "--advance",
        action="store_true",
        help="Skip forward past months where every day is blocked",
    )
    calendar_parser.add_argument(
        "-v", "--verbose", action="store_true", help="List the reason for each flagged day"
    )

    # Day subcommand
    day_parser = subparsers.add_parser("day", help="Explain one day")
    add_context_arguments(day_parser)
    day_parser.add_argument("date", type=str, help="Day to evaluate (YYYY-MM-DD)")
    add_selection_arguments(day_parser)

    # Hours subcommand
    hours_parser = subparsers.add_parser("hours", help="List hour slots for a day")
    add_context_arguments(hours_parser)
    hours_parser.add_argument("date", type=str, help="Day (YYYY-MM-DD)")
    hours_parser.add_argument(
        "--role",
        choices=[r.value for r in EndpointRole],
        default=EndpointRole.PICKUP.value,
        help="Pickup or return hours (default: pickup)",
    )

    # Book subcommand
    book_parser = subparsers.add_parser("book", help="Record a pickup/return choice")
    add_context_arguments(book_parser)
    book_parser.add_argument("pickup_date", type=str, help="Pickup date (YYYY-MM-DD)")
    book_parser.add_argument("pickup_time", type=str, help="Pickup time (HH:MM)")
    book_parser.add_argument("return_date_arg", metavar="return_date", type=str, help="Return date (YYYY-MM-DD)")
    book_parser.add_argument("return_time", type=str, help="Return time (HH:MM)")
    book_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be added without saving",
    )

    args = parser.parse_args(argv)

    # The snapshot may be created by the first booking
    if args.command != "book" and not args.reservations_file.exists():
        print(f"Error: File not found: {args.reservations_file}")
        return 1

    try:
        if args.command == "vehicles":
            return cmd_vehicles(args)
        elif args.command == "calendar":
            return cmd_calendar(args)
        elif args.command == "day":
            return cmd_day(args)
        elif args.command == "hours":
            return cmd_hours(args)
        elif args.command == "book":
            return cmd_book(args)
    except (ValueError, SnapshotUnavailableError) as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
