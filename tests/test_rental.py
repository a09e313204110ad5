#!/usr/bin/env python3
"""Tests for the rental CLI formatting helpers and commands."""
from datetime import date

import pytest

from booking import BlockReason, DayState, ReservationKind, load_reservations
from rental import format_cell, main, make_blocked_table, make_grid_rows

SNAPSHOT = """
reservations:
  - vehicleId: car-1
    startDate: '2024-06-10'
    endDate: '2024-06-15'
"""

NOW = ["--now", "2024-06-01T10:00"]


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "fleet.yaml"
    path.write_text(SNAPSHOT)
    return path


class TestFormatCell:
    """Tests for format_cell."""

    def test_empty_cell(self):
        """Cells outside the month are blank."""
        assert format_cell(None) == ""

    def test_selectable(self):
        """Selectable days show just the number."""
        assert format_cell(DayState(day=date(2024, 6, 3))) == "3"

    def test_endpoint(self):
        """Pickup and return days are bracketed."""
        assert format_cell(DayState(day=date(2024, 6, 3), is_pickup_endpoint=True)) == "[3]"
        assert format_cell(DayState(day=date(2024, 6, 7), is_return_endpoint=True)) == "[7]"

    def test_reserved(self):
        """Reserved days are marked X."""
        state = DayState(day=date(2024, 6, 12), is_blocked=True, is_already_reserved=True)
        assert format_cell(state) == "12 X"

    def test_blocked(self):
        """Other blocked days are marked with a dash."""
        assert format_cell(DayState(day=date(2024, 6, 12), is_blocked=True)) == "12 -"

    def test_min_stay(self):
        """Short-stay days are marked with a bang."""
        assert format_cell(DayState(day=date(2024, 6, 4), violates_min_stay=True)) == "4 !"

    def test_in_range(self):
        """Days inside the selection are marked with a tilde."""
        assert format_cell(DayState(day=date(2024, 6, 5), is_in_selected_range=True)) == "5 ~"


class TestTables:
    """Tests for grid and reason table builders."""

    def test_grid_rows_skip_empty_weeks(self):
        """Weeks without month days are dropped."""
        cells = [None] * 6 + [date(2024, 6, 1)] + [None] * 35
        rows = make_grid_rows(cells, {date(2024, 6, 1): DayState(day=date(2024, 6, 1))})
        assert rows == [["", "", "", "", "", "", "1"]]

    def test_blocked_table(self):
        """Only days with a reason are listed."""
        states = [
            DayState(day=date(2024, 6, 1)),
            DayState(day=date(2024, 6, 2), is_blocked=True,
                     reason=BlockReason.PAST, message="Date is in the past"),
        ]
        assert make_blocked_table(states) == [["2024-06-02", "PAST", "Date is in the past"]]


class TestCommands:
    """Tests for CLI commands through main()."""

    def test_vehicles(self, snapshot_file, capsys):
        """Vehicles in the snapshot are listed."""
        assert main([str(snapshot_file), "vehicles"]) == 0
        assert capsys.readouterr().out.strip() == "car-1"

    def test_missing_file(self, tmp_path, capsys):
        """A missing snapshot is an error."""
        assert main([str(tmp_path / "missing.yaml"), "vehicles"]) == 1
        assert "File not found" in capsys.readouterr().out

    def test_vehicles_malformed_snapshot(self, tmp_path, capsys):
        """A snapshot that is not a mapping is reported, not raised."""
        path = tmp_path / "fleet.yaml"
        path.write_text("- just\n- a list\n")
        assert main([str(path), "vehicles"]) == 1
        assert "expected a mapping" in capsys.readouterr().out

    def test_calendar_malformed_snapshot_fails_closed(self, tmp_path, capsys):
        """With the closed policy a malformed snapshot blocks the month."""
        path = tmp_path / "fleet.yaml"
        path.write_text("reservations: 5\n")
        args = [str(path), "--policy", "closed", "calendar", "car-1", "--month", "2024-06"]
        assert main(args + NOW) == 0
        out = capsys.readouterr().out
        assert "reservations could not be loaded" in out
        assert "FULLY BLOCKED" in out

    def test_calendar(self, snapshot_file, capsys):
        """The month grid marks reserved and maintenance days."""
        assert main([str(snapshot_file), "calendar", "car-1", "--month", "2024-06", "-v"] + NOW) == 0
        out = capsys.readouterr().out
        assert "Month: June 2024" in out
        assert "12 X" in out
        assert "16 X" in out
        assert "ALREADY_RESERVED" in out
        assert "FULLY BLOCKED" not in out

    def test_calendar_advance(self, tmp_path, capsys):
        """Advance moves past a fully booked month."""
        path = tmp_path / "fleet.yaml"
        path.write_text("""
reservations:
  - vehicleId: car-1
    startDate: '2024-06-01'
    endDate: '2024-06-30'
""")
        args = [str(path), "calendar", "car-1", "--month", "2024-06", "--advance"]
        assert main(args + ["--now", "2024-05-20T10:00"]) == 0
        out = capsys.readouterr().out
        assert "Advanced from June 2024" in out
        assert "Month: July 2024" in out

    def test_calendar_fully_blocked(self, tmp_path, capsys):
        """A month in the past is reported fully blocked."""
        path = tmp_path / "fleet.yaml"
        path.write_text(SNAPSHOT)
        assert main([str(path), "calendar", "car-1", "--month", "2024-05"] + NOW) == 0
        assert "FULLY BLOCKED" in capsys.readouterr().out

    def test_day(self, snapshot_file, capsys):
        """A reserved day explains itself."""
        assert main([str(snapshot_file), "day", "car-1", "2024-06-12"] + NOW) == 0
        out = capsys.readouterr().out
        assert "ALREADY_RESERVED" in out
        assert "Date is already booked" in out

    def test_day_return_role(self, snapshot_file, capsys):
        """The return calendar uses the pickup given."""
        args = [str(snapshot_file), "day", "car-1", "2024-06-12",
                "--role", "return", "--pickup", "2024-06-05"]
        assert main(args + NOW) == 0
        assert "ALREADY_RESERVED" in capsys.readouterr().out

    def test_hours(self, snapshot_file, capsys):
        """Slots inside the maintenance window are left out."""
        assert main([str(snapshot_file), "hours", "car-1", "2024-06-16"] + NOW) == 0
        out = capsys.readouterr().out
        assert "05:00, 06:00" in out
        assert "04:00" not in out

    def test_bad_now(self, snapshot_file, capsys):
        """An unreadable --now is reported."""
        assert main([str(snapshot_file), "day", "car-1", "2024-06-12", "--now", "soon"]) == 1
        assert "Error:" in capsys.readouterr().out


class TestBookCommand:
    """Tests for the book command."""

    def test_dry_run(self, snapshot_file, capsys):
        """A dry run prints the booking and saves nothing."""
        args = [str(snapshot_file), "book", "car-1", "2024-06-20", "10:00", "2024-06-25", "17:00", "--dry-run"]
        assert main(args + NOW) == 0
        out = capsys.readouterr().out
        assert "Days:    5" in out
        assert "dry run" in out
        assert len(load_reservations(snapshot_file)) == 1

    def test_saves_pending_hold(self, snapshot_file, capsys):
        """A booking is saved as a pending hold."""
        args = [str(snapshot_file), "book", "car-1", "2024-06-20", "10:00", "2024-06-25", "17:00"]
        assert main(args + NOW) == 0
        assert "Reservation saved." in capsys.readouterr().out
        saved = load_reservations(snapshot_file)[-1]
        assert saved.start_date == "2024-06-20"
        assert saved.end_time == "17:00"
        assert saved.kind == ReservationKind.PENDING_HOLD

    def test_creates_missing_file(self, tmp_path, capsys):
        """The first booking creates the snapshot."""
        path = tmp_path / "new.yaml"
        args = [str(path), "book", "car-1", "2024-06-20", "10:00", "2024-06-25", "17:00"]
        assert main(args + NOW) == 0
        assert len(load_reservations(path)) == 1

    def test_reserved_pickup(self, snapshot_file, capsys):
        """A reserved pickup day is refused."""
        args = [str(snapshot_file), "book", "car-1", "2024-06-12", "10:00", "2024-06-25", "17:00"]
        assert main(args + NOW) == 1
        assert "Date is already booked" in capsys.readouterr().out

    def test_pickup_time_inside_lead_time(self, snapshot_file, capsys):
        """A same-day time within the lead is refused with alternatives."""
        args = [str(snapshot_file), "book", "car-1", "2024-06-01", "10:00", "2024-06-05", "17:00"]
        assert main(args + NOW) == 1
        out = capsys.readouterr().out
        assert "pickup time 10:00 not available" in out
        assert "Available: 12:00, 13:00" in out

    def test_return_crossing_booking(self, snapshot_file, capsys):
        """A return past the next booking is refused."""
        args = [str(snapshot_file), "book", "car-1", "2024-06-03", "10:00", "2024-06-20", "17:00"]
        assert main(args + NOW) == 1
        assert "Vehicle is booked from 10 June 2024" in capsys.readouterr().out
        assert len(load_reservations(snapshot_file)) == 1
