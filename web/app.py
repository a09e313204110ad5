"""Flask web application exposing rental availability to the calendar UI."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request

# Add parent directory to path for booking imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from booking import (
    AvailabilityContext,
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
)
from booking.calculations import month_start, parse_day
from booking.config import settings
from booking.errors import MalformedDateError, NoVehicleSelectedError, SnapshotUnavailableError

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = settings.secret_key
app.config["RESERVATIONS_FILE"] = Path(__file__).parent.parent / settings.storage.reservations_file
app.config["FETCH_FAILURE_POLICY"] = settings.storage.fetch_failure_policy


class BadRequest(Exception):
    """Query or body parameter that cannot be used."""


@app.errorhandler(BadRequest)
def handle_bad_request(error):
    return jsonify({"error": str(error)}), 400


@app.errorhandler(NoVehicleSelectedError)
def handle_no_vehicle(error):
    return jsonify({"error": str(error)}), 404


@app.errorhandler(SnapshotUnavailableError)
def handle_snapshot_unavailable(error):
    logger.error("Snapshot unavailable: %s", error)
    return jsonify({"error": str(error)}), 503


def get_now() -> datetime:
    """Evaluation instant: ?now= override, else the clock."""
    raw = request.args.get("now")
    if not raw:
        return datetime.now()
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        raise BadRequest(f"Invalid now: {raw!r}") from None


def get_role() -> EndpointRole:
    raw = request.args.get("role", EndpointRole.PICKUP.value)
    try:
        return EndpointRole(raw)
    except ValueError:
        raise BadRequest(f"Invalid role: {raw!r}") from None


def get_day_arg(name: str, value: Optional[str]):
    if not value:
        return None
    try:
        return parse_day(value)
    except MalformedDateError:
        raise BadRequest(f"Invalid {name}: {value!r}") from None


def get_selection(vehicle_id: str) -> SelectionState:
    """Selection passed as ?pickup=...&return=..."""
    return SelectionState(
        vehicle_id=vehicle_id,
        pickup_date=get_day_arg("pickup", request.args.get("pickup")),
        return_date=get_day_arg("return", request.args.get("return")),
    )


def get_context(vehicle_id: str, now: datetime) -> AvailabilityContext:
    """Fetch a fresh snapshot for the vehicle."""
    snapshot = fetch_snapshot(
        file_fetcher(app.config["RESERVATIONS_FILE"]),
        vehicle_id,
        policy=app.config["FETCH_FAILURE_POLICY"],
    )
    return AvailabilityContext.from_reservations(
        vehicle_id, snapshot.reservations, now=now, complete=snapshot.complete
    )


@app.route("/api/vehicles")
def vehicles():
    """Vehicle ids present in the reservation snapshot."""
    path = app.config["RESERVATIONS_FILE"]
    if not Path(path).exists():
        return jsonify({"vehicles": []})
    return jsonify({"vehicles": list_vehicle_ids(path)})


@app.route("/api/vehicles/<vehicle_id>/calendar")
def vehicle_calendar(vehicle_id: str):
    """
    Month view for the pickup or return calendar.

    Query: month=YYYY-MM, role=pickup|return, pickup, return, now,
    advance=true to skip fully blocked months.
    """
    context = get_context(vehicle_id, get_now())
    selection = get_selection(vehicle_id)
    role = get_role()

    raw_month = request.args.get("month")
    month = get_day_arg("month", f"{raw_month}-01") if raw_month else month_start(context.today)
    if request.args.get("advance", "").lower() == "true":
        month = advance_month(
            month, context, selection, role, max_months=settings.rules.month_advance_cap
        )

    states = {s.day: s for s in evaluate_month(month, context, selection, role)}
    return jsonify({
        "vehicleId": vehicle_id,
        "month": month.strftime("%Y-%m"),
        "role": role.value,
        "complete": context.complete,
        "fullyBlocked": is_month_fully_blocked(month, context, selection, role),
        "cells": [states[day].to_dict() if day else None for day in calendar_grid(month)],
    })


@app.route("/api/vehicles/<vehicle_id>/days/<day>")
def vehicle_day(vehicle_id: str, day: str):
    """DayState for one day."""
    context = get_context(vehicle_id, get_now())
    state = evaluate_day(day, context, get_selection(vehicle_id), get_role())
    return jsonify(state.to_dict())


@app.route("/api/vehicles/<vehicle_id>/hours/<day>")
def vehicle_hours(vehicle_id: str, day: str):
    """Hour slots offered for a pickup or return day."""
    context = get_context(vehicle_id, get_now())
    role = get_role()
    target = get_day_arg("day", day)
    if role is EndpointRole.PICKUP:
        hours = pickup_hours(target, context)
    else:
        hours = return_hours(target, context)
    return jsonify({"date": target.isoformat(), "role": role.value, "hours": hours})


@app.route("/api/vehicles/<vehicle_id>/selection", methods=["POST"])
def vehicle_selection(vehicle_id: str):
    """
    Replay a form's choices through the selection controller.

    Body: {"pickupDate", "pickupTime", "returnDate", "returnTime"}; any
    may be omitted. Returns the resulting selection and, for each
    refused step, the day state explaining why.
    """
    body = request.get_json(silent=True) or {}
    controller = SelectionController(get_context(vehicle_id, get_now()))
    errors = []

    if body.get("pickupDate"):
        result = controller.select_pickup(body["pickupDate"], body.get("pickupTime"))
        if not result.accepted:
            errors.append({"field": "pickupDate", "day": result.day_state.to_dict()})
        elif body.get("pickupTime") and controller.state.pickup_time is None:
            errors.append({"field": "pickupTime", "available": controller.available_pickup_hours()})

    if body.get("returnDate"):
        result = controller.select_return(body["returnDate"], body.get("returnTime"))
        if not result.accepted:
            errors.append({"field": "returnDate", "day": result.day_state.to_dict()})
        elif body.get("returnTime") and controller.state.return_time is None:
            errors.append({"field": "returnTime", "available": controller.available_return_hours()})

    return jsonify({
        "selection": controller.state.to_dict(),
        "complete": controller.is_complete,
        "rentalDays": controller.state.rental_days,
        "errors": errors,
    })


if __name__ == "__main__":
    app.run(debug=True, port=5000)
