"""YAML loading and saving for reservation snapshots."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

import yaml

from .block_reason import ReservationKind
from .config import settings
from .errors import SnapshotUnavailableError
from .reservation import Reservation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReservationSnapshot:
    """Reservations for one vehicle, and whether the fetch succeeded."""

    vehicle_id: str
    reservations: List[Reservation]
    complete: bool = True


def _parse_kind(value: Optional[str]) -> ReservationKind:
    if value is None:
        return ReservationKind.CONFIRMED
    try:
        return ReservationKind(value)
    except ValueError:
        # Unknown kinds still block
        logger.warning("Unknown reservation kind %r, treating as confirmed", value)
        return ReservationKind.CONFIRMED


def _time_value(value: Any) -> Any:
    """YAML 1.1 reads an unquoted 17:00 as the base-60 integer 1020."""
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value // 60:02d}:{value % 60:02d}"
    return value


def _parse_object(dct: Dict[str, Any]) -> Union[Reservation, dict]:
    """Parse dictionary into a Reservation where it looks like one."""
    if "vehicleId" in dct and "startDate" in dct:
        return Reservation(
            str(dct["vehicleId"]),
            dct["startDate"],
            dct.get("endDate"),
            _time_value(dct.get("startTime")),
            _time_value(dct.get("endTime")),
            _parse_kind(dct.get("kind")),
        )
    return dct


def _read(filename: Union[str, Path]) -> Any:
    with open(filename, "rb") as fp:
        try:
            raw = yaml.load(fp, Loader=yaml.SafeLoader)
        except yaml.YAMLError as e:
            raise SnapshotUnavailableError(f"{filename}: {e}") from e
    # default=str keeps unquoted YAML dates as ISO strings
    json_data = json.dumps(raw or {}, default=str)
    return json.loads(json_data, object_hook=_parse_object)


def load_reservations(
    filename: Union[str, Path], vehicle_id: Optional[str] = None
) -> List[Reservation]:
    """
    Load reservations from a YAML snapshot, optionally for one vehicle.

    Raises:
        SnapshotUnavailableError: if the file is not a mapping with a
            `reservations` list.
    """
    data = _read(filename)
    if not isinstance(data, dict):
        raise SnapshotUnavailableError(
            f"{filename}: expected a mapping, got {type(data).__name__}"
        )
    entries = data.get("reservations") or []
    if not isinstance(entries, list):
        raise SnapshotUnavailableError(
            f"{filename}: reservations must be a list, got {type(entries).__name__}"
        )
    reservations = [r for r in entries if isinstance(r, Reservation)]
    if vehicle_id is not None:
        reservations = [r for r in reservations if r.vehicle_id == vehicle_id]
    return reservations


def list_vehicle_ids(filename: Union[str, Path]) -> List[str]:
    """Vehicle ids that have at least one reservation in the snapshot."""
    return sorted({r.vehicle_id for r in load_reservations(filename)})


def fetch_snapshot(
    fetch: Callable[[str], Iterable[Reservation]],
    vehicle_id: str,
    policy: str = settings.storage.fetch_failure_policy,
) -> ReservationSnapshot:
    """
    Fetch one vehicle's reservations through the persistence collaborator.

    On failure the policy decides: "closed" returns an incomplete
    snapshot (the evaluator then blocks every day), "open" returns an
    empty one that leaves the calendar unblocked.
    """
    try:
        return ReservationSnapshot(vehicle_id, list(fetch(vehicle_id)))
    except (OSError, yaml.YAMLError, SnapshotUnavailableError) as e:
        logger.error("Reservation fetch failed for vehicle %s: %s", vehicle_id, e)
        return ReservationSnapshot(vehicle_id, [], complete=(policy == "open"))


def file_fetcher(filename: Union[str, Path]) -> Callable[[str], List[Reservation]]:
    """Fetch function reading the YAML snapshot on every call."""
    def fetch(vehicle_id: str) -> List[Reservation]:
        return load_reservations(filename, vehicle_id)
    return fetch


def _reservation_to_dict(reservation: Reservation) -> Dict[str, Any]:
    """Serialize a Reservation to the YAML dict format (camelCase keys)."""
    d: Dict[str, Any] = {
        "vehicleId": reservation.vehicle_id,
        "startDate": reservation.start_date,
        "endDate": reservation.end_date,
    }
    if reservation.start_time is not None:
        d["startTime"] = reservation.start_time
    if reservation.end_time is not None:
        d["endTime"] = reservation.end_time
    d["kind"] = reservation.kind.value
    return d


def save_reservation(filename: Union[str, Path], reservation: Reservation) -> None:
    """
    Append a reservation to a snapshot file.

    Loads the raw YAML, appends the entry to the reservations list,
    and writes back to the file. Creates the file if it is missing.
    """
    path = Path(filename)
    data: Dict[str, Any] = {}
    if path.exists():
        with open(path, "r") as fp:
            data = yaml.load(fp, Loader=yaml.SafeLoader) or {}

    if data.get("reservations") is None:
        data["reservations"] = []

    data["reservations"].append(_reservation_to_dict(reservation))

    with open(path, "w") as fp:
        yaml.dump(
            data,
            fp,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
            width=120,
        )
