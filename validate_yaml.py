#!/usr/bin/env python3
"""Validate reservation snapshot YAML files against the schema."""
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from jsonschema import validate, ValidationError

from booking.calculations import parse_day
from booking.errors import MalformedDateError


def load_schema() -> dict:
    """Load the JSON schema from schema.yaml."""
    schema_path = Path(__file__).parent / "schema.yaml"
    with open(schema_path) as f:
        return yaml.safe_load(f)


def check_date_order(data: dict) -> list[str]:
    """Errors for reservations whose end date is before their start date."""
    errors = []
    for index, entry in enumerate(data.get("reservations") or []):
        try:
            if parse_day(entry["endDate"]) < parse_day(entry["startDate"]):
                errors.append(
                    f"Reservation {index}: endDate {entry['endDate']} "
                    f"is before startDate {entry['startDate']}"
                )
        except MalformedDateError as e:
            errors.append(f"Reservation {index}: {e}")
    return errors


def validate_snapshot_file(filepath: Path, schema: dict) -> list[str]:
    """Validate a single snapshot file. Returns list of errors."""
    errors = []
    try:
        with open(filepath) as f:
            # BaseLoader keeps every scalar a string, so dates and times
            # are checked as written
            data = yaml.load(f, Loader=yaml.BaseLoader)
        validate(instance=data, schema=schema)
        errors.extend(check_date_order(data))
    except yaml.YAMLError as e:
        errors.append(f"YAML parse error: {e}")
    except ValidationError as e:
        errors.append(f"Schema validation error: {e.message}")
        if e.path:
            errors.append(f"  at path: {'.'.join(str(p) for p in e.path)}")
    except Exception as e:
        errors.append(f"Error: {e}")
    return errors


def main(argv: Optional[List[str]] = None):
    """Validate the given snapshot files, or all files in reservations/."""
    schema = load_schema()
    args = sys.argv[1:] if argv is None else argv

    if args:
        yaml_files = [Path(a) for a in args]
    else:
        snapshots_dir = Path(__file__).parent / "reservations"
        if not snapshots_dir.exists():
            print(f"Error: reservations directory not found: {snapshots_dir}")
            return 1
        yaml_files = list(snapshots_dir.glob("*.yaml")) + list(snapshots_dir.glob("*.yml"))

    if not yaml_files:
        print("Warning: No YAML files found")
        return 0

    all_valid = True
    for filepath in sorted(yaml_files):
        errors = validate_snapshot_file(filepath, schema)
        if errors:
            print(f"FAIL: {filepath.name}")
            for error in errors:
                print(f"  {error}")
            all_valid = False
        else:
            print(f"OK: {filepath.name}")

    return 0 if all_valid else 1


if __name__ == "__main__":
    sys.exit(main())
