"""
Reference Data Service

Read-only JSON sources that sit beside the database:
- the vehicle master (one row per vehicle, spreadsheet-style columns)
- the historical fuel log exported before the ledger existed
"""

import json
import logging
from typing import Any, Dict, Iterator, List

from calculations.constants import (
    REFERENCE_MILEAGE_COLUMN,
    VEHICLE_HEADER_VALUE,
    VEHICLE_NO_COLUMN,
)
from exceptions import ReferenceDataError

logger = logging.getLogger(__name__)

# fuel.json key -> ledger key
FUEL_HISTORY_FIELDS = {
    'id': 'id',
    'vehicleNo': 'vehicle_no',
    'fuelAmount': 'fuel_amount',
    'cost': 'cost',
    'odometerStart': 'odometer_start',
    'odometerEnd': 'odometer_end',
    'distanceTraveled': 'distance_traveled',
    'fuelEfficiency': 'fuel_efficiency',
    'location': 'location',
    'date': 'date',
}


def _read_json(path: str, label: str) -> Any:
    try:
        with open(path, encoding='utf-8') as fh:
            return json.load(fh)
    except FileNotFoundError as e:
        logger.error(f"{label} not found at {path}")
        raise ReferenceDataError(f"Unable to read {label}", path=path, reason="missing") from e
    except OSError as e:
        logger.error(f"Could not read {label} at {path}: {e}")
        raise ReferenceDataError(f"Unable to read {label}", path=path, reason="unreadable") from e
    except json.JSONDecodeError as e:
        logger.error(f"{label} at {path} is not valid JSON: {e}")
        raise ReferenceDataError(f"Invalid {label} JSON", path=path, reason="invalid-json") from e


def load_vehicle_master(path: str) -> List[Dict[str, Any]]:
    """
    Load the raw vehicle master rows.

    Raises:
        ReferenceDataError: file missing, unreadable or not a JSON list
    """
    records = _read_json(path, "Vehicle Master")
    if not isinstance(records, list):
        raise ReferenceDataError("Invalid Vehicle Master JSON", path=path, reason="invalid-json")
    return records


def iter_vehicles(records: List[Dict[str, Any]]) -> Iterator[Dict[str, Any]]:
    """Vehicle rows, skipping the spreadsheet header row and blank entries."""
    for record in records:
        vehicle_no = record.get(VEHICLE_NO_COLUMN)
        if not vehicle_no or vehicle_no == VEHICLE_HEADER_VALUE:
            continue
        yield record


def find_vehicle(records: List[Dict[str, Any]], vehicle_no: str):
    for record in iter_vehicles(records):
        if record.get(VEHICLE_NO_COLUMN) == vehicle_no:
            return record
    return None


def reference_mileage_for(records: List[Dict[str, Any]], vehicle_no: str) -> float:
    """
    Expected km/l for a vehicle from the master, 0 when unknown.

    Examples:
        >>> reference_mileage_for([{"Vehicle Master": "A", "Column15": 12}], "A")
        12
    """
    vehicle = find_vehicle(records, vehicle_no)
    if vehicle is None:
        return 0
    return vehicle.get(REFERENCE_MILEAGE_COLUMN) or 0


def normalize_fuel_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """Map a fuel.json entry onto ledger field names; unknown keys are dropped."""
    normalized = {}
    for source_key, target_key in FUEL_HISTORY_FIELDS.items():
        if source_key in entry:
            normalized[target_key] = entry[source_key]
        elif target_key in entry:
            normalized[target_key] = entry[target_key]
    normalized.setdefault('fuel_amount', 0)
    normalized.setdefault('distance_traveled', 0)
    return normalized


def load_fuel_history(path: str) -> List[Dict[str, Any]]:
    """
    Load historical fuel entries with ledger field names.

    Raises:
        ReferenceDataError: file missing, unreadable or not a JSON list
    """
    entries = _read_json(path, "fuel.json")
    if not isinstance(entries, list):
        raise ReferenceDataError("Invalid fuel.json format", path=path, reason="invalid-json")
    return [normalize_fuel_entry(e) for e in entries if isinstance(e, dict)]
