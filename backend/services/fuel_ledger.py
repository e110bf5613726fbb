"""
Fuel Ledger Service

Owns the append-only list of fuel fill-up events: validates new events,
derives distance and efficiency, and answers the listing and
"last event before" queries the fuel form relies on.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from calculations import calculate_distance, calculate_fuel_efficiency
from exceptions import StorageError, ValidationError
from models import FuelEvent
from utils import is_iso_timestamp, utc_now_iso

logger = logging.getLogger(__name__)

# Largest value a signed 64-bit INTEGER column holds
MAX_ODOMETER = 2**63 - 1


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _as_integer(value: Any, field: str) -> int:
    """Accept ints and integral floats (JSON clients send 1000.0)."""
    if value is None:
        raise ValidationError(f"{field} is required", field=field, reason="missing")
    if isinstance(value, bool) or not _is_number(value):
        raise ValidationError(f"{field} must be an integer", field=field, reason="invalid-type", value=value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer", field=field, reason="invalid-type", value=value)
        value = int(value)
    if value < 0:
        raise ValidationError(f"{field} must not be negative", field=field, reason="out-of-range", value=value)
    if value > MAX_ODOMETER:
        raise ValidationError(f"{field} is too large", field=field, reason="out-of-range", value=value)
    return value


def _require_text(value: Any, field: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field, reason="missing")
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string", field=field, reason="invalid-type", value=value)
    return value


def validate_fuel_event(
    vehicle_no: Any,
    fuel_amount: Any,
    odometer_start: Any,
    odometer_end: Any,
    location: Any,
    date: Any = None,
) -> Dict[str, Any]:
    """
    Validate fuel event input and return the cleaned values.

    Raises:
        ValidationError: on a missing or wrongly-typed field, or with reason
            ``"odometer-order"`` when odometer_end <= odometer_start.
    """
    vehicle_no = _require_text(vehicle_no, 'vehicle_no')
    location = _require_text(location, 'location')

    if fuel_amount is None:
        raise ValidationError("fuel_amount is required", field='fuel_amount', reason="missing")
    if not _is_number(fuel_amount):
        raise ValidationError(
            "fuel_amount must be a number", field='fuel_amount', reason="invalid-type", value=fuel_amount
        )
    if fuel_amount < 0:
        raise ValidationError(
            "fuel_amount must not be negative", field='fuel_amount', reason="out-of-range", value=fuel_amount
        )

    odometer_start = _as_integer(odometer_start, 'odometer_start')
    odometer_end = _as_integer(odometer_end, 'odometer_end')

    if odometer_end <= odometer_start:
        raise ValidationError(
            "Odometer end must be greater than start", field='odometer_end', reason="odometer-order"
        )

    if date is not None and date != '' and not is_iso_timestamp(date):
        raise ValidationError("date must be an ISO-8601 timestamp", field='date', reason="invalid-type", value=date)

    return {
        'vehicle_no': vehicle_no,
        'fuel_amount': fuel_amount,
        'odometer_start': odometer_start,
        'odometer_end': odometer_end,
        'location': location,
        'date': date or None,
    }


def record_event(
    db: Session,
    vehicle_no: Any,
    fuel_amount: Any,
    odometer_start: Any,
    odometer_end: Any,
    location: Any,
    date: Optional[str] = None,
) -> FuelEvent:
    """
    Validate, derive and persist one fuel event.

    distance_traveled = odometer_end - odometer_start and
    fuel_efficiency = distance / fuel_amount (0 when no fuel). ``cost`` is
    always 0. ``date`` defaults to the current instant.

    Raises:
        ValidationError: invalid input; nothing is written
        StorageError: the insert failed and was rolled back
    """
    values = validate_fuel_event(vehicle_no, fuel_amount, odometer_start, odometer_end, location, date)

    distance = calculate_distance(values['odometer_start'], values['odometer_end'])
    fuel_event = FuelEvent(
        vehicle_no=values['vehicle_no'],
        fuel_amount=values['fuel_amount'],
        cost=0,
        odometer_start=values['odometer_start'],
        odometer_end=values['odometer_end'],
        distance_traveled=distance,
        fuel_efficiency=calculate_fuel_efficiency(distance, values['fuel_amount']),
        location=values['location'],
        date=values['date'] or utc_now_iso(),
    )

    try:
        db.add(fuel_event)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to insert fuel event for {values['vehicle_no']}: {e}")
        raise StorageError("Insert failed", operation="record_event") from e

    logger.info(
        f"Fuel event {fuel_event.id} recorded for {fuel_event.vehicle_no}: "
        f"{distance} km on {fuel_event.fuel_amount} L"
    )
    return fuel_event


def list_events(db: Session) -> List[FuelEvent]:
    """All fuel events, most recent ``date`` first."""
    try:
        return db.query(FuelEvent).order_by(desc(FuelEvent.date), desc(FuelEvent.id)).all()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to fetch fuel entries", operation="list_events") from e


def last_event_before(db: Session, vehicle_no: str, date: str) -> Optional[FuelEvent]:
    """
    Most recent event for ``vehicle_no`` whose date is strictly before ``date``.

    Dates are compared as strings, so ``"2024-05-02"`` matches an event dated
    ``"2024-05-01T23:00:00.000Z"`` but not one dated ``"2024-05-02T08:00"``.
    """
    try:
        return db.query(FuelEvent).filter(
            FuelEvent.vehicle_no == vehicle_no,
            FuelEvent.date < date,
        ).order_by(desc(FuelEvent.date), desc(FuelEvent.id)).first()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to fetch last fuel entry", operation="last_event_before") from e


def events_for_vehicle(db: Session, vehicle_no: str) -> List[Dict[str, Any]]:
    """Ledger events for one vehicle as report input dicts, oldest first."""
    try:
        events = db.query(FuelEvent).filter(
            FuelEvent.vehicle_no == vehicle_no
        ).order_by(FuelEvent.date, FuelEvent.id).all()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to fetch fuel entries", operation="events_for_vehicle") from e
    return [e.to_dict() for e in events]


def fleet_totals(db: Session) -> Dict[str, float]:
    """Total distance and fuel over every ledger event."""
    try:
        total_distance, total_fuel = db.query(
            func.sum(FuelEvent.distance_traveled),
            func.sum(FuelEvent.fuel_amount),
        ).one()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to fetch stats", operation="fleet_totals") from e

    return {
        'total_distance': total_distance or 0,
        'total_fuel': total_fuel or 0,
    }
