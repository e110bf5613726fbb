"""
Driver Directory Service

Driver and inspector contacts come from two places: the vehicle master
(read-only, tagged ``source="json"``) and the drivers table (editable,
tagged ``source="db"``). Listing merges both; edits and deletes are only
allowed on database records.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from calculations.constants import (
    DRIVER_MOBILE_COLUMN,
    DRIVER_NAME_COLUMN,
    INSPECTOR_COLUMN,
    INSPECTOR_MOBILE_COLUMN,
    VEHICLE_NO_COLUMN,
)
from exceptions import ReadOnlyRecordError, RecordNotFoundError, StorageError, ValidationError
from models import Driver
from services.reference_data import iter_vehicles

logger = logging.getLogger(__name__)

SOURCE_JSON = "json"
SOURCE_DB = "db"

REQUIRED_FIELDS = ('vehicle_no', 'driver_name', 'mobile')
EDITABLE_FIELDS = ('driver_name', 'mobile', 'inspector', 'inspector_mobile')


def driver_from_vehicle(record: Dict[str, Any]) -> Dict[str, Any]:
    """Read-only driver entry built from a vehicle master row."""
    return {
        'id': None,
        'vehicle_no': record.get(VEHICLE_NO_COLUMN),
        'driver_name': record.get(DRIVER_NAME_COLUMN),
        'mobile': record.get(DRIVER_MOBILE_COLUMN),
        'inspector': record.get(INSPECTOR_COLUMN),
        'inspector_mobile': record.get(INSPECTOR_MOBILE_COLUMN),
        'source': SOURCE_JSON,
    }


def list_drivers(db: Session, vehicle_records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Vehicle master drivers first, then database drivers, each tagged with its source."""
    from_json = [driver_from_vehicle(v) for v in iter_vehicles(vehicle_records)]

    try:
        db_drivers = db.query(Driver).order_by(Driver.id).all()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("DB error", operation="list_drivers") from e

    from_db = [dict(d.to_dict(), source=SOURCE_DB) for d in db_drivers]
    return from_json + from_db


def find_driver_for_vehicle(drivers: List[Dict[str, Any]], vehicle_no: str) -> Optional[Dict[str, Any]]:
    """First driver listed for ``vehicle_no``, or None."""
    return next((d for d in drivers if d.get('vehicle_no') == vehicle_no), None)


def _get_mutable_driver(db: Session, driver_id: Any) -> Driver:
    if driver_id is None or driver_id == SOURCE_JSON or str(driver_id).lower() in ('none', 'null'):
        raise ReadOnlyRecordError("Vehicle master drivers cannot be modified", source=SOURCE_JSON)

    try:
        driver_id = int(driver_id)
    except (TypeError, ValueError) as e:
        raise RecordNotFoundError("Driver not found", record_type="driver", record_id=driver_id) from e

    try:
        driver = db.query(Driver).filter(Driver.id == driver_id).first()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("DB error", operation="get_driver") from e

    if driver is None:
        raise RecordNotFoundError("Driver not found", record_type="driver", record_id=driver_id)
    return driver


def _commit(db: Session, operation: str, message: str):
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{operation} failed: {e}")
        raise StorageError(message, operation=operation) from e


def create_driver(db: Session, data: Dict[str, Any]) -> Driver:
    """
    Add a driver record.

    Raises:
        ValidationError: vehicle_no, driver_name or mobile missing
    """
    if data.get('source') == SOURCE_JSON:
        raise ReadOnlyRecordError("Vehicle master drivers cannot be created via the API", source=SOURCE_JSON)

    for field in REQUIRED_FIELDS:
        if not data.get(field):
            raise ValidationError("Required fields missing", field=field, reason="missing")

    driver = Driver(
        vehicle_no=data['vehicle_no'],
        driver_name=data['driver_name'],
        mobile=data['mobile'],
        inspector=data.get('inspector'),
        inspector_mobile=data.get('inspector_mobile'),
    )
    db.add(driver)
    _commit(db, 'create_driver', "Insert failed")

    logger.info(f"Added driver {driver.id} for {driver.vehicle_no}")
    return driver


def update_driver(db: Session, driver_id: Any, data: Dict[str, Any]) -> Driver:
    """Update the contact fields of a database driver."""
    driver = _get_mutable_driver(db, driver_id)

    for field in EDITABLE_FIELDS:
        if field in data:
            setattr(driver, field, data[field])

    if not driver.driver_name or not driver.mobile:
        db.rollback()
        raise ValidationError("Required fields missing", field='driver_name' if not driver.driver_name else 'mobile',
                              reason="missing")

    _commit(db, 'update_driver', "Update failed")
    logger.info(f"Updated driver {driver.id}")
    return driver


def delete_driver(db: Session, driver_id: Any) -> int:
    """Delete a database driver and return its id."""
    driver = _get_mutable_driver(db, driver_id)
    deleted_id = driver.id

    db.delete(driver)
    _commit(db, 'delete_driver', "Delete failed")

    logger.info(f"Deleted driver {deleted_id}")
    return deleted_id
