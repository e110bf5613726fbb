"""
Driver routes for the fleet backend.

Lists vehicle master and database drivers together; only database
drivers can be edited or deleted.
"""

import logging
from flask import Blueprint, request, jsonify

from database import get_db
from extensions import limiter, RateLimits
from routes.vehicles import vehicle_records
from services.driver_directory import create_driver, delete_driver, list_drivers, update_driver
from utils.wide_events import track_operation

logger = logging.getLogger(__name__)

drivers_bp = Blueprint('drivers', __name__)


@drivers_bp.route('/drivers', methods=['GET'])
def get_drivers():
    """All drivers, each tagged with source "json" (read-only) or "db"."""
    db = get_db()
    return jsonify(list_drivers(db, vehicle_records()))


@drivers_bp.route('/drivers', methods=['POST'])
@limiter.limit(RateLimits.WRITE_MODERATE)
def add_driver():
    """
    Add a driver.

    Request body:
        vehicle_no, driver_name, mobile: required
        inspector, inspector_mobile: optional
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'No data provided'}), 400

    db = get_db()
    with track_operation("driver_create", vehicle_no=data.get('vehicle_no')) as event:
        driver = create_driver(db, data)
        event.add_context(driver_id=driver.id)
        event.add_business_metric("driver_changed", True)

    return jsonify(dict(driver.to_dict(), source='db')), 201


@drivers_bp.route('/drivers/<driver_id>', methods=['PUT'])
@limiter.limit(RateLimits.WRITE_MODERATE)
def edit_driver(driver_id):
    """Update driver_name, mobile, inspector and inspector_mobile."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'error': 'No data provided'}), 400

    db = get_db()
    with track_operation("driver_update", driver_id=driver_id) as event:
        driver = update_driver(db, driver_id, data)
        event.add_business_metric("driver_changed", True)

    return jsonify(dict(driver.to_dict(), source='db'))


@drivers_bp.route('/drivers/<driver_id>', methods=['DELETE'])
@limiter.limit(RateLimits.WRITE_MODERATE)
def remove_driver(driver_id):
    """Delete a database driver."""
    db = get_db()
    with track_operation("driver_delete", driver_id=driver_id) as event:
        deleted_id = delete_driver(db, driver_id)
        event.add_business_metric("driver_changed", True)

    return jsonify({'deleted': 1, 'id': deleted_id})
