"""
Vehicle routes for the fleet backend.

Serves the read-only vehicle master.
"""

import logging
from flask import Blueprint, current_app, jsonify

from extensions import cache
from services.reference_data import load_vehicle_master

logger = logging.getLogger(__name__)

vehicles_bp = Blueprint('vehicles', __name__)


@cache.memoize()
def _load_vehicle_master(path):
    return load_vehicle_master(path)


def vehicle_records():
    """Vehicle master rows for the configured file (cached outside tests)."""
    return _load_vehicle_master(current_app.config['VEHICLE_MASTER_PATH'])


@vehicles_bp.route('/vehicles', methods=['GET'])
def get_vehicles():
    """Return the vehicle master rows as stored, header row included."""
    return jsonify(vehicle_records())
