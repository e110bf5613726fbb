"""
Fuel routes for the fleet backend.

Handles the fuel ledger endpoints and the historical fuel log.
"""

import logging
from flask import Blueprint, current_app, request, jsonify

from extensions import cache, limiter, RateLimits
from database import get_db
from exceptions import FleetError
from services.fuel_ledger import list_events, last_event_before, record_event
from services.reference_data import load_fuel_history
from utils.error_codes import StructuredError
from utils.wide_events import WideEvent

logger = logging.getLogger(__name__)

fuel_bp = Blueprint('fuel', __name__)


@cache.memoize()
def _load_fuel_history(path):
    return load_fuel_history(path)


def fuel_history():
    """Historical fuel entries for the configured file (cached outside tests)."""
    return _load_fuel_history(current_app.config['FUEL_HISTORY_PATH'])


@fuel_bp.route('/fuel', methods=['GET'])
@limiter.limit(RateLimits.READ_HEAVY)
def get_fuel_events():
    """Get all fuel events, most recent first."""
    db = get_db()
    return jsonify([e.to_dict() for e in list_events(db)])


@fuel_bp.route('/fuel', methods=['POST'])
@limiter.limit(RateLimits.WRITE_MODERATE)
def add_fuel_event():
    """
    Record a fuel event.

    Request body:
        vehicle_no: Vehicle identifier
        fuel_amount: Litres filled (>= 0)
        odometer_start: Odometer at the previous fill-up (km)
        odometer_end: Odometer now (km), must exceed odometer_start
        location: Where the fill-up happened
        date: Optional ISO timestamp, defaults to now
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data:
        return jsonify({'error': 'No data provided'}), 400

    event = WideEvent("fuel_event_create")
    event.add_context(vehicle_no=data.get('vehicle_no'), remote_addr=request.remote_addr)

    db = get_db()
    try:
        with event.timer("db_insert"):
            fuel_event = record_event(
                db,
                vehicle_no=data.get('vehicle_no'),
                fuel_amount=data.get('fuel_amount'),
                odometer_start=data.get('odometer_start'),
                odometer_end=data.get('odometer_end'),
                location=data.get('location'),
                date=data.get('date'),
            )
    except FleetError as e:
        event.add_error(StructuredError.from_exception(e))
        event.mark_failure(type(e).__name__)
        event.emit(level="warning", force=True)
        raise

    event.add_context(fuel_event_id=fuel_event.id)
    event.add_business_metric("fuel_event_recorded", True)
    event.add_business_metric("distance_km", fuel_event.distance_traveled)
    event.mark_success().emit()

    return jsonify(fuel_event.to_dict()), 201


@fuel_bp.route('/fuel/last-entry-before/<vehicle_no>/<date>', methods=['GET'])
def get_last_entry_before(vehicle_no, date):
    """
    Latest fuel event for a vehicle dated strictly before ``date``.

    Returns JSON null when there is none; the fuel form uses the result's
    odometer_end as the next odometer_start.
    """
    db = get_db()
    fuel_event = last_event_before(db, vehicle_no, date)
    return jsonify(fuel_event.to_dict() if fuel_event else None)


@fuel_bp.route('/fuel/json', methods=['GET'])
def get_fuel_history():
    """Historical fuel entries from fuel.json."""
    return jsonify(fuel_history())
