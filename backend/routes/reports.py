"""
Report routes for the fleet backend.

Generates vehicle reports, stores them, and serves them back by id as
JSON, as a summary, or as a CSV download.
"""

import logging
from flask import Blueprint, current_app, request, jsonify, Response

from database import get_db
from extensions import limiter, RateLimits
from routes.fuel import fuel_history
from routes.vehicles import vehicle_records
from services.driver_directory import find_driver_for_vehicle, list_drivers
from services.fuel_ledger import events_for_vehicle
from services.reference_data import reference_mileage_for
from services.report_service import (
    create_report_snapshot,
    generate_report,
    get_report_snapshot,
    merge_event_sources,
    report_to_csv,
    summarize_report,
    validate_report_request,
)
from utils.wide_events import track_operation

logger = logging.getLogger(__name__)

reports_bp = Blueprint('reports', __name__)


@reports_bp.route('/reports', methods=['POST'])
@limiter.limit(RateLimits.EXPENSIVE)
def create_report():
    """
    Generate and store a vehicle report.

    Request body:
        vehicle_no: Vehicle to report on (required)
        from_date: Start of range, inclusive (default DEFAULT_REPORT_FROM)
        to_date: End of range, inclusive (default DEFAULT_REPORT_TO)
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('vehicle_no'):
        return jsonify({'error': 'vehicle_no is required'}), 400

    vehicle_no = data['vehicle_no']
    from_date = data.get('from_date') or current_app.config['DEFAULT_REPORT_FROM']
    to_date = data.get('to_date') or current_app.config['DEFAULT_REPORT_TO']
    validate_report_request(vehicle_no, from_date, to_date)

    db = get_db()
    with track_operation("report_generate", vehicle_no=vehicle_no, from_date=from_date, to_date=to_date) as event:
        vehicles = vehicle_records()
        mileage = reference_mileage_for(vehicles, vehicle_no)

        with event.timer("load_events"):
            events = merge_event_sources(fuel_history(), events_for_vehicle(db, vehicle_no))

        rows = generate_report(vehicle_no, from_date, to_date, events, mileage)
        driver = find_driver_for_vehicle(list_drivers(db, vehicles), vehicle_no)

        snapshot = create_report_snapshot(db, vehicle_no, from_date, to_date, rows, mileage, driver)
        event.add_context(report_id=str(snapshot.id))
        event.add_business_metric("report_generated", True)
        event.add_business_metric("day_rows", len(rows) - 1)

    return jsonify(snapshot.to_dict()), 201


@reports_bp.route('/reports/<report_id>', methods=['GET'])
def get_report(report_id):
    """Stored report rows and the driver it was generated with."""
    db = get_db()
    return jsonify(get_report_snapshot(db, report_id).to_dict())


@reports_bp.route('/reports/<report_id>/summary', methods=['GET'])
def get_report_summary(report_id):
    """Headline figures, peak day and efficiency verdict for a stored report."""
    db = get_db()
    report = get_report_snapshot(db, report_id).to_dict()

    summary = summarize_report(report['rows'], report['from_date'], report['to_date'])
    summary.update({
        'report_id': report['id'],
        'vehicle_no': report['vehicle_no'],
        'driver': report['driver'],
    })
    return jsonify(summary)


@reports_bp.route('/reports/<report_id>/export', methods=['GET'])
@limiter.limit(RateLimits.EXPENSIVE)
def export_report(report_id):
    """Download a stored report as CSV."""
    db = get_db()
    report = get_report_snapshot(db, report_id).to_dict()

    return Response(
        report_to_csv(report),
        mimetype='text/csv',
        headers={
            'Content-Disposition': f"attachment; filename=Vehicle_Report_{report['vehicle_no']}.csv"
        }
    )
