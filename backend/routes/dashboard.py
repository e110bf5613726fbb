"""
Dashboard routes for the fleet backend.

Handles the liveness endpoint, headline stats and chart breakdowns.
"""

from flask import Blueprint, current_app, jsonify, request

from database import get_db
from extensions import limiter, RateLimits
from services.fleet_analytics import chart_breakdown, dashboard_stats
from services.fuel_ledger import fleet_totals, list_events
from routes.vehicles import vehicle_records

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/')
def index():
    return "Fleet backend is running"


@dashboard_bp.route('/api/dashboard/stats', methods=['GET'])
def get_dashboard_stats():
    """Vehicle count, total distance and overall efficiency."""
    db = get_db()
    return jsonify(dashboard_stats(vehicle_records(), fleet_totals(db)))


@dashboard_bp.route('/api/dashboard/charts', methods=['GET'])
@limiter.limit(RateLimits.READ_HEAVY)
def get_dashboard_charts():
    """
    Vehicle breakdowns for the charts page.

    Query params:
        vehicle_no: Limit the distance series to one vehicle
        top: Number of vehicles in the distance series (default CHART_TOP_VEHICLES)
    """
    db = get_db()

    try:
        top = max(1, int(request.args.get('top', current_app.config['CHART_TOP_VEHICLES'])))
    except (ValueError, TypeError):
        top = current_app.config['CHART_TOP_VEHICLES']

    events = [e.to_dict() for e in list_events(db)]
    return jsonify(chart_breakdown(
        vehicle_records(),
        events,
        vehicle_no=request.args.get('vehicle_no') or None,
        top=top,
    ))
