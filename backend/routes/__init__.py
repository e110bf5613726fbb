"""
Routes module for the fleet backend Flask blueprints.

This module contains Flask blueprints that handle different areas of the API.
"""

from routes.dashboard import dashboard_bp
from routes.drivers import drivers_bp
from routes.fuel import fuel_bp
from routes.reports import reports_bp
from routes.vehicles import vehicles_bp

__all__ = [
    "dashboard_bp",
    "drivers_bp",
    "fuel_bp",
    "reports_bp",
    "vehicles_bp",
]


def register_blueprints(app):
    """Register all blueprints with the Flask app."""
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(vehicles_bp, url_prefix="/api")
    app.register_blueprint(fuel_bp, url_prefix="/api")
    app.register_blueprint(drivers_bp, url_prefix="/api")
    app.register_blueprint(reports_bp, url_prefix="/api")
