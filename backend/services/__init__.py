"""
Services module for fleet business logic.

This module contains the business logic kept separate from the Flask
route handlers.
"""

from services.fuel_ledger import (
    record_event,
    list_events,
    last_event_before,
    events_for_vehicle,
    fleet_totals,
)
from services.report_service import (
    generate_report,
    merge_event_sources,
    summarize_report,
    create_report_snapshot,
    get_report_snapshot,
    report_to_csv,
)
from services.driver_directory import (
    list_drivers,
    create_driver,
    update_driver,
    delete_driver,
    find_driver_for_vehicle,
)
from services.reference_data import (
    load_vehicle_master,
    load_fuel_history,
    reference_mileage_for,
)
from services.fleet_analytics import (
    dashboard_stats,
    chart_breakdown,
)

__all__ = [
    # Fuel ledger
    'record_event',
    'list_events',
    'last_event_before',
    'events_for_vehicle',
    'fleet_totals',
    # Reports
    'generate_report',
    'merge_event_sources',
    'summarize_report',
    'create_report_snapshot',
    'get_report_snapshot',
    'report_to_csv',
    # Drivers
    'list_drivers',
    'create_driver',
    'update_driver',
    'delete_driver',
    'find_driver_for_vehicle',
    # Reference data
    'load_vehicle_master',
    'load_fuel_history',
    'reference_mileage_for',
    # Dashboard
    'dashboard_stats',
    'chart_breakdown',
]
