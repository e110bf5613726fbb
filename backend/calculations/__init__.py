"""
Fleet Calculation Module

Distance and efficiency primitives shared by the fuel ledger, the report
aggregator and the dashboard analytics.

Usage:
    from calculations import calculate_fuel_efficiency, format_efficiency
    from calculations.constants import TOTAL_ROW_KEY
"""

from .efficiency import (
    calculate_distance,
    calculate_fuel_efficiency,
    format_efficiency,
    parse_efficiency,
)

__all__ = [
    "calculate_distance",
    "calculate_fuel_efficiency",
    "format_efficiency",
    "parse_efficiency",
]
