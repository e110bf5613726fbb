"""
Efficiency Calculations

Distance and fuel-efficiency metrics for fuel events and reports:
- Distance from odometer readings
- km per litre for a single event
- Two-decimal efficiency strings for report rows
"""

from typing import Union

from .constants import EFFICIENCY_DECIMALS, EFFICIENCY_UNAVAILABLE


def calculate_distance(odometer_start: int, odometer_end: int) -> int:
    """
    Distance covered between two odometer readings.

    Examples:
        >>> calculate_distance(1000, 1100)
        100
    """
    return odometer_end - odometer_start


def calculate_fuel_efficiency(distance: float, fuel_amount: float) -> float:
    """
    Calculate fuel efficiency in km per litre.

    Args:
        distance: Kilometres travelled
        fuel_amount: Litres filled

    Returns:
        distance / fuel_amount, or 0 when no fuel was recorded

    Examples:
        >>> calculate_fuel_efficiency(100, 10)
        10.0
        >>> calculate_fuel_efficiency(100, 0)
        0
    """
    if not fuel_amount or fuel_amount <= 0:
        return 0
    return distance / fuel_amount


def format_efficiency(distance: float, fuel_amount: float) -> str:
    """
    Format efficiency for a report row.

    Examples:
        >>> format_efficiency(150, 15)
        '10.00'
        >>> format_efficiency(0, 0)
        'unavailable'
    """
    if not fuel_amount or fuel_amount <= 0:
        return EFFICIENCY_UNAVAILABLE
    return f"{distance / fuel_amount:.{EFFICIENCY_DECIMALS}f}"


def parse_efficiency(value: Union[str, float, None]) -> float:
    """Turn a formatted efficiency back into a number (0 for the sentinel)."""
    if value is None or value == EFFICIENCY_UNAVAILABLE:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
