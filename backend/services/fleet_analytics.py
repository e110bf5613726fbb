"""
Fleet Analytics Service

Dashboard headline numbers and the vehicle breakdowns behind the charts
page: vehicles per zone and city, HH target buckets, and distance per
vehicle.
"""

from collections import Counter
from typing import Any, Dict, Iterable, List, Optional

from calculations import calculate_fuel_efficiency
from calculations.constants import (
    CITY_COLUMN,
    HH_TARGET_BUCKETS,
    HH_TARGET_COLUMN,
    VEHICLE_NO_COLUMN,
    ZONE_COLUMN,
)
from services.reference_data import iter_vehicles

UNKNOWN_LABEL = "Unknown"


def dashboard_stats(vehicle_records: List[Dict[str, Any]], totals: Dict[str, float]) -> Dict[str, Any]:
    """Vehicle count plus ledger distance, fuel and overall km/l."""
    total_distance = totals.get('total_distance') or 0
    total_fuel = totals.get('total_fuel') or 0
    return {
        'total_vehicles': sum(1 for _ in iter_vehicles(vehicle_records)),
        'total_distance': total_distance,
        'total_fuel': total_fuel,
        'overall_efficiency': calculate_fuel_efficiency(total_distance, total_fuel),
    }


def hh_target_bucket(value: Any) -> str:
    """
    Bucket label for a vehicle's HH target.

    Missing or non-numeric targets count as 0.

    Examples:
        >>> hh_target_bucket(500)
        '0-500'
        >>> hh_target_bucket(1501)
        '1501+'
    """
    try:
        target = float(value or 0)
    except (TypeError, ValueError):
        target = 0
    for label, upper in HH_TARGET_BUCKETS:
        if upper is None or target <= upper:
            return label
    return HH_TARGET_BUCKETS[-1][0]


def _top(counts: Dict[str, float]):
    """Highest entry as [label, value]; first seen wins ties."""
    if not counts:
        return None
    label = max(counts, key=lambda k: counts[k])
    return [label, counts[label]]


def distance_by_vehicle(vehicle_records: List[Dict[str, Any]], events: Iterable[Dict[str, Any]]) -> Dict[str, float]:
    """Ledger distance per master vehicle; events for unknown vehicles are ignored."""
    totals = {v[VEHICLE_NO_COLUMN]: 0 for v in iter_vehicles(vehicle_records)}
    for event in events:
        vehicle_no = event.get('vehicle_no')
        if vehicle_no in totals:
            totals[vehicle_no] += event.get('distance_traveled') or 0
    return totals


def chart_breakdown(
    vehicle_records: List[Dict[str, Any]],
    events: Iterable[Dict[str, Any]],
    vehicle_no: Optional[str] = None,
    top: int = 6,
) -> Dict[str, Any]:
    """
    Aggregations for the charts page.

    ``distance_series`` holds the selected vehicle alone when ``vehicle_no``
    names a master vehicle, otherwise the ``top`` vehicles by distance.
    """
    vehicles = list(iter_vehicles(vehicle_records))

    zones = Counter(str(v.get(ZONE_COLUMN) or UNKNOWN_LABEL) for v in vehicles)
    cities = Counter(str(v.get(CITY_COLUMN) or UNKNOWN_LABEL) for v in vehicles)

    hh_ranges = {label: 0 for label, _ in HH_TARGET_BUCKETS}
    for v in vehicles:
        hh_ranges[hh_target_bucket(v.get(HH_TARGET_COLUMN))] += 1

    distances = distance_by_vehicle(vehicle_records, events)
    ranked = sorted(distances.items(), key=lambda item: item[1], reverse=True)

    if vehicle_no and vehicle_no in distances:
        series = [[vehicle_no, distances[vehicle_no]]]
    else:
        series = [[v, d] for v, d in ranked[:top]]

    return {
        'vehicles_per_zone': dict(zones),
        'vehicles_per_city': dict(cities),
        'hh_target_ranges': hh_ranges,
        'distance_by_vehicle': distances,
        'distance_series': series,
        'top_zone': _top(dict(zones)),
        'top_city': _top(dict(cities)),
        'top_hh_range': _top(hh_ranges),
        'top_distance': [ranked[0][0], ranked[0][1]] if ranked else None,
    }
