"""
Vehicle Report Service

Aggregates fuel events for one vehicle over a date range into day rows
plus a trailing TOTAL row, summarises the result against the vehicle's
reference mileage, and stores generated reports so they can be reloaded
by id.
"""

import csv
import io
import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from dateutil.parser import isoparse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from calculations import format_efficiency, parse_efficiency
from calculations.constants import TOTAL_ROW_KEY
from exceptions import RecordNotFoundError, StorageError, ValidationError
from models import ReportSnapshot
from utils import day_key, is_iso_timestamp

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"

# (header, row key) pairs for the CSV export
REPORT_COLUMNS = [
    ("Date", "date"),
    ("Distance (km)", "distance"),
    ("Mileage (km/l)", "mileage"),
    ("Fuel Filled (L)", "fuel_amount"),
    ("Efficiency (km/l)", "efficiency"),
]

CONTACT_COLUMNS = [
    ("Vehicle No", "vehicle_no"),
    ("Driver Name", "driver_name"),
    ("Driver Mobile", "mobile"),
    ("Inspector", "inspector"),
    ("Inspector Mobile", "inspector_mobile"),
]


def _as_mapping(event: Any) -> Dict[str, Any]:
    if isinstance(event, dict):
        return event
    return event.to_dict()


def merge_event_sources(historical: Iterable[Any], ledger: Iterable[Any]) -> List[Dict[str, Any]]:
    """Historical entries followed by ledger entries; ids are not correlated."""
    return [_as_mapping(e) for e in historical] + [_as_mapping(e) for e in ledger]


def _in_range(event: Dict[str, Any], vehicle_no: str, from_date: str, to_date: str) -> bool:
    date = event.get('date')
    if event.get('vehicle_no') != vehicle_no or not isinstance(date, str):
        return False
    # String comparison: "2024-05-31T10:00" sorts after a to_date of "2024-05-31"
    return from_date <= date <= to_date


def validate_report_request(vehicle_no: Any, from_date: Any, to_date: Any) -> None:
    """
    Check report parameters before aggregation.

    Raises:
        ValidationError: vehicle_no missing or not a string, or a date that is
            not an ISO-8601 string
    """
    if vehicle_no is None or vehicle_no == '':
        raise ValidationError("vehicle_no is required", field='vehicle_no', reason="missing")
    if not isinstance(vehicle_no, str):
        raise ValidationError(
            "vehicle_no must be a string", field='vehicle_no', reason="invalid-type", value=vehicle_no
        )
    for field, value in (('from_date', from_date), ('to_date', to_date)):
        if not is_iso_timestamp(value):
            raise ValidationError(
                f"{field} must be an ISO-8601 date", field=field, reason="invalid-type", value=value
            )


def _report_row(date: str, distance: float, fuel_amount: float, mileage: float) -> Dict[str, Any]:
    return {
        'date': date,
        'distance': distance,
        'mileage': mileage,
        'fuel_amount': fuel_amount,
        'efficiency': format_efficiency(distance, fuel_amount),
    }


def generate_report(
    vehicle_no: str,
    from_date: str,
    to_date: str,
    events: Iterable[Any],
    reference_mileage: float,
) -> List[Dict[str, Any]]:
    """
    Aggregate fuel events into one row per calendar day plus a TOTAL row.

    Events for other vehicles, or dated outside ``from_date..to_date``
    (inclusive, compared as strings), are ignored. Events on the same day
    are summed; the first event seen for a day supplies its other fields.
    Every row carries ``reference_mileage`` as its ``mileage``.

    Returns:
        Day rows sorted ascending by day key, then the TOTAL row. With no
        matching events only the TOTAL row is returned, with zero sums.
    """
    days: Dict[str, Dict[str, Any]] = {}

    for event in events:
        event = _as_mapping(event)
        if not _in_range(event, vehicle_no, from_date, to_date):
            continue

        key = day_key(event['date'])
        existing = days.get(key)
        if existing:
            existing['fuel_amount'] += event.get('fuel_amount') or 0
            existing['distance_traveled'] += event.get('distance_traveled') or 0
        else:
            days[key] = dict(
                event,
                date=key,
                fuel_amount=event.get('fuel_amount') or 0,
                distance_traveled=event.get('distance_traveled') or 0,
            )

    rows = [
        _report_row(key, entry['distance_traveled'], entry['fuel_amount'], reference_mileage)
        for key, entry in sorted(days.items())
    ]

    total_distance = sum(r['distance'] for r in rows)
    total_fuel = sum(r['fuel_amount'] for r in rows)
    rows.append(_report_row(TOTAL_ROW_KEY, total_distance, total_fuel, reference_mileage))

    return rows


def split_total(rows: List[Dict[str, Any]]):
    """Return (day_rows, total_row); total_row is None for malformed input."""
    day_rows = [r for r in rows if r.get('date') != TOTAL_ROW_KEY]
    total = next((r for r in rows if r.get('date') == TOTAL_ROW_KEY), None)
    return day_rows, total


def _month_label(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    try:
        return isoparse(day_key(value)).strftime('%B %Y')
    except (ValueError, OverflowError):
        return None


def report_period_label(from_date: Optional[str], to_date: Optional[str]) -> str:
    """
    Human readable report period.

    Examples:
        >>> report_period_label('2024-05-01', '2024-06-30')
        'May 2024 – June 2024'
    """
    start, end = _month_label(from_date), _month_label(to_date)
    if not start or not end:
        return NOT_AVAILABLE
    return f"{start} – {end}"


def summarize_report(
    rows: List[Dict[str, Any]],
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Headline figures and insights for a generated report.

    The verdict compares the overall efficiency with the reference mileage:
    anything not strictly above the expected value asks for a maintenance
    check.
    """
    day_rows, total = split_total(rows)
    total = total or _report_row(TOTAL_ROW_KEY, 0, 0, 0)

    expected_mileage = total['mileage'] or 0
    actual_efficiency = parse_efficiency(total['efficiency'])

    peak_day = None
    for row in day_rows:
        if row['distance'] > (peak_day['distance'] if peak_day else 0):
            peak_day = {'date': row['date'], 'distance': row['distance']}

    verdict = 'above_expected' if actual_efficiency > expected_mileage else 'below_expected'

    return {
        'report_period': report_period_label(from_date, to_date),
        'total_distance': total['distance'],
        'total_fuel': total['fuel_amount'],
        'expected_mileage': expected_mileage,
        'calculated_efficiency': total['efficiency'],
        'actual_efficiency': actual_efficiency,
        'peak_day': peak_day,
        'verdict': verdict,
        'needs_maintenance_check': verdict == 'below_expected',
        'daily_distance': [{'date': r['date'], 'distance': r['distance']} for r in day_rows],
    }


def create_report_snapshot(
    db: Session,
    vehicle_no: str,
    from_date: str,
    to_date: str,
    rows: List[Dict[str, Any]],
    reference_mileage: float,
    driver: Optional[Dict[str, Any]] = None,
) -> ReportSnapshot:
    """Persist a generated report so other views can load it by id."""
    snapshot = ReportSnapshot(
        id=uuid.uuid4(),
        vehicle_no=vehicle_no,
        from_date=from_date,
        to_date=to_date,
        reference_mileage=reference_mileage,
        rows=rows,
        driver=driver,
    )
    try:
        db.add(snapshot)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to store report for {vehicle_no}: {e}")
        raise StorageError("Failed to store report", operation="create_report_snapshot") from e

    logger.info(f"Report {snapshot.id} stored for {vehicle_no} ({from_date}..{to_date}, {len(rows)} rows)")
    return snapshot


def get_report_snapshot(db: Session, report_id: str) -> ReportSnapshot:
    """
    Load a stored report.

    Raises:
        RecordNotFoundError: malformed or unknown report id
    """
    try:
        key = uuid.UUID(str(report_id))
    except ValueError as e:
        raise RecordNotFoundError("Report not found", record_type="report", record_id=report_id) from e

    try:
        snapshot = db.query(ReportSnapshot).filter(ReportSnapshot.id == key).first()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError("Failed to fetch report", operation="get_report_snapshot") from e

    if snapshot is None:
        raise RecordNotFoundError("Report not found", record_type="report", record_id=report_id)
    return snapshot


def report_to_csv(report: Dict[str, Any]) -> str:
    """
    Render a stored report as CSV.

    Vehicle and driver contact columns are filled on the first row only.
    """
    driver = report.get('driver') or {}
    contact = {
        'vehicle_no': report.get('vehicle_no') or '',
        'driver_name': driver.get('driver_name') or NOT_AVAILABLE,
        'mobile': driver.get('mobile') or NOT_AVAILABLE,
        'inspector': driver.get('inspector') or NOT_AVAILABLE,
        'inspector_mobile': driver.get('inspector_mobile') or NOT_AVAILABLE,
    }

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([header for header, _ in REPORT_COLUMNS + CONTACT_COLUMNS])

    for index, row in enumerate(report.get('rows') or []):
        values = [row.get(key, '') for _, key in REPORT_COLUMNS]
        values += [contact[key] if index == 0 else '' for _, key in CONTACT_COLUMNS]
        writer.writerow(values)

    return output.getvalue()
