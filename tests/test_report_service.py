"""
Tests for the vehicle report aggregator, summary and snapshots.
"""

import csv
import io
import uuid

import pytest

from exceptions import RecordNotFoundError, ValidationError
from services.report_service import (
    create_report_snapshot,
    generate_report,
    get_report_snapshot,
    merge_event_sources,
    report_period_label,
    report_to_csv,
    split_total,
    summarize_report,
    validate_report_request,
)


def fuel(vehicle_no, date, fuel_amount, distance, **extra):
    return dict(vehicle_no=vehicle_no, date=date, fuel_amount=fuel_amount, distance_traveled=distance, **extra)


# ============================================================================
# generate_report
# ============================================================================


class TestGenerateReport:
    """Tests for generate_report."""

    def test_same_day_events_are_merged(self):
        events = [
            fuel("A", "2024-05-01T10:00", 10, 100),
            fuel("A", "2024-05-01T18:00", 5, 50),
        ]

        rows = generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert rows == [
            {"date": "2024-05-01", "distance": 150, "mileage": 12, "fuel_amount": 15, "efficiency": "10.00"},
            {"date": "TOTAL", "distance": 150, "mileage": 12, "fuel_amount": 15, "efficiency": "10.00"},
        ]

    def test_no_matching_events_yields_only_total(self):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [fuel("B", "2024-05-02T10:00", 10, 100)], 9)

        assert rows == [
            {"date": "TOTAL", "distance": 0, "mileage": 9, "fuel_amount": 0, "efficiency": "unavailable"},
        ]

    def test_empty_input(self):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [], 0)

        assert len(rows) == 1
        assert rows[0]["date"] == "TOTAL"

    def test_day_rows_sorted_ascending_total_last(self):
        events = [
            fuel("A", "2024-05-09T10:00", 10, 120),
            fuel("A", "2024-05-02T10:00", 10, 100),
            fuel("A", "2024-05-05T10:00", 10, 110),
        ]

        rows = generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert [r["date"] for r in rows] == ["2024-05-02", "2024-05-05", "2024-05-09", "TOTAL"]

    def test_range_filter_is_lexical(self):
        """An event later on the to_date day sorts after the bare day key."""
        events = [
            fuel("A", "2024-05-01T00:00", 10, 100),
            fuel("A", "2024-05-31T10:00", 10, 100),
            fuel("A", "2024-04-30T23:59", 10, 100),
        ]

        rows = generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert [r["date"] for r in rows] == ["2024-05-01", "TOTAL"]

    def test_vehicle_match_is_exact(self):
        events = [fuel("a", "2024-05-02T10:00", 10, 100), fuel("A ", "2024-05-02T10:00", 10, 100)]

        rows = generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert rows[-1]["distance"] == 0

    def test_zero_fuel_day_is_unavailable(self):
        events = [fuel("A", "2024-05-02T10:00", 0, 80), fuel("A", "2024-05-03T10:00", 10, 100)]

        rows = generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert rows[0]["efficiency"] == "unavailable"
        assert rows[1]["efficiency"] == "10.00"
        assert rows[-1]["efficiency"] == "18.00"

    def test_efficiency_two_decimals(self):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [fuel("A", "2024-05-02T10:00", 3, 100)], 12)

        assert rows[0]["efficiency"] == "33.33"

    def test_mileage_is_reference_value_on_every_row(self):
        events = [fuel("A", "2024-05-02T10:00", 10, 100), fuel("A", "2024-05-03T10:00", 10, 300)]

        rows = generate_report("A", "2024-05-01", "2024-05-31", events, 14.5)

        assert {r["mileage"] for r in rows} == {14.5}

    def test_duplicates_across_sources_are_not_deduplicated(self):
        event = fuel("A", "2024-05-02T10:00", 10, 100, id=1)
        events = merge_event_sources([dict(event)], [dict(event)])

        rows = generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert rows[0]["distance"] == 200
        assert rows[0]["fuel_amount"] == 20

    def test_does_not_mutate_input(self):
        events = [fuel("A", "2024-05-01T10:00", 10, 100), fuel("A", "2024-05-01T18:00", 5, 50)]
        original = [dict(e) for e in events]

        generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert events == original

    def test_idempotent(self):
        events = [fuel("A", "2024-05-01T10:00", 10, 100), fuel("A", "2024-05-04T18:00", 5, 50)]

        first = generate_report("A", "2024-05-01", "2024-05-31", events, 12)
        second = generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert first == second

    def test_events_without_date_are_skipped(self):
        events = [fuel("A", None, 10, 100), fuel("A", "2024-05-02T10:00", 10, 100)]

        rows = generate_report("A", "2024-05-01", "2024-05-31", events, 12)

        assert rows[-1]["distance"] == 100

    def test_accepts_model_instances(self):
        from factories import FuelEventFactory

        event = FuelEventFactory.build(vehicle_no="A", date="2024-05-02T10:00", fuel_amount=10.0)

        rows = generate_report("A", "2024-05-01", "2024-05-31", [event], 12)

        assert rows[0]["distance"] == 100


class TestValidateReportRequest:
    """Tests for validate_report_request."""

    def test_accepts_dates_and_timestamps(self):
        validate_report_request("A", "2024-05-01", "2024-05-31T23:59")

    @pytest.mark.parametrize("vehicle_no, from_date, to_date, field, reason", [
        ("", "2024-05-01", "2024-05-31", "vehicle_no", "missing"),
        (42, "2024-05-01", "2024-05-31", "vehicle_no", "invalid-type"),
        ("A", 20240501, "2024-05-31", "from_date", "invalid-type"),
        ("A", "2024-05-01", None, "to_date", "invalid-type"),
        ("A", "2024-05-01", "end of May", "to_date", "invalid-type"),
    ])
    def test_rejects_bad_parameters(self, vehicle_no, from_date, to_date, field, reason):
        with pytest.raises(ValidationError) as exc_info:
            validate_report_request(vehicle_no, from_date, to_date)

        assert exc_info.value.field == field
        assert exc_info.value.reason == reason


class TestMergeEventSources:
    """Tests for merge_event_sources."""

    def test_historical_first(self):
        merged = merge_event_sources([{"date": "h"}], [{"date": "l"}])

        assert [e["date"] for e in merged] == ["h", "l"]

    def test_first_seen_day_entry_comes_from_historical(self):
        """Same-day entries merge into the first one seen (historical wins)."""
        historical = [fuel("A", "2024-05-02T10:00", 10, 100, location="Depot")]
        ledger = [fuel("A", "2024-05-02T18:00", 5, 50, location="Highway")]

        rows = generate_report("A", "2024-05-01", "2024-05-31", merge_event_sources(historical, ledger), 12)

        assert rows[0]["distance"] == 150


# ============================================================================
# Summary
# ============================================================================


class TestSummarizeReport:
    """Tests for summarize_report."""

    def test_above_expected(self):
        rows = generate_report("A", "2024-05-01", "2024-06-30", [
            fuel("A", "2024-05-02T10:00", 10, 150),
            fuel("A", "2024-05-03T10:00", 10, 100),
        ], 12)

        summary = summarize_report(rows, "2024-05-01", "2024-06-30")

        assert summary["total_distance"] == 250
        assert summary["total_fuel"] == 20
        assert summary["actual_efficiency"] == 12.5
        assert summary["expected_mileage"] == 12
        assert summary["verdict"] == "above_expected"
        assert summary["needs_maintenance_check"] is False
        assert summary["peak_day"] == {"date": "2024-05-02", "distance": 150}
        assert summary["report_period"] == "May 2024 – June 2024"

    def test_equal_is_below_expected(self):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [fuel("A", "2024-05-02T10:00", 10, 120)], 12)

        assert summarize_report(rows)["verdict"] == "below_expected"

    def test_empty_report(self):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [], 12)

        summary = summarize_report(rows)

        assert summary["actual_efficiency"] == 0
        assert summary["calculated_efficiency"] == "unavailable"
        assert summary["peak_day"] is None
        assert summary["daily_distance"] == []
        assert summary["report_period"] == "N/A"

    def test_split_total(self):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [fuel("A", "2024-05-02T10:00", 10, 120)], 12)

        day_rows, total = split_total(rows)

        assert len(day_rows) == 1
        assert total["date"] == "TOTAL"


class TestReportPeriodLabel:
    """Tests for report_period_label."""

    def test_accepts_timestamps(self):
        assert report_period_label("2024-05-01T00:00", "2024-05-31") == "May 2024 – May 2024"

    def test_invalid_dates(self):
        assert report_period_label("not-a-date", "2024-05-31") == "N/A"


# ============================================================================
# Snapshots and CSV
# ============================================================================


class TestReportSnapshots:
    """Tests for storing and loading generated reports."""

    def test_round_trip(self, db_session):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [fuel("A", "2024-05-02T10:00", 10, 120)], 12)
        snapshot = create_report_snapshot(db_session, "A", "2024-05-01", "2024-05-31", rows, 12, None)
        report_id = str(snapshot.id)

        loaded = get_report_snapshot(db_session, report_id).to_dict()

        assert loaded["id"] == report_id
        assert loaded["rows"] == rows
        assert loaded["driver"] is None

    def test_unknown_id(self, db_session):
        with pytest.raises(RecordNotFoundError):
            get_report_snapshot(db_session, str(uuid.uuid4()))

    def test_malformed_id(self, db_session):
        with pytest.raises(RecordNotFoundError):
            get_report_snapshot(db_session, "not-a-uuid")


class TestReportToCsv:
    """Tests for report_to_csv."""

    def test_contact_details_on_first_row_only(self):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [
            fuel("A", "2024-05-02T10:00", 10, 120),
        ], 12)
        report = {
            "vehicle_no": "A",
            "rows": rows,
            "driver": {"driver_name": "Ravi Kumar", "mobile": "9845000001", "inspector": None},
        }

        parsed = list(csv.reader(io.StringIO(report_to_csv(report))))

        assert parsed[0][:5] == ["Date", "Distance (km)", "Mileage (km/l)", "Fuel Filled (L)", "Efficiency (km/l)"]
        assert parsed[1][0] == "2024-05-02"
        assert parsed[1][5:] == ["A", "Ravi Kumar", "9845000001", "N/A", "N/A"]
        assert parsed[2][0] == "TOTAL"
        assert parsed[2][5:] == ["", "", "", "", ""]

    def test_missing_driver(self):
        rows = generate_report("A", "2024-05-01", "2024-05-31", [], 12)

        parsed = list(csv.reader(io.StringIO(report_to_csv({"vehicle_no": "A", "rows": rows, "driver": None}))))

        assert parsed[1][6] == "N/A"
