"""
Tests for the exception hierarchy and error code mapping.
"""

import pytest

from app import status_for
from exceptions import (
    FleetError,
    ReadOnlyRecordError,
    RecordNotFoundError,
    ReferenceDataError,
    StorageError,
    ValidationError,
)
from utils.error_codes import ErrorCategory, ErrorCode, StructuredError, error_code_for, get_error_metadata


class TestExceptions:
    """Tests for exception construction."""

    def test_base_error_str(self):
        assert str(FleetError("boom")) == "boom"
        assert str(FleetError("boom", {"a": 1})) == "boom - {'a': 1}"

    def test_validation_error_details(self):
        error = ValidationError("bad", field="fuel_amount", reason="out-of-range", value=-1)

        assert error.details == {"field": "fuel_amount", "reason": "out-of-range", "value": -1}
        assert isinstance(error, FleetError)

    def test_validation_error_omits_empty_details(self):
        assert ValidationError("bad").details == {}

    def test_record_not_found_stringifies_id(self):
        error = RecordNotFoundError("Driver not found", record_type="driver", record_id=7)

        assert error.details == {"record_type": "driver", "record_id": "7"}
        assert error.record_id == 7

    def test_reference_data_error(self):
        error = ReferenceDataError("Unable to read", path="/x.json", reason="missing")

        assert error.details == {"path": "/x.json", "reason": "missing"}


class TestErrorCodes:
    """Tests for error_code_for and StructuredError."""

    @pytest.mark.parametrize("error, code", [
        (ValidationError("x", reason="odometer-order"), ErrorCode.E006_ODOMETER_ORDER),
        (ValidationError("x", reason="missing"), ErrorCode.E002_MISSING_REQUIRED_FIELD),
        (ValidationError("x", reason="out-of-range"), ErrorCode.E004_OUT_OF_RANGE),
        (ValidationError("x", reason="invalid-type"), ErrorCode.E003_INVALID_DATA_TYPE),
        (ReferenceDataError("x", reason="invalid-json"), ErrorCode.E101_REFERENCE_FILE_INVALID),
        (ReferenceDataError("x", reason="missing"), ErrorCode.E100_REFERENCE_FILE_MISSING),
        (StorageError("x"), ErrorCode.E203_DB_TRANSACTION_ROLLBACK),
        (RecordNotFoundError("x"), ErrorCode.E410_RECORD_NOT_FOUND),
        (ReadOnlyRecordError("x"), ErrorCode.E411_READ_ONLY_RECORD),
        (FleetError("x"), ErrorCode.E500_INTERNAL_SERVER_ERROR),
    ])
    def test_error_code_for(self, error, code):
        assert error_code_for(error) == code

    def test_every_code_has_metadata(self):
        for code in ErrorCode:
            assert isinstance(get_error_metadata(code)["category"], ErrorCategory)

    def test_structured_error_to_dict(self):
        error = RecordNotFoundError("Report not found", record_type="report", record_id="abc")

        structured = StructuredError.from_exception(error)
        data = structured.to_dict()

        assert str(structured) == "[E410] Report not found"
        assert data["category"] == "business_logic"
        assert data["context"] == {"record_type": "report", "record_id": "abc"}
        assert data["exception_type"] == "RecordNotFoundError"


class TestStatusMapping:
    """Tests for the HTTP status of each error type."""

    @pytest.mark.parametrize("error, status", [
        (ValidationError("x"), 400),
        (ReadOnlyRecordError("x"), 403),
        (RecordNotFoundError("x"), 404),
        (ReferenceDataError("x"), 500),
        (StorageError("x"), 500),
        (FleetError("x"), 500),
    ])
    def test_status_for(self, error, status):
        assert status_for(error) == status
