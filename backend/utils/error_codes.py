"""
Error Code Taxonomy for the fleet backend

Structured error codes attached to API error responses and wide events.

Error Code Format:
- E001-E099: Validation errors (bad input data)
- E100-E199: Reference data errors (vehicle master, fuel history files)
- E200-E299: Database errors (connection, query failures)
- E400-E499: Business logic errors (missing records, read-only records)
- E500-E599: System errors
"""

from enum import Enum
from typing import Optional

from exceptions import (
    FleetError,
    ReadOnlyRecordError,
    RecordNotFoundError,
    ReferenceDataError,
    StorageError,
    ValidationError,
)


class ErrorCategory(str, Enum):
    """High-level error categories for grouping and alerting."""

    VALIDATION = "validation"
    REFERENCE_DATA = "reference_data"
    DATABASE = "database"
    BUSINESS_LOGIC = "business_logic"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """Structured error codes with consistent format."""

    # Validation Errors (E001-E099)
    E002_MISSING_REQUIRED_FIELD = "E002"
    E003_INVALID_DATA_TYPE = "E003"
    E004_OUT_OF_RANGE = "E004"
    E006_ODOMETER_ORDER = "E006"  # odometer end not greater than start

    # Reference Data Errors (E100-E199)
    E100_REFERENCE_FILE_MISSING = "E100"
    E101_REFERENCE_FILE_INVALID = "E101"

    # Database Errors (E200-E299)
    E200_DB_CONNECTION_FAILED = "E200"
    E202_DB_CONSTRAINT_VIOLATION = "E202"
    E203_DB_TRANSACTION_ROLLBACK = "E203"

    # Business Logic Errors (E400-E499)
    E410_RECORD_NOT_FOUND = "E410"
    E411_READ_ONLY_RECORD = "E411"

    # System Errors (E500-E599)
    E500_INTERNAL_SERVER_ERROR = "E500"


ERROR_METADATA = {
    ErrorCode.E002_MISSING_REQUIRED_FIELD: {
        "category": ErrorCategory.VALIDATION,
        "description": "Required field missing in request",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E003_INVALID_DATA_TYPE: {
        "category": ErrorCategory.VALIDATION,
        "description": "Field has wrong data type",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E004_OUT_OF_RANGE: {
        "category": ErrorCategory.VALIDATION,
        "description": "Value outside acceptable range",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E006_ODOMETER_ORDER: {
        "category": ErrorCategory.VALIDATION,
        "description": "Odometer end must be greater than start",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E100_REFERENCE_FILE_MISSING: {
        "category": ErrorCategory.REFERENCE_DATA,
        "description": "Reference data file could not be read",
        "severity": "error",
        "alert": True,
    },
    ErrorCode.E101_REFERENCE_FILE_INVALID: {
        "category": ErrorCategory.REFERENCE_DATA,
        "description": "Reference data file is not valid JSON",
        "severity": "error",
        "alert": True,
    },
    ErrorCode.E200_DB_CONNECTION_FAILED: {
        "category": ErrorCategory.DATABASE,
        "description": "Database connection failed",
        "severity": "critical",
        "alert": True,
    },
    ErrorCode.E202_DB_CONSTRAINT_VIOLATION: {
        "category": ErrorCategory.DATABASE,
        "description": "Database constraint violated",
        "severity": "error",
        "alert": False,
    },
    ErrorCode.E203_DB_TRANSACTION_ROLLBACK: {
        "category": ErrorCategory.DATABASE,
        "description": "Database transaction rolled back",
        "severity": "error",
        "alert": True,
    },
    ErrorCode.E410_RECORD_NOT_FOUND: {
        "category": ErrorCategory.BUSINESS_LOGIC,
        "description": "Requested record does not exist",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E411_READ_ONLY_RECORD: {
        "category": ErrorCategory.BUSINESS_LOGIC,
        "description": "Record comes from a read-only source",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E500_INTERNAL_SERVER_ERROR: {
        "category": ErrorCategory.SYSTEM,
        "description": "Unhandled internal error",
        "severity": "critical",
        "alert": True,
    },
}


def get_error_metadata(error_code: ErrorCode) -> dict:
    """Get metadata for an error code."""
    return ERROR_METADATA.get(
        error_code,
        {
            "category": ErrorCategory.SYSTEM,
            "description": "Unknown error",
            "severity": "error",
            "alert": True,
        },
    )


def error_code_for(error: Exception) -> ErrorCode:
    """Pick the error code that best describes an application exception."""
    if isinstance(error, ValidationError):
        if error.reason == "odometer-order":
            return ErrorCode.E006_ODOMETER_ORDER
        if error.reason == "missing":
            return ErrorCode.E002_MISSING_REQUIRED_FIELD
        if error.reason == "out-of-range":
            return ErrorCode.E004_OUT_OF_RANGE
        return ErrorCode.E003_INVALID_DATA_TYPE
    if isinstance(error, ReferenceDataError):
        if error.details.get("reason") == "invalid-json":
            return ErrorCode.E101_REFERENCE_FILE_INVALID
        return ErrorCode.E100_REFERENCE_FILE_MISSING
    if isinstance(error, StorageError):
        return ErrorCode.E203_DB_TRANSACTION_ROLLBACK
    if isinstance(error, RecordNotFoundError):
        return ErrorCode.E410_RECORD_NOT_FOUND
    if isinstance(error, ReadOnlyRecordError):
        return ErrorCode.E411_READ_ONLY_RECORD
    return ErrorCode.E500_INTERNAL_SERVER_ERROR


class StructuredError:
    """Structured error with code, category, and metadata."""

    def __init__(self, code: ErrorCode, message: str, exception: Optional[Exception] = None, **context):
        """
        Create a structured error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            exception: Original exception (if applicable)
            **context: Additional context fields (vehicle_no, report_id, etc.)
        """
        self.code = code
        self.message = message
        self.exception = exception
        self.context = context
        self.metadata = get_error_metadata(code)

    @classmethod
    def from_exception(cls, error: FleetError) -> "StructuredError":
        return cls(error_code_for(error), error.message, exception=error, **error.details)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        error_dict = {
            "code": self.code.value,
            "category": self.metadata["category"].value,
            "message": self.message,
            "severity": self.metadata["severity"],
            "alert": self.metadata["alert"],
        }

        if self.exception:
            error_dict["exception_type"] = type(self.exception).__name__
            error_dict["exception_message"] = str(self.exception)

        if self.context:
            error_dict["context"] = self.context

        return error_dict

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"
