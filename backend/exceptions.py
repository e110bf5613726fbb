"""
Custom exceptions for the fleet backend.

This module provides a hierarchy of exceptions for better error handling
and more informative error messages throughout the application.
"""


class FleetError(Exception):
    """Base exception for all fleet backend errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(FleetError):
    """Caller-supplied data is missing, malformed or inconsistent."""

    def __init__(self, message: str, field: str = None, reason: str = None, value=None):
        details = {}
        if field:
            details['field'] = field
        if reason:
            details['reason'] = reason
        if value is not None:
            details['value'] = value
        super().__init__(message, details)
        self.field = field
        self.reason = reason
        self.value = value


class StorageError(FleetError):
    """Database operation failed."""

    def __init__(self, message: str, operation: str = None):
        details = {}
        if operation:
            details['operation'] = operation
        super().__init__(message, details)
        self.operation = operation


class ReferenceDataError(FleetError):
    """A read-only JSON data source could not be loaded."""

    def __init__(self, message: str, path: str = None, reason: str = None):
        details = {}
        if path:
            details['path'] = path
        if reason:
            details['reason'] = reason
        super().__init__(message, details)
        self.path = path
        self.reason = reason


class RecordNotFoundError(FleetError):
    """Requested record does not exist."""

    def __init__(self, message: str, record_type: str = None, record_id=None):
        details = {}
        if record_type:
            details['record_type'] = record_type
        if record_id is not None:
            details['record_id'] = str(record_id)
        super().__init__(message, details)
        self.record_type = record_type
        self.record_id = record_id


class ReadOnlyRecordError(FleetError):
    """Attempt to mutate a record that comes from a read-only source."""

    def __init__(self, message: str, source: str = None):
        details = {}
        if source:
            details['source'] = source
        super().__init__(message, details)
        self.source = source
