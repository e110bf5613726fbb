"""Utility modules for the fleet backend."""

from .timezone import (
    utc_now_iso,
    is_iso_timestamp,
    day_key,
)

__all__ = [
    'utc_now_iso',
    'is_iso_timestamp',
    'day_key',
]
