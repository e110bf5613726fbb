"""
Timestamp helpers for fuel event dates.

Fuel event dates are stored as the ISO-8601 text the client sent, so the
helpers here work on strings:
- utc_now_iso() produces the default ``date`` for new events
- is_iso_timestamp() checks a client value before it is stored
- day_key() truncates a timestamp to its calendar day
"""

from datetime import datetime, timezone as tz
from typing import Optional

from dateutil.parser import isoparse

from calculations.constants import DATE_TIME_SEPARATOR


def utc_now_iso() -> str:
    """
    Current instant as an ISO-8601 string with millisecond precision.

    Examples:
        >>> utc_now_iso()  # doctest: +SKIP
        '2024-05-01T10:00:00.000Z'
    """
    now = datetime.now(tz.utc)
    return now.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def is_iso_timestamp(value: Optional[str]) -> bool:
    """True when ``value`` is a string python-dateutil can parse as ISO-8601."""
    if not isinstance(value, str) or not value:
        return False
    try:
        isoparse(value)
    except (ValueError, OverflowError):
        return False
    return True


def day_key(value: str) -> str:
    """
    Calendar-day key of an ISO timestamp (the text before the ``T``).

    No timezone conversion is applied; the day is the one written in the
    string.

    Examples:
        >>> day_key('2024-05-01T18:00')
        '2024-05-01'
        >>> day_key('2024-05-01')
        '2024-05-01'
    """
    return value.split(DATE_TIME_SEPARATOR)[0]
