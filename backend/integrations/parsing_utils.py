"""Shared parsing utilities for market data provider payloads.

Provider payloads are loosely typed dicts: numbers may arrive as ints,
floats, numeric strings or NaN, and market times as epoch seconds.
These helpers turn them into Decimals and UTC-aware datetimes.
"""

import math
from datetime import date, datetime, timezone
from decimal import Decimal


def parse_decimal(value, places: int = 6) -> Decimal | None:
    """Convert a provider number to a Decimal rounded to ``places``.

    Args:
        value: An int, float, Decimal, numeric string, or None.
        places: Number of decimal places to keep.

    Returns:
        The Decimal value, or None for missing, non-numeric, NaN or
        infinite input. Booleans are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(as_float) or math.isinf(as_float):
        return None
    return Decimal(str(round(as_float, places)))


def parse_unix_timestamp(value) -> datetime | None:
    """Parse a Unix epoch timestamp to a UTC-aware datetime.

    Args:
        value: An int, float, string-encoded number, or None.

    Returns:
        A timezone-aware UTC datetime, or None if the value cannot be parsed.
    """
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (ValueError, TypeError, OSError, OverflowError):
        return None


def ensure_utc(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware (UTC).

    If the datetime is naive, attach UTC; otherwise return as-is.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_date(value: date | datetime) -> date:
    """Return the calendar date of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value
