"""Date parsing and normalization utilities.

Dates reach the ledger in several shapes: driver timestamp objects,
serialized timestamps ({"seconds": ..., "nanoseconds": ...}), ISO-8601
strings and native date/datetime values. normalize_date() reduces all of
them to a calendar date or None.
"""

from collections.abc import Mapping
from datetime import date, datetime, timezone

# Accessors tried, in order, on driver-specific timestamp objects
TIMESTAMP_ACCESSORS = ("to_date", "to_datetime", "ToDatetime")

# Fixed English month abbreviations, independent of the process locale
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_iso_date(raw_date: str) -> date:
    """Parse an ISO-8601 date or date-time string into a date.

    Handles:
    - Date only: 2024-05-15
    - Date-time: 2024-05-15T10:30:00, 2024-05-15 10:30:00.123
    - UTC suffix or offset: 2024-05-15T10:30:00Z, 2024-05-15T10:30:00+01:00

    The calendar date is taken in whatever offset the string carries.

    Args:
        raw_date: The raw date string.

    Returns:
        Parsed date.

    Raises:
        ValueError: If the string is empty or not ISO-8601.
    """
    date_str = raw_date.strip()
    if not date_str:
        raise ValueError("Empty date string")

    if date_str.endswith(("Z", "z")):
        date_str = date_str[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(date_str).date()
    except ValueError:
        raise ValueError(f"Cannot parse date: '{raw_date}'") from None


def _timestamp_from_mapping(data: Mapping[str, object]) -> datetime | None:
    seconds = data.get("seconds", data.get("_seconds"))
    if seconds is None or isinstance(seconds, bool):
        return None
    nanos = data.get("nanoseconds", data.get("_nanoseconds", 0)) or 0
    try:
        epoch = float(seconds) + float(nanos) / 1_000_000_000  # type: ignore[arg-type]
        return datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _convert_timestamp_object(value: object) -> datetime | None:
    for accessor_name in TIMESTAMP_ACCESSORS:
        accessor = getattr(value, accessor_name, None)
        if not callable(accessor):
            continue
        try:
            converted = accessor()
        except (TypeError, ValueError, OverflowError, OSError):
            return None
        if isinstance(converted, date):
            return normalize_datetime(converted)
        return None
    return None


def normalize_datetime(value: object) -> datetime | None:
    """Coerce a heterogeneous timestamp value into a datetime.

    Plain dates become midnight; serialized timestamps are UTC.

    Args:
        value: A date, datetime, ISO-8601 string, serialized timestamp
            mapping, or an object exposing one of TIMESTAMP_ACCESSORS.

    Returns:
        The datetime, or None if the value is missing or invalid.
    """
    if value is None:
        return None

    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, str):
        date_str = value.strip()
        if date_str.endswith(("Z", "z")):
            date_str = date_str[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(date_str)
        except ValueError:
            return None

    if isinstance(value, Mapping):
        return _timestamp_from_mapping(value)

    return _convert_timestamp_object(value)


def normalize_date(value: object) -> date | None:
    """Coerce a heterogeneous date value into a calendar date.

    Never raises: missing, unparseable or unsupported values give None so
    callers can drop the record instead of failing.

    Args:
        value: Anything normalize_datetime() accepts.

    Returns:
        The calendar date, or None if the value is missing or invalid.
    """
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    converted = normalize_datetime(value)
    return converted.date() if converted is not None else None


def month_abbreviation(d: date) -> str:
    """Return the English three-letter month name for a date."""
    return MONTH_ABBREVIATIONS[d.month - 1]


def format_date(d: date, fmt: str = "%Y-%m-%d") -> str:
    """Format a date object as a string."""
    return d.strftime(fmt)
