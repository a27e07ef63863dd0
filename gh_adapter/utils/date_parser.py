"""Timestamp parsing for platform responses and request filters."""

from datetime import datetime, timezone


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO 8601 timestamp from a platform response.

    Empty or absent values map to None. The offset in the string is kept
    as-is; a trailing ``Z`` is read as UTC.

    Args:
        value: Raw timestamp string, e.g. ``2021-01-01T00:00:00Z``

    Returns:
        Timezone-aware datetime (naive if the source carries no offset),
        or None

    Raises:
        ValueError: If a non-empty value is not an ISO 8601 timestamp string
    """
    if not value:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Unable to parse timestamp {value!r}: not a string")

    if value.endswith(("Z", "z")):
        value = f"{value[:-1]}+00:00"

    try:
        return datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"Unable to parse timestamp '{value}': {e}") from e


def format_timestamp(dt: datetime) -> str:
    """Format a datetime for API filter parameters such as ``since``.

    Naive datetimes are treated as UTC.

    Args:
        dt: Datetime to format

    Returns:
        ISO 8601 string with a ``Z`` suffix
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
