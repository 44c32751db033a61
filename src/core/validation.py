"""
Request validation for new calendar events and meetings.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

REQUIRED_FIELDS_MESSAGE = (
    "Missing required fields: subject, startDateTime, and endDateTime are required"
)


def parse_local_datetime(value: str, time_zone: str = "UTC") -> datetime:
    """
    Parse a form date-time ('2024-06-10T09:00') in the given IANA zone.

    Values carrying their own offset keep it. Unknown zones fall back to UTC.

    Raises:
        ValueError: if the value is not an ISO date-time
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        return parsed
    try:
        zone = ZoneInfo(time_zone)
    except (ZoneInfoNotFoundError, ValueError):
        zone = timezone.utc
    return parsed.replace(tzinfo=zone)


def validate_event_times(
    subject: str | None,
    start: str | None,
    end: str | None,
    time_zone: str = "UTC",
) -> list[str]:
    """
    Validate the fields every new event or meeting needs.

    Checks:
    1. subject, start and end are present
    2. start and end are ISO date-times
    3. end is after start

    Returns:
        List of field-level error messages (empty when valid)
    """
    errors = []
    if not (subject or "").strip():
        errors.append("subject is required")
    if not start:
        errors.append("startDateTime is required")
    if not end:
        errors.append("endDateTime is required")
    if errors:
        return errors

    try:
        start_dt = parse_local_datetime(start, time_zone)
    except ValueError:
        errors.append(f"startDateTime is not a valid date-time: '{start}'")
    try:
        end_dt = parse_local_datetime(end, time_zone)
    except ValueError:
        errors.append(f"endDateTime is not a valid date-time: '{end}'")
    if errors:
        return errors

    if end_dt <= start_dt:
        errors.append("End time must be after start time")
    return errors
