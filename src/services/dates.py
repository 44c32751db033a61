"""
Date bucketing and fixed en-US formatting for the calendar views.

Stored start/end values are always read as UTC and then shown in the viewer's
timezone. When the upstream value was not actually UTC this shifts the shown
time by the viewer's offset; the calendar has always bucketed events this way,
so changing it would move events between days and hours.
"""

from datetime import date, datetime, timezone, tzinfo

from models.events import DateTimeTimeZone, Event, parse_graph_datetime

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


# =============================================================================
# BUCKETING
# =============================================================================


def to_viewer_time(value: DateTimeTimeZone, tz: tzinfo) -> datetime:
    """Read a stored date-time as UTC and express it in the viewer's timezone."""
    parsed = parse_graph_datetime(value.date_time)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(tz)


def start_instant(event: Event, tz: tzinfo) -> datetime:
    return to_viewer_time(event.start, tz)


def end_instant(event: Event, tz: tzinfo) -> datetime:
    return to_viewer_time(event.end, tz)


def month_day_key(event: Event, tz: tzinfo) -> date:
    """Calendar day (year, month, day) the event starts on, in viewer time."""
    return start_instant(event, tz).date()


def day_hour_key(event: Event, tz: tzinfo) -> tuple[date, int]:
    """Calendar day and hour (0-23) the event starts in, in viewer time."""
    start = start_instant(event, tz)
    return start.date(), start.hour


def group_by_day(events: list[Event], tz: tzinfo) -> dict[date, list[Event]]:
    """Bucket events by start day, keeping store order inside each bucket."""
    buckets: dict[date, list[Event]] = {}
    for event in events:
        buckets.setdefault(month_day_key(event, tz), []).append(event)
    return buckets


def group_by_day_hour(events: list[Event], tz: tzinfo) -> dict[tuple[date, int], list[Event]]:
    """Bucket events by (start day, start hour), keeping store order."""
    buckets: dict[tuple[date, int], list[Event]] = {}
    for event in events:
        buckets.setdefault(day_hour_key(event, tz), []).append(event)
    return buckets


# =============================================================================
# FORMATTING
# =============================================================================


def format_hour(hour: int) -> str:
    """Hour label for grid rows, e.g. '7 AM', '12 PM'."""
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    if hour < 12:
        return f"{hour} AM"
    return f"{hour - 12} PM"


def format_time(value: datetime, padded: bool = False) -> str:
    """Format as '9:00 AM', or '09:00 AM' when padded."""
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    hour_text = f"{hour:02d}" if padded else str(hour)
    return f"{hour_text}:{value.minute:02d} {suffix}"


def format_month_title(year: int, month: int) -> str:
    """'June 2024'."""
    return f"{MONTH_NAMES[month - 1]} {year}"


def format_date_long(d: date) -> str:
    """'Monday, June 10, 2024'."""
    return f"{WEEKDAY_NAMES[d.weekday()]}, {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"


def format_date_short(d: date) -> str:
    """'Mon, Jun 10'."""
    return f"{WEEKDAY_NAMES[d.weekday()][:3]}, {MONTH_NAMES[d.month - 1][:3]} {d.day}"


def format_datetime(value: datetime) -> str:
    """'Jun 10, 2024, 09:00 AM'."""
    return f"{MONTH_NAMES[value.month - 1][:3]} {value.day}, {value.year}, {format_time(value, padded=True)}"


def format_week_title(first: date, last: date) -> str:
    """'Jun 9 - 15, 2024', or 'Jun 30 - Jul 6, 2024' across months."""
    start_month = MONTH_NAMES[first.month - 1][:3]
    end_month = MONTH_NAMES[last.month - 1][:3]
    if start_month == end_month:
        return f"{start_month} {first.day} - {last.day}, {first.year}"
    return f"{start_month} {first.day} - {end_month} {last.day}, {first.year}"


def plural_events(count: int) -> str:
    return f"{count} event{'s' if count != 1 else ''}"
