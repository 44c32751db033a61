"""
Data models for calendar events.

Pydantic models with camelCase aliases so the JSON wire form matches what the
browser client and the local cache have always used (isOnlineMeeting,
onlineMeetingUrl, bodyPreview, ...).
"""

import re
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from core.config import NO_TITLE

# Graph returns up to 7 fractional digits; datetime accepts at most 6
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def parse_graph_datetime(value: str) -> datetime:
    """
    Parse a Graph dateTime string.

    Naive strings stay naive; a trailing 'Z' or explicit offset is kept.
    Raises ValueError for anything unparseable.
    """
    text = _FRACTION_RE.sub(r"\1", value.strip())
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


class AttendeeStatus(str, Enum):
    """Attendee response, collapsed to the four states the UI shows."""

    ACCEPTED = "accepted"
    DECLINED = "declined"
    TENTATIVE = "tentative"
    NONE = "none"

    @classmethod
    def from_response(cls, response: str | None) -> "AttendeeStatus":
        """Map a Graph responseType value onto the four display states."""
        if response in ("tentativelyAccepted", "tentative"):
            return cls.TENTATIVE
        if response == "accepted":
            return cls.ACCEPTED
        if response == "declined":
            return cls.DECLINED
        return cls.NONE


class DateTimeTimeZone(CamelModel):
    """A (naive date-time string, time zone) pair as stored by Graph."""

    model_config = ConfigDict(frozen=True)

    date_time: str
    time_zone: str = "UTC"

    @field_validator("date_time")
    @classmethod
    def _must_parse(cls, value: str) -> str:
        parse_graph_datetime(value)
        return value


class Attendee(CamelModel):
    model_config = ConfigDict(frozen=True)

    email: str = ""
    name: str = ""
    status: AttendeeStatus = AttendeeStatus.NONE

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value):
        if isinstance(value, AttendeeStatus):
            return value
        return AttendeeStatus.from_response(value)


class Event(CamelModel):
    """Synced calendar event. Immutable; identity is `id`."""

    model_config = ConfigDict(frozen=True)

    id: str
    subject: str = NO_TITLE
    start: DateTimeTimeZone
    end: DateTimeTimeZone
    location: str = ""
    is_online_meeting: bool = False
    online_meeting_url: str | None = None
    attendees: tuple[Attendee, ...] = ()
    body_preview: str = ""
    organizer: str = ""
    is_cancelled: bool = False
    is_recurring: bool = False
    importance: str = "normal"
    show_as: str = "busy"
    categories: tuple[str, ...] = ()
    web_link: str = ""
    calendar_id: str | None = None
    synced_at: str | None = None

    @field_validator("subject", mode="before")
    @classmethod
    def _default_subject(cls, value):
        return value or NO_TITLE

    @field_validator("location", "organizer", "web_link", "body_preview", mode="before")
    @classmethod
    def _empty_string(cls, value):
        return value or ""


class MeetingInfo(CamelModel):
    """A standalone Teams online meeting."""

    id: str | None = None
    subject: str | None = None
    join_url: str | None = None
    join_web_url: str | None = None
    start_date_time: str | None = None
    end_date_time: str | None = None


class CalendarInfo(CamelModel):
    """Calendar discovery result."""

    id: str
    name: str = ""
    color: str = ""
    is_default_calendar: bool = False
    can_edit: bool = False
    owner: str = ""
