"""Pydantic request bodies for the calendar endpoints."""

from pydantic import Field

from models.events import CamelModel


class CreateEventRequest(CamelModel):
    """
    New calendar event.

    Required fields are checked by the route so missing ones are reported
    together with field-level messages.
    """

    subject: str | None = None
    start_date_time: str | None = None
    end_date_time: str | None = None
    time_zone: str = "UTC"
    body: str | None = None
    location: str | None = None
    attendees: list[str] = Field(default_factory=list)
    is_online_meeting: bool = True


class UpdateEventRequest(CamelModel):
    """Fields left out of the body are not changed."""

    subject: str | None = None
    start_date_time: str | None = None
    end_date_time: str | None = None
    time_zone: str | None = None
    body: str | None = None
    location: str | None = None


class MeetingRequest(CamelModel):
    subject: str | None = None
    start_date_time: str | None = None
    end_date_time: str | None = None
