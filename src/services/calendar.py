"""
Calendar and Teams meeting operations against MS Graph for the signed-in user.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from kiota_abstractions.api_error import APIError
from kiota_abstractions.base_request_configuration import RequestConfiguration
from msgraph import GraphServiceClient
from msgraph.generated.models.attendee import Attendee as GraphAttendee
from msgraph.generated.models.attendee_type import AttendeeType
from msgraph.generated.models.body_type import BodyType
from msgraph.generated.models.date_time_time_zone import (
    DateTimeTimeZone as GraphDateTimeTimeZone,
)
from msgraph.generated.models.email_address import EmailAddress
from msgraph.generated.models.event import Event as GraphEvent
from msgraph.generated.models.item_body import ItemBody
from msgraph.generated.models.location import Location
from msgraph.generated.models.online_meeting import OnlineMeeting
from msgraph.generated.models.online_meeting_provider_type import OnlineMeetingProviderType
from msgraph.generated.users.item.calendar.events.events_request_builder import (
    EventsRequestBuilder,
)
from msgraph.generated.users.item.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder,
)
from msgraph.generated.users.item.calendars.item.calendar_view.calendar_view_request_builder import (
    CalendarViewRequestBuilder as CalendarItemViewRequestBuilder,
)

from core.config import (
    BODY_PREVIEW_LENGTH,
    EVENTS_PAGE_SIZE,
    SYNC_PAGE_SIZE,
    SYNC_SELECT_FIELDS,
    TEAMS_LOCATION,
)
from core.validation import parse_local_datetime
from models.events import Attendee, AttendeeStatus, CalendarInfo, Event, MeetingInfo

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")


@dataclass
class SyncResult:
    """Outcome of one calendar sync."""

    synced_at: str
    start: str
    end: str
    days: int
    events: list[Event]


def iso_utc(value: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _enum_value(value, default: str = "") -> str:
    if value is None:
        return default
    return getattr(value, "value", value)


# =============================================================================
# PARSING
# =============================================================================


def parse_event(event: GraphEvent, calendar_id: str | None = None, synced_at: str | None = None) -> Event:
    """Reshape an MS Graph event into our Event model."""
    attendees = []
    for attendee in event.attendees or []:
        email_address = attendee.email_address
        response = attendee.status.response if attendee.status else None
        attendees.append(
            Attendee(
                email=(email_address.address if email_address else None) or "",
                name=(email_address.name if email_address else None) or "",
                status=AttendeeStatus.from_response(_enum_value(response, "none")),
            )
        )

    body_preview = ""
    if event.body and event.body.content:
        # Truncate first, then strip tags
        body_preview = _TAG_RE.sub("", event.body.content[:BODY_PREVIEW_LENGTH])

    organizer = ""
    if event.organizer and event.organizer.email_address:
        organizer = event.organizer.email_address.address or ""

    return Event(
        id=event.id,
        subject=event.subject,
        start={"date_time": event.start.date_time, "time_zone": event.start.time_zone or "UTC"},
        end={"date_time": event.end.date_time, "time_zone": event.end.time_zone or "UTC"},
        location=event.location.display_name if event.location else "",
        is_online_meeting=bool(event.is_online_meeting),
        online_meeting_url=event.online_meeting.join_url if event.online_meeting else None,
        attendees=attendees,
        body_preview=body_preview,
        organizer=organizer,
        is_cancelled=bool(event.is_cancelled),
        is_recurring=event.recurrence is not None,
        importance=_enum_value(event.importance, "normal"),
        show_as=_enum_value(event.show_as, "busy"),
        categories=event.categories or [],
        web_link=event.web_link,
        calendar_id=calendar_id,
        synced_at=synced_at,
    )


# =============================================================================
# READ
# =============================================================================


async def list_events(
    graph: GraphServiceClient, start: str | None = None, end: str | None = None
) -> list[Event]:
    """
    Fetch the user's events.

    With a start/end range this is the calendar view of that range (recurring
    events expanded); otherwise the first page of events ordered by start.
    """
    if start and end:
        query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
            start_date_time=start,
            end_date_time=end,
            orderby=["start/dateTime"],
        )
        response = await graph.me.calendar_view.get(
            request_configuration=RequestConfiguration(query_parameters=query_params)
        )
    else:
        query_params = EventsRequestBuilder.EventsRequestBuilderGetQueryParameters(
            orderby=["start/dateTime"],
            top=EVENTS_PAGE_SIZE,
        )
        response = await graph.me.calendar.events.get(
            request_configuration=RequestConfiguration(query_parameters=query_params)
        )

    raw_events = response.value if response and response.value else []
    return [parse_event(event) for event in raw_events]


async def sync_events(graph: GraphServiceClient, days: int, now: datetime | None = None) -> SyncResult:
    """Fetch every event from now until `days` days ahead."""
    now = now or datetime.now(timezone.utc)
    start = iso_utc(now)
    end = iso_utc(now + timedelta(days=days))
    synced_at = iso_utc(datetime.now(timezone.utc))

    query_params = CalendarViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
        start_date_time=start,
        end_date_time=end,
        orderby=["start/dateTime"],
        top=SYNC_PAGE_SIZE,
        select=SYNC_SELECT_FIELDS,
    )
    response = await graph.me.calendar_view.get(
        request_configuration=RequestConfiguration(query_parameters=query_params)
    )
    raw_events = response.value if response and response.value else []
    events = [parse_event(event, synced_at=synced_at) for event in raw_events]
    logger.info("Synced %d events (%d days from %s)", len(events), days, start)

    return SyncResult(synced_at=synced_at, start=start, end=end, days=days, events=events)


async def list_calendars(graph: GraphServiceClient) -> list[CalendarInfo]:
    """List every calendar the user can see."""
    response = await graph.me.calendars.get()
    calendars = response.value if response and response.value else []
    return [
        CalendarInfo(
            id=calendar.id,
            name=calendar.name or "",
            color=_enum_value(calendar.color),
            is_default_calendar=bool(calendar.is_default_calendar),
            can_edit=bool(calendar.can_edit),
            owner=(calendar.owner.address if calendar.owner else None) or "",
        )
        for calendar in calendars
    ]


async def sync_calendar_events(
    graph: GraphServiceClient, calendar_id: str, days: int, now: datetime | None = None
) -> list[Event]:
    """Fetch events from one specific calendar from now until `days` days ahead."""
    now = now or datetime.now(timezone.utc)
    synced_at = iso_utc(datetime.now(timezone.utc))

    query_params = CalendarItemViewRequestBuilder.CalendarViewRequestBuilderGetQueryParameters(
        start_date_time=iso_utc(now),
        end_date_time=iso_utc(now + timedelta(days=days)),
        orderby=["start/dateTime"],
        top=SYNC_PAGE_SIZE,
    )
    response = await graph.me.calendars.by_calendar_id(calendar_id).calendar_view.get(
        request_configuration=RequestConfiguration(query_parameters=query_params)
    )
    raw_events = response.value if response and response.value else []
    return [parse_event(event, calendar_id=calendar_id, synced_at=synced_at) for event in raw_events]


# =============================================================================
# WRITE
# =============================================================================


async def create_online_meeting(
    graph: GraphServiceClient, subject: str, start: datetime, end: datetime
) -> MeetingInfo:
    """Create a standalone Teams meeting."""
    meeting = await graph.me.online_meetings.post(
        OnlineMeeting(subject=subject, start_date_time=start, end_date_time=end)
    )
    return MeetingInfo(
        id=meeting.id,
        subject=meeting.subject,
        join_url=meeting.join_web_url,
        join_web_url=meeting.join_web_url,
        start_date_time=iso_utc(meeting.start_date_time) if meeting.start_date_time else None,
        end_date_time=iso_utc(meeting.end_date_time) if meeting.end_date_time else None,
    )


def build_event_body(body: str | None, teams_join_url: str | None) -> str:
    """HTML event body, with a join paragraph when a Teams meeting exists."""
    content = body or ""
    if not teams_join_url:
        return content
    return (
        f"{content}<br><br><p><strong>Microsoft Teams Meeting</strong></p>"
        f'<p><a href="{teams_join_url}">Click here to join the meeting</a></p>'
    )


async def create_event(
    graph: GraphServiceClient,
    subject: str,
    start: str,
    end: str,
    time_zone: str = "UTC",
    body: str | None = None,
    location: str | None = None,
    attendees: list[str] | None = None,
    is_online_meeting: bool = True,
) -> Event:
    """
    Create a calendar event, provisioning a Teams meeting first when asked.

    A failed Teams provisioning is logged and the event is created without a
    join link.
    """
    teams_join_url = None
    if is_online_meeting:
        try:
            meeting = await create_online_meeting(
                graph,
                subject,
                parse_local_datetime(start, time_zone),
                parse_local_datetime(end, time_zone),
            )
            teams_join_url = meeting.join_web_url
            logger.info("Teams meeting created: %s", teams_join_url)
        except Exception as e:
            logger.warning("Failed to create Teams meeting, continuing without link: %s", e)

    graph_event = GraphEvent(
        subject=subject,
        start=GraphDateTimeTimeZone(date_time=start, time_zone=time_zone),
        end=GraphDateTimeTimeZone(date_time=end, time_zone=time_zone),
        body=ItemBody(content_type=BodyType.Html, content=build_event_body(body, teams_join_url)),
        location=Location(display_name=location or (TEAMS_LOCATION if teams_join_url else "")),
    )
    if teams_join_url:
        graph_event.is_online_meeting = True
        graph_event.online_meeting_provider = OnlineMeetingProviderType.TeamsForBusiness

    emails = [email.strip() for email in attendees or [] if email.strip()]
    if emails:
        graph_event.attendees = [
            GraphAttendee(
                email_address=EmailAddress(address=email, name=email.split("@")[0]),
                type=AttendeeType.Required,
            )
            for email in emails
        ]

    created = await graph.me.calendar.events.post(graph_event)
    logger.info("Event created: %s", created.id)

    event = parse_event(created)
    if teams_join_url:
        event = event.model_copy(update={"online_meeting_url": teams_join_url})
    return event


async def update_event(
    graph: GraphServiceClient,
    event_id: str,
    subject: str | None = None,
    start: str | None = None,
    end: str | None = None,
    time_zone: str | None = None,
    body: str | None = None,
    location: str | None = None,
) -> Event:
    """Patch only the fields that were provided (None means leave unchanged)."""
    patch = GraphEvent()
    if subject:
        patch.subject = subject
    if start:
        patch.start = GraphDateTimeTimeZone(date_time=start, time_zone=time_zone or "UTC")
    if end:
        patch.end = GraphDateTimeTimeZone(date_time=end, time_zone=time_zone or "UTC")
    if body is not None:
        patch.body = ItemBody(content_type=BodyType.Html, content=body)
    if location is not None:
        patch.location = Location(display_name=location)

    updated = await graph.me.calendar.events.by_event_id(event_id).patch(patch)
    return parse_event(updated)


async def delete_event(graph: GraphServiceClient, event_id: str):
    await graph.me.calendar.events.by_event_id(event_id).delete()
    logger.info("Event deleted: %s", event_id)


def graph_error_message(exc: APIError) -> str:
    """Human-readable message of a Graph error response."""
    error = getattr(exc, "error", None)
    if error is not None and getattr(error, "message", None):
        return error.message
    return getattr(exc, "message", None) or str(exc)
