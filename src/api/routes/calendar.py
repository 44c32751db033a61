"""Calendar proxy endpoints: read, sync and write the linked user's Graph calendar."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from kiota_abstractions.api_error import APIError
from msgraph import GraphServiceClient

from api.dependencies import get_graph, get_session_user
from api.logging import logged_request
from api.models.requests import CreateEventRequest, MeetingRequest, UpdateEventRequest
from api.models.responses import (
    CalendarsResponse,
    CalendarSyncResponse,
    CreatedEvent,
    CreateEventResponse,
    DeleteEventResponse,
    ErrorCodes,
    EventsResponse,
    MeetingResponse,
    SyncPeriod,
    SyncResponse,
    UpdatedEvent,
    UpdateEventResponse,
)
from core.config import DEFAULT_SYNC_DAYS
from core.validation import REQUIRED_FIELDS_MESSAGE, parse_local_datetime, validate_event_times
from services import calendar as calendar_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/calendar")


def user_email(request: Request) -> str | None:
    return (get_session_user(request) or {}).get("email")


def graph_failure(error: str, exc: APIError) -> HTTPException:
    """Log a failed Graph call and turn it into the standard error response."""
    message = calendar_service.graph_error_message(exc)
    logger.error("%s: %s", error, message)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": error,
            "code": ErrorCodes.GRAPH_ERROR,
            "details": [message],
        },
    )


def reject_invalid(errors: list[str]):
    """Raise 400 with field-level details when validation found problems."""
    if not errors:
        return
    missing = any(error.endswith("is required") for error in errors)
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": REQUIRED_FIELDS_MESSAGE if missing else "Invalid event times",
            "code": ErrorCodes.INVALID_REQUEST,
            "details": errors,
        },
    )


# =============================================================================
# READ
# =============================================================================


@router.get("/events", response_model=EventsResponse)
async def get_events(
    request: Request,
    start_date_time: str | None = Query(None, alias="startDateTime"),
    end_date_time: str | None = Query(None, alias="endDateTime"),
    graph: GraphServiceClient = Depends(get_graph),
):
    """Events in a date range, or the first page of events when no range is given."""
    with logged_request(request, user_email(request)) as request_log:
        try:
            events = await calendar_service.list_events(graph, start_date_time, end_date_time)
        except APIError as e:
            raise graph_failure("Failed to fetch calendar events", e)
        request_log.event_count = len(events)
        return EventsResponse(events=events)


@router.get("/sync", response_model=SyncResponse)
async def sync_calendar(
    request: Request,
    days: int = Query(DEFAULT_SYNC_DAYS, ge=1),
    graph: GraphServiceClient = Depends(get_graph),
):
    """All events from now until `days` days ahead."""
    with logged_request(request, user_email(request)) as request_log:
        try:
            result = await calendar_service.sync_events(graph, days)
        except APIError as e:
            raise graph_failure("Failed to sync calendar", e)
        request_log.event_count = len(result.events)
        return SyncResponse(
            synced_at=result.synced_at,
            period=SyncPeriod(start=result.start, end=result.end, days=result.days),
            total_events=len(result.events),
            events=result.events,
        )


@router.get("/calendars", response_model=CalendarsResponse)
async def get_calendars(request: Request, graph: GraphServiceClient = Depends(get_graph)):
    with logged_request(request, user_email(request)):
        try:
            calendars = await calendar_service.list_calendars(graph)
        except APIError as e:
            raise graph_failure("Failed to fetch calendars", e)
        return CalendarsResponse(calendars=calendars)


@router.get("/calendars/{calendar_id}/sync", response_model=CalendarSyncResponse)
async def sync_single_calendar(
    request: Request,
    calendar_id: str,
    days: int = Query(DEFAULT_SYNC_DAYS, ge=1),
    graph: GraphServiceClient = Depends(get_graph),
):
    with logged_request(request, user_email(request)) as request_log:
        try:
            events = await calendar_service.sync_calendar_events(graph, calendar_id, days)
        except APIError as e:
            raise graph_failure("Failed to sync calendar", e)
        request_log.event_count = len(events)
        return CalendarSyncResponse(calendar_id=calendar_id, total_events=len(events), events=events)


# =============================================================================
# WRITE
# =============================================================================


@router.post("/events", status_code=status.HTTP_201_CREATED, response_model=CreateEventResponse)
async def create_calendar_event(
    request: Request,
    payload: CreateEventRequest,
    graph: GraphServiceClient = Depends(get_graph),
):
    """
    Create an event, with a Teams meeting unless isOnlineMeeting is false.

    A Teams provisioning failure does not fail the request; the event is
    created without a join link.
    """
    with logged_request(request, user_email(request)) as request_log:
        reject_invalid(
            validate_event_times(
                payload.subject, payload.start_date_time, payload.end_date_time, payload.time_zone
            )
        )
        try:
            event = await calendar_service.create_event(
                graph,
                subject=payload.subject,
                start=payload.start_date_time,
                end=payload.end_date_time,
                time_zone=payload.time_zone,
                body=payload.body,
                location=payload.location,
                attendees=payload.attendees,
                is_online_meeting=payload.is_online_meeting,
            )
        except APIError as e:
            raise graph_failure("Failed to create appointment", e)

        request_log.status_code = status.HTTP_201_CREATED
        request_log.event_count = 1
        return CreateEventResponse(
            event=CreatedEvent(
                id=event.id,
                subject=event.subject,
                start=event.start,
                end=event.end,
                online_meeting_url=event.online_meeting_url,
                web_link=event.web_link,
            )
        )


@router.put("/events/{event_id}", response_model=UpdateEventResponse)
async def update_calendar_event(
    request: Request,
    event_id: str,
    payload: UpdateEventRequest,
    graph: GraphServiceClient = Depends(get_graph),
):
    """Change only the fields present in the body."""
    with logged_request(request, user_email(request)):
        try:
            event = await calendar_service.update_event(
                graph,
                event_id,
                subject=payload.subject,
                start=payload.start_date_time,
                end=payload.end_date_time,
                time_zone=payload.time_zone,
                body=payload.body,
                location=payload.location,
            )
        except APIError as e:
            raise graph_failure("Failed to update appointment", e)
        return UpdateEventResponse(
            event=UpdatedEvent(id=event.id, subject=event.subject, start=event.start, end=event.end)
        )


@router.delete("/events/{event_id}", response_model=DeleteEventResponse)
async def delete_calendar_event(
    request: Request,
    event_id: str,
    graph: GraphServiceClient = Depends(get_graph),
):
    with logged_request(request, user_email(request)):
        try:
            await calendar_service.delete_event(graph, event_id)
        except APIError as e:
            raise graph_failure("Failed to delete appointment", e)
        return DeleteEventResponse()


@router.post("/meeting", status_code=status.HTTP_201_CREATED, response_model=MeetingResponse)
async def create_meeting(
    request: Request,
    payload: MeetingRequest,
    graph: GraphServiceClient = Depends(get_graph),
):
    """Create a standalone Teams meeting with no calendar event."""
    with logged_request(request, user_email(request)) as request_log:
        reject_invalid(
            validate_event_times(payload.subject, payload.start_date_time, payload.end_date_time)
        )
        try:
            meeting = await calendar_service.create_online_meeting(
                graph,
                payload.subject,
                parse_local_datetime(payload.start_date_time),
                parse_local_datetime(payload.end_date_time),
            )
        except APIError as e:
            raise graph_failure("Failed to create Teams meeting", e)
        request_log.status_code = status.HTTP_201_CREATED
        return MeetingResponse(meeting=meeting)
