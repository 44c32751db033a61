"""Calendar view endpoints: render model, navigation commands, sync and event details."""

import logging
from datetime import tzinfo
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from kiota_abstractions.api_error import APIError
from msgraph import GraphServiceClient

from api.dependencies import get_calendar_shell, get_graph, viewer_timezone
from api.logging import logged_request
from api.models.responses import CalendarViewResponse, ErrorCodes, EventDetailsResponse
from api.routes.calendar import user_email
from core.config import DEFAULT_SYNC_DAYS
from services import calendar as calendar_service
from services.navigation import CommandError
from services.shell import CalendarRender, CalendarShell

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/view")


def to_response(render: CalendarRender) -> CalendarViewResponse:
    return CalendarViewResponse.model_validate(render, from_attributes=True)


@router.get("", response_model=CalendarViewResponse)
async def get_view(
    shell: CalendarShell = Depends(get_calendar_shell),
    tz: tzinfo | None = Depends(viewer_timezone),
):
    """Current calendar render for this session."""
    return to_response(shell.render(tz))


@router.post("/commands/{action}", response_model=CalendarViewResponse)
async def run_command(
    action: str,
    params: dict[str, Any] | None = Body(None),
    shell: CalendarShell = Depends(get_calendar_shell),
    tz: tzinfo | None = Depends(viewer_timezone),
):
    """
    Apply one navigation command and return the new render.

    Commands: switch_view {mode}, navigate {delta}, today {},
    select_date {year, month, day}.
    """
    try:
        render = shell.dispatch(action, params, tz)
    except CommandError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Invalid calendar command",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [str(e)],
            },
        )
    return to_response(render)


@router.post("/sync", response_model=CalendarViewResponse)
async def sync_view(
    request: Request,
    days: int = Query(DEFAULT_SYNC_DAYS, ge=1),
    shell: CalendarShell = Depends(get_calendar_shell),
    graph: GraphServiceClient = Depends(get_graph),
    tz: tzinfo | None = Depends(viewer_timezone),
):
    """
    Re-sync from Graph and replace the local snapshot.

    On failure the stored events and navigation state are left as they were.
    """
    with logged_request(request, user_email(request)) as request_log:
        try:
            result = await calendar_service.sync_events(graph, days)
        except APIError as e:
            message = calendar_service.graph_error_message(e)
            logger.error("Calendar sync failed: %s", message)
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail={
                    "error": "Failed to sync calendar",
                    "code": ErrorCodes.GRAPH_ERROR,
                    "details": [message],
                },
            )
        request_log.event_count = len(result.events)
        return to_response(shell.apply_sync(result.events, result.synced_at, tz))


@router.get("/events/{event_id}", response_model=EventDetailsResponse)
async def get_event_details(
    event_id: str,
    shell: CalendarShell = Depends(get_calendar_shell),
    tz: tzinfo | None = Depends(viewer_timezone),
):
    details = shell.event_details(event_id, tz)
    if details is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "Event not found",
                "code": ErrorCodes.NOT_FOUND,
                "details": [f"No synced event with id {event_id}"],
            },
        )
    return EventDetailsResponse.model_validate(details, from_attributes=True)
