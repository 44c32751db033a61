"""Pydantic response models for API endpoints."""

from datetime import date

from pydantic import BaseModel, ConfigDict

from models.events import (
    AttendeeStatus,
    CalendarInfo,
    CamelModel,
    DateTimeTimeZone,
    Event,
    MeetingInfo,
)
from services.navigation import ViewMode


class HealthResponse(CamelModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    GRAPH_ERROR = "GRAPH_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# AUTH
# =============================================================================


class UserInfo(BaseModel):
    name: str = ""
    email: str = ""
    id: str = ""


class StatusResponse(CamelModel):
    is_authenticated: bool
    user: UserInfo | None = None


class UserResponse(BaseModel):
    user: UserInfo


# =============================================================================
# CALENDAR PROXY
# =============================================================================


class EventsResponse(BaseModel):
    events: list[Event]


class SyncPeriod(BaseModel):
    start: str
    end: str
    days: int


class SyncResponse(CamelModel):
    success: bool = True
    synced_at: str
    period: SyncPeriod
    total_events: int
    events: list[Event]


class CalendarsResponse(BaseModel):
    calendars: list[CalendarInfo]


class CalendarSyncResponse(CamelModel):
    success: bool = True
    calendar_id: str
    total_events: int
    events: list[Event]


class CreatedEvent(CamelModel):
    id: str
    subject: str
    start: DateTimeTimeZone
    end: DateTimeTimeZone
    online_meeting_url: str | None = None
    web_link: str = ""


class CreateEventResponse(BaseModel):
    success: bool = True
    event: CreatedEvent


class UpdatedEvent(BaseModel):
    id: str
    subject: str
    start: DateTimeTimeZone
    end: DateTimeTimeZone


class UpdateEventResponse(BaseModel):
    success: bool = True
    event: UpdatedEvent


class DeleteEventResponse(BaseModel):
    success: bool = True
    message: str = "Appointment deleted successfully"


class MeetingResponse(BaseModel):
    success: bool = True
    meeting: MeetingInfo


# =============================================================================
# CALENDAR VIEW
# =============================================================================


class ViewModel(CamelModel):
    """Read straight off the engine's render dataclasses."""

    model_config = ConfigDict(from_attributes=True)


class MonthCellOut(ViewModel):
    date: date
    in_month: bool
    is_today: bool
    is_selected: bool
    events: list[Event]
    overflow: int
    total_events: int


class MonthViewOut(ViewModel):
    year: int
    month: int
    title: str
    weeks: list[list[MonthCellOut]]


class WeekDayOut(ViewModel):
    date: date
    label: str
    is_today: bool


class WeekRowOut(ViewModel):
    hour: int
    label: str
    cells: list[list[Event]]


class WeekViewOut(ViewModel):
    title: str
    days: list[WeekDayOut]
    rows: list[WeekRowOut]


class HourSlotOut(ViewModel):
    hour: int
    label: str
    events: list[Event]
    has_events: bool


class DayViewOut(ViewModel):
    date: date
    title: str
    is_today: bool
    event_count: int
    slots: list[HourSlotOut]


class SelectedDayOut(ViewModel):
    date: date
    title: str
    events: list[Event]


class CalendarViewResponse(ViewModel):
    view_mode: ViewMode
    anchor_date: date
    selected_date: date | None
    title: str
    month: MonthViewOut | None
    week: WeekViewOut | None
    day: DayViewOut | None
    selected_day: SelectedDayOut | None
    teams_meetings: list[Event]
    total_events: int
    last_sync_time: str | None
    last_sync_text: str | None


class AttendeeLineOut(ViewModel):
    label: str
    status: AttendeeStatus
    icon: str


class EventDetailsResponse(ViewModel):
    id: str
    title: str
    is_cancelled: bool
    date_text: str
    time_text: str
    location: str
    organizer: str
    attendees: list[AttendeeLineOut]
    description: str
    badges: list[str]
    teams_url: str | None
    web_link: str
    show_location: bool
    show_organizer: bool
    show_attendees: bool
    show_description: bool
    show_teams_link: bool
    show_web_link: bool
