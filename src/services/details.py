"""
Display-ready projection of a single event for the detail view.
"""

from dataclasses import dataclass
from datetime import tzinfo

from models.events import AttendeeStatus, Event
from services.dates import end_instant, format_date_long, format_time, start_instant

STATUS_ICONS = {
    AttendeeStatus.ACCEPTED: "check-circle-fill",
    AttendeeStatus.DECLINED: "x-circle-fill",
    AttendeeStatus.TENTATIVE: "question-circle-fill",
    AttendeeStatus.NONE: "circle",
}


@dataclass(frozen=True)
class AttendeeLine:
    label: str
    status: AttendeeStatus
    icon: str


@dataclass(frozen=True)
class EventDetails:
    id: str
    title: str
    is_cancelled: bool
    date_text: str
    time_text: str
    location: str
    organizer: str
    attendees: tuple[AttendeeLine, ...]
    description: str
    badges: tuple[str, ...]
    teams_url: str | None
    web_link: str
    show_location: bool
    show_organizer: bool
    show_attendees: bool
    show_description: bool
    show_teams_link: bool
    show_web_link: bool


def project_details(event: Event, tz: tzinfo) -> EventDetails:
    """Format one event for the detail view; empty sections are hidden."""
    start = start_instant(event, tz)
    end = end_instant(event, tz)

    attendees = tuple(
        AttendeeLine(
            label=attendee.name or attendee.email,
            status=attendee.status,
            icon=STATUS_ICONS[attendee.status],
        )
        for attendee in event.attendees
    )

    badges = []
    if event.importance == "high":
        badges.append("Important")
    if event.is_recurring:
        badges.append("Recurring")
    if event.is_online_meeting:
        badges.append("Teams Meeting")

    return EventDetails(
        id=event.id,
        title=event.subject,
        is_cancelled=event.is_cancelled,
        date_text=format_date_long(start.date()),
        time_text=f"{format_time(start, padded=True)} - {format_time(end, padded=True)}",
        location=event.location,
        organizer=event.organizer,
        attendees=attendees,
        description=event.body_preview,
        badges=tuple(badges),
        teams_url=event.online_meeting_url,
        web_link=event.web_link,
        show_location=bool(event.location),
        show_organizer=bool(event.organizer),
        show_attendees=bool(attendees),
        show_description=bool(event.body_preview),
        show_teams_link=bool(event.online_meeting_url),
        show_web_link=bool(event.web_link),
    )
