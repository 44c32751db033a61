"""Tests for the event detail projection."""

from datetime import timezone

from models.events import AttendeeStatus
from services.details import STATUS_ICONS, project_details


def test_teams_event_details(teams_event):
    details = project_details(teams_event, timezone.utc)

    assert details.title == "Weekly sync"
    assert details.date_text == "Monday, June 10, 2024"
    assert details.time_text == "09:00 AM - 10:00 AM"
    assert details.badges == ("Teams Meeting",)
    assert details.teams_url == "https://teams.microsoft.com/l/meetup-join/abc"
    assert details.show_teams_link and details.show_web_link
    assert details.show_location and details.show_organizer and details.show_description


def test_attendee_lines(teams_event):
    ana, bo = project_details(teams_event, timezone.utc).attendees

    assert (ana.label, ana.status, ana.icon) == ("Ana", AttendeeStatus.ACCEPTED, "check-circle-fill")
    # Falls back to the address when there is no display name
    assert (bo.label, bo.status, bo.icon) == ("bo@contoso.com", AttendeeStatus.TENTATIVE, "question-circle-fill")


def test_empty_sections_hidden(make_event):
    details = project_details(make_event("bare"), timezone.utc)

    assert not details.show_location
    assert not details.show_organizer
    assert not details.show_attendees
    assert not details.show_description
    assert not details.show_teams_link
    assert not details.show_web_link
    assert details.badges == ()


def test_badges_and_cancelled(make_event):
    event = make_event("x", importance="high", is_recurring=True, is_cancelled=True)
    details = project_details(event, timezone.utc)

    assert details.badges == ("Important", "Recurring")
    assert details.is_cancelled


def test_every_status_has_an_icon():
    assert set(STATUS_ICONS) == set(AttendeeStatus)
    assert STATUS_ICONS[AttendeeStatus.DECLINED] == "x-circle-fill"
    assert STATUS_ICONS[AttendeeStatus.NONE] == "circle"


def test_unknown_response_maps_to_none():
    assert AttendeeStatus.from_response("notResponded") == AttendeeStatus.NONE
    assert AttendeeStatus.from_response("organizer") == AttendeeStatus.NONE
    assert AttendeeStatus.from_response(None) == AttendeeStatus.NONE
