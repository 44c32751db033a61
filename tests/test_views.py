"""Tests for the month, week and day render models."""

from datetime import date, timezone

import pytest

from services.navigation import NavigationState, ViewMode
from services.views import (
    render_day,
    render_month,
    render_selected_day,
    render_week,
    start_of_week,
    teams_meetings,
)

UTC = timezone.utc
TODAY = date(2024, 6, 15)


def month_state(anchor: date, selected: date | None = None) -> NavigationState:
    return NavigationState(anchor_date=anchor, view_mode=ViewMode.MONTH, selected_date=selected)


# =============================================================================
# MONTH
# =============================================================================


class TestRenderMonth:
    @pytest.mark.parametrize(
        "anchor, rows",
        [
            (date(2024, 6, 1), 6),  # starts Saturday, 30 days
            (date(2024, 5, 1), 5),  # starts Wednesday, 31 days
            (date(2015, 2, 1), 4),  # starts Sunday, 28 days
        ],
    )
    def test_row_count(self, anchor, rows):
        view = render_month([], month_state(anchor), UTC, TODAY)

        assert len(view.weeks) == rows
        assert all(len(week) == 7 for week in view.weeks)
        assert len(view.cells) == rows * 7

    def test_every_day_of_month_appears_once(self):
        view = render_month([], month_state(date(2024, 6, 1)), UTC, TODAY)
        in_month = [cell.date for cell in view.cells if cell.in_month]

        assert in_month == [date(2024, 6, d) for d in range(1, 31)]

    def test_leading_cells_are_inert(self, make_event):
        events = [make_event("may", "2024-05-31T10:00:00")]
        view = render_month(events, month_state(date(2024, 6, 1)), UTC, TODAY)
        first_week = view.weeks[0]

        assert [cell.in_month for cell in first_week] == [False] * 6 + [True]
        assert first_week[0].date == date(2024, 5, 26)
        assert all(cell.events == () for cell in first_week[:6])

    def test_title_and_flags(self):
        view = render_month([], month_state(date(2024, 6, 10), selected=date(2024, 6, 10)), UTC, TODAY)
        by_date = {cell.date: cell for cell in view.cells if cell.in_month}

        assert view.title == "June 2024"
        assert by_date[TODAY].is_today
        assert by_date[date(2024, 6, 10)].is_selected
        assert not by_date[date(2024, 6, 11)].is_selected

    def test_five_events_show_three_plus_overflow(self, make_event):
        events = [make_event(f"e{i}", f"2024-06-10T{9 + i:02d}:00:00") for i in range(5)]
        view = render_month(events, month_state(date(2024, 6, 1)), UTC, TODAY)
        cell = next(cell for cell in view.cells if cell.date == date(2024, 6, 10))

        assert [e.id for e in cell.events] == ["e0", "e1", "e2"]
        assert cell.overflow == 2
        assert cell.total_events == 5

    def test_each_event_counted_in_one_cell(self, make_event):
        events = [
            make_event("a", "2024-06-01T08:00:00"),
            make_event("b", "2024-06-10T08:00:00"),
            make_event("c", "2024-06-10T23:30:00"),
            make_event("d", "2024-06-30T12:00:00"),
            make_event("july", "2024-07-01T12:00:00"),
        ]
        view = render_month(events, month_state(date(2024, 6, 1)), UTC, TODAY)

        assert sum(cell.total_events for cell in view.cells) == 4

    def test_teams_meeting_on_june_10(self, make_event):
        event = make_event(
            "1",
            "2024-06-10T09:00:00",
            is_online_meeting=True,
            online_meeting_url="https://t/x",
        )
        view = render_month([event], month_state(date(2024, 6, 10)), UTC, TODAY)
        cell = next(cell for cell in view.cells if cell.date == date(2024, 6, 10))

        assert cell.events == (event,)
        assert cell.events[0].is_online_meeting
        assert teams_meetings([event]) == [event]


# =============================================================================
# WEEK
# =============================================================================


class TestRenderWeek:
    def test_start_of_week_is_sunday(self):
        assert start_of_week(date(2024, 6, 10)) == date(2024, 6, 9)
        assert start_of_week(date(2024, 6, 9)) == date(2024, 6, 9)
        assert start_of_week(date(2024, 6, 15)) == date(2024, 6, 9)

    def test_empty_week_is_fifteen_by_seven(self):
        view = render_week([], NavigationState(date(2024, 6, 12), ViewMode.WEEK), UTC, TODAY)

        assert len(view.rows) == 15
        assert all(len(row.cells) == 7 for row in view.rows)
        assert view.rows[0].label == "7 AM"
        assert view.rows[-1].label == "9 PM"
        assert [day.label for day in view.days][:2] == ["Sun 9", "Mon 10"]
        assert view.title == "Jun 9 - 15, 2024"
        assert view.days[-1].is_today

    def test_events_land_in_day_hour_slot(self, make_event):
        events = [
            make_event("a", "2024-06-10T09:15:00"),
            make_event("b", "2024-06-10T09:45:00"),
            make_event("early", "2024-06-10T06:00:00"),
        ]
        view = render_week(events, NavigationState(date(2024, 6, 10), ViewMode.WEEK), UTC, TODAY)
        nine_am = next(row for row in view.rows if row.hour == 9)

        assert [e.id for e in nine_am.cells[1]] == ["a", "b"]
        assert sum(len(cell) for row in view.rows for cell in row.cells) == 2


# =============================================================================
# DAY
# =============================================================================


class TestRenderDay:
    def test_always_seventeen_slots(self):
        view = render_day([], NavigationState(date(2024, 6, 10), ViewMode.DAY), UTC, TODAY)

        assert len(view.slots) == 17
        assert view.slots[0].label == "6 AM"
        assert view.slots[-1].label == "10 PM"
        assert view.title == "Monday, June 10, 2024"
        assert view.event_count == 0

    def test_ordered_by_start(self, make_event):
        events = [
            make_event("nine", "2024-06-10T09:00:00"),
            make_event("half-eight", "2024-06-10T08:30:00"),
            make_event("late-eight", "2024-06-10T08:45:00"),
        ]
        view = render_day(events, NavigationState(date(2024, 6, 10), ViewMode.DAY), UTC, TODAY)
        shown = [e.id for slot in view.slots for e in slot.events]

        assert shown == ["half-eight", "late-eight", "nine"]
        eight = next(slot for slot in view.slots if slot.hour == 8)
        assert eight.has_events

    def test_events_outside_slots_still_counted(self, make_event):
        events = [make_event("night", "2024-06-10T23:30:00"), make_event("noon", "2024-06-10T12:00:00")]
        view = render_day(events, NavigationState(date(2024, 6, 10), ViewMode.DAY), UTC, TODAY)

        assert view.event_count == 2
        assert sum(len(slot.events) for slot in view.slots) == 1


def test_selected_day_list(make_event):
    events = [make_event("a", "2024-06-10T09:00:00"), make_event("b", "2024-06-11T09:00:00")]
    selected = render_selected_day(events, date(2024, 6, 10), UTC)

    assert selected.title == "Monday, June 10, 2024 (1 event)"
    assert [e.id for e in selected.events] == ["a"]


def test_teams_list_needs_join_link(make_event):
    linked = make_event("linked", is_online_meeting=True, online_meeting_url="https://t/x")
    unlinked = make_event("unlinked", is_online_meeting=True)
    plain = make_event("plain")

    assert teams_meetings([plain, linked, unlinked]) == [linked]
