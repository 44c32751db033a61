"""
Month, week and day render models for the synced calendar.

Each renderer is a pure function of the event list and navigation state and
returns a frozen description of cells/slots and the events they hold. Nothing
here knows how the model is drawn.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta, tzinfo

from core.config import (
    DAY_FIRST_HOUR,
    DAY_LAST_HOUR,
    MONTH_CELL_MAX_EVENTS,
    MONTH_GRID_ROWS,
    MONTH_MIN_ROWS,
    WEEK_FIRST_HOUR,
    WEEK_LAST_HOUR,
)
from models.events import Event
from services.dates import (
    WEEKDAY_NAMES,
    format_date_long,
    format_hour,
    format_month_title,
    format_week_title,
    group_by_day,
    group_by_day_hour,
    month_day_key,
    plural_events,
    start_instant,
)
from services.navigation import NavigationState

# =============================================================================
# RENDER MODELS
# =============================================================================


@dataclass(frozen=True)
class MonthCell:
    """One day in the month grid. Cells outside the month are inert."""

    date: date
    in_month: bool
    is_today: bool = False
    is_selected: bool = False
    events: tuple[Event, ...] = ()
    overflow: int = 0  # shown as "+N more"

    @property
    def total_events(self) -> int:
        return len(self.events) + self.overflow


@dataclass(frozen=True)
class MonthView:
    year: int
    month: int
    title: str
    weeks: tuple[tuple[MonthCell, ...], ...]

    @property
    def cells(self) -> list[MonthCell]:
        return [cell for week in self.weeks for cell in week]


@dataclass(frozen=True)
class WeekDay:
    date: date
    label: str  # "Sun 9"
    is_today: bool


@dataclass(frozen=True)
class WeekRow:
    hour: int
    label: str
    cells: tuple[tuple[Event, ...], ...]  # one entry per day column


@dataclass(frozen=True)
class WeekView:
    title: str
    days: tuple[WeekDay, ...]
    rows: tuple[WeekRow, ...]


@dataclass(frozen=True)
class HourSlot:
    hour: int
    label: str
    events: tuple[Event, ...]
    has_events: bool


@dataclass(frozen=True)
class DayView:
    date: date
    title: str
    is_today: bool
    event_count: int
    slots: tuple[HourSlot, ...]


@dataclass(frozen=True)
class SelectedDay:
    date: date
    title: str
    events: tuple[Event, ...]


# =============================================================================
# MONTH VIEW
# =============================================================================


def render_month(
    events: list[Event], state: NavigationState, tz: tzinfo, today: date
) -> MonthView:
    """
    Lay out the anchor month as Sunday-first weeks.

    Renders up to 6 rows; stops early once every day of the month is placed
    and at least 4 rows are complete.
    """
    year, month = state.anchor_date.year, state.anchor_date.month
    first_weekday = (calendar.weekday(year, month, 1) + 1) % 7  # Sunday = 0
    days_in_month = calendar.monthrange(year, month)[1]
    first_of_month = date(year, month, 1)
    events_by_day = group_by_day(events, tz)

    weeks = []
    day_count = 1
    for week in range(MONTH_GRID_ROWS):
        row = []
        for day_of_week in range(7):
            cell_index = week * 7 + day_of_week
            cell_date = first_of_month + timedelta(days=cell_index - first_weekday)

            if cell_index < first_weekday or day_count > days_in_month:
                row.append(MonthCell(date=cell_date, in_month=False))
                continue

            day_events = events_by_day.get(cell_date, [])
            row.append(
                MonthCell(
                    date=cell_date,
                    in_month=True,
                    is_today=cell_date == today,
                    is_selected=cell_date == state.selected_date,
                    events=tuple(day_events[:MONTH_CELL_MAX_EVENTS]),
                    overflow=max(len(day_events) - MONTH_CELL_MAX_EVENTS, 0),
                )
            )
            day_count += 1

        weeks.append(tuple(row))
        if day_count > days_in_month and week >= MONTH_MIN_ROWS - 1:
            break

    return MonthView(
        year=year,
        month=month,
        title=format_month_title(year, month),
        weeks=tuple(weeks),
    )


# =============================================================================
# WEEK VIEW
# =============================================================================


def start_of_week(d: date) -> date:
    """The Sunday on or before d."""
    return d - timedelta(days=(d.weekday() + 1) % 7)


def render_week(
    events: list[Event], state: NavigationState, tz: tzinfo, today: date
) -> WeekView:
    """Seven day columns by hour rows 7 AM - 9 PM; every event in a slot is shown."""
    first = start_of_week(state.anchor_date)
    week_dates = [first + timedelta(days=offset) for offset in range(7)]
    events_by_slot = group_by_day_hour(events, tz)

    days = tuple(
        WeekDay(
            date=d,
            label=f"{WEEKDAY_NAMES[d.weekday()][:3]} {d.day}",
            is_today=d == today,
        )
        for d in week_dates
    )
    rows = tuple(
        WeekRow(
            hour=hour,
            label=format_hour(hour),
            cells=tuple(tuple(events_by_slot.get((d, hour), [])) for d in week_dates),
        )
        for hour in range(WEEK_FIRST_HOUR, WEEK_LAST_HOUR + 1)
    )
    return WeekView(title=format_week_title(week_dates[0], week_dates[-1]), days=days, rows=rows)


# =============================================================================
# DAY VIEW
# =============================================================================


def events_on(events: list[Event], day: date, tz: tzinfo) -> list[Event]:
    """Events starting on the given viewer-local day, in store order."""
    return [event for event in events if month_day_key(event, tz) == day]


def render_day(
    events: list[Event], state: NavigationState, tz: tzinfo, today: date
) -> DayView:
    """Hour slots 6 AM - 10 PM for the anchor day, always all 17 of them."""
    day = state.anchor_date
    day_events = sorted(events_on(events, day, tz), key=lambda event: start_instant(event, tz))

    events_by_hour: dict[int, list[Event]] = {}
    for event in day_events:
        events_by_hour.setdefault(start_instant(event, tz).hour, []).append(event)

    slots = []
    for hour in range(DAY_FIRST_HOUR, DAY_LAST_HOUR + 1):
        hour_events = tuple(events_by_hour.get(hour, []))
        slots.append(
            HourSlot(
                hour=hour,
                label=format_hour(hour),
                events=hour_events,
                has_events=bool(hour_events),
            )
        )

    return DayView(
        date=day,
        title=format_date_long(day),
        is_today=day == today,
        event_count=len(day_events),
        slots=tuple(slots),
    )


# =============================================================================
# SIDE LISTS
# =============================================================================


def render_selected_day(events: list[Event], day: date, tz: tzinfo) -> SelectedDay:
    day_events = events_on(events, day, tz)
    return SelectedDay(
        date=day,
        title=f"{format_date_long(day)} ({plural_events(len(day_events))})",
        events=tuple(day_events),
    )


def teams_meetings(events: list[Event]) -> list[Event]:
    """Events with a provisioned Teams join link."""
    return [event for event in events if event.is_online_meeting and event.online_meeting_url]
