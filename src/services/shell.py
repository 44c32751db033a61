"""
Calendar application shell.

Owns the navigation state of one page session over a user's event store,
routes named commands to the navigation transitions, and assembles the full
render model.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Any

from models.events import Event
from services.dates import format_datetime
from services.details import EventDetails, project_details
from services.event_store import EventStore
from services.navigation import (
    CommandError,
    NavigationState,
    ViewMode,
    go_to_today,
    navigate,
    select_date,
    switch_view,
)
from services.views import (
    DayView,
    MonthView,
    SelectedDay,
    WeekView,
    render_day,
    render_month,
    render_selected_day,
    render_week,
    teams_meetings,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalendarRender:
    """Everything a presentation layer needs to draw the calendar."""

    view_mode: ViewMode
    anchor_date: date
    selected_date: date | None
    title: str
    month: MonthView | None
    week: WeekView | None
    day: DayView | None
    selected_day: SelectedDay | None
    teams_meetings: tuple[Event, ...]
    total_events: int
    last_sync_time: str | None
    last_sync_text: str | None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CalendarShell:
    """Navigation state of one page session, rendered over a user's event store."""

    def __init__(
        self,
        store: EventStore,
        tz: tzinfo,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.store = store
        self.tz = tz
        self._clock = clock
        self.state = NavigationState(anchor_date=self.today())

    def today(self, tz: tzinfo | None = None) -> date:
        return self._clock().astimezone(tz or self.tz).date()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def dispatch(
        self,
        action: str,
        params: Mapping[str, Any] | None = None,
        tz: tzinfo | None = None,
    ) -> "CalendarRender":
        """
        Run a named command and return the re-rendered calendar.

        `tz` overrides the shell's viewer zone for this call only.
        """
        handler = COMMANDS.get(action)
        if handler is None:
            raise CommandError(f"Unknown calendar command '{action}'")
        handler(self, params or {}, tz)
        logger.debug("Calendar command %s -> %s", action, self.state)
        return self.render(tz)

    def _switch_view(self, params: Mapping[str, Any], tz: tzinfo | None):
        try:
            mode = ViewMode(params.get("mode"))
        except ValueError as e:
            raise CommandError(f"Unknown view mode {params.get('mode')!r}") from e
        switch_view(self.state, mode)

    def _navigate(self, params: Mapping[str, Any], tz: tzinfo | None):
        navigate(self.state, params.get("delta"))

    def _today(self, params: Mapping[str, Any], tz: tzinfo | None):
        go_to_today(self.state, self.today(tz))

    def _select_date(self, params: Mapping[str, Any], tz: tzinfo | None):
        try:
            day = date(int(params["year"]), int(params["month"]), int(params["day"]))
        except (KeyError, TypeError, ValueError) as e:
            raise CommandError("select_date requires a valid 'year', 'month' and 'day'") from e
        select_date(self.state, day)

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------

    def apply_sync(self, events: list[Event], synced_at: str, tz: tzinfo | None = None) -> "CalendarRender":
        self.store.replace(events, synced_at)
        logger.info("Calendar store replaced with %d events", len(self.store))
        return self.render(tz)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render(self, tz: tzinfo | None = None) -> CalendarRender:
        tz = tz or self.tz
        events = self.store.all()
        today = self.today(tz)
        month = week = day = selected = None

        if self.state.view_mode == ViewMode.MONTH:
            month = render_month(events, self.state, tz, today)
            title = month.title
            if self.state.selected_date is not None:
                selected = render_selected_day(events, self.state.selected_date, tz)
        elif self.state.view_mode == ViewMode.WEEK:
            week = render_week(events, self.state, tz, today)
            title = week.title
        else:
            day = render_day(events, self.state, tz, today)
            title = day.title

        last_sync = self.store.last_sync_time
        return CalendarRender(
            view_mode=self.state.view_mode,
            anchor_date=self.state.anchor_date,
            selected_date=self.state.selected_date,
            title=title,
            month=month,
            week=week,
            day=day,
            selected_day=selected,
            teams_meetings=tuple(teams_meetings(events)),
            total_events=len(events),
            last_sync_time=last_sync,
            last_sync_text=self._format_sync_time(last_sync, tz),
        )

    def event_details(self, event_id: str, tz: tzinfo | None = None) -> EventDetails | None:
        event = self.store.get(event_id)
        if event is None:
            return None
        return project_details(event, tz or self.tz)

    def _format_sync_time(self, value: str | None, tz: tzinfo) -> str | None:
        if not value:
            return None
        try:
            synced = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
        if synced.tzinfo is None:
            synced = synced.replace(tzinfo=timezone.utc)
        return format_datetime(synced.astimezone(tz))


COMMANDS: dict[str, Callable[[CalendarShell, Mapping[str, Any], tzinfo | None], None]] = {
    "switch_view": CalendarShell._switch_view,
    "navigate": CalendarShell._navigate,
    "today": CalendarShell._today,
    "select_date": CalendarShell._select_date,
}
