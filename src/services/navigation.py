"""
Calendar navigation state and its transitions.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum


class ViewMode(str, Enum):
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


class CommandError(ValueError):
    """A navigation command was unknown or its parameters were invalid."""


@dataclass
class NavigationState:
    """
    Which window of the calendar is visible.

    selected_date is only ever set in month view and always lies in the
    anchor month; every transition other than select_date clears it.
    """

    anchor_date: date
    view_mode: ViewMode = ViewMode.MONTH
    selected_date: date | None = None


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def switch_view(state: NavigationState, mode: ViewMode):
    state.selected_date = None
    state.view_mode = mode


def navigate(state: NavigationState, delta: int):
    """Move one step back (-1) or forward (+1) in the current view's unit."""
    # bool is an int subclass and 1.0 == 1
    if isinstance(delta, bool) or not isinstance(delta, int) or delta not in (-1, 1):
        raise CommandError(f"Navigation delta must be -1 or 1, got {delta!r}")

    state.selected_date = None
    if state.view_mode == ViewMode.MONTH:
        state.anchor_date = add_months(state.anchor_date, delta)
    elif state.view_mode == ViewMode.WEEK:
        state.anchor_date += timedelta(days=7 * delta)
    else:
        state.anchor_date += timedelta(days=delta)


def go_to_today(state: NavigationState, today: date):
    state.selected_date = None
    state.anchor_date = today


def select_date(state: NavigationState, day: date):
    """
    Select a day cell in month view.

    Selecting the day that is already the anchor promotes to day view;
    otherwise the day becomes both the selection and the anchor.
    """
    if state.view_mode != ViewMode.MONTH:
        raise CommandError("Days can only be selected in month view")
    if (day.year, day.month) != (state.anchor_date.year, state.anchor_date.month):
        raise CommandError(f"{day.isoformat()} is outside the displayed month")

    if day == state.anchor_date:
        state.anchor_date = day
        switch_view(state, ViewMode.DAY)
        return

    state.selected_date = day
    state.anchor_date = day
