"""Tests for navigation state transitions."""

from datetime import date

import pytest

from services.navigation import (
    CommandError,
    NavigationState,
    ViewMode,
    add_months,
    go_to_today,
    navigate,
    select_date,
    switch_view,
)


@pytest.fixture
def state():
    return NavigationState(anchor_date=date(2024, 6, 15))


def test_add_months_clamps_day():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)


class TestNavigate:
    def test_month_step(self, state):
        navigate(state, 1)
        assert state.anchor_date == date(2024, 7, 15)

    def test_week_step(self, state):
        switch_view(state, ViewMode.WEEK)
        navigate(state, -1)
        assert state.anchor_date == date(2024, 6, 8)

    def test_day_step(self, state):
        switch_view(state, ViewMode.DAY)
        navigate(state, 1)
        assert state.anchor_date == date(2024, 6, 16)

    @pytest.mark.parametrize("delta", [0, 2, -3, 1.9, 1.0, True, "1", None])
    def test_rejects_other_deltas_without_change(self, state, delta):
        state.selected_date = date(2024, 6, 10)
        with pytest.raises(CommandError):
            navigate(state, delta)
        assert state.anchor_date == date(2024, 6, 15)
        assert state.selected_date == date(2024, 6, 10)


class TestSelection:
    def test_select_sets_anchor_and_selection(self, state):
        select_date(state, date(2024, 6, 10))

        assert state.selected_date == date(2024, 6, 10)
        assert state.anchor_date == date(2024, 6, 10)
        assert state.view_mode == ViewMode.MONTH

    def test_double_select_promotes_to_day_view(self, state):
        select_date(state, date(2024, 6, 10))
        select_date(state, date(2024, 6, 10))

        assert state.view_mode == ViewMode.DAY
        assert state.anchor_date == date(2024, 6, 10)
        assert state.selected_date is None

    def test_select_outside_month_rejected(self, state):
        with pytest.raises(CommandError):
            select_date(state, date(2024, 7, 1))

    def test_select_outside_month_view_rejected(self, state):
        switch_view(state, ViewMode.WEEK)
        with pytest.raises(CommandError):
            select_date(state, date(2024, 6, 10))

    @pytest.mark.parametrize(
        "transition",
        [
            lambda s: switch_view(s, ViewMode.MONTH),
            lambda s: navigate(s, 1),
            lambda s: navigate(s, -1),
            lambda s: go_to_today(s, date(2024, 6, 15)),
        ],
    )
    def test_transitions_clear_selection(self, state, transition):
        select_date(state, date(2024, 6, 10))
        transition(state)
        assert state.selected_date is None


def test_go_to_today_keeps_view(state):
    switch_view(state, ViewMode.WEEK)
    navigate(state, 1)
    go_to_today(state, date(2024, 6, 15))

    assert state.anchor_date == date(2024, 6, 15)
    assert state.view_mode == ViewMode.WEEK
