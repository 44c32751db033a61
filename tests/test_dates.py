"""Tests for date bucketing and display formatting."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from models.events import Event
from services.dates import (
    day_hour_key,
    format_date_long,
    format_date_short,
    format_datetime,
    format_hour,
    format_month_title,
    format_time,
    format_week_title,
    group_by_day,
    group_by_day_hour,
    month_day_key,
    plural_events,
    start_instant,
)

UTC = timezone.utc


class TestBucketing:
    def test_naive_value_is_read_as_utc(self, make_event):
        event = make_event(start="2024-06-10T09:00:00")
        assert start_instant(event, UTC) == datetime(2024, 6, 10, 9, 0, tzinfo=UTC)

    def test_viewer_zone_can_move_event_to_previous_day(self, make_event):
        event = make_event(start="2024-06-10T02:00:00")
        new_york = ZoneInfo("America/New_York")

        assert month_day_key(event, UTC) == date(2024, 6, 10)
        assert month_day_key(event, new_york) == date(2024, 6, 9)
        assert day_hour_key(event, new_york) == (date(2024, 6, 9), 22)

    def test_seven_digit_fractions_parse(self):
        event = Event(
            id="graph-1",
            start={"dateTime": "2024-06-10T09:00:00.0000000", "timeZone": "UTC"},
            end={"dateTime": "2024-06-10T10:00:00.0000000", "timeZone": "UTC"},
        )
        assert day_hour_key(event, UTC) == (date(2024, 6, 10), 9)

    def test_group_by_day_keeps_store_order(self, make_event):
        late = make_event("late", "2024-06-10T15:00:00")
        early = make_event("early", "2024-06-10T08:00:00")
        other = make_event("other", "2024-06-11T08:00:00")

        buckets = group_by_day([late, early, other], UTC)

        assert [e.id for e in buckets[date(2024, 6, 10)]] == ["late", "early"]
        assert [e.id for e in buckets[date(2024, 6, 11)]] == ["other"]

    def test_every_event_lands_in_exactly_one_hour_bucket(self, make_event):
        events = [make_event(f"e{i}", f"2024-06-10T{h:02d}:30:00") for i, h in enumerate((7, 7, 13, 23))]
        buckets = group_by_day_hour(events, UTC)

        assert sum(len(v) for v in buckets.values()) == len(events)
        assert len(buckets[(date(2024, 6, 10), 7)]) == 2


class TestFormatting:
    def test_hour_labels(self):
        assert format_hour(0) == "12 AM"
        assert format_hour(7) == "7 AM"
        assert format_hour(12) == "12 PM"
        assert format_hour(21) == "9 PM"

    def test_time(self):
        assert format_time(datetime(2024, 6, 10, 9, 5)) == "9:05 AM"
        assert format_time(datetime(2024, 6, 10, 9, 5), padded=True) == "09:05 AM"
        assert format_time(datetime(2024, 6, 10, 0, 0)) == "12:00 AM"
        assert format_time(datetime(2024, 6, 10, 13, 30)) == "1:30 PM"

    def test_dates(self):
        assert format_month_title(2024, 6) == "June 2024"
        assert format_date_long(date(2024, 6, 10)) == "Monday, June 10, 2024"
        assert format_date_short(date(2024, 6, 10)) == "Mon, Jun 10"
        assert format_datetime(datetime(2024, 6, 10, 9, 0)) == "Jun 10, 2024, 09:00 AM"

    def test_week_title_within_and_across_months(self):
        assert format_week_title(date(2024, 6, 9), date(2024, 6, 15)) == "Jun 9 - 15, 2024"
        assert format_week_title(date(2024, 6, 30), date(2024, 7, 6)) == "Jun 30 - Jul 6, 2024"

    def test_plural(self):
        assert plural_events(1) == "1 event"
        assert plural_events(0) == "0 events"
        assert plural_events(3) == "3 events"
