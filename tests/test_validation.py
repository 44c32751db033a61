"""Tests for new event validation."""

from datetime import timedelta

import pytest

from core.validation import parse_local_datetime, validate_event_times


def test_valid_event():
    assert validate_event_times("Sync", "2024-06-10T09:00", "2024-06-10T10:00") == []


def test_missing_fields_reported_together():
    errors = validate_event_times("", None, "")

    assert errors == [
        "subject is required",
        "startDateTime is required",
        "endDateTime is required",
    ]


def test_whitespace_subject_is_missing():
    assert validate_event_times("   ", "2024-06-10T09:00", "2024-06-10T10:00") == ["subject is required"]


@pytest.mark.parametrize("end", ["2024-06-10T09:00", "2024-06-10T08:00"])
def test_end_must_be_after_start(end):
    assert validate_event_times("Sync", "2024-06-10T09:00", end) == ["End time must be after start time"]


def test_unparseable_times():
    errors = validate_event_times("Sync", "tomorrow", "2024-06-10T10:00")

    assert len(errors) == 1
    assert errors[0].startswith("startDateTime is not a valid date-time")


def test_local_time_in_zone():
    parsed = parse_local_datetime("2024-06-10T09:00", "Europe/Berlin")

    assert parsed.utcoffset() == timedelta(hours=2)


def test_explicit_offset_wins():
    parsed = parse_local_datetime("2024-06-10T09:00:00Z", "Europe/Berlin")

    assert parsed.utcoffset() == timedelta(0)


def test_unknown_zone_falls_back_to_utc():
    assert parse_local_datetime("2024-06-10T09:00", "Mars/Olympus").utcoffset() == timedelta(0)
