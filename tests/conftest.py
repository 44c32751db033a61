"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.events import Event  # noqa: E402


class MemoryStorage:
    """In-memory stand-in for SqliteStorage."""

    def __init__(self, values: dict[str, str] | None = None):
        self.values = dict(values or {})

    def get_many(self, keys: list[str]) -> dict[str, str]:
        return {key: self.values[key] for key in keys if key in self.values}

    def set_many(self, values: dict[str, str]):
        self.values.update(values)

    def remove_many(self, keys: list[str]):
        for key in keys:
            self.values.pop(key, None)


@pytest.fixture
def make_event():
    """Factory for synced events; start is a naive UTC string like Graph returns."""

    def _make(event_id: str = "evt-1", start: str = "2024-06-10T09:00:00", minutes: int = 60, **fields) -> Event:
        end = datetime.fromisoformat(start) + timedelta(minutes=minutes)
        return Event(
            id=event_id,
            subject=fields.pop("subject", f"Event {event_id}"),
            start={"date_time": start, "time_zone": "UTC"},
            end={"date_time": end.isoformat(), "time_zone": "UTC"},
            **fields,
        )

    return _make


@pytest.fixture
def teams_event(make_event):
    """Online meeting on June 10, 2024 09:00 UTC with a join link."""
    return make_event(
        "teams-1",
        "2024-06-10T09:00:00",
        subject="Weekly sync",
        is_online_meeting=True,
        online_meeting_url="https://teams.microsoft.com/l/meetup-join/abc",
        location="Microsoft Teams Meeting",
        organizer="lead@contoso.com",
        attendees=[
            {"email": "ana@contoso.com", "name": "Ana", "status": "accepted"},
            {"email": "bo@contoso.com", "name": "", "status": "tentativelyAccepted"},
        ],
        body_preview="Agenda: status",
        web_link="https://outlook.office365.com/owa/?itemid=abc",
    )


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def fixed_clock():
    """Clock pinned to 2024-06-15 12:00 UTC."""
    return lambda: datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def tmp_db(tmp_path, monkeypatch):
    """Point the database module at a fresh SQLite file."""
    import core.database

    db_path = tmp_path / "db" / "test.db"
    monkeypatch.setattr(core.database, "DB_PATH", db_path)
    core.database.init_db()
    return db_path
