"""Tests for the event store and its SQLite-backed persistence."""

import logging

from core.config import CACHE_EVENTS_KEY, CACHE_SYNC_TIME_KEY
from core.database import SqliteStorage
from services.event_store import EventStore

SYNCED_AT = "2024-06-10T08:00:00.000Z"


def test_replace_then_reload_round_trip(memory_storage, make_event, teams_event):
    events = [make_event("a"), teams_event, make_event("b", "2024-06-11T14:00:00", categories=["Blue"])]
    EventStore(memory_storage).replace(events, SYNCED_AT)

    reloaded = EventStore(memory_storage)
    reloaded.load_cached()

    assert len(reloaded) == 3
    assert reloaded.all() == events
    assert reloaded.last_sync_time == SYNCED_AT
    assert reloaded.get("teams-1").attendees[1].status.value == "tentative"


def test_cache_uses_camel_case_keys(memory_storage, teams_event):
    EventStore(memory_storage).replace([teams_event], SYNCED_AT)
    raw = memory_storage.values[CACHE_EVENTS_KEY]

    assert '"onlineMeetingUrl"' in raw
    assert '"isOnlineMeeting":true' in raw
    assert memory_storage.values[CACHE_SYNC_TIME_KEY] == SYNCED_AT


def test_replace_drops_duplicate_ids(memory_storage, make_event, caplog):
    first = make_event("dup", subject="First")
    second = make_event("dup", subject="Second")
    store = EventStore(memory_storage)

    with caplog.at_level(logging.WARNING):
        store.replace([first, second, make_event("other")], SYNCED_AT)

    assert [e.id for e in store.all()] == ["dup", "other"]
    assert store.get("dup").subject == "First"
    assert "duplicate" in caplog.text


def test_replace_does_not_merge(memory_storage, make_event):
    store = EventStore(memory_storage)
    store.replace([make_event("a"), make_event("b")], SYNCED_AT)
    store.replace([make_event("c")], "2024-06-11T08:00:00.000Z")

    assert [e.id for e in store.all()] == ["c"]
    assert store.get("a") is None


def test_all_returns_copy(memory_storage, make_event):
    store = EventStore(memory_storage)
    store.replace([make_event("a")], SYNCED_AT)
    store.all().clear()

    assert len(store) == 1


def test_malformed_cache_is_discarded(memory_storage):
    memory_storage.values[CACHE_EVENTS_KEY] = '[{"id": "x", "start": "not a date"}]'
    memory_storage.values[CACHE_SYNC_TIME_KEY] = SYNCED_AT

    store = EventStore(memory_storage)
    store.load_cached()

    assert len(store) == 0
    assert store.last_sync_time is None
    assert memory_storage.values == {}


def test_invalid_json_is_discarded(memory_storage):
    memory_storage.values[CACHE_EVENTS_KEY] = "{not json"
    memory_storage.values[CACHE_SYNC_TIME_KEY] = SYNCED_AT

    store = EventStore(memory_storage)
    store.load_cached()

    assert len(store) == 0


def test_missing_sync_time_means_empty(memory_storage, make_event):
    EventStore(memory_storage).replace([make_event("a")], SYNCED_AT)
    del memory_storage.values[CACHE_SYNC_TIME_KEY]

    store = EventStore(memory_storage)
    store.load_cached()

    assert len(store) == 0


class TestSqliteStorage:
    def test_round_trip_through_database(self, tmp_db, make_event):
        EventStore(SqliteStorage("user-1", tmp_db)).replace([make_event("a")], SYNCED_AT)

        store = EventStore(SqliteStorage("user-1", tmp_db))
        store.load_cached()

        assert [e.id for e in store.all()] == ["a"]

    def test_namespaces_are_isolated(self, tmp_db, make_event):
        SqliteStorage("user-1", tmp_db).set_many({CACHE_SYNC_TIME_KEY: SYNCED_AT})

        assert SqliteStorage("user-2", tmp_db).get_many([CACHE_SYNC_TIME_KEY]) == {}

    def test_remove_many(self, tmp_db):
        storage = SqliteStorage("user-1", tmp_db)
        storage.set_many({"a": "1", "b": "2"})
        storage.remove_many(["a"])

        assert storage.get_many(["a", "b"]) == {"b": "2"}
