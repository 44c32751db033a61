"""
In-memory store of synced events, persisted to local key-value storage.
"""

import logging
from typing import Protocol

from pydantic import TypeAdapter, ValidationError

from core.config import CACHE_EVENTS_KEY, CACHE_SYNC_TIME_KEY
from models.events import Event

logger = logging.getLogger(__name__)

EVENT_LIST = TypeAdapter(list[Event])


class LocalStorage(Protocol):
    """Key-value storage the snapshot is written to (see core.database.SqliteStorage)."""

    def get_many(self, keys: list[str]) -> dict[str, str]: ...

    def set_many(self, values: dict[str, str]): ...

    def remove_many(self, keys: list[str]): ...


class EventStore:
    """
    Holds the last synced events, keyed by id, in server-provided order.

    A sync replaces the whole sequence; nothing is ever merged.
    """

    def __init__(self, storage: LocalStorage):
        self._storage = storage
        self._events: list[Event] = []
        self._by_id: dict[str, Event] = {}
        self.last_sync_time: str | None = None

    def __len__(self) -> int:
        return len(self._events)

    def all(self) -> list[Event]:
        return list(self._events)

    def get(self, event_id: str) -> Event | None:
        return self._by_id.get(event_id)

    def replace(self, events: list[Event], synced_at: str):
        """Swap in a new snapshot and persist it with its sync timestamp."""
        unique: dict[str, Event] = {}
        for event in events:
            if event.id in unique:
                logger.warning("Dropping duplicate event id %s from sync payload", event.id)
                continue
            unique[event.id] = event
        snapshot = list(unique.values())

        self._storage.set_many(
            {
                CACHE_EVENTS_KEY: EVENT_LIST.dump_json(snapshot, by_alias=True).decode("utf-8"),
                CACHE_SYNC_TIME_KEY: synced_at,
            }
        )
        self._events = snapshot
        self._by_id = unique
        self.last_sync_time = synced_at

    def load_cached(self):
        """Restore the last persisted snapshot; malformed data is discarded."""
        cached = self._storage.get_many([CACHE_EVENTS_KEY, CACHE_SYNC_TIME_KEY])
        raw_events = cached.get(CACHE_EVENTS_KEY)
        synced_at = cached.get(CACHE_SYNC_TIME_KEY)
        if not raw_events or not synced_at:
            self._set([], None)
            return

        try:
            events = EVENT_LIST.validate_json(raw_events)
        except ValidationError as e:
            logger.warning("Discarding malformed cached calendar data: %s", e)
            self._storage.remove_many([CACHE_EVENTS_KEY, CACHE_SYNC_TIME_KEY])
            self._set([], None)
            return

        self._set(events, synced_at)
        logger.info("Loaded %d cached events (last sync %s)", len(events), synced_at)

    def _set(self, events: list[Event], synced_at: str | None):
        self._events = events
        self._by_id = {event.id: event for event in events}
        self.last_sync_time = synced_at
