"""FastAPI dependencies for authentication and shared resources."""

import logging
import secrets
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import tzinfo
from typing import Generic, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Depends, HTTPException, Query, Request, status
from msgraph import GraphServiceClient

from api.models.responses import ErrorCodes
from core.config import MAX_CALENDAR_SESSIONS, SESSION_MAX_AGE, VIEWER_TIMEZONE
from core.database import SqliteStorage
from core.graph_client import get_graph_client
from services.event_store import EventStore
from services.shell import CalendarShell

logger = logging.getLogger(__name__)

NOT_LINKED_MESSAGE = "Not authenticated. Please link your Teams account first."
SHELL_SESSION_KEY = "calendarShellId"

T = TypeVar("T")


def get_session_user(request: Request) -> dict | None:
    return request.session.get("user")


async def require_access_token(request: Request) -> str:
    """
    Access token of the linked Microsoft account.

    Raises:
        HTTPException: 401 if no account is linked in this session
    """
    access_token = request.session.get("accessToken")
    if not access_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": NOT_LINKED_MESSAGE,
                "code": ErrorCodes.UNAUTHORIZED,
                "details": [],
            },
        )
    return access_token


async def get_graph(access_token: str = Depends(require_access_token)) -> GraphServiceClient:
    return get_graph_client(access_token)


def resolve_timezone(name: str | None):
    """
    IANA zone for the viewer.

    Raises:
        HTTPException: 400 if the name is not a known time zone
    """
    try:
        return ZoneInfo(name or VIEWER_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Unknown time zone",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [f"Received: {name or VIEWER_TIMEZONE}"],
            },
        )


# =============================================================================
# CALENDAR SESSIONS
# =============================================================================


@dataclass
class RegistryEntry(Generic[T]):
    value: T
    expires_at: float


class ExpiringRegistry(Generic[T]):
    """
    In-memory registry whose entries expire after `ttl_seconds` without use.

    Holds at most `max_entries`; the least recently used entry is evicted first.
    """

    def __init__(self, ttl_seconds: float, max_entries: int) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._entries: OrderedDict[str, RegistryEntry[T]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at <= time.time():
                del self._entries[key]
                return None
            entry.expires_at = time.time() + self.ttl_seconds
            self._entries.move_to_end(key)
            return entry.value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            self._entries[key] = RegistryEntry(value=value, expires_at=time.time() + self.ttl_seconds)
            self._entries.move_to_end(key)
            now = time.time()
            for stale in [k for k, e in self._entries.items() if e.expires_at <= now]:
                del self._entries[stale]
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def pop(self, key: str) -> T | None:
        with self._lock:
            entry = self._entries.pop(key, None)
            return entry.value if entry else None

    def __len__(self) -> int:
        return len(self._entries)


# Event stores are shared by every session of a user; navigation is per session
_stores: ExpiringRegistry[EventStore] = ExpiringRegistry(SESSION_MAX_AGE, MAX_CALENDAR_SESSIONS)
_shells: ExpiringRegistry[CalendarShell] = ExpiringRegistry(SESSION_MAX_AGE, MAX_CALENDAR_SESSIONS)


def store_key(user: dict | None) -> str:
    """Cache namespace of a session user."""
    user = user or {}
    return user.get("id") or user.get("email") or "anonymous"


def get_event_store(user: dict | None) -> EventStore:
    """Event store of a user, loaded from the SQLite cache on first use."""
    user_id = store_key(user)
    store = _stores.get(user_id)
    if store is None:
        store = EventStore(SqliteStorage(user_id))
        store.load_cached()
        _stores.set(user_id, store)
        logger.info("Event store loaded for %s with %d cached events", user_id, len(store))
    return store


async def viewer_timezone(
    tz: str | None = Query(None, description="Viewer IANA time zone, e.g. Europe/Berlin"),
) -> tzinfo | None:
    """Zone requested for this call only, or None for the configured default."""
    return resolve_timezone(tz) if tz else None


async def get_calendar_shell(
    request: Request,
    _access_token: str = Depends(require_access_token),
) -> CalendarShell:
    """Calendar shell of this browser session, created on first use."""
    store = get_event_store(get_session_user(request))

    shell_id = request.session.get(SHELL_SESSION_KEY)
    shell = _shells.get(shell_id) if shell_id else None
    if shell is None:
        shell_id = secrets.token_urlsafe(16)
        request.session[SHELL_SESSION_KEY] = shell_id
        shell = CalendarShell(store, resolve_timezone(None))
        _shells.set(shell_id, shell)
        logger.debug("Calendar shell %s created", shell_id)
    # The user's store may have been evicted and reloaded since the shell was made
    shell.store = store
    return shell


def drop_calendar_shell(request: Request):
    shell_id = request.session.get(SHELL_SESSION_KEY)
    if shell_id:
        _shells.pop(shell_id)
