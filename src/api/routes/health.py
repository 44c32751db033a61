"""Health check and link status endpoints."""

import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse, StatusResponse
from core.config import API_VERSION
from core.database import get_connection

router = APIRouter()


def database_available() -> bool:
    try:
        conn = get_connection()
    except (sqlite3.Error, OSError):
        return False
    try:
        conn.execute("SELECT 1 FROM cache_entries LIMIT 1")
        return True
    except sqlite3.Error:
        return False
    finally:
        conn.close()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 if healthy, 503 if the local database is unusable.
    """
    timestamp = datetime.now(timezone.utc).isoformat()

    if database_available():
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            database_available=True,
            timestamp=timestamp,
        )
    else:
        return JSONResponse(
            status_code=503,
            content=HealthResponse(
                status="unhealthy",
                version=API_VERSION,
                database_available=False,
                timestamp=timestamp,
                error="Local database not available",
            ).model_dump(by_alias=True),
        )


@router.get("/api/status", response_model=StatusResponse)
async def link_status(request: Request):
    """Whether a Microsoft account is linked in this session."""
    return StatusResponse(
        is_authenticated=bool(request.session.get("accessToken")),
        user=request.session.get("user"),
    )
