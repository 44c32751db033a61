"""API Pydantic models."""

from .requests import CreateEventRequest, MeetingRequest, UpdateEventRequest
from .responses import ErrorCodes, ErrorResponse, HealthResponse

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "CreateEventRequest",
    "UpdateEventRequest",
    "MeetingRequest",
]
