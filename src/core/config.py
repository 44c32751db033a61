"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("DB_PATH", PROJECT_ROOT / "data" / "db" / "teams-calendar.db"))

# =============================================================================
# AZURE AD APPLICATION (from environment)
# =============================================================================

CLIENT_ID = os.environ.get("CLIENT_ID", "")
CLIENT_SECRET = os.environ.get("CLIENT_SECRET", "")
TENANT_ID = os.environ.get("TENANT_ID", "common")
AUTHORITY = f"https://login.microsoftonline.com/{TENANT_ID}"
REDIRECT_URI = os.environ.get("REDIRECT_URI", "http://localhost:3000/auth/callback")
POST_LOGOUT_REDIRECT_URI = os.environ.get("POST_LOGOUT_REDIRECT_URI", "http://localhost:3000")
LOGOUT_URL = "https://login.microsoftonline.com/common/oauth2/v2.0/logout"

# Delegated Graph permissions: calendar and Teams access
SCOPES = [
    "User.Read",
    "Calendars.ReadWrite",
    "OnlineMeetings.ReadWrite",
    "OnlineMeetingArtifact.Read.All",
]

# =============================================================================
# SESSION CONFIGURATION
# =============================================================================

ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
SESSION_SECRET = os.environ.get("SESSION_SECRET", "your-secret-key")
SESSION_MAX_AGE = 24 * 60 * 60  # seconds
AUTH_COOKIE_NAME = "auth_token"
AUTH_COOKIE_MAX_AGE = 24 * 60 * 60  # seconds
COOKIE_SECURE = ENVIRONMENT == "production"
MAX_CALENDAR_SESSIONS = int(os.environ.get("MAX_CALENDAR_SESSIONS", "500"))

# =============================================================================
# SYNC CONFIGURATION
# =============================================================================

DEFAULT_SYNC_DAYS = 30
SYNC_PAGE_SIZE = 100
EVENTS_PAGE_SIZE = 50
NO_TITLE = "(No title)"
BODY_PREVIEW_LENGTH = 200
TEAMS_LOCATION = "Microsoft Teams Meeting"

SYNC_SELECT_FIELDS = [
    "id", "subject", "start", "end", "location", "isOnlineMeeting",
    "onlineMeeting", "attendees", "body", "organizer", "isCancelled",
    "importance", "showAs", "categories", "webLink", "recurrence",
]

# Local storage keys for the synced snapshot
CACHE_EVENTS_KEY = "syncedCalendarEvents"
CACHE_SYNC_TIME_KEY = "lastSyncTime"

# =============================================================================
# CALENDAR VIEW CONFIGURATION
# =============================================================================

VIEWER_TIMEZONE = os.environ.get("VIEWER_TIMEZONE", "UTC")

MONTH_GRID_ROWS = 6
MONTH_MIN_ROWS = 4
MONTH_CELL_MAX_EVENTS = 3
WEEK_FIRST_HOUR = 7  # 7 AM
WEEK_LAST_HOUR = 21  # 9 PM
DAY_FIRST_HOUR = 6  # 6 AM
DAY_LAST_HOUR = 22  # 10 PM

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("PORT", "3000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
