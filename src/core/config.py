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
DB_PATH = PROJECT_ROOT / "data" / "db" / "booking-requests.db"

# =============================================================================
# CALENDAR CONFIGURATION
# =============================================================================

CALENDAR_TIME_ZONE = "Europe/Brussels"
UPCOMING_EVENTS_LIMIT = 3

GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
]

# =============================================================================
# GOOGLE SERVICE ACCOUNT (from environment)
# =============================================================================

GOOGLE_CLIENT_EMAIL = os.environ.get("GOOGLE_CLIENT_EMAIL", "")
# Keys stored in .env files usually carry literal "\n" sequences
GOOGLE_PRIVATE_KEY = os.environ.get("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n")

# =============================================================================
# USER DIRECTORY (Supabase / PostgREST)
# =============================================================================

SUPABASE_URL = os.environ.get("APP_SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.environ.get("APP_SUPABASE_ANON_KEY", "")
DIRECTORY_TABLE = os.environ.get("DIRECTORY_TABLE", "gebruikers")
DIRECTORY_USERNAME_COLUMN = os.environ.get("DIRECTORY_USERNAME_COLUMN", "gebruikersnaam")
DIRECTORY_EMAIL_COLUMN = os.environ.get("DIRECTORY_EMAIL_COLUMN", "email")
DIRECTORY_ORDER_COLUMN = os.environ.get("DIRECTORY_ORDER_COLUMN", "id")

# =============================================================================
# EMAIL CONFIGURATION
# =============================================================================

SMTP_HOST = os.environ.get("SMTP_HOST", "smtp.gmail.com")
SMTP_PORT = int(os.environ.get("SMTP_PORT", "465"))
SMTP_AUTH_USER = os.environ.get("SMTP_AUTH_USER", "")
SMTP_AUTH_PASS = os.environ.get("SMTP_AUTH_PASS", "")
SMTP_FROM = os.environ.get("SMTP_FROM", "") or SMTP_AUTH_USER

# =============================================================================
# API CONFIGURATION
# =============================================================================

BOOKING_API_KEY = os.environ.get("BOOKING_API_KEY", "")
API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "3001"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]
REQUEST_LOG_ENABLED = os.environ.get("REQUEST_LOG_ENABLED", "true").lower() == "true"
PROVIDER_TIMEOUT_SECONDS = float(os.environ.get("PROVIDER_TIMEOUT_SECONDS", "30"))
API_VERSION = "1.0.0"

REQUIRED_PROVIDER_SETTINGS = {
    "GOOGLE_CLIENT_EMAIL": GOOGLE_CLIENT_EMAIL,
    "GOOGLE_PRIVATE_KEY": GOOGLE_PRIVATE_KEY,
    "APP_SUPABASE_URL": SUPABASE_URL,
    "APP_SUPABASE_ANON_KEY": SUPABASE_ANON_KEY,
    "SMTP_AUTH_USER": SMTP_AUTH_USER,
    "SMTP_AUTH_PASS": SMTP_AUTH_PASS,
}


def missing_provider_settings() -> list[str]:
    """Names of required provider settings that are not configured."""
    return sorted(name for name, value in REQUIRED_PROVIDER_SETTINGS.items() if not value)
