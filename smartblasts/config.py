"""
Centralized Configuration - Single source of truth for all settings.

All environment variables are read here, validated, and exposed as module-level
constants. Other modules import from here instead of reading os.environ directly.

Usage:
    from smartblasts.config import DB_PATH, SESSION_TTL_DAYS, LOG_LEVEL
"""

import os
import sys

# ─── PATHS ───────────────────────────────────────────────────

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOGS_DIR = os.path.join(PROJECT_ROOT, "logs")

# ─── DATABASE ────────────────────────────────────────────────

DB_PATH = os.environ.get("SB_DB_PATH", os.path.join(PROJECT_ROOT, "smartblasts.db"))
DB_JOURNAL_MODE = os.environ.get("SB_JOURNAL_MODE", "WAL")

# ─── API ─────────────────────────────────────────────────────

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
CORS_ORIGINS = os.environ.get(
    "SB_CORS_ORIGINS", "http://localhost:3000,http://localhost:5173,http://localhost:8000"
).split(",")
ADMIN_EMAILS = {
    e.strip().lower() for e in os.environ.get("SB_ADMIN_EMAILS", "").split(",") if e.strip()
}

# ─── ACCOUNTS & BILLING ──────────────────────────────────────

SESSION_TTL_DAYS = int(os.environ.get("SESSION_TTL_DAYS", "7"))
TRIAL_DAYS = int(os.environ.get("TRIAL_DAYS", "30"))
FREE_MESSAGE_LIMIT = int(os.environ.get("FREE_MESSAGE_LIMIT", "25"))
PASSWORD_MIN_LENGTH = int(os.environ.get("PASSWORD_MIN_LENGTH", "6"))
VENDOR_MONTHLY_PRICE_CENTS = int(os.environ.get("VENDOR_MONTHLY_PRICE_CENTS", "9700"))

# ─── CAMPAIGNS ───────────────────────────────────────────────

DEFAULT_SEND_INTERVAL_SECONDS = int(os.environ.get("DEFAULT_SEND_INTERVAL_SECONDS", "10"))
FOLLOW_UP_DELAY_DAYS = int(os.environ.get("FOLLOW_UP_DELAY_DAYS", "2"))

# ─── LOGGING ─────────────────────────────────────────────────

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = os.environ.get("LOG_FORMAT", "text")  # "text" or "json"
LOG_FILE = os.environ.get("LOG_FILE", "")  # empty = stdout only

# ─── VALIDATION ──────────────────────────────────────────────

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_LOG_FORMATS = {"text", "json"}
_VALID_JOURNAL_MODES = {"WAL", "DELETE", "MEMORY", "OFF"}

_errors = []

if LOG_LEVEL not in _VALID_LOG_LEVELS:
    _errors.append(f"LOG_LEVEL must be one of {_VALID_LOG_LEVELS}, got '{LOG_LEVEL}'")

if LOG_FORMAT not in _VALID_LOG_FORMATS:
    _errors.append(f"LOG_FORMAT must be one of {_VALID_LOG_FORMATS}, got '{LOG_FORMAT}'")

if DB_JOURNAL_MODE not in _VALID_JOURNAL_MODES:
    _errors.append(f"SB_JOURNAL_MODE must be one of {_VALID_JOURNAL_MODES}, got '{DB_JOURNAL_MODE}'")

if SESSION_TTL_DAYS < 1:
    _errors.append(f"SESSION_TTL_DAYS must be positive, got {SESSION_TTL_DAYS}")

if PASSWORD_MIN_LENGTH < 1:
    _errors.append(f"PASSWORD_MIN_LENGTH must be positive, got {PASSWORD_MIN_LENGTH}")

if FREE_MESSAGE_LIMIT < 0:
    _errors.append(f"FREE_MESSAGE_LIMIT must not be negative, got {FREE_MESSAGE_LIMIT}")

if _errors:
    for e in _errors:
        print(f"[config] ERROR: {e}", file=sys.stderr)


def validate(strict: bool = False) -> list:
    """Validate all configuration settings.

    Args:
        strict: If True, raise ValueError on any errors.

    Returns:
        List of error messages (empty if all valid).
    """
    if strict and _errors:
        raise ValueError(f"Configuration errors: {'; '.join(_errors)}")
    return list(_errors)


def print_config():
    """Print current configuration (safe - no secrets)."""
    print("=" * 50)
    print("SmartBlasts Configuration")
    print("=" * 50)
    print(f"  DB_PATH:              {DB_PATH}")
    print(f"  DB_JOURNAL_MODE:      {DB_JOURNAL_MODE}")
    print(f"  API_HOST:             {API_HOST}")
    print(f"  API_PORT:             {API_PORT}")
    print(f"  CORS_ORIGINS:         {','.join(CORS_ORIGINS)}")
    print(f"  ADMIN_EMAILS:         {len(ADMIN_EMAILS)} configured")
    print(f"  SESSION_TTL_DAYS:     {SESSION_TTL_DAYS}")
    print(f"  TRIAL_DAYS:           {TRIAL_DAYS}")
    print(f"  FREE_MESSAGE_LIMIT:   {FREE_MESSAGE_LIMIT}")
    print(f"  LOG_LEVEL:            {LOG_LEVEL}")
    print(f"  LOG_FORMAT:           {LOG_FORMAT}")
    print(f"  PROJECT_ROOT:         {PROJECT_ROOT}")
    print("=" * 50)
