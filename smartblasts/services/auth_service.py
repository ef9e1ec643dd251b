"""
Accounts and sessions.
Handles password hashing, signup/login, session tokens and plan changes.
"""

import hashlib
import logging
import re
import secrets
import string
from datetime import datetime, timedelta, timezone
from typing import Optional

from smartblasts.config import (
    FREE_MESSAGE_LIMIT, PASSWORD_MIN_LENGTH, SESSION_TTL_DAYS, TRIAL_DAYS,
)
from smartblasts.db import models
from smartblasts.errors import (
    AuthenticationError, DuplicateError, NotFoundError, ValidationError,
)

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
TEMP_PASSWORD_LENGTH = 8

# Columns never sent to clients
_PRIVATE_FIELDS = ("password_hash", "password_salt")


def generate_salt() -> str:
    return secrets.token_hex(16)


def hash_password(password: str, salt: str) -> str:
    """Hash a password with its per-user salt using SHA-256."""
    return hashlib.sha256(f"{salt}{password}".encode()).hexdigest()


def verify_password(password: str, salt: str, hashed: str) -> bool:
    return secrets.compare_digest(hash_password(password, salt), hashed)


def generate_session_token() -> str:
    return secrets.token_urlsafe(32)


def generate_temp_password(length: int = TEMP_PASSWORD_LENGTH) -> str:
    alphabet = string.ascii_uppercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def is_valid_email(email: str) -> bool:
    return bool(email and EMAIL_RE.match(email))


def public_user(user: Optional[dict]) -> Optional[dict]:
    """User row without credential columns, with is_active as a bool."""
    if user is None:
        return None
    out = {k: v for k, v in user.items() if k not in _PRIVATE_FIELDS}
    out["is_active"] = bool(out.get("is_active"))
    return out


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_password_length(password: str):
    if not password or len(password) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")


# ─── SESSIONS ──────────────────────────────────────────────────

def create_session(user_id: str) -> dict:
    token = generate_session_token()
    expires_at = (_utcnow() + timedelta(days=SESSION_TTL_DAYS)).isoformat()
    models.create_session(user_id, token, expires_at)
    return {"session_token": token, "expires_at": expires_at}


def check_session(session_token: str) -> Optional[dict]:
    """Resolve a session token to its active user.

    Unknown tokens give None. An expired session is deleted and gives None,
    as does a session whose user is gone or deactivated.
    """
    if not session_token:
        return None
    session = models.get_session(session_token)
    if not session:
        return None

    if datetime.fromisoformat(session["expires_at"]) < _utcnow():
        models.delete_session(session["id"])
        logger.info("Expired session removed", extra={"user_id": session["user_id"]})
        return None

    return models.get_user(session["user_id"], active_only=True)


def logout(session_token: str) -> int:
    return models.delete_sessions_by_token(session_token)


# ─── ACCOUNTS ──────────────────────────────────────────────────

def signup(email: str, password: str, full_name: str, company_name: str = "",
           phone_number: str = "", confirm_password: Optional[str] = None) -> dict:
    """Create a free trial account and open a session for it.

    Returns {"user": <public user>, "session_token", "expires_at"}.
    """
    email = (email or "").strip()
    full_name = (full_name or "").strip()
    if not email or not password or not full_name:
        raise ValidationError("Please fill in all required fields")
    if confirm_password is not None and password != confirm_password:
        raise ValidationError("Passwords do not match")
    _check_password_length(password)
    if not is_valid_email(email):
        raise ValidationError("Please enter a valid email address")
    if models.get_user_by_email(email):
        raise DuplicateError("An account with this email already exists")

    now = _utcnow()
    salt = generate_salt()
    user = models.create_user({
        "email": email,
        "password_hash": hash_password(password, salt),
        "password_salt": salt,
        "full_name": full_name,
        "company_name": company_name or "",
        "phone_number": phone_number or "",
        "plan_type": "free",
        "message_limit": FREE_MESSAGE_LIMIT,
        "subscription_status": "trial",
        "subscription_start_date": now.isoformat(),
        "subscription_end_date": (now + timedelta(days=TRIAL_DAYS)).isoformat(),
        "last_login": now.isoformat(),
    })
    logger.info("User signed up", extra={"user_id": user["id"], "event": "signup"})

    session = create_session(user["id"])
    return {"user": public_user(user), **session}


def login(email: str, password: str) -> dict:
    if not email or not password:
        raise ValidationError("Please enter both email and password")

    user = models.get_user_by_email(email.strip(), active_only=True)
    if not user or not verify_password(password, user["password_salt"], user["password_hash"]):
        logger.warning("Failed login attempt for %s", email)
        raise AuthenticationError("Invalid email or password")

    user = models.update_user(user["id"], {"last_login": _utcnow().isoformat()})
    logger.info("User logged in", extra={"user_id": user["id"], "event": "login"})

    session = create_session(user["id"])
    return {"user": public_user(user), **session}


def change_password(user: dict, current_password: str, new_password: str) -> dict:
    if not verify_password(current_password or "", user["password_salt"], user["password_hash"]):
        raise AuthenticationError("Current password is incorrect")
    _check_password_length(new_password)

    salt = generate_salt()
    updated = models.update_user(user["id"], {
        "password_hash": hash_password(new_password, salt),
        "password_salt": salt,
    })
    logger.info("Password changed", extra={"user_id": user["id"], "event": "password_change"})
    return public_user(updated)


def forgot_password(email: str) -> str:
    """Reset an active user's password to a temporary one and return it.

    Nothing is e-mailed; the caller shows the temporary password.
    """
    user = models.get_user_by_email((email or "").strip(), active_only=True)
    if not user:
        raise NotFoundError("No account found with this email address")

    temp_password = generate_temp_password()
    salt = generate_salt()
    models.update_user(user["id"], {
        "password_hash": hash_password(temp_password, salt),
        "password_salt": salt,
    })
    logger.info("Password reset", extra={"user_id": user["id"], "event": "password_reset"})
    return temp_password


def update_profile(user: dict, data: dict) -> dict:
    """Update name, company, phone and e-mail. E-mail stays valid and unique."""
    updates = {k: v for k, v in data.items()
               if k in ("full_name", "company_name", "phone_number", "email") and v is not None}

    if "full_name" in updates and not updates["full_name"].strip():
        raise ValidationError("Full name cannot be empty")
    if "email" in updates:
        updates["email"] = updates["email"].strip()
        if not is_valid_email(updates["email"]):
            raise ValidationError("Please enter a valid email address")
        other = models.get_user_by_email(updates["email"])
        if other and other["id"] != user["id"]:
            raise DuplicateError("An account with this email already exists")

    if not updates:
        return public_user(user)
    return public_user(models.update_user(user["id"], updates))


def upgrade_plan(user_id: str, plan_type: str, message_limit: int) -> dict:
    """Move a user onto a paid plan with a fresh 30-day period."""
    now = _utcnow()
    updated = models.update_user(user_id, {
        "plan_type": plan_type,
        "message_limit": message_limit,
        "subscription_status": "active",
        "subscription_start_date": now.isoformat(),
        "subscription_end_date": (now + timedelta(days=30)).isoformat(),
    })
    if updated is None:
        raise NotFoundError("User not found")
    logger.info("Plan upgraded to %s", plan_type, extra={"user_id": user_id, "event": "upgrade"})
    return public_user(updated)


def update_message_count(user_id: str, messages_sent: int) -> dict:
    if messages_sent < 0:
        raise ValidationError("messages_sent must be 0 or more")
    updated = models.update_user(user_id, {"messages_sent": messages_sent})
    if updated is None:
        raise NotFoundError("User not found")
    return public_user(updated)


def refresh_user(user_id: str) -> Optional[dict]:
    return public_user(models.get_user(user_id, active_only=True))
