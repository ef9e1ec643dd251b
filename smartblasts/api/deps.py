"""Request dependencies shared by the routers."""

from typing import Optional

from fastapi import Depends, Header, Request

from smartblasts import config
from smartblasts.errors import AuthenticationError, PermissionDeniedError
from smartblasts.services import auth_service


def get_session_token(x_session_token: Optional[str] = Header(None)) -> str:
    if not x_session_token:
        raise AuthenticationError("Not signed in")
    return x_session_token


def get_current_user(request: Request, session_token: str = Depends(get_session_token)) -> dict:
    """The active user behind the X-Session-Token header (full row, credentials included)."""
    user = auth_service.check_session(session_token)
    if not user:
        raise AuthenticationError("Session expired. Please sign in again")
    request.state.user_id = user["id"]
    return user


def is_admin(user: dict) -> bool:
    return user["email"].lower() in config.ADMIN_EMAILS


def require_admin(user: dict = Depends(get_current_user)) -> dict:
    if not is_admin(user):
        raise PermissionDeniedError("Admin access required")
    return user
