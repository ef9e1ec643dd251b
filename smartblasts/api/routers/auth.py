"""Signup, login, logout and password reset routes."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user, get_session_token, is_admin
from smartblasts.services import analytics_service, auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


class SignupRequest(BaseModel):
    email: str
    password: str
    confirm_password: Optional[str] = None
    full_name: str
    company_name: Optional[str] = ""
    phone_number: Optional[str] = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class ForgotPasswordRequest(BaseModel):
    email: str


@router.post("/signup", status_code=201)
def signup(data: SignupRequest):
    result = auth_service.signup(**data.model_dump())
    analytics_service.track_event(result["user"]["id"], "signup")
    return result


@router.post("/login")
def login(data: LoginRequest):
    result = auth_service.login(data.email, data.password)
    analytics_service.track_event(result["user"]["id"], "login")
    return result


@router.post("/logout")
def logout(session_token: str = Depends(get_session_token)):
    return {"logged_out": auth_service.logout(session_token) > 0}


@router.get("/me")
def me(user: dict = Depends(get_current_user)):
    return {**auth_service.public_user(user), "is_admin": is_admin(user)}


@router.post("/forgot-password")
def forgot_password(data: ForgotPasswordRequest):
    temp_password = auth_service.forgot_password(data.email)
    return {
        "temporary_password": temp_password,
        "message": "Your password has been reset. Sign in with the temporary password and change it.",
    }
