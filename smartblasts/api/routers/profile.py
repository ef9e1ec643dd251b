"""Profile routes for the signed-in user."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user
from smartblasts.errors import ValidationError
from smartblasts.services import auth_service

router = APIRouter(prefix="/api/profile", tags=["profile"])


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    company_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None


class PasswordChange(BaseModel):
    current_password: str
    new_password: str
    confirm_password: Optional[str] = None


@router.get("")
def get_profile(user: dict = Depends(get_current_user)):
    return auth_service.public_user(user)


@router.patch("")
def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    return auth_service.update_profile(user, data.model_dump())


@router.post("/password")
def change_password(data: PasswordChange, user: dict = Depends(get_current_user)):
    if data.confirm_password is not None and data.confirm_password != data.new_password:
        raise ValidationError("New passwords do not match")
    auth_service.change_password(user, data.current_password, data.new_password)
    return {"status": "ok", "message": "Password updated successfully"}
