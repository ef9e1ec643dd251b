"""Admin routes: user management and platform stats."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from smartblasts.api.deps import require_admin
from smartblasts.db import models
from smartblasts.services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


def usage_percentage(messages_sent: int, message_limit: int) -> float:
    if not message_limit:
        return 0.0
    return round(min(messages_sent / message_limit * 100, 100), 1)


@router.get("/users")
def list_users(search: str = None, plan_type: str = None, limit: int = 500, offset: int = 0,
               admin: dict = Depends(require_admin)):
    users = models.list_users(search=search, plan_type=plan_type, limit=limit, offset=offset)
    return [
        {
            **auth_service.public_user(u),
            "usage_percentage": usage_percentage(u["messages_sent"], u["message_limit"]),
            "campaign_count": models.count_user_campaigns(u["id"]),
        }
        for u in users
    ]


@router.post("/users/{user_id}/toggle-status")
def toggle_user_status(user_id: str, admin: dict = Depends(require_admin)):
    user = models.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user_id == admin["id"]:
        raise HTTPException(status_code=400, detail="You cannot suspend your own account")

    new_status = "suspended" if user["status"] == "active" else "active"
    updated = models.update_user(user_id, {
        "status": new_status,
        "is_active": 1 if new_status == "active" else 0,
    })
    if new_status == "suspended":
        models.delete_user_sessions(user_id)
    logger.info("User %s set to %s", user_id, new_status, extra={"user_id": admin["id"]})
    return auth_service.public_user(updated)


@router.delete("/users/{user_id}")
def delete_user(user_id: str, admin: dict = Depends(require_admin)):
    if user_id == admin["id"]:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    if not models.delete_user(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    logger.info("User %s deleted", user_id, extra={"user_id": admin["id"]})
    return {"deleted": user_id}


@router.get("/stats")
def platform_stats(admin: dict = Depends(require_admin)):
    return models.get_platform_stats()
