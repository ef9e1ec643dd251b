"""Subscription plan and upgrade routes."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user
from smartblasts.db import models
from smartblasts.services import analytics_service, auth_service

router = APIRouter(prefix="/api/plans", tags=["plans"])


class UpgradeRequest(BaseModel):
    plan_id: str


class MessageCountUpdate(BaseModel):
    messages_sent: int


@router.get("")
def list_plans():
    return models.list_plans()


@router.post("/upgrade")
def upgrade(data: UpgradeRequest, user: dict = Depends(get_current_user)):
    plan = models.get_plan(data.plan_id)
    if not plan:
        raise HTTPException(status_code=404, detail="Plan not found")
    result = auth_service.upgrade_plan(user["id"], plan["id"], plan["message_limit"])
    analytics_service.track_event(user["id"], "plan_upgraded", {"plan_id": plan["id"]})
    return result


@router.post("/usage")
def update_usage(data: MessageCountUpdate, user: dict = Depends(get_current_user)):
    return auth_service.update_message_count(user["id"], data.messages_sent)
