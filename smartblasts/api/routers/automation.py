"""Automation rule routes. Rules are stored for the dashboard; nothing runs them."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user
from smartblasts.db import models
from smartblasts.errors import ValidationError

router = APIRouter(prefix="/api/automation", tags=["automation"])

TRIGGER_TYPES = ("time_based", "response_based", "manual")
DEFAULT_FOLLOW_UP_DELAY_HOURS = 24


class RuleCreate(BaseModel):
    campaign_id: str
    name: str
    description: Optional[str] = ""
    trigger_type: str = "time_based"
    schedule_time: Optional[str] = ""
    schedule_date: Optional[str] = ""
    follow_up_delay: Optional[int] = DEFAULT_FOLLOW_UP_DELAY_HOURS
    conditions: Optional[dict] = None


@router.get("")
def list_rules(user: dict = Depends(get_current_user)):
    return models.list_rules(user["id"])


@router.post("", status_code=201)
def create_rule(data: RuleCreate, user: dict = Depends(get_current_user)):
    if not data.name.strip():
        raise ValidationError("Please enter a rule name")
    if data.trigger_type not in TRIGGER_TYPES:
        raise ValidationError(f"trigger_type must be one of {', '.join(TRIGGER_TYPES)}")
    if not models.get_campaign(data.campaign_id, user["id"]):
        raise HTTPException(status_code=404, detail="Campaign not found")

    return models.create_rule(user["id"], {
        "campaign_id": data.campaign_id,
        "name": data.name.strip(),
        "description": data.description,
        "trigger_type": data.trigger_type,
        "is_active": True,
        "conditions": data.conditions or {"no_response": True, "response_received": False},
        "actions": {
            "schedule_time": data.schedule_time or "",
            "schedule_date": data.schedule_date or "",
            "follow_up_delay": data.follow_up_delay if data.follow_up_delay is not None
            else DEFAULT_FOLLOW_UP_DELAY_HOURS,
        },
    })


@router.get("/{rule_id}")
def get_rule(rule_id: str, user: dict = Depends(get_current_user)):
    rule = models.get_rule(rule_id, user["id"])
    if not rule:
        raise HTTPException(status_code=404, detail="Rule not found")
    return rule


@router.post("/{rule_id}/toggle")
def toggle_rule(rule_id: str, user: dict = Depends(get_current_user)):
    rule = models.get_rule(rule_id, user["id"])
    if not rule:
        raise HTTPException(status_code=404, detail="Rule not found")
    return models.set_rule_active(rule_id, user["id"], not rule["is_active"])


@router.delete("/{rule_id}")
def delete_rule(rule_id: str, user: dict = Depends(get_current_user)):
    if not models.delete_rule(rule_id, user["id"]):
        raise HTTPException(status_code=404, detail="Rule not found")
    return {"deleted": rule_id}
