"""Analytics routes: campaign performance and usage tracking."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user
from smartblasts.db import models
from smartblasts.services import analytics_service

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


class PageView(BaseModel):
    page: str


class TrackedEvent(BaseModel):
    event_name: str
    properties: Optional[dict] = None


@router.get("/summary")
def campaign_summary(time_range: str = "30d", user: dict = Depends(get_current_user)):
    return analytics_service.campaign_summary(user["id"], time_range)


@router.get("/dashboard")
def dashboard(user: dict = Depends(get_current_user)):
    """Headline numbers for the home screen."""
    summary = analytics_service.campaign_summary(user["id"], "all")
    limit = user["message_limit"] or 0
    return {
        "total_campaigns": summary["total_campaigns"],
        "active_campaigns": summary["active_campaigns"],
        "total_contacts": models.count_contacts(user["id"]),
        "messages_sent": user["messages_sent"],
        "message_limit": limit,
        "messages_remaining": max(limit - user["messages_sent"], 0),
        "avg_response_rate": summary["avg_response_rate"],
        "plan_type": user["plan_type"],
        "subscription_status": user["subscription_status"],
    }


@router.post("/page-view", status_code=202)
def page_view(data: PageView, user: dict = Depends(get_current_user)):
    analytics_service.track_page_view(user["id"], data.page)
    return {"tracked": True}


@router.post("/events", status_code=202)
def track_event(data: TrackedEvent, user: dict = Depends(get_current_user)):
    analytics_service.track_event(user["id"], data.event_name, data.properties)
    return {"tracked": True}


@router.get("/events")
def list_events(event_type: str = None, limit: int = 100, user: dict = Depends(get_current_user)):
    return models.list_analytics_events(user_id=user["id"], event_type=event_type, limit=limit)
