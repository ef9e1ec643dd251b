"""
Usage tracking and campaign performance summaries.

Tracking is best-effort: a failure to record an event is logged and never
reaches the caller.
"""

import logging
from datetime import datetime, timedelta, timezone

from smartblasts.db import models
from smartblasts.errors import ValidationError

logger = logging.getLogger("smartblasts.analytics")

TIME_RANGES = {
    "7d": "Last 7 days",
    "30d": "Last 30 days",
    "90d": "Last 90 days",
    "all": "All time",
}


def track_page_view(user_id: str, page: str):
    try:
        logger.info("Page view tracked: %s", page,
                    extra={"user_id": user_id, "page": page, "event": "page_view"})
        models.log_analytics_event(user_id, "page_view", page)
    except Exception as e:
        logger.error("Analytics tracking error: %s", e)


def track_event(user_id: str, event_name: str, properties: dict = None):
    try:
        logger.info("Event tracked: %s", event_name,
                    extra={"user_id": user_id, "event": event_name})
        models.log_analytics_event(user_id, "event", event_name, properties)
    except Exception as e:
        logger.error("Analytics event tracking error: %s", e)


def response_rate(responses: int, sent: int) -> float:
    """Responses as a percentage of messages sent; 0 when nothing was sent."""
    if sent <= 0:
        return 0.0
    return round(responses / sent * 100, 1)


def _since(time_range: str):
    if time_range not in TIME_RANGES:
        raise ValidationError(f"time_range must be one of {', '.join(TIME_RANGES)}")
    if time_range == "all":
        return None
    days = int(time_range.rstrip("d"))
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


def _insights(total_campaigns: int, total_sent: int, avg_rate: float) -> list:
    insights = []
    if avg_rate > 12:
        insights.append({
            "type": "excellent",
            "message": f"Your average response rate of {avg_rate:.1f}% is above industry average.",
        })
    if avg_rate < 5 and total_sent > 50:
        insights.append({
            "type": "optimize",
            "message": f"Your response rate of {avg_rate:.1f}% could be improved. "
                       "Consider personalizing your messages more or reviewing your contact targeting.",
        })
    if total_campaigns == 0:
        insights.append({
            "type": "get_started",
            "message": "Create your first campaign to start tracking performance.",
        })
    return insights


def campaign_summary(user_id: str, time_range: str = "30d") -> dict:
    """Totals and per-campaign rows for campaigns created inside ``time_range``."""
    campaigns = models.list_campaigns(user_id, since=_since(time_range))

    rows = []
    for c in campaigns:
        sent = c.get("sent_count") or 0
        responses = c.get("response_count") or 0
        rows.append({
            "id": c["id"],
            "name": c["name"],
            "status": c["status"],
            "total_contacts": c.get("total_contacts") or 0,
            "sent_count": sent,
            "response_count": responses,
            "response_rate": response_rate(responses, sent),
            "created_at": c["created_at"],
        })

    total_sent = sum(r["sent_count"] for r in rows)
    total_responses = sum(r["response_count"] for r in rows)
    avg_rate = response_rate(total_responses, total_sent)

    return {
        "time_range": time_range,
        "label": TIME_RANGES[time_range],
        "total_campaigns": len(rows),
        "active_campaigns": sum(1 for r in rows if r["status"] == "active"),
        "total_contacts": sum(r["total_contacts"] for r in rows),
        "total_sent": total_sent,
        "total_responses": total_responses,
        "avg_response_rate": avg_rate,
        "insights": _insights(len(rows), total_sent, avg_rate),
        "campaigns": rows,
    }
