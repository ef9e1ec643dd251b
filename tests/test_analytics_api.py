"""
API tests for analytics summaries and event tracking.
"""

from datetime import datetime, timedelta, timezone

from smartblasts.db import models
from smartblasts.services import analytics_service


def _campaign(client, auth, drip_messages, name, sent, responses, age_days=0, status=None):
    c = client.post("/api/campaigns", headers=auth, json={"name": name, "drip_messages": drip_messages}).json()
    created = (datetime.now(timezone.utc) - timedelta(days=age_days)).isoformat()
    with models.get_db_conn() as conn:
        conn.execute(
            "UPDATE campaigns SET sent_count=?, response_count=?, created_at=?, status=COALESCE(?, status) "
            "WHERE id=?",
            (sent, responses, created, status, c["id"]),
        )
        conn.commit()
    return c["id"]


def test_summary_totals_and_rate(client, auth, drip_messages):
    _campaign(client, auth, drip_messages, "A", sent=100, responses=10, status="active")
    _campaign(client, auth, drip_messages, "B", sent=100, responses=20)

    s = client.get("/api/analytics/summary", headers=auth).json()
    assert s["total_campaigns"] == 2
    assert s["active_campaigns"] == 1
    assert s["total_sent"] == 200
    assert s["total_responses"] == 30
    assert s["avg_response_rate"] == 15.0
    assert s["insights"][0]["type"] == "excellent"


def test_time_range_filters_by_created_at(client, auth, drip_messages):
    _campaign(client, auth, drip_messages, "Recent", sent=10, responses=1, age_days=1)
    _campaign(client, auth, drip_messages, "Old", sent=10, responses=1, age_days=45)

    names = lambda rng: [c["name"] for c in client.get(
        "/api/analytics/summary", headers=auth, params={"time_range": rng}).json()["campaigns"]]
    assert names("7d") == ["Recent"]
    assert names("30d") == ["Recent"]
    assert sorted(names("90d")) == ["Old", "Recent"]
    assert sorted(names("all")) == ["Old", "Recent"]


def test_zero_sent_gives_zero_rate(client, auth):
    s = client.get("/api/analytics/summary", headers=auth).json()
    assert s["avg_response_rate"] == 0
    assert s["insights"][0]["type"] == "get_started"


def test_bad_time_range(client, auth):
    r = client.get("/api/analytics/summary", headers=auth, params={"time_range": "1y"})
    assert r.status_code == 400


def test_dashboard(client, auth):
    d = client.get("/api/analytics/dashboard", headers=auth).json()
    assert d["message_limit"] == 25
    assert d["messages_remaining"] == 25
    assert d["plan_type"] == "free"


def test_tracked_events_are_stored(client, auth):
    client.post("/api/analytics/page-view", headers=auth, json={"page": "dashboard"})
    client.post("/api/analytics/events", headers=auth, json={"event_name": "clicked", "properties": {"x": 1}})
    page_views = client.get("/api/analytics/events", headers=auth, params={"event_type": "page_view"}).json()
    assert [e["event_name"] for e in page_views] == ["dashboard"]
    events = client.get("/api/analytics/events", headers=auth, params={"event_type": "event"}).json()
    assert events[0]["event_name"] == "clicked"
    assert events[0]["properties"] == {"x": 1}


def test_tracking_failure_is_swallowed(monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("db down")
    monkeypatch.setattr(models, "log_analytics_event", boom)
    analytics_service.track_event("user_1", "anything")
    analytics_service.track_page_view("user_1", "home")


def test_response_rate():
    assert analytics_service.response_rate(0, 0) == 0.0
    assert analytics_service.response_rate(1, 3) == 33.3
