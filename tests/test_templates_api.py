"""
API tests for message templates.
"""

import pytest


@pytest.fixture
def template(client, auth):
    r = client.post("/api/templates", headers=auth, json={
        "name": "Warm intro",
        "description": "First touch",
        "category": "introduction",
        "subject_line": "Quick question for {company}",
        "message_template": "Hi {contact}, I had a look at {website}.",
    })
    assert r.status_code == 201, r.text
    return r.json()


def test_create_and_get(client, auth, template):
    assert template["is_active"] is True
    got = client.get(f"/api/templates/{template['id']}", headers=auth).json()
    assert got["category"] == "introduction"


def test_required_fields(client, auth):
    r = client.post("/api/templates", headers=auth, json={
        "name": "X", "subject_line": " ", "message_template": "body",
    })
    assert r.status_code == 400


def test_search_and_category_filter(client, auth, template):
    client.post("/api/templates", headers=auth, json={
        "name": "Thanks", "category": "thank-you", "subject_line": "Thanks!", "message_template": "Cheers",
    })
    assert len(client.get("/api/templates", headers=auth).json()) == 2
    found = client.get("/api/templates", headers=auth, params={"search": "QUICK"}).json()
    assert [t["name"] for t in found] == ["Warm intro"]
    by_cat = client.get("/api/templates", headers=auth, params={"category": "thank-you"}).json()
    assert [t["name"] for t in by_cat] == ["Thanks"]
    assert len(client.get("/api/templates", headers=auth, params={"category": "all"}).json()) == 2


def test_update(client, auth, template):
    r = client.patch(f"/api/templates/{template['id']}", headers=auth, json={"name": "Renamed"})
    assert r.json()["name"] == "Renamed"
    assert client.patch(f"/api/templates/{template['id']}", headers=auth, json={}).status_code == 400


def test_inactive_templates_hidden_by_default(client, auth, template):
    client.patch(f"/api/templates/{template['id']}", headers=auth, json={"is_active": False})
    assert client.get("/api/templates", headers=auth).json() == []
    hidden = client.get("/api/templates", headers=auth, params={"include_inactive": True}).json()
    assert hidden[0]["is_active"] is False


def test_clone(client, auth, template):
    r = client.post(f"/api/templates/{template['id']}/clone", headers=auth)
    assert r.status_code == 201
    assert r.json()["name"] == "Warm intro (Copy)"
    assert r.json()["subject_line"] == template["subject_line"]


def test_preview_with_sample_contact(client, auth, template):
    r = client.get(f"/api/templates/{template['id']}/preview", headers=auth).json()
    assert r["subject_line"] == "Quick question for Acme Corporation"
    assert r["message_template"] == "Hi John Smith, I had a look at acmecorp.com."
    assert r["tokens"] == ["company", "contact", "website"]


def test_delete(client, auth, template):
    assert client.delete(f"/api/templates/{template['id']}", headers=auth).status_code == 200
    assert client.get(f"/api/templates/{template['id']}", headers=auth).status_code == 404


def test_categories(client):
    values = [c["value"] for c in client.get("/api/templates/categories").json()]
    assert values == ["general", "introduction", "follow-up", "proposal", "meeting", "thank-you"]
