"""
API tests for plans/upgrade and the admin screens.
"""


def test_plans_ordered_by_price(client):
    plans = client.get("/api/plans").json()
    assert [p["id"] for p in plans] == ["starter", "professional", "enterprise"]
    assert isinstance(plans[0]["features"], list)


def test_upgrade(client, auth):
    r = client.post("/api/plans/upgrade", headers=auth, json={"plan_id": "professional"})
    assert r.status_code == 200
    user = r.json()
    assert user["plan_type"] == "professional"
    assert user["message_limit"] == 2500
    assert user["subscription_status"] == "active"


def test_upgrade_unknown_or_free_plan(client, auth):
    assert client.post("/api/plans/upgrade", headers=auth, json={"plan_id": "platinum"}).status_code == 404
    assert client.post("/api/plans/upgrade", headers=auth, json={"plan_id": "free"}).status_code == 404


def test_usage_update(client, auth):
    r = client.post("/api/plans/usage", headers=auth, json={"messages_sent": 5})
    assert r.json()["messages_sent"] == 5
    assert client.post("/api/plans/usage", headers=auth, json={"messages_sent": -1}).status_code == 400


class TestAdmin:

    def test_requires_admin(self, client, auth):
        assert client.get("/api/admin/users", headers=auth).status_code == 403

    def test_list_users_with_usage(self, client, admin_auth, auth):
        client.post("/api/plans/usage", headers=auth, json={"messages_sent": 30})
        users = client.get("/api/admin/users", headers=admin_auth).json()
        assert len(users) == 2
        jane = next(u for u in users if u["email"] == "jane@example.com")
        assert jane["usage_percentage"] == 100
        assert "password_hash" not in jane

        found = client.get("/api/admin/users", headers=admin_auth, params={"search": "JANE"}).json()
        assert [u["email"] for u in found] == ["jane@example.com"]
        assert client.get("/api/admin/users", headers=admin_auth, params={"plan_type": "starter"}).json() == []

    def test_toggle_status(self, client, admin_auth, auth):
        me = client.get("/api/auth/me", headers=auth).json()
        r = client.post(f"/api/admin/users/{me['id']}/toggle-status", headers=admin_auth)
        assert r.json()["status"] == "suspended"
        assert r.json()["is_active"] is False
        assert client.get("/api/auth/me", headers=auth).status_code == 401

        r = client.post(f"/api/admin/users/{me['id']}/toggle-status", headers=admin_auth)
        assert r.json()["status"] == "active"

    def test_delete_user_cascades(self, client, admin_auth, auth, drip_messages):
        me = client.get("/api/auth/me", headers=auth).json()
        client.post("/api/campaigns", headers=auth, json={
            "name": "C", "drip_messages": drip_messages,
            "contacts": [{"company_name": "Acme", "email": "a@acme.com"}],
        })
        client.post("/api/templates", headers=auth, json={
            "name": "T", "subject_line": "s", "message_template": "m",
        })

        assert client.delete(f"/api/admin/users/{me['id']}", headers=admin_auth).status_code == 200
        stats = client.get("/api/admin/stats", headers=admin_auth).json()
        assert stats["total_users"] == 1
        assert stats["total_campaigns"] == 0
        assert stats["total_contacts"] == 0
        assert client.delete(f"/api/admin/users/{me['id']}", headers=admin_auth).status_code == 404

    def test_admin_cannot_delete_self(self, client, admin_auth):
        me = client.get("/api/auth/me", headers=admin_auth).json()
        assert me["is_admin"] is True
        assert client.delete(f"/api/admin/users/{me['id']}", headers=admin_auth).status_code == 400
