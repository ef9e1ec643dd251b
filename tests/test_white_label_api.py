"""
API tests for white label vendors.
"""

from datetime import datetime


def _add(client, auth, **fields):
    body = {"vendor_email": "shop@vendor.com", "vendor_name": "Vendor Shop"}
    body.update(fields)
    return client.post("/api/white-label/vendors", headers=auth, json=body)


def test_add_vendor_creates_stats_and_subscription(client, auth):
    r = _add(client, auth)
    assert r.status_code == 201
    body = r.json()
    vendor_id = body["vendor"]["id"]
    assert len(body["password"]) == 12
    assert body["subscription"]["id"] == f"sub_{vendor_id}"
    assert body["subscription"]["amount"] == 9700
    assert body["vendor"]["payment_platform"] == "stripe"

    vendors = client.get("/api/white-label/vendors", headers=auth).json()
    assert vendors[0]["stats"]["id"] == f"stats_{vendor_id}"


def test_yearly_plan(client, auth):
    body = _add(client, auth, plan_type="yearly").json()
    assert body["subscription"]["amount"] == 9700 * 12
    start = datetime.fromisoformat(body["vendor"]["signup_date"])
    end = datetime.fromisoformat(body["vendor"]["membership_end_date"])
    assert end.year == start.year + 1


def test_validation_and_duplicates(client, auth):
    assert _add(client, auth, vendor_name="").status_code == 400
    assert _add(client, auth, vendor_email="nope").status_code == 400
    _add(client, auth)
    assert _add(client, auth, vendor_email="SHOP@vendor.com").status_code == 409


def test_summary_revenue(client, auth):
    _add(client, auth)
    yearly = _add(client, auth, vendor_email="big@vendor.com", plan_type="yearly").json()
    s = client.get("/api/white-label/summary", headers=auth).json()
    assert s["active_vendors"] == 2
    assert s["monthly_revenue"] == 194.0

    client.patch(f"/api/white-label/vendors/{yearly['vendor']['id']}/status", headers=auth,
                 json={"status": "suspended"})
    s = client.get("/api/white-label/summary", headers=auth).json()
    assert s["active_vendors"] == 1
    assert s["suspended_vendors"] == 1
    assert s["monthly_revenue"] == 97.0


def test_status_change_updates_subscription(client, auth):
    vendor_id = _add(client, auth).json()["vendor"]["id"]
    url = f"/api/white-label/vendors/{vendor_id}/status"
    assert client.patch(url, headers=auth, json={"status": "suspended"}).json()["status"] == "suspended"
    vendors = client.get("/api/white-label/vendors", headers=auth).json()
    assert vendors[0]["subscription"]["status"] == "cancelled"

    client.patch(url, headers=auth, json={"status": "active"})
    vendors = client.get("/api/white-label/vendors", headers=auth).json()
    assert vendors[0]["subscription"]["status"] == "active"

    assert client.patch(url, headers=auth, json={"status": "deleted"}).status_code == 400


def test_remove_vendor(client, auth):
    vendor_id = _add(client, auth).json()["vendor"]["id"]
    assert client.delete(f"/api/white-label/vendors/{vendor_id}", headers=auth).status_code == 200
    assert client.get("/api/white-label/vendors", headers=auth).json() == []
    assert client.delete(f"/api/white-label/vendors/{vendor_id}", headers=auth).status_code == 404


def test_vendors_private_to_owner(client, auth, signup):
    vendor_id = _add(client, auth).json()["vendor"]["id"]
    other = {"X-Session-Token": signup(email="other@example.com")["session_token"]}
    assert client.get("/api/white-label/vendors", headers=other).json() == []
    assert client.delete(f"/api/white-label/vendors/{vendor_id}", headers=other).status_code == 404


def test_other_user_delete_keeps_subscription_and_stats(client, auth, signup):
    vendor_id = _add(client, auth).json()["vendor"]["id"]
    other = {"X-Session-Token": signup(email="other@example.com")["session_token"]}
    assert client.delete(f"/api/white-label/vendors/{vendor_id}", headers=other).status_code == 404

    vendors = client.get("/api/white-label/vendors", headers=auth).json()
    assert vendors[0]["subscription"]["id"] == f"sub_{vendor_id}"
    assert vendors[0]["stats"]["id"] == f"stats_{vendor_id}"
