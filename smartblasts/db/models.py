"""
SmartBlasts - Data Access Layer
CRUD operations for every table via a plain-dict Python API.

Every tenant-owned read and write takes the owning user_id so one tenant can
never see or touch another tenant's rows.
"""

import json
import logging
from typing import Optional

from smartblasts.db.connection import get_db, get_db_conn, gen_id, now_iso, _safe_update

logger = logging.getLogger(__name__)


def _decode(row, json_fields=(), bool_fields=()) -> Optional[dict]:
    """sqlite3.Row -> dict, decoding JSON text columns and 0/1 flags."""
    if row is None:
        return None
    d = dict(row)
    for f in json_fields:
        if isinstance(d.get(f), str):
            try:
                d[f] = json.loads(d[f])
            except json.JSONDecodeError:
                logger.warning("Undecodable JSON in column %s of %s", f, d.get("id"))
                d[f] = None
    for f in bool_fields:
        if f in d:
            d[f] = bool(d[f])
    return d


# ─── USERS ─────────────────────────────────────────────────────

USER_UPDATE_FIELDS = {
    "email", "password_hash", "password_salt", "full_name", "company_name",
    "phone_number", "plan_type", "messages_sent", "message_limit",
    "subscription_status", "subscription_start_date", "subscription_end_date",
    "status", "is_active", "last_login", "updated_at",
}


def create_user(data: dict) -> dict:
    uid = data.get("id") or gen_id("user")
    now = now_iso()
    with get_db_conn() as conn:
        conn.execute("""
            INSERT INTO users (id, email, password_hash, password_salt, full_name,
                company_name, phone_number, plan_type, messages_sent, message_limit,
                subscription_status, subscription_start_date, subscription_end_date,
                status, is_active, last_login, created_at, updated_at)
            VALUES (?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?,?)
        """, (
            uid, data["email"], data["password_hash"], data["password_salt"],
            data["full_name"], data.get("company_name") or "", data.get("phone_number") or "",
            data.get("plan_type", "free"), data.get("messages_sent", 0),
            data.get("message_limit", 25), data.get("subscription_status", "trial"),
            data.get("subscription_start_date"), data.get("subscription_end_date"),
            data.get("status", "active"), data.get("is_active", 1),
            data.get("last_login"), now, now,
        ))
        conn.commit()
        row = conn.execute("SELECT * FROM users WHERE id=?", (uid,)).fetchone()
    return dict(row)


def get_user(user_id: str, active_only: bool = False) -> Optional[dict]:
    query = "SELECT * FROM users WHERE id=?"
    if active_only:
        query += " AND is_active=1"
    with get_db_conn() as conn:
        row = conn.execute(query, (user_id,)).fetchone()
    return dict(row) if row else None


def get_user_by_email(email: str, active_only: bool = False) -> Optional[dict]:
    """Look a user up by e-mail, ignoring case."""
    query = "SELECT * FROM users WHERE lower(email)=lower(?)"
    if active_only:
        query += " AND is_active=1"
    with get_db_conn() as conn:
        row = conn.execute(query, (email,)).fetchone()
    return dict(row) if row else None


def list_users(search: str = None, plan_type: str = None, limit: int = 500, offset: int = 0) -> list:
    query = "SELECT * FROM users WHERE 1=1"
    params = []
    if search:
        query += " AND (lower(email) LIKE ? OR lower(full_name) LIKE ? OR lower(company_name) LIKE ?)"
        like = f"%{search.lower()}%"
        params.extend([like, like, like])
    if plan_type:
        query += " AND plan_type=?"
        params.append(plan_type)
    query += " ORDER BY created_at DESC LIMIT ? OFFSET ?"
    params.extend([limit, offset])
    with get_db_conn() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(r) for r in rows]


def update_user(user_id: str, data: dict) -> Optional[dict]:
    data = {**data, "updated_at": now_iso()}
    return _safe_update("users", user_id, data, USER_UPDATE_FIELDS)


def count_user_campaigns(user_id: str) -> int:
    with get_db_conn() as conn:
        return conn.execute("SELECT COUNT(*) FROM campaigns WHERE user_id=?", (user_id,)).fetchone()[0]


def delete_user(user_id: str) -> bool:
    """Delete a user and everything they own.

    Children are removed explicitly, deepest first, so the delete does not
    depend on ON DELETE CASCADE being honoured by older database files.
    """
    conn = get_db()
    try:
        vendor_ids = [r[0] for r in conn.execute(
            "SELECT id FROM white_label_vendors WHERE owner_id=?", (user_id,)).fetchall()]
        for vid in vendor_ids:
            conn.execute("DELETE FROM subscriptions WHERE vendor_id=?", (vid,))
            conn.execute("DELETE FROM vendor_stats WHERE vendor_id=?", (vid,))
        conn.execute("DELETE FROM white_label_vendors WHERE owner_id=?", (user_id,))
        conn.execute("DELETE FROM automation_rules WHERE user_id=?", (user_id,))
        conn.execute("DELETE FROM campaign_contacts WHERE user_id=?", (user_id,))
        conn.execute("DELETE FROM campaigns WHERE user_id=?", (user_id,))
        conn.execute("DELETE FROM contacts WHERE user_id=?", (user_id,))
        conn.execute("DELETE FROM templates WHERE user_id=?", (user_id,))
        conn.execute("DELETE FROM user_sessions WHERE user_id=?", (user_id,))
        result = conn.execute("DELETE FROM users WHERE id=?", (user_id,))
        conn.commit()
        return result.rowcount > 0
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


# ─── SESSIONS ──────────────────────────────────────────────────

def create_session(user_id: str, session_token: str, expires_at: str) -> dict:
    sid = gen_id("sess")
    with get_db_conn() as conn:
        conn.execute(
            "INSERT INTO user_sessions (id, user_id, session_token, expires_at, created_at) VALUES (?,?,?,?,?)",
            (sid, user_id, session_token, expires_at, now_iso()),
        )
        conn.commit()
        row = conn.execute("SELECT * FROM user_sessions WHERE id=?", (sid,)).fetchone()
    return dict(row)


def get_session(session_token: str) -> Optional[dict]:
    with get_db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM user_sessions WHERE session_token=?", (session_token,)
        ).fetchone()
    return dict(row) if row else None


def delete_session(session_id: str):
    with get_db_conn() as conn:
        conn.execute("DELETE FROM user_sessions WHERE id=?", (session_id,))
        conn.commit()


def delete_sessions_by_token(session_token: str) -> int:
    with get_db_conn() as conn:
        result = conn.execute("DELETE FROM user_sessions WHERE session_token=?", (session_token,))
        conn.commit()
        return result.rowcount


def delete_user_sessions(user_id: str) -> int:
    with get_db_conn() as conn:
        result = conn.execute("DELETE FROM user_sessions WHERE user_id=?", (user_id,))
        conn.commit()
        return result.rowcount


# ─── CONTACTS ──────────────────────────────────────────────────

def create_contact(user_id: str, data: dict) -> dict:
    cid = data.get("id") or gen_id("contact")
    now = now_iso()
    with get_db_conn() as conn:
        conn.execute("""
            INSERT INTO contacts (id, user_id, company_name, contact_name, email, website,
                created_at, updated_at)
            VALUES (?,?,?,?,?,?,?,?)
        """, (
            cid, user_id, data.get("company_name") or "", data.get("contact_name") or "",
            data.get("email") or "", data.get("website") or "", now, now,
        ))
        conn.commit()
        row = conn.execute("SELECT * FROM contacts WHERE id=?", (cid,)).fetchone()
    return dict(row)


def create_contacts(user_id: str, contacts: list) -> int:
    """Insert many contacts in one transaction. Returns the number inserted."""
    now = now_iso()
    rows = [
        (gen_id("contact"), user_id, c.get("company_name") or "", c.get("contact_name") or "",
         c.get("email") or "", c.get("website") or "", now, now)
        for c in contacts
    ]
    with get_db_conn() as conn:
        conn.executemany("""
            INSERT INTO contacts (id, user_id, company_name, contact_name, email, website,
                created_at, updated_at)
            VALUES (?,?,?,?,?,?,?,?)
        """, rows)
        conn.commit()
    return len(rows)


def list_contacts(user_id: str, search: str = None) -> list:
    """Contact book, newest first, optionally filtered by a case-insensitive substring."""
    query = "SELECT * FROM contacts WHERE user_id=?"
    params = [user_id]
    if search and search.strip():
        like = f"%{search.strip().lower()}%"
        query += """ AND (lower(company_name) LIKE ? OR lower(contact_name) LIKE ?
                     OR lower(email) LIKE ? OR lower(website) LIKE ?)"""
        params.extend([like, like, like, like])
    query += " ORDER BY created_at DESC, rowid DESC"
    with get_db_conn() as conn:
        rows = conn.execute(query, params).fetchall()
    return [dict(r) for r in rows]


def get_contact(contact_id: str, user_id: str) -> Optional[dict]:
    with get_db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM contacts WHERE id=? AND user_id=?", (contact_id, user_id)
        ).fetchone()
    return dict(row) if row else None


def delete_contact(contact_id: str, user_id: str) -> bool:
    with get_db_conn() as conn:
        result = conn.execute("DELETE FROM contacts WHERE id=? AND user_id=?", (contact_id, user_id))
        conn.commit()
        return result.rowcount > 0


def count_contacts(user_id: str) -> int:
    with get_db_conn() as conn:
        return conn.execute("SELECT COUNT(*) FROM contacts WHERE user_id=?", (user_id,)).fetchone()[0]


# ─── CAMPAIGNS ─────────────────────────────────────────────────

CAMPAIGN_UPDATE_FIELDS = {
    "name", "description", "status", "drip_messages", "send_interval_seconds",
    "total_contacts", "sent_count", "response_count", "response_rate", "updated_at",
}


def _campaign(row) -> Optional[dict]:
    return _decode(row, json_fields=("drip_messages",))


def create_campaign(user_id: str, data: dict) -> dict:
    cid = data.get("id") or gen_id("campaign")
    now = now_iso()
    with get_db_conn() as conn:
        conn.execute("""
            INSERT INTO campaigns (id, user_id, name, description, status, drip_messages,
                send_interval_seconds, total_contacts, sent_count, response_count,
                response_rate, created_at, updated_at)
            VALUES (?,?,?,?,?,?,?,?,?,?,?,?,?)
        """, (
            cid, user_id, data["name"], data.get("description") or "",
            data.get("status", "draft"), json.dumps(data.get("drip_messages", [])),
            data.get("send_interval_seconds", 10), data.get("total_contacts", 0),
            data.get("sent_count", 0), data.get("response_count", 0),
            data.get("response_rate", 0.0), data.get("created_at") or now, now,
        ))
        conn.commit()
        row = conn.execute("SELECT * FROM campaigns WHERE id=?", (cid,)).fetchone()
    return _campaign(row)


def get_campaign(campaign_id: str, user_id: str) -> Optional[dict]:
    with get_db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM campaigns WHERE id=? AND user_id=?", (campaign_id, user_id)
        ).fetchone()
    return _campaign(row)


def list_campaigns(user_id: str, since: str = None) -> list:
    """Campaigns newest first; ``since`` keeps those created at or after an ISO timestamp."""
    query = "SELECT * FROM campaigns WHERE user_id=?"
    params = [user_id]
    if since:
        query += " AND created_at >= ?"
        params.append(since)
    query += " ORDER BY created_at DESC, rowid DESC"
    with get_db_conn() as conn:
        rows = conn.execute(query, params).fetchall()
    return [_campaign(r) for r in rows]


def update_campaign(campaign_id: str, data: dict) -> Optional[dict]:
    data = {**data, "updated_at": now_iso()}
    if "drip_messages" in data and not isinstance(data["drip_messages"], str):
        data["drip_messages"] = json.dumps(data["drip_messages"])
    return _campaign_from_update(_safe_update("campaigns", campaign_id, data, CAMPAIGN_UPDATE_FIELDS))


def _campaign_from_update(d: Optional[dict]) -> Optional[dict]:
    if d is not None and isinstance(d.get("drip_messages"), str):
        d["drip_messages"] = json.loads(d["drip_messages"])
    return d


def delete_campaign(campaign_id: str, user_id: str) -> bool:
    with get_db_conn() as conn:
        owned = conn.execute(
            "SELECT 1 FROM campaigns WHERE id=? AND user_id=?", (campaign_id, user_id)
        ).fetchone()
        if not owned:
            return False
        conn.execute("DELETE FROM automation_rules WHERE campaign_id=? AND user_id=?", (campaign_id, user_id))
        conn.execute("DELETE FROM campaign_contacts WHERE campaign_id=? AND user_id=?", (campaign_id, user_id))
        result = conn.execute("DELETE FROM campaigns WHERE id=? AND user_id=?", (campaign_id, user_id))
        conn.commit()
        return result.rowcount > 0


def list_campaign_contacts(campaign_id: str) -> list:
    with get_db_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM campaign_contacts WHERE campaign_id=? ORDER BY created_at ASC, rowid ASC",
            (campaign_id,),
        ).fetchall()
    return [dict(r) for r in rows]


def _insert_campaign_contacts(conn, campaign_id: str, user_id: str, contacts: list) -> int:
    """Insert rows and refresh the campaign's total_contacts. Caller commits."""
    now = now_iso()
    rows = [
        (gen_id("cc"), campaign_id, user_id, c.get("company_name") or "",
         c.get("contact_name") or "", c.get("email") or "", c.get("website") or "",
         c.get("status") or "pending", now)
        for c in contacts
    ]
    conn.executemany("""
        INSERT INTO campaign_contacts (id, campaign_id, user_id, company_name, contact_name,
            email, website, status, created_at)
        VALUES (?,?,?,?,?,?,?,?,?)
    """, rows)
    conn.execute(
        "UPDATE campaigns SET total_contacts=(SELECT COUNT(*) FROM campaign_contacts WHERE campaign_id=?) "
        "WHERE id=?",
        (campaign_id, campaign_id),
    )
    return len(rows)


def add_campaign_contacts(campaign_id: str, user_id: str, contacts: list) -> int:
    with get_db_conn() as conn:
        added = _insert_campaign_contacts(conn, campaign_id, user_id, contacts)
        conn.commit()
    return added


def replace_campaign_contacts(campaign_id: str, user_id: str, contacts: list) -> int:
    """Swap a campaign's contact list for ``contacts`` in one transaction."""
    conn = get_db()
    try:
        conn.execute("DELETE FROM campaign_contacts WHERE campaign_id=? AND user_id=?", (campaign_id, user_id))
        added = _insert_campaign_contacts(conn, campaign_id, user_id, contacts)
        conn.commit()
        return added
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def delete_campaign_contact(campaign_id: str, contact_id: str) -> bool:
    with get_db_conn() as conn:
        result = conn.execute(
            "DELETE FROM campaign_contacts WHERE id=? AND campaign_id=?", (contact_id, campaign_id)
        )
        conn.execute(
            "UPDATE campaigns SET total_contacts=(SELECT COUNT(*) FROM campaign_contacts WHERE campaign_id=?) "
            "WHERE id=?",
            (campaign_id, campaign_id),
        )
        conn.commit()
        return result.rowcount > 0


# ─── TEMPLATES ─────────────────────────────────────────────────

TEMPLATE_UPDATE_FIELDS = {
    "name", "description", "category", "subject_line", "message_template", "is_active", "updated_at",
}


def _template(row) -> Optional[dict]:
    return _decode(row, bool_fields=("is_active",))


def create_template(user_id: str, data: dict) -> dict:
    tid = data.get("id") or gen_id("template")
    now = now_iso()
    with get_db_conn() as conn:
        conn.execute("""
            INSERT INTO templates (id, user_id, name, description, category, subject_line,
                message_template, is_active, created_at, updated_at)
            VALUES (?,?,?,?,?,?,?,?,?,?)
        """, (
            tid, user_id, data["name"], data.get("description") or "",
            data.get("category") or "general", data["subject_line"], data["message_template"],
            1 if data.get("is_active", True) else 0, now, now,
        ))
        conn.commit()
        row = conn.execute("SELECT * FROM templates WHERE id=?", (tid,)).fetchone()
    return _template(row)


def get_template(template_id: str, user_id: str) -> Optional[dict]:
    with get_db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM templates WHERE id=? AND user_id=?", (template_id, user_id)
        ).fetchone()
    return _template(row)


def list_templates(user_id: str, search: str = None, category: str = None,
                   active_only: bool = True) -> list:
    query = "SELECT * FROM templates WHERE user_id=?"
    params = [user_id]
    if active_only:
        query += " AND is_active=1"
    if search and search.strip():
        like = f"%{search.strip().lower()}%"
        query += """ AND (lower(name) LIKE ? OR lower(description) LIKE ?
                     OR lower(subject_line) LIKE ? OR lower(message_template) LIKE ?)"""
        params.extend([like, like, like, like])
    if category and category != "all":
        query += " AND category=?"
        params.append(category)
    query += " ORDER BY created_at DESC, rowid DESC"
    with get_db_conn() as conn:
        rows = conn.execute(query, params).fetchall()
    return [_template(r) for r in rows]


def update_template(template_id: str, data: dict) -> Optional[dict]:
    data = {**data, "updated_at": now_iso()}
    if "is_active" in data:
        data["is_active"] = 1 if data["is_active"] else 0
    d = _safe_update("templates", template_id, data, TEMPLATE_UPDATE_FIELDS)
    if d is not None:
        d["is_active"] = bool(d["is_active"])
    return d


def delete_template(template_id: str, user_id: str) -> bool:
    with get_db_conn() as conn:
        result = conn.execute("DELETE FROM templates WHERE id=? AND user_id=?", (template_id, user_id))
        conn.commit()
        return result.rowcount > 0


# ─── AUTOMATION RULES ──────────────────────────────────────────

def _rule(row) -> Optional[dict]:
    return _decode(row, json_fields=("conditions", "actions"), bool_fields=("is_active",))


def create_rule(user_id: str, data: dict) -> dict:
    rid = data.get("id") or gen_id("rule")
    now = now_iso()
    with get_db_conn() as conn:
        conn.execute("""
            INSERT INTO automation_rules (id, user_id, campaign_id, name, description,
                trigger_type, is_active, conditions, actions, created_at, updated_at)
            VALUES (?,?,?,?,?,?,?,?,?,?,?)
        """, (
            rid, user_id, data["campaign_id"], data["name"], data.get("description") or "",
            data.get("trigger_type", "time_based"), 1 if data.get("is_active", True) else 0,
            json.dumps(data.get("conditions") or {}), json.dumps(data.get("actions") or {}),
            now, now,
        ))
        conn.commit()
        row = conn.execute("SELECT * FROM automation_rules WHERE id=?", (rid,)).fetchone()
    return _rule(row)


def get_rule(rule_id: str, user_id: str) -> Optional[dict]:
    with get_db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM automation_rules WHERE id=? AND user_id=?", (rule_id, user_id)
        ).fetchone()
    return _rule(row)


def list_rules(user_id: str) -> list:
    with get_db_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM automation_rules WHERE user_id=? ORDER BY created_at DESC, rowid DESC",
            (user_id,),
        ).fetchall()
    return [_rule(r) for r in rows]


def set_rule_active(rule_id: str, user_id: str, is_active: bool) -> Optional[dict]:
    with get_db_conn() as conn:
        conn.execute(
            "UPDATE automation_rules SET is_active=?, updated_at=? WHERE id=? AND user_id=?",
            (1 if is_active else 0, now_iso(), rule_id, user_id),
        )
        conn.commit()
        row = conn.execute(
            "SELECT * FROM automation_rules WHERE id=? AND user_id=?", (rule_id, user_id)
        ).fetchone()
    return _rule(row)


def delete_rule(rule_id: str, user_id: str) -> bool:
    with get_db_conn() as conn:
        result = conn.execute("DELETE FROM automation_rules WHERE id=? AND user_id=?", (rule_id, user_id))
        conn.commit()
        return result.rowcount > 0


# ─── SUBSCRIPTION PLANS ────────────────────────────────────────

def list_plans(active_only: bool = True) -> list:
    query = "SELECT * FROM subscription_plans"
    if active_only:
        query += " WHERE is_active=1"
    query += " ORDER BY price ASC"
    with get_db_conn() as conn:
        rows = conn.execute(query).fetchall()
    return [_decode(r, json_fields=("features",), bool_fields=("is_active",)) for r in rows]


def get_plan(plan_id: str) -> Optional[dict]:
    with get_db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM subscription_plans WHERE id=? AND is_active=1", (plan_id,)
        ).fetchone()
    return _decode(row, json_fields=("features",), bool_fields=("is_active",))


# ─── WHITE LABEL VENDORS ───────────────────────────────────────

VENDOR_UPDATE_FIELDS = {
    "vendor_email", "vendor_name", "phone_number", "website", "payment_platform",
    "membership_end_date", "status", "updated_at",
}


def create_vendor(data: dict) -> dict:
    with get_db_conn() as conn:
        conn.execute("""
            INSERT INTO white_label_vendors (id, owner_id, vendor_email, vendor_name, phone_number,
                website, payment_platform, signup_date, membership_end_date, status,
                created_at, updated_at)
            VALUES (?,?,?,?,?,?,?,?,?,?,?,?)
        """, (
            data["id"], data["owner_id"], data["vendor_email"], data["vendor_name"],
            data.get("phone_number") or "", data.get("website") or "",
            data.get("payment_platform") or "stripe", data["signup_date"],
            data["membership_end_date"], data.get("status", "active"),
            data["signup_date"], data["signup_date"],
        ))
        conn.commit()
        row = conn.execute("SELECT * FROM white_label_vendors WHERE id=?", (data["id"],)).fetchone()
    return dict(row)


def get_vendor(vendor_id: str, owner_id: str) -> Optional[dict]:
    with get_db_conn() as conn:
        row = conn.execute(
            "SELECT * FROM white_label_vendors WHERE id=? AND owner_id=?", (vendor_id, owner_id)
        ).fetchone()
    return dict(row) if row else None


def list_vendors(owner_id: str) -> list:
    with get_db_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM white_label_vendors WHERE owner_id=? ORDER BY created_at DESC, rowid DESC",
            (owner_id,),
        ).fetchall()
    return [dict(r) for r in rows]


def update_vendor(vendor_id: str, data: dict) -> Optional[dict]:
    data = {**data, "updated_at": now_iso()}
    return _safe_update("white_label_vendors", vendor_id, data, VENDOR_UPDATE_FIELDS)


def create_vendor_stats(data: dict) -> dict:
    with get_db_conn() as conn:
        conn.execute("""
            INSERT INTO vendor_stats (id, vendor_id, user_id, messages_sent, campaigns_created,
                created_at, updated_at)
            VALUES (?,?,?,?,?,?,?)
        """, (
            data["id"], data["vendor_id"], data["user_id"], data.get("messages_sent", 0),
            data.get("campaigns_created", 0), data["created_at"], data["created_at"],
        ))
        conn.commit()
        row = conn.execute("SELECT * FROM vendor_stats WHERE id=?", (data["id"],)).fetchone()
    return dict(row)


def list_vendor_stats(user_id: str) -> list:
    with get_db_conn() as conn:
        rows = conn.execute("SELECT * FROM vendor_stats WHERE user_id=?", (user_id,)).fetchall()
    return [dict(r) for r in rows]


def create_subscription(data: dict) -> dict:
    with get_db_conn() as conn:
        conn.execute("""
            INSERT INTO subscriptions (id, vendor_id, user_id, plan_type, status, amount, currency,
                current_period_start, current_period_end, created_at, updated_at)
            VALUES (?,?,?,?,?,?,?,?,?,?,?)
        """, (
            data["id"], data["vendor_id"], data["user_id"], data["plan_type"],
            data.get("status", "active"), data["amount"], data.get("currency", "usd"),
            data["current_period_start"], data["current_period_end"],
            data["current_period_start"], data["current_period_start"],
        ))
        conn.commit()
        row = conn.execute("SELECT * FROM subscriptions WHERE id=?", (data["id"],)).fetchone()
    return dict(row)


def list_subscriptions(user_id: str) -> list:
    with get_db_conn() as conn:
        rows = conn.execute("SELECT * FROM subscriptions WHERE user_id=?", (user_id,)).fetchall()
    return [dict(r) for r in rows]


def update_vendor_subscription_status(vendor_id: str, status: str) -> int:
    with get_db_conn() as conn:
        result = conn.execute(
            "UPDATE subscriptions SET status=?, updated_at=? WHERE vendor_id=?",
            (status, now_iso(), vendor_id),
        )
        conn.commit()
        return result.rowcount


def delete_vendor(vendor_id: str, owner_id: str) -> bool:
    """Remove a vendor with its subscription and stats rows."""
    with get_db_conn() as conn:
        owned = conn.execute(
            "SELECT 1 FROM white_label_vendors WHERE id=? AND owner_id=?", (vendor_id, owner_id)
        ).fetchone()
        if not owned:
            return False
        conn.execute("DELETE FROM subscriptions WHERE vendor_id=?", (vendor_id,))
        conn.execute("DELETE FROM vendor_stats WHERE vendor_id=?", (vendor_id,))
        result = conn.execute(
            "DELETE FROM white_label_vendors WHERE id=? AND owner_id=?", (vendor_id, owner_id)
        )
        conn.commit()
        return result.rowcount > 0


# ─── ANALYTICS EVENTS ──────────────────────────────────────────

def log_analytics_event(user_id: str, event_type: str, event_name: str, properties: dict = None):
    with get_db_conn() as conn:
        conn.execute(
            "INSERT INTO analytics_events (user_id, event_type, event_name, properties, created_at) "
            "VALUES (?,?,?,?,?)",
            (user_id, event_type, event_name, json.dumps(properties or {}, default=str), now_iso()),
        )
        conn.commit()


def list_analytics_events(user_id: str = None, event_type: str = None, limit: int = 100) -> list:
    query = "SELECT * FROM analytics_events WHERE 1=1"
    params = []
    if user_id:
        query += " AND user_id=?"
        params.append(user_id)
    if event_type:
        query += " AND event_type=?"
        params.append(event_type)
    query += " ORDER BY id DESC LIMIT ?"
    params.append(limit)
    with get_db_conn() as conn:
        rows = conn.execute(query, params).fetchall()
    return [_decode(r, json_fields=("properties",)) for r in rows]


# ─── PLATFORM STATS ────────────────────────────────────────────

def get_platform_stats() -> dict:
    """Counts across all tenants for the admin dashboard."""
    with get_db_conn() as conn:
        users = conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
        active_users = conn.execute("SELECT COUNT(*) FROM users WHERE status='active'").fetchone()[0]
        by_plan = {
            r["plan_type"]: r["n"] for r in conn.execute(
                "SELECT plan_type, COUNT(*) as n FROM users GROUP BY plan_type"
            ).fetchall()
        }
        messages_sent = conn.execute("SELECT COALESCE(SUM(messages_sent), 0) FROM users").fetchone()[0]
        campaigns = conn.execute("SELECT COUNT(*) FROM campaigns").fetchone()[0]
        contacts = conn.execute("SELECT COUNT(*) FROM contacts").fetchone()[0]
    return {
        "total_users": users,
        "active_users": active_users,
        "suspended_users": users - active_users,
        "users_by_plan": by_plan,
        "total_messages_sent": messages_sent,
        "total_campaigns": campaigns,
        "total_contacts": contacts,
    }
