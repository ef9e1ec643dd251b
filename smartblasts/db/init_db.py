"""
SmartBlasts - Database Initialization
Creates all tables, indexes, and seeds the subscription plans.
"""

import json
import sqlite3

from smartblasts.db import connection

SCHEMA_SQL = """
-- Dashboard users (tenants)
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    password_salt TEXT NOT NULL,
    full_name TEXT NOT NULL,
    company_name TEXT DEFAULT '',
    phone_number TEXT DEFAULT '',
    plan_type TEXT DEFAULT 'free',
    messages_sent INTEGER DEFAULT 0,
    message_limit INTEGER DEFAULT 25,
    subscription_status TEXT DEFAULT 'trial',
    subscription_start_date TEXT,
    subscription_end_date TEXT,
    status TEXT DEFAULT 'active',
    is_active INTEGER DEFAULT 1,
    last_login TEXT,
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

-- Login sessions
CREATE TABLE IF NOT EXISTS user_sessions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    session_token TEXT NOT NULL UNIQUE,
    expires_at TEXT NOT NULL,
    created_at TEXT DEFAULT (datetime('now'))
);

-- Global contact book (per user)
CREATE TABLE IF NOT EXISTS contacts (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    company_name TEXT DEFAULT '',
    contact_name TEXT DEFAULT '',
    email TEXT DEFAULT '',
    website TEXT DEFAULT '',
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

-- Drip campaigns; drip_messages is a JSON list of steps
CREATE TABLE IF NOT EXISTS campaigns (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    status TEXT DEFAULT 'draft',
    drip_messages TEXT DEFAULT '[]',
    send_interval_seconds INTEGER DEFAULT 10,
    total_contacts INTEGER DEFAULT 0,
    sent_count INTEGER DEFAULT 0,
    response_count INTEGER DEFAULT 0,
    response_rate REAL DEFAULT 0.0,
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

-- Contacts attached to one campaign
CREATE TABLE IF NOT EXISTS campaign_contacts (
    id TEXT PRIMARY KEY,
    campaign_id TEXT NOT NULL REFERENCES campaigns(id) ON DELETE CASCADE,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    company_name TEXT DEFAULT '',
    contact_name TEXT DEFAULT '',
    email TEXT DEFAULT '',
    website TEXT DEFAULT '',
    status TEXT DEFAULT 'pending',
    created_at TEXT DEFAULT (datetime('now'))
);

-- Reusable message templates
CREATE TABLE IF NOT EXISTS templates (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    category TEXT DEFAULT 'general',
    subject_line TEXT NOT NULL,
    message_template TEXT NOT NULL,
    is_active INTEGER DEFAULT 1,
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

-- Automation rules (stored only, never executed)
CREATE TABLE IF NOT EXISTS automation_rules (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    campaign_id TEXT REFERENCES campaigns(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT DEFAULT '',
    trigger_type TEXT DEFAULT 'time_based',
    is_active INTEGER DEFAULT 1,
    conditions TEXT DEFAULT '{}',
    actions TEXT DEFAULT '{}',
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

-- Plans offered on the upgrade page
CREATE TABLE IF NOT EXISTS subscription_plans (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    price REAL NOT NULL,
    message_limit INTEGER NOT NULL,
    features TEXT DEFAULT '[]',
    is_active INTEGER DEFAULT 1
);

-- White label vendors owned by a user
CREATE TABLE IF NOT EXISTS white_label_vendors (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    vendor_email TEXT NOT NULL,
    vendor_name TEXT NOT NULL,
    phone_number TEXT DEFAULT '',
    website TEXT DEFAULT '',
    payment_platform TEXT DEFAULT 'stripe',
    signup_date TEXT,
    membership_end_date TEXT,
    status TEXT DEFAULT 'active',
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS vendor_stats (
    id TEXT PRIMARY KEY,
    vendor_id TEXT NOT NULL REFERENCES white_label_vendors(id) ON DELETE CASCADE,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    messages_sent INTEGER DEFAULT 0,
    campaigns_created INTEGER DEFAULT 0,
    last_activity TEXT,
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS subscriptions (
    id TEXT PRIMARY KEY,
    vendor_id TEXT NOT NULL REFERENCES white_label_vendors(id) ON DELETE CASCADE,
    user_id TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    plan_type TEXT DEFAULT 'monthly',
    status TEXT DEFAULT 'active',
    amount INTEGER NOT NULL,
    currency TEXT DEFAULT 'usd',
    current_period_start TEXT,
    current_period_end TEXT,
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

-- Indexes
CREATE INDEX IF NOT EXISTS idx_sessions_token ON user_sessions(session_token);
CREATE INDEX IF NOT EXISTS idx_contacts_user ON contacts(user_id, created_at);
CREATE INDEX IF NOT EXISTS idx_campaigns_user ON campaigns(user_id, created_at);
CREATE INDEX IF NOT EXISTS idx_campaign_contacts ON campaign_contacts(campaign_id);
CREATE INDEX IF NOT EXISTS idx_templates_user ON templates(user_id, category);
CREATE INDEX IF NOT EXISTS idx_rules_user ON automation_rules(user_id);
CREATE INDEX IF NOT EXISTS idx_vendors_owner ON white_label_vendors(owner_id);
"""

SEED_PLANS = [
    {
        "id": "starter", "name": "Starter Plan", "price": 29.0, "message_limit": 500,
        "features": ["500 messages per month", "Unlimited campaigns", "CSV import", "Email support"],
    },
    {
        "id": "professional", "name": "Professional Plan", "price": 79.0, "message_limit": 2500,
        "features": ["2,500 messages per month", "Drip automation", "Template library",
                     "Analytics dashboard", "Priority support"],
    },
    {
        "id": "enterprise", "name": "Enterprise Plan", "price": 199.0, "message_limit": 10000,
        "features": ["10,000 messages per month", "White label vendors", "Dedicated account manager"],
    },
]

EXPECTED_TABLES = [
    "users", "user_sessions", "contacts", "campaigns", "campaign_contacts",
    "templates", "automation_rules", "subscription_plans",
    "white_label_vendors", "vendor_stats", "subscriptions",
]


def seed_plans(conn: sqlite3.Connection):
    for plan in SEED_PLANS:
        conn.execute(
            "INSERT OR IGNORE INTO subscription_plans (id, name, price, message_limit, features, is_active) "
            "VALUES (?,?,?,?,?,1)",
            (plan["id"], plan["name"], plan["price"], plan["message_limit"], json.dumps(plan["features"])),
        )


def init_db(db_path=None):
    """Initialize the database with all tables, indexes and seed plans."""
    path = db_path or connection.DB_PATH
    conn = sqlite3.connect(path)
    conn.executescript(SCHEMA_SQL)
    seed_plans(conn)
    conn.commit()

    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = [row[0] for row in cursor.fetchall()]
    conn.close()
    return tables


def verify_db(db_path=None):
    """Verify the database schema is correct."""
    path = db_path or connection.DB_PATH
    conn = sqlite3.connect(path)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    actual_tables = [row[0] for row in cursor.fetchall()]
    conn.close()

    missing = set(EXPECTED_TABLES) - set(actual_tables)
    if missing:
        print(f"FAIL: Missing tables: {missing}")
        return False

    print(f"PASS: All {len(EXPECTED_TABLES)} tables present")
    return True


if __name__ == "__main__":
    tables = init_db()
    print(f"Database initialized at {connection.DB_PATH}")
    print(f"Tables created: {len(tables)}")
    verify_db()
