"""
Migration 002: Add analytics_events table.

Page views and product events used to go to the console only. They are now
kept here as well so the admin screen can count them.
"""


def up(conn):
    conn.execute("""
        CREATE TABLE IF NOT EXISTS analytics_events (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT,
            event_type TEXT NOT NULL,
            event_name TEXT NOT NULL,
            properties TEXT DEFAULT '{}',
            created_at TEXT DEFAULT (datetime('now'))
        )
    """)
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_analytics_events_user
        ON analytics_events(user_id, event_type)
    """)
