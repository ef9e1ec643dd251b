"""
Migration 001: Baseline schema.

No-op for databases created by init_db.py. It establishes a baseline version
so later migrations can build on it.
"""


def up(conn):
    """Baseline migration - verify core tables exist."""
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}

    required = {"users", "user_sessions", "contacts", "campaigns", "templates"}
    missing = required - tables

    if missing:
        raise RuntimeError(
            f"Baseline migration requires existing schema. Missing tables: {missing}. "
            f"Run 'python -m smartblasts.db.init_db' first."
        )
