"""
Database Migration Runner - Sequential, versioned, idempotent schema migrations.

Tracks applied migrations in a schema_versions table. Each migration is a
numbered Python file in smartblasts/db/migrations/ that defines an up() function.

Usage:
    python -m smartblasts.db.migration_runner          # Apply pending migrations
    python -m smartblasts.db.migration_runner --status  # Show migration status
"""

import argparse
import importlib.util
import logging
import os
import sqlite3
import sys
from datetime import datetime, timezone
from glob import glob

from smartblasts.db import connection

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = os.path.join(os.path.dirname(__file__), "migrations")


def _ensure_schema_versions(conn: sqlite3.Connection):
    """Create the schema_versions table if it doesn't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_versions (
            version INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            applied_at TEXT NOT NULL
        )
    """)
    conn.commit()


def get_applied_versions(conn: sqlite3.Connection) -> set:
    """Get the set of already-applied migration version numbers."""
    _ensure_schema_versions(conn)
    rows = conn.execute("SELECT version FROM schema_versions ORDER BY version").fetchall()
    return {row[0] for row in rows}


def discover_migrations() -> list:
    """Find all migration files in the migrations directory.

    Returns list of (version, name, module_path) sorted by version.
    """
    pattern = os.path.join(MIGRATIONS_DIR, "[0-9]*.py")
    migrations = []

    for filepath in sorted(glob(pattern)):
        filename = os.path.basename(filepath)
        # Expected format: 001_description.py
        parts = filename.split("_", 1)
        if len(parts) < 2:
            continue
        try:
            version = int(parts[0])
        except ValueError:
            continue
        name = os.path.splitext(parts[1])[0]
        migrations.append((version, name, filepath))

    return sorted(migrations, key=lambda x: x[0])


def apply_migration(conn: sqlite3.Connection, version: int, name: str, filepath: str) -> bool:
    """Apply a single migration. Returns True if successful, False if failed."""
    module_name = f"migration_{version}"

    try:
        spec = importlib.util.spec_from_file_location(module_name, filepath)
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        if not hasattr(module, "up"):
            logger.error("Migration %03d_%s missing up() function", version, name)
            return False

        module.up(conn)

        conn.execute(
            "INSERT INTO schema_versions (version, name, applied_at) VALUES (?, ?, ?)",
            (version, name, datetime.now(timezone.utc).isoformat())
        )
        conn.commit()
        return True

    except Exception as e:
        conn.rollback()
        logger.error("Failed applying migration %03d_%s: %s", version, name, e)
        return False


def run_migrations(db_path: str = None) -> dict:
    """Apply all pending migrations, stopping at the first failure.

    Returns dict with counts and details.
    """
    path = db_path or connection.DB_PATH
    conn = sqlite3.connect(path)
    _ensure_schema_versions(conn)

    applied = get_applied_versions(conn)
    available = discover_migrations()

    pending = [(v, n, p) for v, n, p in available if v not in applied]

    result = {"applied": 0, "skipped": len(applied), "failed": 0, "errors": []}

    if not pending:
        logger.info("Database is up to date (%d migrations applied)", len(applied))
        conn.close()
        return result

    logger.info("Applying %d pending migration(s)", len(pending))

    for version, name, filepath in pending:
        if apply_migration(conn, version, name, filepath):
            logger.info("Applied migration %03d_%s", version, name)
            result["applied"] += 1
        else:
            result["failed"] += 1
            result["errors"].append(f"{version:03d}_{name}")
            break

    conn.close()
    return result


def show_status(db_path: str = None):
    """Print migration status."""
    path = db_path or connection.DB_PATH

    if not os.path.exists(path):
        print(f"Database not found at {path}")
        return

    conn = sqlite3.connect(path)
    applied = get_applied_versions(conn)
    available = discover_migrations()
    conn.close()

    print(f"Database: {path}")
    print(f"Applied: {len(applied)}")
    print(f"Available: {len(available)}")
    print()

    for version, name, _ in available:
        status = "applied" if version in applied else "PENDING"
        marker = "+" if version in applied else "-"
        print(f"  [{marker}] {version:03d}_{name} ({status})")

    orphaned = applied - {v for v, _, _ in available}
    if orphaned:
        print(f"\n  Warning: {len(orphaned)} applied migration(s) not found in filesystem: {orphaned}")


def main():
    parser = argparse.ArgumentParser(description="SmartBlasts Database Migration Runner")
    parser.add_argument("--status", action="store_true", help="Show migration status")
    parser.add_argument("--db", type=str, help="Database path override")
    args = parser.parse_args()

    if args.status:
        show_status(args.db)
    else:
        from smartblasts.logging_config import setup_logging
        setup_logging()
        result = run_migrations(args.db)
        if result["failed"]:
            sys.exit(1)


if __name__ == "__main__":
    main()
