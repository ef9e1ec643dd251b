"""
Shared pytest fixtures for the SmartBlasts test suite.
"""

import os
import pytest

from smartblasts.db import connection
from smartblasts.db.init_db import init_db
from smartblasts.db.migration_runner import run_migrations


@pytest.fixture
def test_db(tmp_path):
    """Create a fresh test database with all migrations applied."""
    db_path = str(tmp_path / "test.db")
    os.environ["SB_JOURNAL_MODE"] = "DELETE"

    # Point the data layer at the temp database
    original_path = connection.DB_PATH
    connection.DB_PATH = db_path

    init_db(db_path)
    run_migrations(db_path)

    yield db_path

    connection.DB_PATH = original_path
    os.environ.pop("SB_JOURNAL_MODE", None)


@pytest.fixture
def client(test_db):
    from fastapi.testclient import TestClient
    from smartblasts.api.app import app
    return TestClient(app)


@pytest.fixture
def signup(client):
    """Sign a user up through the API and return the session payload."""
    def _signup(email="jane@example.com", password="secret123", full_name="Jane Doe"):
        response = client.post("/api/auth/signup", json={
            "email": email,
            "password": password,
            "confirm_password": password,
            "full_name": full_name,
            "company_name": "Example Inc",
        })
        assert response.status_code == 201, response.text
        return response.json()
    return _signup


@pytest.fixture
def auth(signup):
    """Headers for a freshly signed-up user."""
    session = signup()
    return {"X-Session-Token": session["session_token"]}


@pytest.fixture
def admin_auth(signup, monkeypatch):
    """Headers for a user listed in SB_ADMIN_EMAILS."""
    from smartblasts import config
    monkeypatch.setattr(config, "ADMIN_EMAILS", {"admin@example.com"})
    session = signup(email="Admin@example.com", full_name="Site Admin")
    return {"X-Session-Token": session["session_token"]}


@pytest.fixture
def drip_messages():
    return [
        {"id": "m1", "sequence": 1, "delay_days": 0,
         "subject_line": "Hello {company}", "message_template": "Hi {contact}, saw {website}."},
        {"id": "m2", "sequence": 2, "delay_days": 2,
         "subject_line": "Following up", "message_template": "Any thoughts, {contact}?"},
        {"id": "m3", "sequence": 3, "delay_days": 3,
         "subject_line": "Last note", "message_template": "Closing the loop with {company}."},
    ]
