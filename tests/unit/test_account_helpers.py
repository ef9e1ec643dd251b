"""
Unit tests for password hashing, vendor billing math and admin usage.
"""

from datetime import datetime, timezone

from smartblasts.api.routers.admin import usage_percentage
from smartblasts.services.auth_service import (
    generate_salt, generate_temp_password, hash_password, is_valid_email, verify_password,
)
from smartblasts.services.white_label import (
    add_months, generate_vendor_password, monthly_revenue, subscription_amount,
)


def test_password_hash_is_salted():
    a, b = generate_salt(), generate_salt()
    assert a != b
    assert hash_password("secret", a) != hash_password("secret", b)
    assert verify_password("secret", a, hash_password("secret", a))
    assert not verify_password("Secret", a, hash_password("secret", a))


def test_temp_password_shape():
    pw = generate_temp_password()
    assert len(pw) == 8
    assert all(ch.isupper() or ch.isdigit() for ch in pw)


def test_email_format():
    assert is_valid_email("a@b.co")
    assert not is_valid_email("a@b")
    assert not is_valid_email("a b@c.com")
    assert not is_valid_email("")


def test_add_months_clamps_to_month_end():
    jan31 = datetime(2025, 1, 31, tzinfo=timezone.utc)
    assert add_months(jan31, 1) == datetime(2025, 2, 28, tzinfo=timezone.utc)
    assert add_months(jan31, 12) == datetime(2026, 1, 31, tzinfo=timezone.utc)
    assert add_months(datetime(2025, 12, 15), 1) == datetime(2026, 1, 15)


def test_subscription_amounts():
    assert subscription_amount("monthly") == 9700
    assert subscription_amount("yearly") == 116400


def test_monthly_revenue_counts_active_only():
    subs = [
        {"plan_type": "monthly", "amount": 9700, "status": "active"},
        {"plan_type": "yearly", "amount": 116400, "status": "active"},
        {"plan_type": "monthly", "amount": 9700, "status": "cancelled"},
    ]
    assert monthly_revenue(subs) == 194.0
    assert monthly_revenue([]) == 0


def test_vendor_password_length():
    assert len(generate_vendor_password()) == 12


def test_usage_percentage_caps_at_100():
    assert usage_percentage(10, 25) == 40.0
    assert usage_percentage(50, 25) == 100
    assert usage_percentage(5, 0) == 0.0
