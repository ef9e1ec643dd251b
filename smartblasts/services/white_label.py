"""
White label vendor management.

A vendor is a reseller account owned by a SmartBlasts user. Adding one also
creates its usage stats row and a subscription billed monthly or yearly.
"""

import calendar
import logging
import secrets
import string
import time
from datetime import datetime, timezone

from smartblasts.config import VENDOR_MONTHLY_PRICE_CENTS
from smartblasts.db import models
from smartblasts.errors import DuplicateError, NotFoundError, ValidationError
from smartblasts.services.auth_service import is_valid_email

logger = logging.getLogger(__name__)

PLAN_TYPES = ("monthly", "yearly")
VENDOR_STATUSES = ("active", "suspended")
VENDOR_PASSWORD_LENGTH = 12
_PASSWORD_ALPHABET = string.ascii_letters + string.digits + "!@#$%^&*"


def generate_vendor_password(length: int = VENDOR_PASSWORD_LENGTH) -> str:
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(length))


def add_months(dt: datetime, months: int) -> datetime:
    """Same day ``months`` later, clamped to the end of shorter months."""
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def subscription_amount(plan_type: str) -> int:
    """Price in cents for one billing period."""
    if plan_type == "yearly":
        return VENDOR_MONTHLY_PRICE_CENTS * 12
    return VENDOR_MONTHLY_PRICE_CENTS


def add_vendor(owner_id: str, vendor_email: str, vendor_name: str, phone_number: str = "",
               website: str = "", payment_platform: str = "stripe",
               plan_type: str = "monthly") -> dict:
    """Create a vendor, its stats row and its subscription.

    Returns {"vendor", "subscription", "password"}. The generated password is
    not stored and is only available in this return value.
    """
    vendor_email = (vendor_email or "").strip()
    vendor_name = (vendor_name or "").strip()
    if not vendor_email or not vendor_name:
        raise ValidationError("Please enter vendor email and name")
    if not is_valid_email(vendor_email):
        raise ValidationError("Please enter a valid email address")
    if plan_type not in PLAN_TYPES:
        raise ValidationError(f"plan_type must be one of {', '.join(PLAN_TYPES)}")

    existing = {v["vendor_email"].lower() for v in models.list_vendors(owner_id)}
    if vendor_email.lower() in existing:
        raise DuplicateError("This vendor email already exists")

    vendor_id = f"vendor_{int(time.time() * 1000)}_{secrets.token_hex(3)}"
    password = generate_vendor_password()
    now = datetime.now(timezone.utc)
    end = add_months(now, 12 if plan_type == "yearly" else 1)
    signup_date, end_date = now.isoformat(), end.isoformat()

    vendor = models.create_vendor({
        "id": vendor_id,
        "owner_id": owner_id,
        "vendor_email": vendor_email,
        "vendor_name": vendor_name,
        "phone_number": phone_number,
        "website": website,
        "payment_platform": payment_platform or "stripe",
        "signup_date": signup_date,
        "membership_end_date": end_date,
        "status": "active",
    })
    models.create_vendor_stats({
        "id": f"stats_{vendor_id}",
        "vendor_id": vendor_id,
        "user_id": owner_id,
        "created_at": signup_date,
    })
    subscription = models.create_subscription({
        "id": f"sub_{vendor_id}",
        "vendor_id": vendor_id,
        "user_id": owner_id,
        "plan_type": plan_type,
        "status": "active",
        "amount": subscription_amount(plan_type),
        "currency": "usd",
        "current_period_start": signup_date,
        "current_period_end": end_date,
    })

    logger.info("Vendor added", extra={"user_id": owner_id, "vendor_id": vendor_id})
    return {"vendor": vendor, "subscription": subscription, "password": password}


def update_vendor_status(owner_id: str, vendor_id: str, status: str) -> dict:
    """Suspend or reactivate a vendor; its subscription follows."""
    if status not in VENDOR_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(VENDOR_STATUSES)}")
    if not models.get_vendor(vendor_id, owner_id):
        raise NotFoundError("Vendor not found")

    vendor = models.update_vendor(vendor_id, {"status": status})
    models.update_vendor_subscription_status(vendor_id, "active" if status == "active" else "cancelled")
    logger.info("Vendor status set to %s", status, extra={"user_id": owner_id, "vendor_id": vendor_id})
    return vendor


def remove_vendor(owner_id: str, vendor_id: str):
    if not models.delete_vendor(vendor_id, owner_id):
        raise NotFoundError("Vendor not found")
    logger.info("Vendor removed", extra={"user_id": owner_id, "vendor_id": vendor_id})


def monthly_revenue(subscriptions: list) -> float:
    """Dollars per month from active subscriptions; yearly plans count 1/12."""
    cents = sum(
        s["amount"] / 12 if s["plan_type"] == "yearly" else s["amount"]
        for s in subscriptions if s["status"] == "active"
    )
    return round(cents / 100, 2)


def list_vendors_detailed(owner_id: str) -> list:
    """Vendors with their stats and subscription attached."""
    stats = {s["vendor_id"]: s for s in models.list_vendor_stats(owner_id)}
    subs = {s["vendor_id"]: s for s in models.list_subscriptions(owner_id)}
    return [
        {**v, "stats": stats.get(v["id"]), "subscription": subs.get(v["id"])}
        for v in models.list_vendors(owner_id)
    ]


def vendor_summary(owner_id: str) -> dict:
    vendors = models.list_vendors(owner_id)
    stats = models.list_vendor_stats(owner_id)
    return {
        "total_vendors": len(vendors),
        "active_vendors": sum(1 for v in vendors if v["status"] == "active"),
        "suspended_vendors": sum(1 for v in vendors if v["status"] == "suspended"),
        "monthly_revenue": monthly_revenue(models.list_subscriptions(owner_id)),
        "total_messages_sent": sum(s["messages_sent"] or 0 for s in stats),
        "total_campaigns": sum(s["campaigns_created"] or 0 for s in stats),
    }
