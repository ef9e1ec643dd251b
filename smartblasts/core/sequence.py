"""
SmartBlasts - Drip Sequence
A drip campaign is an ordered list of message steps. Each step waits
``delay_days`` after the previous one, so the day a step goes out is the
running total of delays up to and including it:

    delay_days  [0, 2, 3]
    send_day    [0, 2, 5]

``sequence`` is the 1-based position a step had when it was created. It is
not renumbered when steps are edited, reordered or removed; list order is
what the schedule follows.
"""

import json
import time
from typing import Optional

from smartblasts.config import FOLLOW_UP_DELAY_DAYS
from smartblasts.errors import ValidationError


DRIP_FIELDS = ("id", "sequence", "delay_days", "subject_line", "message_template", "is_active")

# Stored blobs written by the old dashboard use camelCase keys
_CAMEL_KEYS = {
    "delayDays": "delay_days",
    "subjectLine": "subject_line",
    "messageTemplate": "message_template",
    "isActive": "is_active",
}


def new_drip_message(existing: list, message_id: Optional[str] = None) -> dict:
    """Build the default next step for a sequence.

    The first step sends immediately; later steps default to a short follow-up gap.
    """
    return {
        "id": message_id or f"msg_{int(time.time() * 1000)}",
        "sequence": len(existing) + 1,
        "delay_days": 0 if not existing else FOLLOW_UP_DELAY_DAYS,
        "subject_line": "",
        "message_template": "",
        "is_active": True,
    }


def normalize_drip_message(raw: dict, position: int = 1) -> dict:
    """Coerce a step coming from JSON (either key style) into the canonical dict."""
    msg = {}
    for key, value in raw.items():
        msg[_CAMEL_KEYS.get(key, key)] = value

    try:
        delay = int(msg.get("delay_days") or 0)
    except (TypeError, ValueError):
        delay = 0

    return {
        "id": msg.get("id") or f"msg_{position}",
        "sequence": int(msg.get("sequence") or position),
        "delay_days": delay,
        "subject_line": msg.get("subject_line") or "",
        "message_template": msg.get("message_template") or "",
        "is_active": bool(msg.get("is_active", True)),
    }


def parse_drip_messages(raw) -> list:
    """Decode a stored drip_messages value.

    Accepts the JSON string kept in the campaigns table or an already-decoded
    list. Anything unreadable yields an empty list.
    """
    if not raw:
        return []
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            return []
    if not isinstance(raw, list):
        return []
    return [normalize_drip_message(m, i + 1) for i, m in enumerate(raw) if isinstance(m, dict)]


def compute_schedule(messages: list) -> list:
    """Attach a cumulative ``send_day`` to every step, in list order.

    Pure: the input dicts are copied, never modified.
    """
    cumulative = 0
    timeline = []
    for message in messages:
        send_day = cumulative + message["delay_days"]
        cumulative = send_day
        timeline.append({**message, "send_day": send_day})
    return timeline


def describe_send_day(send_day: int) -> str:
    if send_day == 0:
        return "Send immediately"
    return f"Send after {send_day} day{'s' if send_day > 1 else ''}"


def check_delays(messages: list):
    """Raise ValidationError when any step waits a negative number of days."""
    for i, msg in enumerate(messages, start=1):
        if msg["delay_days"] < 0:
            raise ValidationError(f"Message {i}: delay_days must be 0 or more")


def validate_messages(messages: list):
    """Check a sequence is complete enough to save.

    Raises:
        ValidationError: empty sequence, negative delay, or a step with a
            blank subject line or message template.
    """
    if not messages:
        raise ValidationError("A drip campaign needs at least one message")
    check_delays(messages)
    for msg in messages:
        if not msg["subject_line"].strip() or not msg["message_template"].strip():
            raise ValidationError(
                "Please complete all drip messages (subject line and message template)"
            )


def update_drip_message(messages: list, message_id: str, field: str, value) -> list:
    if field not in DRIP_FIELDS or field == "id":
        raise ValidationError(f"Unknown drip message field: {field}")
    return [{**m, field: value} if m["id"] == message_id else m for m in messages]


def remove_drip_message(messages: list, message_id: str) -> list:
    """Drop one step. The last remaining step can't be removed."""
    if len(messages) <= 1:
        raise ValidationError("You must have at least one message in your drip campaign")
    remaining = [m for m in messages if m["id"] != message_id]
    if len(remaining) == len(messages):
        raise ValidationError("Invalid message selection")
    return remaining


def apply_template(messages: list, index: int, template: dict) -> list:
    """Copy a saved template's subject and body into the step at ``index``."""
    if not template:
        raise ValidationError("No template selected")
    if index < 0 or index >= len(messages):
        raise ValidationError("Invalid message selection")

    updated = list(messages)
    updated[index] = {
        **updated[index],
        "subject_line": template.get("subject_line") or "",
        "message_template": template.get("message_template") or "",
    }
    return updated
