"""
Campaign builder operations that span more than one table.

Saving a campaign writes the campaign row, replaces its contact list and
copies the contacts into the owner's global contact book.
"""

import logging
from typing import Optional

from smartblasts.config import DEFAULT_SEND_INTERVAL_SECONDS
from smartblasts.core import csv_import, personalize, sequence
from smartblasts.core.dedupe import is_duplicate, split_new_and_duplicates
from smartblasts.db import models
from smartblasts.errors import DuplicateError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CAMPAIGN_STATUSES = ("draft", "active", "paused", "completed")


def get_owned_campaign(user_id: str, campaign_id: str) -> dict:
    campaign = models.get_campaign(campaign_id, user_id)
    if not campaign:
        raise NotFoundError("Campaign not found")
    campaign["drip_messages"] = sequence.parse_drip_messages(campaign["drip_messages"])
    return campaign


def _check_fields(name: Optional[str], status: Optional[str], send_interval_seconds: Optional[int]):
    if name is not None and not name.strip():
        raise ValidationError("Please enter a campaign name")
    if status is not None and status not in CAMPAIGN_STATUSES:
        raise ValidationError(f"status must be one of {', '.join(CAMPAIGN_STATUSES)}")
    if send_interval_seconds is not None and send_interval_seconds < 1:
        raise ValidationError("send_interval_seconds must be at least 1")


def _sync_global_contacts(user_id: str, contacts: list) -> int:
    """Add campaign contacts to the contact book, skipping e-mails already there."""
    new, _ = split_new_and_duplicates(contacts, models.list_contacts(user_id))
    if not new:
        return 0
    return models.create_contacts(user_id, new)


def save_campaign(user_id: str, data: dict, contacts: Optional[list] = None,
                  campaign_id: Optional[str] = None) -> dict:
    """Create (no ``campaign_id``) or update a campaign.

    ``contacts`` of None leaves an existing campaign's contact list alone; a
    list replaces it.
    """
    if campaign_id is None and not (data.get("name") or "").strip():
        raise ValidationError("Please enter a campaign name")
    _check_fields(data.get("name"), data.get("status"), data.get("send_interval_seconds"))

    if "drip_messages" in data and data["drip_messages"] is not None:
        messages = sequence.parse_drip_messages(data["drip_messages"])
        sequence.validate_messages(messages)
        data = {**data, "drip_messages": messages}
    elif campaign_id is None:
        raise ValidationError("A drip campaign needs at least one message")

    if campaign_id is None:
        campaign = models.create_campaign(user_id, {
            "name": data["name"].strip(),
            "description": data.get("description") or "",
            "status": data.get("status") or "draft",
            "drip_messages": data["drip_messages"],
            "send_interval_seconds": data.get("send_interval_seconds") or DEFAULT_SEND_INTERVAL_SECONDS,
            "total_contacts": len(contacts or []),
        })
        campaign_id = campaign["id"]
        logger.info("Campaign created", extra={"user_id": user_id, "campaign_id": campaign_id})
    else:
        get_owned_campaign(user_id, campaign_id)
        updates = {k: v for k, v in data.items() if v is not None}
        if "name" in updates:
            updates["name"] = updates["name"].strip()
        if updates:
            models.update_campaign(campaign_id, updates)
        logger.info("Campaign updated", extra={"user_id": user_id, "campaign_id": campaign_id})

    if contacts is not None:
        contacts, _ = split_new_and_duplicates(contacts, [])
        models.replace_campaign_contacts(campaign_id, user_id, contacts)
        added = _sync_global_contacts(user_id, contacts)
        logger.info("Saved %d campaign contacts (%d new in contact book)", len(contacts), added,
                    extra={"user_id": user_id, "campaign_id": campaign_id})

    return campaign_detail(user_id, campaign_id)


def campaign_detail(user_id: str, campaign_id: str) -> dict:
    """Campaign with its contacts and the computed drip schedule."""
    campaign = get_owned_campaign(user_id, campaign_id)
    campaign["contacts"] = models.list_campaign_contacts(campaign_id)
    campaign["schedule"] = schedule(campaign["drip_messages"])
    return campaign


def schedule(messages: list) -> list:
    sequence.check_delays(messages)
    return [
        {**step, "description": sequence.describe_send_day(step["send_day"])}
        for step in sequence.compute_schedule(messages)
    ]


def preview(user_id: str, campaign_id: str) -> list:
    campaign = get_owned_campaign(user_id, campaign_id)
    contacts = models.list_campaign_contacts(campaign_id)
    return personalize.preview_campaign(campaign["drip_messages"], contacts)


def toggle_status(user_id: str, campaign_id: str) -> dict:
    """Flip an active campaign to paused; anything else becomes active."""
    campaign = get_owned_campaign(user_id, campaign_id)
    new_status = "paused" if campaign["status"] == "active" else "active"
    models.update_campaign(campaign_id, {"status": new_status})
    logger.info("Campaign status set to %s", new_status,
                extra={"user_id": user_id, "campaign_id": campaign_id})
    return get_owned_campaign(user_id, campaign_id)


def clone_campaign(user_id: str, campaign_id: str, copy_contacts: bool = True) -> dict:
    source = get_owned_campaign(user_id, campaign_id)
    contacts = models.list_campaign_contacts(campaign_id) if copy_contacts else []

    clone = models.create_campaign(user_id, {
        "name": f"{source['name']} (Copy)",
        "description": source["description"],
        "status": "draft",
        "drip_messages": source["drip_messages"],
        "send_interval_seconds": source["send_interval_seconds"],
        "total_contacts": len(contacts),
    })
    if contacts:
        models.add_campaign_contacts(clone["id"], user_id, contacts)
    logger.info("Campaign cloned from %s", campaign_id,
                extra={"user_id": user_id, "campaign_id": clone["id"]})
    return campaign_detail(user_id, clone["id"])


def delete_campaign(user_id: str, campaign_id: str):
    if not models.delete_campaign(campaign_id, user_id):
        raise NotFoundError("Campaign not found")
    logger.info("Campaign deleted", extra={"user_id": user_id, "campaign_id": campaign_id})


def add_contact(user_id: str, campaign_id: str, contact: dict) -> dict:
    """Attach one contact to a campaign, refusing an e-mail it already has."""
    get_owned_campaign(user_id, campaign_id)
    if not (contact.get("company_name") or "").strip() or not (contact.get("email") or "").strip():
        raise ValidationError("Company name and email are required")
    if is_duplicate(contact, models.list_campaign_contacts(campaign_id)):
        raise DuplicateError("This email already exists in your contact list")

    models.add_campaign_contacts(campaign_id, user_id, [contact])
    _sync_global_contacts(user_id, [contact])
    return campaign_detail(user_id, campaign_id)


def remove_contact(user_id: str, campaign_id: str, contact_id: str):
    get_owned_campaign(user_id, campaign_id)
    if not models.delete_campaign_contact(campaign_id, contact_id):
        raise NotFoundError("Contact not found")


def import_contacts(user_id: str, campaign_id: str, csv_text: str,
                    mapping: Optional[csv_import.ColumnMapping] = None,
                    website_only: bool = False) -> dict:
    """CSV import into a campaign, deduplicated against the campaign's contacts."""
    get_owned_campaign(user_id, campaign_id)
    result = csv_import.import_csv(
        csv_text, models.list_campaign_contacts(campaign_id),
        mapping=mapping, website_only=website_only,
    )
    if result.contacts:
        models.add_campaign_contacts(campaign_id, user_id, result.contacts)
        _sync_global_contacts(user_id, result.contacts)
    logger.info(result.message, extra={"user_id": user_id, "campaign_id": campaign_id})
    return result.to_dict()
