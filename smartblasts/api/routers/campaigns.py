"""Drip campaign routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user
from smartblasts.api.routers.contacts import CSVImportRequest, mapping_from_request
from smartblasts.core import sequence
from smartblasts.db import models
from smartblasts.services import analytics_service, campaign_service

router = APIRouter(prefix="/api/campaigns", tags=["campaigns"])


class CampaignContact(BaseModel):
    company_name: Optional[str] = ""
    contact_name: Optional[str] = ""
    email: Optional[str] = ""
    website: Optional[str] = ""


class CampaignCreate(BaseModel):
    name: str
    description: Optional[str] = ""
    status: Optional[str] = "draft"
    drip_messages: List[dict]
    send_interval_seconds: Optional[int] = None
    contacts: Optional[List[CampaignContact]] = None


class CampaignUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    drip_messages: Optional[List[dict]] = None
    send_interval_seconds: Optional[int] = None
    contacts: Optional[List[CampaignContact]] = None


class ScheduleRequest(BaseModel):
    drip_messages: List[dict]


class ApplyTemplateRequest(BaseModel):
    drip_messages: List[dict]
    index: int
    template_id: str


class RemoveMessageRequest(BaseModel):
    drip_messages: List[dict]
    message_id: str


def _split_contacts(data: BaseModel):
    payload = data.model_dump()
    contacts = payload.pop("contacts")
    return payload, contacts


@router.get("")
def list_campaigns(user: dict = Depends(get_current_user)):
    return models.list_campaigns(user["id"])


@router.post("", status_code=201)
def create_campaign(data: CampaignCreate, user: dict = Depends(get_current_user)):
    payload, contacts = _split_contacts(data)
    result = campaign_service.save_campaign(user["id"], payload, contacts=contacts)
    analytics_service.track_event(user["id"], "campaign_created", {"campaign_id": result["id"]})
    return result


@router.post("/schedule")
def compute_schedule(data: ScheduleRequest, user: dict = Depends(get_current_user)):
    """Timeline for an unsaved sequence, as the builder shows it while editing."""
    return campaign_service.schedule(sequence.parse_drip_messages(data.drip_messages))


@router.post("/drip-messages/add")
def add_drip_message(data: ScheduleRequest, user: dict = Depends(get_current_user)):
    messages = sequence.parse_drip_messages(data.drip_messages)
    sequence.check_delays(messages)
    return messages + [sequence.new_drip_message(messages)]


@router.post("/drip-messages/remove")
def remove_drip_message(data: RemoveMessageRequest, user: dict = Depends(get_current_user)):
    messages = sequence.parse_drip_messages(data.drip_messages)
    sequence.check_delays(messages)
    return sequence.remove_drip_message(messages, data.message_id)


@router.post("/apply-template")
def apply_template(data: ApplyTemplateRequest, user: dict = Depends(get_current_user)):
    template = models.get_template(data.template_id, user["id"])
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    messages = sequence.parse_drip_messages(data.drip_messages)
    sequence.check_delays(messages)
    return sequence.apply_template(messages, data.index, template)


@router.get("/{campaign_id}")
def get_campaign(campaign_id: str, user: dict = Depends(get_current_user)):
    return campaign_service.campaign_detail(user["id"], campaign_id)


@router.patch("/{campaign_id}")
def update_campaign(campaign_id: str, data: CampaignUpdate, user: dict = Depends(get_current_user)):
    payload, contacts = _split_contacts(data)
    if not any(v is not None for v in payload.values()) and contacts is None:
        raise HTTPException(status_code=400, detail="No fields to update")
    return campaign_service.save_campaign(user["id"], payload, contacts=contacts, campaign_id=campaign_id)


@router.delete("/{campaign_id}")
def delete_campaign(campaign_id: str, user: dict = Depends(get_current_user)):
    campaign_service.delete_campaign(user["id"], campaign_id)
    return {"deleted": campaign_id}


@router.post("/{campaign_id}/toggle")
def toggle_campaign(campaign_id: str, user: dict = Depends(get_current_user)):
    return campaign_service.toggle_status(user["id"], campaign_id)


@router.post("/{campaign_id}/clone", status_code=201)
def clone_campaign(campaign_id: str, copy_contacts: bool = True, user: dict = Depends(get_current_user)):
    return campaign_service.clone_campaign(user["id"], campaign_id, copy_contacts=copy_contacts)


@router.get("/{campaign_id}/schedule")
def campaign_schedule(campaign_id: str, user: dict = Depends(get_current_user)):
    campaign = campaign_service.get_owned_campaign(user["id"], campaign_id)
    return campaign_service.schedule(campaign["drip_messages"])


@router.get("/{campaign_id}/preview")
def campaign_preview(campaign_id: str, user: dict = Depends(get_current_user)):
    return campaign_service.preview(user["id"], campaign_id)


@router.get("/{campaign_id}/contacts")
def list_campaign_contacts(campaign_id: str, user: dict = Depends(get_current_user)):
    campaign_service.get_owned_campaign(user["id"], campaign_id)
    return models.list_campaign_contacts(campaign_id)


@router.post("/{campaign_id}/contacts", status_code=201)
def add_campaign_contact(campaign_id: str, contact: CampaignContact,
                         user: dict = Depends(get_current_user)):
    return campaign_service.add_contact(user["id"], campaign_id, contact.model_dump())


@router.delete("/{campaign_id}/contacts/{contact_id}")
def remove_campaign_contact(campaign_id: str, contact_id: str, user: dict = Depends(get_current_user)):
    campaign_service.remove_contact(user["id"], campaign_id, contact_id)
    return {"deleted": contact_id}


@router.post("/{campaign_id}/contacts/import")
def import_campaign_contacts(campaign_id: str, data: CSVImportRequest,
                             user: dict = Depends(get_current_user)):
    return campaign_service.import_contacts(
        user["id"], campaign_id, data.csv_text,
        mapping=mapping_from_request(data.mapping), website_only=data.website_only,
    )
