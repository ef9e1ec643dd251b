"""Message template routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user
from smartblasts.core import personalize
from smartblasts.db import models
from smartblasts.errors import ValidationError

router = APIRouter(prefix="/api/templates", tags=["templates"])

CATEGORIES = [
    {"value": "general", "label": "General"},
    {"value": "introduction", "label": "Introduction"},
    {"value": "follow-up", "label": "Follow-up"},
    {"value": "proposal", "label": "Proposal"},
    {"value": "meeting", "label": "Meeting Request"},
    {"value": "thank-you", "label": "Thank You"},
]


class TemplateCreate(BaseModel):
    name: str
    description: Optional[str] = ""
    category: Optional[str] = "general"
    subject_line: str
    message_template: str
    is_active: Optional[bool] = True


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    subject_line: Optional[str] = None
    message_template: Optional[str] = None
    is_active: Optional[bool] = None


def _require_text(data: dict):
    for field, label in (("name", "Template name"), ("subject_line", "Subject line"),
                         ("message_template", "Message template")):
        if field in data and not (data[field] or "").strip():
            raise ValidationError(f"{label} is required")


def _owned(template_id: str, user_id: str) -> dict:
    template = models.get_template(template_id, user_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.get("/categories")
def list_categories():
    return CATEGORIES


@router.get("")
def list_templates(search: str = None, category: str = None, include_inactive: bool = False,
                   user: dict = Depends(get_current_user)):
    return models.list_templates(user["id"], search=search, category=category,
                                 active_only=not include_inactive)


@router.post("", status_code=201)
def create_template(data: TemplateCreate, user: dict = Depends(get_current_user)):
    payload = data.model_dump()
    _require_text(payload)
    return models.create_template(user["id"], payload)


@router.get("/{template_id}")
def get_template(template_id: str, user: dict = Depends(get_current_user)):
    return _owned(template_id, user["id"])


@router.patch("/{template_id}")
def update_template(template_id: str, data: TemplateUpdate, user: dict = Depends(get_current_user)):
    _owned(template_id, user["id"])
    update_data = {k: v for k, v in data.model_dump().items() if v is not None}
    if not update_data:
        raise HTTPException(status_code=400, detail="No fields to update")
    _require_text(update_data)
    return models.update_template(template_id, update_data)


@router.delete("/{template_id}")
def delete_template(template_id: str, user: dict = Depends(get_current_user)):
    if not models.delete_template(template_id, user["id"]):
        raise HTTPException(status_code=404, detail="Template not found")
    return {"deleted": template_id}


@router.post("/{template_id}/clone", status_code=201)
def clone_template(template_id: str, user: dict = Depends(get_current_user)):
    source = _owned(template_id, user["id"])
    return models.create_template(user["id"], {
        "name": f"{source['name']} (Copy)",
        "description": source["description"],
        "category": source["category"],
        "subject_line": source["subject_line"],
        "message_template": source["message_template"],
        "is_active": True,
    })


@router.get("/{template_id}/preview")
def preview_template(template_id: str, user: dict = Depends(get_current_user)):
    """Template rendered for the sample contact."""
    template = _owned(template_id, user["id"])
    return {
        "id": template["id"],
        "sample_contact": personalize.SAMPLE_CONTACT,
        "tokens": personalize.find_tokens(template["subject_line"] + template["message_template"]),
        **personalize.personalize_message(template, personalize.SAMPLE_CONTACT),
    }
