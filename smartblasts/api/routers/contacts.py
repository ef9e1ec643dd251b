"""Contact book routes: CRUD, CSV import and export."""

import io
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user
from smartblasts.core import csv_import
from smartblasts.core.dedupe import is_duplicate
from smartblasts.db import models
from smartblasts.errors import DuplicateError, ValidationError
from smartblasts.services import analytics_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contacts", tags=["contacts"])


class ContactCreate(BaseModel):
    company_name: str
    contact_name: Optional[str] = ""
    email: str
    website: Optional[str] = ""


class CSVPreviewRequest(BaseModel):
    csv_text: str


class CSVImportRequest(BaseModel):
    csv_text: str
    mapping: Optional[dict] = None
    website_only: bool = False


def mapping_from_request(mapping: Optional[dict]) -> Optional[csv_import.ColumnMapping]:
    return csv_import.ColumnMapping.from_dict(mapping) if mapping else None


@router.get("")
def list_contacts(search: str = None, user: dict = Depends(get_current_user)):
    return models.list_contacts(user["id"], search=search)


@router.post("", status_code=201)
def create_contact(contact: ContactCreate, user: dict = Depends(get_current_user)):
    data = contact.model_dump()
    if not data["company_name"].strip() or not data["email"].strip():
        raise ValidationError("Company name and email are required")
    if is_duplicate(data, models.list_contacts(user["id"])):
        raise DuplicateError("This email already exists in your contact list")
    result = models.create_contact(user["id"], data)
    analytics_service.track_event(user["id"], "contact_added")
    return result


@router.get("/export")
def export_contacts(user: dict = Depends(get_current_user)):
    content = csv_import.export_csv(models.list_contacts(user["id"]))
    return StreamingResponse(
        io.StringIO(content),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=contacts.csv"},
    )


@router.post("/import/preview")
def preview_import(data: CSVPreviewRequest, user: dict = Depends(get_current_user)):
    return csv_import.preview_csv(data.csv_text)


@router.post("/import")
def import_contacts(data: CSVImportRequest, user: dict = Depends(get_current_user)):
    result = csv_import.import_csv(
        data.csv_text,
        models.list_contacts(user["id"]),
        mapping=mapping_from_request(data.mapping),
        website_only=data.website_only,
    )
    if result.contacts:
        models.create_contacts(user["id"], result.contacts)
    logger.info(result.message, extra={"user_id": user["id"]})
    analytics_service.track_event(user["id"], "contacts_imported", {
        "imported": len(result.contacts), "duplicates": result.duplicate_count,
    })
    return result.to_dict()


@router.get("/{contact_id}")
def get_contact(contact_id: str, user: dict = Depends(get_current_user)):
    result = models.get_contact(contact_id, user["id"])
    if not result:
        raise HTTPException(status_code=404, detail="Contact not found")
    return result


@router.delete("/{contact_id}")
def delete_contact(contact_id: str, user: dict = Depends(get_current_user)):
    if not models.delete_contact(contact_id, user["id"]):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"deleted": contact_id}
