"""White label vendor routes."""

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from smartblasts.api.deps import get_current_user
from smartblasts.services import white_label

router = APIRouter(prefix="/api/white-label", tags=["white-label"])


class VendorCreate(BaseModel):
    vendor_email: str
    vendor_name: str
    phone_number: Optional[str] = ""
    website: Optional[str] = ""
    payment_platform: Optional[str] = "stripe"
    plan_type: Optional[str] = "monthly"


class VendorStatusUpdate(BaseModel):
    status: str


@router.get("/vendors")
def list_vendors(user: dict = Depends(get_current_user)):
    return white_label.list_vendors_detailed(user["id"])


@router.post("/vendors", status_code=201)
def add_vendor(data: VendorCreate, user: dict = Depends(get_current_user)):
    return white_label.add_vendor(user["id"], **data.model_dump())


@router.patch("/vendors/{vendor_id}/status")
def update_vendor_status(vendor_id: str, data: VendorStatusUpdate, user: dict = Depends(get_current_user)):
    return white_label.update_vendor_status(user["id"], vendor_id, data.status)


@router.delete("/vendors/{vendor_id}")
def remove_vendor(vendor_id: str, user: dict = Depends(get_current_user)):
    white_label.remove_vendor(user["id"], vendor_id)
    return {"deleted": vendor_id}


@router.get("/summary")
def summary(user: dict = Depends(get_current_user)):
    return white_label.vendor_summary(user["id"])
