"""
Consignee Pydantic schemas.

Defines request and response models for consignee management and the
admin approval workflow.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from dispatch_backend.app.models.enums import ConsigneeStatus
from dispatch_backend.app.schemas.common import RequestModel


class ConsigneeBase(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    contact_person: Optional[str] = Field(None, max_length=255)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    pincode: Optional[str] = Field(None, max_length=20)
    phone: str = Field(..., min_length=1, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    gst_number: Optional[str] = Field(None, max_length=50)


class ConsigneeCreate(ConsigneeBase):
    """Schema for a company registering a consignee (starts PENDING)."""
    company_id: int = Field(..., gt=0)


class ConsigneeUpdate(ConsigneeBase):
    """Schema for a company editing a reviewed consignee."""


class ConsigneeApprove(RequestModel):
    consignee_number: str = Field(..., min_length=1, max_length=50)


class ConsigneeReject(RequestModel):
    # Blank reasons are rejected by the workflow with a 400.
    reason: str = Field(..., max_length=1000)


class ConsigneeResponse(BaseModel):
    """Schema for consignee response."""
    id: int
    company_id: int
    name: str
    contact_person: Optional[str]
    address: str
    city: str
    state: Optional[str]
    pincode: Optional[str]
    phone: str
    email: Optional[str]
    gst_number: Optional[str]
    status: ConsigneeStatus
    consignee_number: Optional[str]
    rejection_reason: Optional[str]
    approved_at: Optional[datetime]
    last_used: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PendingConsigneeResponse(ConsigneeResponse):
    company_name: Optional[str] = None
    company_email: Optional[str] = None


class BookableConsignees(BaseModel):
    """Consignees a company may book against; the form is disabled when empty."""
    consignees: List[ConsigneeResponse]
    booking_enabled: bool
