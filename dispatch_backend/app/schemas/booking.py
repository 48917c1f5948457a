"""
Booking Pydantic schemas.

Defines request and response models for single and batch booking creation
and for status updates.
"""

from pydantic import BaseModel, Field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
from dispatch_backend.app.domain.pricing.pricing_engine import MAX_ARTICLE_COUNT
from dispatch_backend.app.models.enums import BookingStatus
from dispatch_backend.app.schemas.common import RequestModel
from dispatch_backend.app.schemas.vehicle import DriverSummary


class ParcelDetails(RequestModel):
    """Consignee and parcel fields shared by single and batch creation."""
    consignee_id: Optional[int] = Field(None, gt=0, description="Approved consignee to pre-fill from")
    consignee_name: str = Field(..., min_length=1, max_length=255)
    consignee_contact: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=500)
    destination: str = Field(..., min_length=1, max_length=255)
    destination_pincode: Optional[str] = Field(None, max_length=20)
    article_count: int = Field(..., gt=0, le=MAX_ARTICLE_COUNT, description="Number of articles")
    parcel_type: Optional[str] = Field(None, max_length=50, description="e.g. Standard, Express")
    weight: Optional[float] = Field(None, gt=0, le=1_000_000, description="Weight in kg")


class BookingCreate(ParcelDetails):
    """Schema for creating a single booking."""
    company_id: int = Field(..., gt=0)


class BookingBatchCreate(RequestModel):
    """Schema for creating several bookings under one LR prefix."""
    company_id: int = Field(..., gt=0)
    lr_number: Optional[str] = Field(None, min_length=1, max_length=90, description="Batch LR prefix")
    parcels: List[ParcelDetails] = Field(..., min_length=1)


class BookingUpdate(RequestModel):
    """Schema for status / assignment changes on one booking."""
    status: Optional[BookingStatus] = None
    assigned_vehicle_id: Optional[int] = Field(None, gt=0)
    assigned_driver_id: Optional[int] = Field(None, gt=0)


class BookingResponse(BaseModel):
    """Schema for booking response."""
    id: int
    lr_number: str
    booking_date: date
    company_id: int
    consignee_id: Optional[int]
    consignee_name: str
    consignee_contact: Optional[str]
    consignee_address: Optional[str]
    origin: str
    destination: str
    destination_pincode: str
    article_count: int
    parcel_type: str
    weight: float
    description: Optional[str]
    base_rate: Decimal
    per_article_rate: Decimal
    parcel_type_charge: Decimal
    zone_charge: Decimal
    total_amount: Decimal
    gst_amount: Decimal
    grand_total: Decimal
    status: BookingStatus
    assigned_vehicle_id: Optional[int]
    assigned_driver_id: Optional[int]
    dispatched_at: Optional[datetime]
    delivered_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CompanySummary(BaseModel):
    id: int
    name: str
    phone: Optional[str]
    email: Optional[str]

    class Config:
        from_attributes = True


class VehicleSummary(BaseModel):
    id: int
    registration_number: str
    vehicle_type: Optional[str]
    capacity: Optional[int]

    class Config:
        from_attributes = True


class BookingListItem(BookingResponse):
    """Booking with its company, vehicle and driver embedded."""
    company: Optional[CompanySummary] = None
    vehicle: Optional[VehicleSummary] = None
    driver: Optional[DriverSummary] = None


class BookingBatchResponse(BaseModel):
    """Schema for a created batch."""
    bookings: List[BookingResponse]
    count: int
    company_id: int
