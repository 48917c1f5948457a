"""
Vehicle Pydantic schemas.

Defines request and response models for the vehicle registry and the
booking assignment workflow.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from dispatch_backend.app.models.enums import VehicleStatus
from dispatch_backend.app.schemas.common import RequestModel


class VehicleCreate(RequestModel):
    """Schema for registering a new vehicle."""
    registration_number: str = Field(..., min_length=1, max_length=50, description="Unique registration number")
    vehicle_type: Optional[str] = Field(None, max_length=100)
    capacity: Optional[int] = Field(None, gt=0, description="Capacity in articles")
    capacity_kg: Optional[float] = Field(None, gt=0, description="Capacity in kg")
    make: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = Field(None, ge=1950, le=2100)
    status: VehicleStatus = VehicleStatus.AVAILABLE
    current_driver_id: Optional[int] = Field(None, gt=0)


class VehicleUpdate(RequestModel):
    """Schema for updating an existing vehicle."""
    vehicle_type: Optional[str] = Field(None, max_length=100)
    capacity: Optional[int] = Field(None, gt=0)
    capacity_kg: Optional[float] = Field(None, gt=0)
    make: Optional[str] = Field(None, max_length=100)
    model: Optional[str] = Field(None, max_length=100)
    year: Optional[int] = Field(None, ge=1950, le=2100)
    status: Optional[VehicleStatus] = None
    current_driver_id: Optional[int] = Field(None, gt=0)


class DriverSummary(BaseModel):
    id: int
    name: str
    phone: Optional[str]

    class Config:
        from_attributes = True


class VehicleResponse(BaseModel):
    """Schema for vehicle response."""
    id: int
    registration_number: str
    vehicle_type: Optional[str]
    capacity: Optional[int]
    capacity_kg: Optional[float]
    make: Optional[str]
    model: Optional[str]
    year: Optional[int]
    status: VehicleStatus
    current_driver_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class VehicleListItem(VehicleResponse):
    """Vehicle with its live load; status is the reconciled display value."""
    stored_status: VehicleStatus
    assigned_parcels: int
    driver: Optional[DriverSummary] = None


class AssignBookingsRequest(RequestModel):
    """Schema for assigning bookings to a vehicle."""
    booking_ids: List[int] = Field(..., min_length=1)


class SkippedBooking(BaseModel):
    booking_id: int
    reason: str


class AssignmentResult(BaseModel):
    """Outcome of an assignment run. Callers must inspect assigned_count."""
    vehicle_id: int
    assigned_count: int
    assigned_booking_ids: List[int]
    skipped: List[SkippedBooking]
    vehicle_status: VehicleStatus
