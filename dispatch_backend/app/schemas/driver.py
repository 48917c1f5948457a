"""
Driver Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from dispatch_backend.app.schemas.common import RequestModel


class DriverCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    license_number: Optional[str] = Field(None, max_length=100)
    license_type: str = Field("HMV", max_length=20)
    status: str = Field("Active", max_length=50)
    current_status: str = Field("Available", max_length=50)


class DriverUpdate(RequestModel):
    assigned_vehicle_id: Optional[int] = Field(None, gt=0)
    status: Optional[str] = Field(None, max_length=50)
    current_status: Optional[str] = Field(None, max_length=50)


class DriverResponse(BaseModel):
    id: int
    name: str
    phone: Optional[str]
    license_number: Optional[str]
    license_type: str
    status: str
    current_status: str
    assigned_vehicle_id: Optional[int]
    created_at: datetime

    class Config:
        from_attributes = True
