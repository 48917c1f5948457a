"""
Company Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from dispatch_backend.app.schemas.common import RequestModel


class CompanyCreate(RequestModel):
    """Schema for registering a company."""
    name: str = Field(..., min_length=1, max_length=255)
    contact_person: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    company_type: str = Field("Corporate", max_length=50)
    status: str = Field("Active", max_length=50)


class CompanyResponse(BaseModel):
    """Schema for company response."""
    id: int
    name: str
    contact_person: Optional[str]
    phone: Optional[str]
    email: Optional[str]
    company_type: str
    status: str
    created_at: datetime

    class Config:
        from_attributes = True
