"""
Rate Card Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, Dict
from dispatch_backend.app.schemas.common import RequestModel


class RateCardCreate(RequestModel):
    """Schema for creating a rate card (replaces the company's active card)."""
    company_id: int = Field(..., gt=0)
    per_article_rate: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    base_rate: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    parcel_type_charges: Optional[Dict[str, float]] = None
    effective_from: Optional[date] = None


class RateCardUpdate(RequestModel):
    """Schema for updating rate card values."""
    per_article_rate: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    base_rate: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    parcel_type_charges: Optional[Dict[str, float]] = None
    effective_from: Optional[date] = None


class RateCardResponse(BaseModel):
    """Schema for displaying a rate card."""
    id: int
    company_id: int
    per_article_rate: Decimal
    base_rate: Decimal
    parcel_type_charges: Optional[Dict[str, float]]
    effective_from: date
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
