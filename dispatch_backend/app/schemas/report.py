"""
Report Pydantic schemas.
"""

from pydantic import BaseModel
from decimal import Decimal


class ReportSummary(BaseModel):
    total_revenue: Decimal
    total_bookings: int
    total_dispatches: int
    avg_revenue_per_booking: Decimal


class RevenuePoint(BaseModel):
    month: str
    revenue: Decimal


class CompanyRevenue(BaseModel):
    company: str
    total_revenue: Decimal
    total_bookings: int
    avg_per_booking: Decimal


class ParcelTypeShare(BaseModel):
    type: str
    count: int
    percentage: Decimal


class VehicleDispatchCount(BaseModel):
    vehicle: str
    count: int
