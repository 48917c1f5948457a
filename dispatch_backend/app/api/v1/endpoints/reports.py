"""
Report API Endpoints.

companyId and city accept "All" as well as a concrete value.
"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.db.session import get_db
from dispatch_backend.app.schemas.common import APIResponse
from dispatch_backend.app.schemas.report import (
    ReportSummary,
    RevenuePoint,
    CompanyRevenue,
    ParcelTypeShare,
    VehicleDispatchCount
)
from dispatch_backend.app.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/summary", response_model=APIResponse[ReportSummary])
async def report_summary(
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    company_id: Optional[str] = Query(None, alias="companyId", description="Company id or All"),
    city: Optional[str] = Query(None, description="Destination city or All"),
    db: AsyncSession = Depends(get_db)
):
    """Revenue, booking and dispatch totals for the filtered bookings."""
    summary = await ReportService.summary(db, date_from, date_to, company_id, city)
    return APIResponse(data=summary)


@router.get("/revenue-trend", response_model=APIResponse[List[RevenuePoint]])
async def revenue_trend(
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    company_id: Optional[str] = Query(None, alias="companyId", description="Company id or All"),
    city: Optional[str] = Query(None, description="Destination city or All"),
    db: AsyncSession = Depends(get_db)
):
    """Monthly revenue for the latest six months with bookings."""
    points = await ReportService.revenue_trend(db, date_from, date_to, company_id, city)
    return APIResponse(data=points, count=len(points))


@router.get("/company-summary", response_model=APIResponse[List[CompanyRevenue]])
async def company_summary(
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    city: Optional[str] = Query(None, description="Destination city or All"),
    db: AsyncSession = Depends(get_db)
):
    """Revenue per company, highest first."""
    rows = await ReportService.company_summary(db, date_from, date_to, city)
    return APIResponse(data=rows, count=len(rows))


@router.get("/parcel-type-distribution", response_model=APIResponse[List[ParcelTypeShare]])
async def parcel_type_distribution(
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    company_id: Optional[str] = Query(None, alias="companyId", description="Company id or All"),
    city: Optional[str] = Query(None, description="Destination city or All"),
    db: AsyncSession = Depends(get_db)
):
    rows = await ReportService.parcel_type_distribution(db, date_from, date_to, company_id, city)
    return APIResponse(data=rows, count=len(rows))


@router.get("/vehicle-dispatch", response_model=APIResponse[List[VehicleDispatchCount]])
async def vehicle_dispatch(
    date_from: Optional[date] = Query(None, alias="dateFrom"),
    date_to: Optional[date] = Query(None, alias="dateTo"),
    city: Optional[str] = Query(None, description="Destination city or All"),
    db: AsyncSession = Depends(get_db)
):
    """Top ten vehicles by number of bookings on board."""
    rows = await ReportService.vehicle_dispatch(db, date_from, date_to, city)
    return APIResponse(data=rows, count=len(rows))
