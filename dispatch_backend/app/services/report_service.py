"""
Booking reports.

Aggregates are computed from the selected rows in Python so the same code
runs on PostgreSQL and SQLite. Every report takes the same optional
filters; "All" for company or city means no filter.
"""

from collections import defaultdict, Counter
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from dispatch_backend.app.core.exceptions import ValidationFailedError
from dispatch_backend.app.domain.pricing.pricing_engine import to_money, ZERO
from dispatch_backend.app.models.booking import Booking
from dispatch_backend.app.models.company import Company
from dispatch_backend.app.models.enums import BookingStatus
from dispatch_backend.app.models.vehicle import Vehicle
from dispatch_backend.app.schemas.report import (
    ReportSummary,
    RevenuePoint,
    CompanyRevenue,
    ParcelTypeShare,
    VehicleDispatchCount
)

DISPATCHED_STATUSES = (BookingStatus.IN_TRANSIT, BookingStatus.DELIVERED)
TREND_MONTHS = 6
TOP_VEHICLES = 10
ALL = "All"
UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_VEHICLE = "Unknown Vehicle"


def parse_company_filter(company_id: Union[int, str, None]) -> Optional[int]:
    """companyId query value to an id; empty or "All" means every company."""
    if company_id is None or company_id == "" or company_id == ALL:
        return None
    try:
        return int(company_id)
    except (TypeError, ValueError):
        raise ValidationFailedError(
            f"Invalid companyId {company_id}",
            details={"allowed": "a company id or All"}
        )


def apply_filters(
    query,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    company_id: Union[int, str, None] = None,
    city: Optional[str] = None
):
    """Restrict a bookings query by booking date range, company and exact destination."""
    if date_from:
        query = query.where(Booking.booking_date >= date_from)
    if date_to:
        query = query.where(Booking.booking_date <= date_to)
    company_id = parse_company_filter(company_id)
    if company_id is not None:
        query = query.where(Booking.company_id == company_id)
    if city and city != ALL:
        query = query.where(Booking.destination == city)
    return query


def _revenue(total) -> Decimal:
    # Non-positive totals are left out of revenue
    if total is None:
        return ZERO
    value = Decimal(str(total))
    return value if value > 0 else ZERO


class ReportService:

    @staticmethod
    async def summary(
        db: AsyncSession,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        company_id: Union[int, str, None] = None,
        city: Optional[str] = None
    ) -> ReportSummary:
        """
        Revenue and volume for the filtered bookings.

        Only positive grand totals count toward revenue. city must equal the
        booking destination exactly.
        """
        query = apply_filters(
            select(Booking.grand_total, Booking.status), date_from, date_to, company_id, city
        )
        rows = (await db.execute(query)).all()

        total_revenue = sum((_revenue(total) for total, _ in rows), ZERO)
        total_bookings = len(rows)
        total_dispatches = sum(1 for _, status in rows if status in DISPATCHED_STATUSES)
        average = total_revenue / total_bookings if total_bookings else ZERO

        return ReportSummary(
            total_revenue=to_money(total_revenue),
            total_bookings=total_bookings,
            total_dispatches=total_dispatches,
            avg_revenue_per_booking=to_money(average)
        )

    @staticmethod
    async def revenue_trend(
        db: AsyncSession,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        company_id: Union[int, str, None] = None,
        city: Optional[str] = None
    ) -> List[RevenuePoint]:
        """Monthly revenue for the latest six months that have bookings, oldest first."""
        query = apply_filters(
            select(Booking.booking_date, Booking.grand_total), date_from, date_to, company_id, city
        )

        monthly = defaultdict(lambda: ZERO)
        for booking_date, total in (await db.execute(query)).all():
            monthly[booking_date.strftime("%Y-%m")] += _revenue(total)

        months = sorted(monthly)[-TREND_MONTHS:]
        return [RevenuePoint(month=month, revenue=to_money(monthly[month])) for month in months]

    @staticmethod
    async def company_summary(
        db: AsyncSession,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        city: Optional[str] = None
    ) -> List[CompanyRevenue]:
        """
        Revenue per company, highest first.

        total_bookings counts only bookings with a positive grand total, so
        avg_per_booking is the average over revenue-bearing bookings.
        """
        query = apply_filters(
            select(Company.name, Booking.grand_total)
            .select_from(Booking)
            .outerjoin(Company, Company.id == Booking.company_id),
            date_from, date_to, None, city
        )

        revenue = defaultdict(lambda: ZERO)
        counted = Counter()
        for name, total in (await db.execute(query)).all():
            company = name or UNKNOWN_COMPANY
            amount = _revenue(total)
            revenue[company] += amount
            if amount > 0:
                counted[company] += 1

        rows = [
            CompanyRevenue(
                company=company,
                total_revenue=to_money(amount),
                total_bookings=counted[company],
                avg_per_booking=to_money(amount / counted[company]) if counted[company] else ZERO
            )
            for company, amount in revenue.items()
        ]
        return sorted(rows, key=lambda row: row.total_revenue, reverse=True)

    @staticmethod
    async def parcel_type_distribution(
        db: AsyncSession,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        company_id: Union[int, str, None] = None,
        city: Optional[str] = None
    ) -> List[ParcelTypeShare]:
        """Booking count and share (percent, one decimal) per parcel type, most common first."""
        query = apply_filters(select(Booking.parcel_type), date_from, date_to, company_id, city)
        counts = Counter(
            parcel_type or "Unknown" for parcel_type in (await db.execute(query)).scalars().all()
        )
        total = sum(counts.values())

        return [
            ParcelTypeShare(
                type=parcel_type,
                count=count,
                percentage=(Decimal(count * 100) / total).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            )
            for parcel_type, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        ]

    @staticmethod
    async def vehicle_dispatch(
        db: AsyncSession,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        city: Optional[str] = None
    ) -> List[VehicleDispatchCount]:
        """Bookings currently on each vehicle, top ten vehicles by count."""
        query = apply_filters(
            select(Vehicle.registration_number)
            .select_from(Booking)
            .outerjoin(Vehicle, Vehicle.id == Booking.assigned_vehicle_id)
            .where(Booking.assigned_vehicle_id.is_not(None)),
            date_from, date_to, None, city
        )
        counts = Counter(
            registration or UNKNOWN_VEHICLE for registration in (await db.execute(query)).scalars().all()
        )

        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:TOP_VEHICLES]
        return [VehicleDispatchCount(vehicle=vehicle, count=count) for vehicle, count in ranked]
