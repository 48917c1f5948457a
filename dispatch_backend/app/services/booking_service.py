"""
Booking service.

Creates priced bookings (singly or as a batch under one LR prefix), lists
and filters them, and routes status changes through the booking lifecycle.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from dispatch_backend.app.core.config import settings
from dispatch_backend.app.core.exceptions import (
    ConflictError,
    InvalidStatusTransitionError,
    ResourceNotFoundError,
    ValidationFailedError,
)
from dispatch_backend.app.db.session import commit_or_raise, flush_or_raise
from dispatch_backend.app.domain.booking.lifecycle import BookingLifecycle
from dispatch_backend.app.domain.booking.lr_numbers import generate_lr_number, batch_lr_number
from dispatch_backend.app.domain.pricing.pricing_engine import compute_price, PriceBreakdown
from dispatch_backend.app.domain.pricing.rate_resolver import RateResolver
from dispatch_backend.app.models.booking import Booking
from dispatch_backend.app.models.company import Company
from dispatch_backend.app.models.consignee import Consignee
from dispatch_backend.app.models.driver import Driver
from dispatch_backend.app.models.enums import BookingStatus, BOOKABLE_CONSIGNEE_STATUSES
from dispatch_backend.app.models.vehicle import Vehicle
from dispatch_backend.app.schemas.booking import (
    BookingCreate,
    BookingBatchCreate,
    BookingUpdate,
    BookingListItem,
    CompanySummary,
    ParcelDetails,
    VehicleSummary
)
from dispatch_backend.app.schemas.vehicle import DriverSummary
from dispatch_backend.app.services.assignment_service import AssignmentService
from dispatch_backend.app.services.audit import log_event, AuditAction
from dispatch_backend.app.services.company_service import CompanyService
from dispatch_backend.app.services.driver_service import DriverService
from dispatch_backend.app.services.vehicle_service import VehicleService

logger = logging.getLogger(__name__)


class BookingService:

    @staticmethod
    async def create_booking(db: AsyncSession, data: BookingCreate) -> Booking:
        """
        Create a single priced booking in BOOKED status.

        Raises:
            ResourceNotFoundError: Company or consignee does not exist
            ConflictError: Consignee not bookable, or LR number already taken
        """
        await CompanyService.get_company(db, data.company_id)
        consignee = await BookingService._bookable_consignee(db, data.company_id, data.consignee_id)

        rate_card = await RateResolver.resolve_rate(db, data.company_id)
        price = compute_price(data.article_count, rate_card)
        lr_number = generate_lr_number()

        booking = BookingService._build_booking(data.company_id, lr_number, data, price, consignee)
        db.add(booking)

        try:
            await flush_or_raise(db, "create booking")
            log_event(
                db,
                AuditAction.BOOKING_CREATED,
                "booking",
                booking.id,
                {
                    "lr_number": lr_number,
                    "company_id": data.company_id,
                    "article_count": data.article_count,
                    "grand_total": str(price.grand_total),
                    "rate_card_id": rate_card.id if rate_card else None
                }
            )
            await commit_or_raise(db, "create booking")
        except IntegrityError as exc:
            raise ConflictError(
                f"LR number {lr_number} already exists",
                details={"lr_number": lr_number}
            ) from exc

        await db.refresh(booking)
        logger.info(
            "booking created lr=%s company_id=%s articles=%s grand_total=%s",
            booking.lr_number, booking.company_id, booking.article_count, booking.grand_total
        )
        return booking

    @staticmethod
    async def create_batch(db: AsyncSession, data: BookingBatchCreate) -> List[Booking]:
        """
        Create one booking per parcel under a shared LR prefix.

        The rate is resolved once for the whole batch. All bookings are
        written in one transaction: either every parcel is booked or none.
        """
        await CompanyService.get_company(db, data.company_id)

        prefix = data.lr_number or generate_lr_number()
        rate_card = await RateResolver.resolve_rate(db, data.company_id)

        bookings = []
        for index, parcel in enumerate(data.parcels):
            consignee = await BookingService._bookable_consignee(db, data.company_id, parcel.consignee_id)
            price = compute_price(parcel.article_count, rate_card)
            bookings.append(
                BookingService._build_booking(
                    data.company_id, batch_lr_number(prefix, index), parcel, price, consignee
                )
            )

        db.add_all(bookings)

        try:
            await flush_or_raise(db, "create booking batch")
            log_event(
                db,
                AuditAction.BOOKING_BATCH_CREATED,
                "booking",
                None,
                {
                    "lr_prefix": prefix,
                    "company_id": data.company_id,
                    "booking_ids": [booking.id for booking in bookings],
                    "rate_card_id": rate_card.id if rate_card else None
                }
            )
            await commit_or_raise(db, "create booking batch")
        except IntegrityError as exc:
            raise ConflictError(
                f"LR numbers with prefix {prefix} already exist",
                details={"lr_number": prefix}
            ) from exc

        for booking in bookings:
            await db.refresh(booking)

        logger.info("batch %s created: %d booking(s) for company_id=%s", prefix, len(bookings), data.company_id)
        return bookings

    @staticmethod
    async def list_bookings(
        db: AsyncSession,
        company_id: Optional[int] = None,
        company: Optional[str] = None,
        status: Optional[str] = None,
        lr_number: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: Optional[int] = None
    ) -> List[BookingListItem]:
        """
        List bookings, newest first, with company, vehicle and driver summaries.

        status "All" (or empty) means no status filter, and so does company
        "All". company matches the company name exactly; lr_number matches
        as a case-insensitive substring.
        """
        query = (
            select(Booking, Company, Vehicle, Driver)
            .outerjoin(Company, Booking.company_id == Company.id)
            .outerjoin(Vehicle, Booking.assigned_vehicle_id == Vehicle.id)
            .outerjoin(Driver, Booking.assigned_driver_id == Driver.id)
        )

        if company_id is not None:
            query = query.where(Booking.company_id == company_id)
        if company and company != "All":
            query = query.where(Company.name == company)
        if status and status != "All":
            try:
                status_filter = BookingStatus(status)
            except ValueError:
                raise ValidationFailedError(
                    f"Unknown booking status {status}",
                    details={"allowed": ["All"] + [s.value for s in BookingStatus]}
                )
            query = query.where(Booking.status == status_filter)
        if lr_number:
            query = query.where(Booking.lr_number.ilike(f"%{lr_number}%"))
        if date_from:
            query = query.where(Booking.booking_date >= date_from)
        if date_to:
            query = query.where(Booking.booking_date <= date_to)

        query = query.order_by(Booking.booking_date.desc(), Booking.id.desc())
        if limit:
            query = query.limit(limit)

        result = await db.execute(query)
        return [
            BookingListItem.model_validate({
                **BookingService._columns(booking),
                "company": CompanySummary.model_validate(owner) if owner else None,
                "vehicle": VehicleSummary.model_validate(vehicle) if vehicle else None,
                "driver": DriverSummary.model_validate(driver) if driver else None,
            })
            for booking, owner, vehicle, driver in result.all()
        ]

    @staticmethod
    async def get_booking(db: AsyncSession, booking_id: int) -> Booking:
        booking = await db.get(Booking, booking_id)
        if booking is None:
            raise ResourceNotFoundError("Booking", booking_id)
        return booking

    @staticmethod
    async def list_assignable(db: AsyncSession) -> List[Booking]:
        """BOOKED bookings not yet on a vehicle."""
        result = await db.execute(
            select(Booking)
            .where(
                Booking.status == BookingStatus.BOOKED,
                Booking.assigned_vehicle_id.is_(None)
            )
            .order_by(Booking.booking_date.desc(), Booking.id.desc())
        )
        return result.scalars().all()

    @staticmethod
    async def mark_delivered(db: AsyncSession, booking_id: int) -> Booking:
        """
        IN-TRANSIT → DELIVERED.

        The vehicle is released (set Available) when this was its last
        booking in transit.

        Raises:
            ResourceNotFoundError: Booking does not exist
            InvalidStatusTransitionError: Booking is not IN-TRANSIT
        """
        booking = await BookingService.get_booking(db, booking_id)
        vehicle_id = BookingLifecycle.deliver(booking)
        await flush_or_raise(db, "mark booking delivered")

        vehicle_status = await VehicleService.release_if_empty(db, vehicle_id)

        log_event(
            db,
            AuditAction.BOOKING_DELIVERED,
            "booking",
            booking.id,
            {
                "lr_number": booking.lr_number,
                "vehicle_id": vehicle_id,
                "vehicle_released": vehicle_status is not None
            }
        )
        await commit_or_raise(db, "mark booking delivered")
        await db.refresh(booking)

        logger.info("booking %s delivered (vehicle %s)", booking.lr_number, vehicle_id)
        return booking

    @staticmethod
    async def update_booking(db: AsyncSession, booking_id: int, data: BookingUpdate) -> Booking:
        """
        Apply a status / assignment change through the lifecycle.

        IN-TRANSIT requires a vehicle and runs the assignment workflow for
        this booking; DELIVERED runs mark_delivered. A driver-only change is
        allowed until the booking is delivered.
        """
        booking = await BookingService.get_booking(db, booking_id)
        if data.assigned_driver_id is not None:
            await DriverService.get_driver(db, data.assigned_driver_id)

        target = data.status
        if target is None and data.assigned_vehicle_id is not None:
            target = BookingStatus.IN_TRANSIT

        if target == BookingStatus.IN_TRANSIT and booking.status != BookingStatus.IN_TRANSIT:
            BookingLifecycle.ensure_transition(booking.status, target)
            if data.assigned_vehicle_id is None:
                raise ValidationFailedError(
                    "assignedVehicleId is required to move a booking IN-TRANSIT",
                    details={"booking_id": booking_id}
                )
            outcome = await AssignmentService.assign_bookings_to_vehicle(
                db, data.assigned_vehicle_id, [booking_id], driver_id=data.assigned_driver_id
            )
            if outcome.assigned_count == 0:
                raise ConflictError(
                    outcome.skipped[0].reason,
                    details={"booking_id": booking_id, "vehicle_id": data.assigned_vehicle_id}
                )
            await db.refresh(booking)
            return booking

        if target == BookingStatus.DELIVERED and booking.status != BookingStatus.DELIVERED:
            if data.assigned_vehicle_id is not None:
                raise ValidationFailedError(
                    "A vehicle cannot be assigned while marking a booking delivered",
                    details={"booking_id": booking_id}
                )
            return await BookingService.mark_delivered(db, booking_id)

        if target is not None and target != booking.status:
            raise InvalidStatusTransitionError(booking.status.value, target.value)

        if data.assigned_vehicle_id is not None and data.assigned_vehicle_id != booking.assigned_vehicle_id:
            raise ConflictError(
                "Booking is already on a vehicle; deliver it before reassigning",
                details={"booking_id": booking_id, "vehicle_id": booking.assigned_vehicle_id}
            )

        if data.assigned_driver_id is not None and data.assigned_driver_id != booking.assigned_driver_id:
            if booking.status == BookingStatus.DELIVERED:
                raise ConflictError(
                    "Driver cannot be changed on a delivered booking",
                    details={"booking_id": booking_id}
                )
            old_driver_id = booking.assigned_driver_id
            booking.assigned_driver_id = data.assigned_driver_id
            log_event(
                db,
                AuditAction.BOOKING_DRIVER_CHANGED,
                "booking",
                booking.id,
                {"old_driver_id": old_driver_id, "new_driver_id": data.assigned_driver_id}
            )
            await commit_or_raise(db, "update booking")
            await db.refresh(booking)

        return booking

    @staticmethod
    async def _bookable_consignee(
        db: AsyncSession,
        company_id: int,
        consignee_id: Optional[int]
    ) -> Optional[Consignee]:
        """Load the referenced consignee and stamp last_used; must be the company's and approved."""
        if consignee_id is None:
            return None

        consignee = await db.get(Consignee, consignee_id)
        if consignee is None:
            raise ResourceNotFoundError("Consignee", consignee_id)
        if consignee.company_id != company_id:
            raise ConflictError(
                "Consignee belongs to another company",
                details={"consignee_id": consignee_id, "company_id": company_id}
            )
        if consignee.status not in BOOKABLE_CONSIGNEE_STATUSES:
            raise ConflictError(
                f"Consignee is {consignee.status.value} and cannot be booked",
                details={"consignee_id": consignee_id, "status": consignee.status.value}
            )

        consignee.last_used = datetime.now(timezone.utc)
        return consignee

    @staticmethod
    def _build_booking(
        company_id: int,
        lr_number: str,
        parcel: ParcelDetails,
        price: PriceBreakdown,
        consignee: Optional[Consignee] = None
    ) -> Booking:
        parcel_type = parcel.parcel_type or settings.default_parcel_type
        weight = parcel.weight if parcel.weight is not None else parcel.article_count * settings.weight_per_article_kg

        contact = parcel.consignee_contact
        address = parcel.address
        if consignee is not None:
            contact = contact or consignee.phone
            address = address or consignee.address

        return Booking(
            lr_number=lr_number,
            booking_date=date.today(),
            company_id=company_id,
            consignee_id=consignee.id if consignee else None,
            consignee_name=parcel.consignee_name,
            consignee_contact=contact,
            consignee_address=address,
            origin=settings.default_origin,
            destination=parcel.destination,
            destination_pincode=parcel.destination_pincode or settings.default_destination_pincode,
            article_count=parcel.article_count,
            parcel_type=parcel_type,
            weight=weight,
            description=f"{parcel_type} parcel for {parcel.consignee_name}",
            status=BookingStatus.BOOKED,
            **price.as_booking_fields()
        )

    @staticmethod
    def _columns(booking: Booking) -> dict:
        return {column.name: getattr(booking, column.name) for column in Booking.__table__.columns}
