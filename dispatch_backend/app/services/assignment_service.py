"""
Vehicle Assignment Workflow.

Puts a set of BOOKED bookings on a vehicle in one transaction. Ineligible
or unknown bookings are reported as skipped and left untouched, so running
the same assignment twice changes nothing the second time.
"""

import logging
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from dispatch_backend.app.core.exceptions import ValidationFailedError
from dispatch_backend.app.db.session import commit_or_raise, flush_or_raise
from dispatch_backend.app.domain.booking.lifecycle import BookingLifecycle
from dispatch_backend.app.models.booking import Booking
from dispatch_backend.app.models.enums import VehicleStatus
from dispatch_backend.app.schemas.vehicle import AssignmentResult, SkippedBooking
from dispatch_backend.app.services.audit import log_event, AuditAction
from dispatch_backend.app.services.vehicle_service import VehicleService

logger = logging.getLogger(__name__)


class AssignmentService:

    @staticmethod
    async def assign_bookings_to_vehicle(
        db: AsyncSession,
        vehicle_id: int,
        booking_ids: List[int],
        driver_id: Optional[int] = None
    ) -> AssignmentResult:
        """
        Assign bookings to a vehicle.

        Args:
            db: Database session
            vehicle_id: Target vehicle
            booking_ids: Bookings to put on the vehicle (duplicates ignored)
            driver_id: Driver override. Without it a booking keeps its own driver,
                or gets the vehicle's current driver if it has none

        Returns:
            AssignmentResult with the assigned and skipped bookings

        Raises:
            ResourceNotFoundError: Vehicle does not exist
            ValidationFailedError: No booking ids given
        """
        if not booking_ids:
            raise ValidationFailedError("At least one booking id is required")

        vehicle = await VehicleService.get_vehicle(db, vehicle_id)
        unique_ids = list(dict.fromkeys(booking_ids))

        result = await db.execute(
            select(Booking).where(Booking.id.in_(unique_ids)).with_for_update()
        )
        bookings: Dict[int, Booking] = {booking.id: booking for booking in result.scalars().all()}

        assigned: List[int] = []
        skipped: List[SkippedBooking] = []
        for booking_id in unique_ids:
            booking = bookings.get(booking_id)
            reason = BookingLifecycle.assignment_block_reason(booking)
            if reason is not None:
                skipped.append(SkippedBooking(booking_id=booking_id, reason=reason))
                continue

            BookingLifecycle.dispatch(
                booking, vehicle.id, driver_id or booking.assigned_driver_id or vehicle.current_driver_id
            )
            assigned.append(booking_id)

        if assigned:
            old_status = vehicle.status
            vehicle.status = VehicleStatus.ASSIGNED
            await flush_or_raise(db, "assign bookings")

            log_event(
                db,
                AuditAction.BOOKINGS_ASSIGNED,
                "vehicle",
                vehicle.id,
                {
                    "booking_ids": assigned,
                    "driver_id": driver_id or vehicle.current_driver_id,
                    "old_status": old_status.value,
                    "skipped": [item.booking_id for item in skipped]
                }
            )
            await commit_or_raise(db, "assign bookings")
            logger.info(
                "assigned %d booking(s) to vehicle %s, skipped %d",
                len(assigned), vehicle.id, len(skipped)
            )
        else:
            logger.warning("no bookings assigned to vehicle %s, skipped %d", vehicle.id, len(skipped))

        return AssignmentResult(
            vehicle_id=vehicle.id,
            assigned_count=len(assigned),
            assigned_booking_ids=assigned,
            skipped=skipped,
            vehicle_status=vehicle.status
        )
