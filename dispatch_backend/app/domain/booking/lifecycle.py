"""
Booking Lifecycle State Machine.

    BOOKED ──(assignment)──> IN-TRANSIT ──(mark delivered)──> DELIVERED

DELIVERED is terminal and nothing moves backwards. These are the only
functions that write Booking.status and Booking.assigned_vehicle_id, so the
vehicle link is set on dispatch and cleared on delivery.
"""

from datetime import datetime, timezone
from typing import Optional

from dispatch_backend.app.core.exceptions import InvalidStatusTransitionError
from dispatch_backend.app.models.booking import Booking
from dispatch_backend.app.models.enums import BookingStatus


ALLOWED_TRANSITIONS = {
    BookingStatus.BOOKED: frozenset({BookingStatus.IN_TRANSIT}),
    BookingStatus.IN_TRANSIT: frozenset({BookingStatus.DELIVERED}),
    BookingStatus.DELIVERED: frozenset(),
}


class BookingLifecycle:

    @staticmethod
    def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
        return target in ALLOWED_TRANSITIONS.get(current, frozenset())

    @staticmethod
    def ensure_transition(current: BookingStatus, target: BookingStatus) -> None:
        """Raise InvalidStatusTransitionError unless current → target is allowed."""
        if not BookingLifecycle.can_transition(current, target):
            raise InvalidStatusTransitionError(current.value, target.value)

    @staticmethod
    def is_assignable(booking: Booking) -> bool:
        """A booking can be put on a vehicle only while BOOKED and unassigned."""
        return booking.status == BookingStatus.BOOKED and booking.assigned_vehicle_id is None

    @staticmethod
    def assignment_block_reason(booking: Optional[Booking]) -> Optional[str]:
        """Why a booking cannot be assigned, or None if it can."""
        if booking is None:
            return "Booking not found"
        if booking.status != BookingStatus.BOOKED:
            return f"Booking is {booking.status.value}, expected BOOKED"
        if booking.assigned_vehicle_id is not None:
            return f"Booking is already assigned to vehicle {booking.assigned_vehicle_id}"
        return None

    @staticmethod
    def dispatch(booking: Booking, vehicle_id: int, driver_id: Optional[int] = None) -> None:
        """
        BOOKED → IN-TRANSIT on the given vehicle.

        A driver already on the booking is kept unless driver_id replaces it.
        """
        BookingLifecycle.ensure_transition(booking.status, BookingStatus.IN_TRANSIT)
        if booking.assigned_vehicle_id is not None:
            raise InvalidStatusTransitionError(booking.status.value, BookingStatus.IN_TRANSIT.value)

        booking.status = BookingStatus.IN_TRANSIT
        booking.assigned_vehicle_id = vehicle_id
        if driver_id is not None:
            booking.assigned_driver_id = driver_id
        booking.dispatched_at = datetime.now(timezone.utc)

    @staticmethod
    def deliver(booking: Booking) -> Optional[int]:
        """
        IN-TRANSIT → DELIVERED.

        Returns:
            The vehicle the booking was travelling on (now released).
        """
        BookingLifecycle.ensure_transition(booking.status, BookingStatus.DELIVERED)

        vehicle_id = booking.assigned_vehicle_id
        booking.status = BookingStatus.DELIVERED
        booking.assigned_vehicle_id = None
        booking.delivered_at = datetime.now(timezone.utc)
        return vehicle_id
