"""
Status enumerations for bookings, vehicles and consignees.
"""

import enum


class BookingStatus(str, enum.Enum):
    """
    Booking status enumeration.

    Status flow:
        BOOKED → IN-TRANSIT → DELIVERED
    DELIVERED is terminal; nothing moves backwards.
    """
    BOOKED = "BOOKED"
    IN_TRANSIT = "IN-TRANSIT"
    DELIVERED = "DELIVERED"


class VehicleStatus(str, enum.Enum):
    """Stored vehicle status. Listings may display a reconciled value."""
    AVAILABLE = "Available"
    ASSIGNED = "Assigned"
    DISPATCHED = "Dispatched"


class ConsigneeStatus(str, enum.Enum):
    """
    Consignee approval status.

    Status flow:
        PENDING → APPROVED | REJECTED
    LEGACY marks rows created before approvals existed; they are bookable.
    """
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    LEGACY = "LEGACY"


BOOKABLE_CONSIGNEE_STATUSES = (ConsigneeStatus.APPROVED, ConsigneeStatus.LEGACY)


def enum_values(enum_cls):
    """values_callable for SQLAlchemy Enum columns so the stored value is the enum value."""
    return [member.value for member in enum_cls]
