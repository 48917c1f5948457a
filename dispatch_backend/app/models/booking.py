"""
Booking database model.

A parcel booking identified by its LR number. Pricing columns are a
snapshot taken at creation and never recomputed.
"""

from sqlalchemy import Column, Integer, String, Float, Numeric, Date, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from dispatch_backend.app.db.session import Base
from dispatch_backend.app.models.enums import BookingStatus, enum_values


class Booking(Base):
    """
    Booking model.

    status and assigned_vehicle_id are only written by BookingLifecycle.
    Consignee details are denormalized; consignee_id records provenance only.
    """
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Identification
    lr_number = Column(String(100), unique=True, nullable=False, index=True)
    booking_date = Column(Date, nullable=False, index=True)

    # Ownership
    company_id = Column(Integer, ForeignKey('companies.id'), nullable=False, index=True)
    consignee_id = Column(Integer, ForeignKey('consignees.id', ondelete='SET NULL'), nullable=True)

    # Consignee (denormalized)
    consignee_name = Column(String(255), nullable=False)
    consignee_contact = Column(String(50), nullable=True)
    consignee_address = Column(String(500), nullable=True)

    # Route
    origin = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False, index=True)
    destination_pincode = Column(String(20), nullable=False)

    # Parcel
    article_count = Column(Integer, nullable=False)
    parcel_type = Column(String(50), nullable=False)
    weight = Column(Float, nullable=False)
    description = Column(String(500), nullable=True)

    # Pricing snapshot
    base_rate = Column(Numeric(10, 2), nullable=False, default=0)
    per_article_rate = Column(Numeric(10, 2), nullable=False)
    parcel_type_charge = Column(Numeric(10, 2), nullable=False, default=0)
    zone_charge = Column(Numeric(10, 2), nullable=False, default=0)
    total_amount = Column(Numeric(10, 2), nullable=False)
    gst_amount = Column(Numeric(10, 2), nullable=False, default=0)
    grand_total = Column(Numeric(10, 2), nullable=False)

    # Lifecycle
    status = Column(
        Enum(BookingStatus, name="booking_status", values_callable=enum_values, native_enum=False),
        default=BookingStatus.BOOKED,
        nullable=False,
        index=True
    )
    assigned_vehicle_id = Column(Integer, ForeignKey('vehicles.id'), nullable=True, index=True)
    assigned_driver_id = Column(Integer, ForeignKey('drivers.id'), nullable=True, index=True)
    dispatched_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Booking(id={self.id}, lr='{self.lr_number}', status='{self.status.value}')>"
