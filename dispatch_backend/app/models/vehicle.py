"""
Vehicle database model.

Admins register vehicles; bookings are assigned to them for dispatch.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from dispatch_backend.app.db.session import Base
from dispatch_backend.app.models.enums import VehicleStatus, enum_values


class Vehicle(Base):
    """
    Vehicle model.

    The stored status is written by the assignment workflow and on delivery;
    listings reconcile it against live IN-TRANSIT counts.
    """
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Vehicle identification
    registration_number = Column(String(50), unique=True, nullable=False, index=True)
    vehicle_type = Column(String(100), nullable=True)  # e.g., "Truck", "Tempo"
    make = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    year = Column(Integer, nullable=True)

    # Capacity
    capacity = Column(Integer, nullable=True)  # articles
    capacity_kg = Column(Float, nullable=True)

    # Status
    status = Column(
        Enum(VehicleStatus, name="vehicle_status", values_callable=enum_values, native_enum=False),
        default=VehicleStatus.AVAILABLE,
        nullable=False,
        index=True
    )
    current_driver_id = Column(Integer, ForeignKey('drivers.id'), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Vehicle(id={self.id}, number='{self.registration_number}', status='{self.status.value}')>"
