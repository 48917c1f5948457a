"""
Driver database model.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from dispatch_backend.app.db.session import Base


class Driver(Base):
    """Driver model. A vehicle's current driver is copied onto bookings at assignment."""
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    license_number = Column(String(100), nullable=True)
    license_type = Column(String(20), default="HMV", nullable=False)

    status = Column(String(50), default="Active", nullable=False)  # employment status
    current_status = Column(String(50), default="Available", nullable=False)  # duty status
    assigned_vehicle_id = Column(Integer, index=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Driver(id={self.id}, name='{self.name}', status='{self.current_status}')>"
