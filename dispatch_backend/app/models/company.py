"""
Company database model.

Companies register with the back office and submit parcel bookings.
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from dispatch_backend.app.db.session import Base


class Company(Base):
    """
    Company model.

    Owns consignees, bookings and a history of rate cards (one active).
    """
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    name = Column(String(255), nullable=False, index=True)
    contact_person = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    company_type = Column(String(50), default="Corporate", nullable=False)
    status = Column(String(50), default="Active", nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}', status='{self.status}')>"
