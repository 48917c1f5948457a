"""
Consignee database model.

Receiving parties registered per company. New consignees wait for admin
approval before they can be booked against.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum, Text
from sqlalchemy.sql import func
from dispatch_backend.app.db.session import Base
from dispatch_backend.app.models.enums import ConsigneeStatus, enum_values


class Consignee(Base):
    """
    Consignee model.

    consignee_number is assigned on approval and unique across all rows;
    rejection_reason is set on rejection. Rows without an explicit status
    default to LEGACY.
    """
    __tablename__ = "consignees"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership
    company_id = Column(Integer, ForeignKey('companies.id'), nullable=False, index=True)

    # Identity and address
    name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=True)
    pincode = Column(String(20), nullable=True)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)
    gst_number = Column(String(50), nullable=True)

    # Approval
    status = Column(
        Enum(ConsigneeStatus, name="consignee_status", values_callable=enum_values, native_enum=False),
        default=ConsigneeStatus.LEGACY,
        nullable=False,
        index=True
    )
    consignee_number = Column(String(50), unique=True, nullable=True, index=True)
    rejection_reason = Column(Text, nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)

    last_used = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Consignee(id={self.id}, name='{self.name}', status='{self.status.value}')>"
