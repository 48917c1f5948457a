"""
Audit Log Database Model.

Tracks booking, dispatch and approval actions for traceability.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from dispatch_backend.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking state changes.

    Events logged:
    - BOOKING_CREATED / BOOKING_BATCH_CREATED / BOOKING_DELIVERED
    - BOOKINGS_ASSIGNED / VEHICLE_STATUS_CHANGED
    - RATE_CARD_CREATED / RATE_CARD_UPDATED
    - CONSIGNEE_APPROVED / CONSIGNEE_REJECTED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for system actions)
    actor = Column(String(100), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which record was affected
    entity_type = Column(String(50), nullable=False, index=True)
    entity_id = Column(Integer, nullable=True, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # Timestamp
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity_type}:{self.entity_id})>"
