"""
Audit logging service for tracking booking, dispatch and approval actions.

Entries are added to the caller's unit of work so they commit (or roll
back) together with the change they describe.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from dispatch_backend.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    COMPANY_CREATED = "COMPANY_CREATED"

    # Rate cards
    RATE_CARD_CREATED = "RATE_CARD_CREATED"
    RATE_CARD_UPDATED = "RATE_CARD_UPDATED"

    # Bookings
    BOOKING_CREATED = "BOOKING_CREATED"
    BOOKING_BATCH_CREATED = "BOOKING_BATCH_CREATED"
    BOOKING_DRIVER_CHANGED = "BOOKING_DRIVER_CHANGED"
    BOOKING_DELIVERED = "BOOKING_DELIVERED"

    # Fleet
    VEHICLE_CREATED = "VEHICLE_CREATED"
    VEHICLE_UPDATED = "VEHICLE_UPDATED"
    VEHICLE_STATUS_CHANGED = "VEHICLE_STATUS_CHANGED"
    BOOKINGS_ASSIGNED = "BOOKINGS_ASSIGNED"
    DRIVER_CREATED = "DRIVER_CREATED"
    DRIVER_UPDATED = "DRIVER_UPDATED"

    # Consignees
    CONSIGNEE_CREATED = "CONSIGNEE_CREATED"
    CONSIGNEE_UPDATED = "CONSIGNEE_UPDATED"
    CONSIGNEE_DELETED = "CONSIGNEE_DELETED"
    CONSIGNEE_APPROVED = "CONSIGNEE_APPROVED"
    CONSIGNEE_REJECTED = "CONSIGNEE_REJECTED"


def log_event(
    db: AsyncSession,
    action: str,
    entity_type: str,
    entity_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None,
    actor: Optional[str] = None
) -> AuditLog:
    """
    Record an audit event in the current session.

    Args:
        db: Database session (caller commits)
        action: Action being performed (use AuditAction constants)
        entity_type: Kind of record affected, e.g. "booking"
        entity_id: ID of the record affected
        metadata: Additional JSON-serializable context
        actor: Who triggered the action, if known

    Returns:
        Pending AuditLog instance
    """
    audit_log = AuditLog(
        actor=actor,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        meta_data=metadata
    )

    db.add(audit_log)
    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    entity_type: Optional[str] = None,
    entity_id: Optional[int] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering, most recent first.
    """
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if entity_type:
        query = query.where(AuditLog.entity_type == entity_type)

    if entity_id is not None:
        query = query.where(AuditLog.entity_id == entity_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.limit(limit)

    result = await db.execute(query)
    return result.scalars().all()
