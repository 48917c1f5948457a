"""
Audit log API Endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from dispatch_backend.app.db.session import get_db
from dispatch_backend.app.schemas.audit import AuditLogResponse
from dispatch_backend.app.schemas.common import APIResponse
from dispatch_backend.app.services.audit import get_audit_trail

router = APIRouter(prefix="/audit-logs", tags=["Audit"])


@router.get("", response_model=APIResponse[List[AuditLogResponse]])
async def list_audit_logs(
    entity_type: Optional[str] = Query(None, alias="entityType", description="e.g. booking, vehicle"),
    entity_id: Optional[int] = Query(None, alias="entityId"),
    action: Optional[str] = Query(None, description="AuditAction value"),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db)
):
    """Audit trail, most recent first."""
    logs = await get_audit_trail(db, entity_type=entity_type, entity_id=entity_id, action=action, limit=limit)
    return APIResponse(
        data=[AuditLogResponse.model_validate(log) for log in logs],
        count=len(logs)
    )
