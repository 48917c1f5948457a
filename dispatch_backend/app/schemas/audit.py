"""
Audit log Pydantic schemas.
"""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Dict, Any


class AuditLogResponse(BaseModel):
    """Schema for audit log entry."""
    id: int
    actor: Optional[str]
    action: str
    entity_type: str
    entity_id: Optional[int]
    meta_data: Optional[Dict[str, Any]]
    timestamp: datetime

    class Config:
        from_attributes = True
