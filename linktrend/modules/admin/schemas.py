from pydantic import BaseModel
from uuid import UUID
from datetime import datetime
from typing import Optional, Dict, Any

class AdminStats(BaseModel):
    total_users: int
    total_videos: int
    premium_videos: int
    pending_transactions: int
    approved_transactions: int
    revenue_total: float

class AuditLogRead(BaseModel):
    id: UUID
    user_id: Optional[UUID]
    action: str
    target_type: Optional[str]
    target_id: Optional[str]
    created_at: datetime
    metadata_json: Optional[Dict[str, Any]]

    class Config:
        from_attributes = True
