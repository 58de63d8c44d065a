import uuid
from sqlalchemy import Column, String, DateTime, JSON, Uuid
from linktrend.core.db import Base
from linktrend.modules.auth.models import utcnow

class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=True) # Acting admin; no FK so entries survive user deletion

    action = Column(String, nullable=False) # e.g. "transaction.approve", "video.delete"
    target_type = Column(String, nullable=True) # e.g. "transaction", "video", "user"
    target_id = Column(String, nullable=True)

    metadata_json = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
