import uuid
from sqlalchemy import Column, String, Boolean, Integer, DateTime, Text, Uuid
from linktrend.core.db import Base
from linktrend.modules.auth.models import utcnow

class Video(Base):
    __tablename__ = "videos"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Integer, default=0, nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False) # Fixed at creation: price > 0

    creator = Column(String, nullable=False) # Display name
    creator_id = Column(String, index=True, nullable=False) # User id or email

    thumbnail_url = Column(String, nullable=False)
    video_url = Column(String, nullable=False)

    views = Column(Integer, default=0, nullable=False)
    duration = Column(String, default="00:00", nullable=False) # MM:SS
    upload_date = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
