import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from linktrend.core.db import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    avatar_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    unlocks = relationship(
        "UnlockedVideo",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def unlocked_videos(self) -> list[uuid.UUID]:
        return [unlock.video_id for unlock in self.unlocks]

    def has_unlocked(self, video_id: uuid.UUID) -> bool:
        return any(unlock.video_id == video_id for unlock in self.unlocks)

    def unlock(self, video_id: uuid.UUID) -> bool:
        """Adds video_id to the unlocked set. Returns False if it was already there."""
        if self.has_unlocked(video_id):
            return False
        self.unlocks.append(UnlockedVideo(video_id=video_id))
        return True

    @property
    def is_admin(self) -> bool:
        from linktrend.core.access import is_admin
        return is_admin(self)


class UnlockedVideo(Base):
    __tablename__ = "user_unlocked_videos"
    __table_args__ = (UniqueConstraint("user_id", "video_id", name="uq_user_unlocked_video"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    video_id = Column(Uuid, nullable=False) # No FK: unlocks outlive deleted videos
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="unlocks")


class Session(Base):
    __tablename__ = "sessions"

    token = Column(String, primary_key=True)
    user_id = Column(Uuid, nullable=False, index=True)
    email = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
