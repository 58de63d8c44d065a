from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID

class VideoCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str
    price: int = Field(0, ge=0)
    creator: str = Field(..., min_length=1)
    creator_id: str = Field(..., min_length=1)
    thumbnail_url: str = Field(..., min_length=1)
    video_url: str = Field(..., min_length=1)
    duration: str = Field("00:00", pattern=r"^\d{2,}:\d{2}$")
    upload_date: Optional[str] = None # Defaults to today's date label

class VideoRead(BaseModel):
    id: UUID
    title: str
    description: str
    price: int
    is_premium: bool
    creator: str
    creator_id: str
    thumbnail_url: str
    video_url: str
    views: int
    duration: str
    upload_date: str
    created_at: datetime

    class Config:
        from_attributes = True

class VideoAccess(BaseModel):
    video_id: UUID
    is_premium: bool
    access: bool
