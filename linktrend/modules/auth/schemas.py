from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, model_validator
from uuid import UUID

class LoginRequest(BaseModel):
    # Either a Google ID token, or the admin username/password pair
    credential: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def check_one_method(self):
        if self.credential:
            return self
        if self.username is not None or self.password is not None:
            if not self.username or not self.password:
                raise ValueError("Username and password are required")
            return self
        raise ValueError("Google credential is required")

    @property
    def is_admin_login(self) -> bool:
        return not self.credential

class UserUpdate(BaseModel):
    name: Optional[str] = None
    avatar_url: Optional[str] = None

class UserRead(BaseModel):
    id: UUID
    name: str
    email: str
    avatar_url: Optional[str] = None
    unlocked_videos: List[UUID] = []
    is_admin: bool = False
    created_at: datetime

    class Config:
        from_attributes = True
