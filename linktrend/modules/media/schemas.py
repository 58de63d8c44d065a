from typing import Optional
from pydantic import BaseModel

class UploadResponse(BaseModel):
    success: bool = True
    url: str
    file_name: str
    duration: Optional[str] = None # Only for videos, MM:SS
