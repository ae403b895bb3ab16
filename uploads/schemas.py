# src/uploads/schemas.py
from typing import Optional
from auth.schemas import UserResponse
from schemas import ApiModel


class UploadResponse(ApiModel):
    """Where an upload was stored; ``user`` is set for profile pictures."""
    success: bool = True
    file_url: str
    media_type: str
    user: Optional[UserResponse] = None
