# src/notifications/schemas.py
from datetime import datetime
from typing import Optional
from schemas import ApiModel


class NotificationResponse(ApiModel):
    id: int
    user_id: int
    type: str
    actor_id: int
    content_id: Optional[int] = None
    content_type: Optional[str] = None
    read: bool
    created_at: datetime
