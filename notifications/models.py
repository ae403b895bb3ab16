# src/notifications/models.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Boolean
from database import Base
from datetime import datetime
from typing import Optional


class Notification(Base):
    """A persisted record of a like, comment or follow, addressed to its target's owner."""
    __tablename__ = "notifications"

    id: int = Column(Integer, primary_key=True, index=True)
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type: str = Column(String, nullable=False)  # like, comment, follow
    actor_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)
    content_id: Optional[int] = Column(Integer, nullable=True)
    content_type: Optional[str] = Column(String, nullable=True)  # post, video, user
    read: bool = Column(Boolean, nullable=False, default=False)
    created_at: datetime = Column(DateTime, default=datetime.utcnow)
