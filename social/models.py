# src/social/models.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint, Index
from database import Base
from datetime import datetime


class Follow(Base):
    """A directed follower -> following edge."""
    __tablename__ = "follows"

    id: int = Column(Integer, primary_key=True, index=True)
    follower_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)
    following_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at: datetime = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="unique_follow_edge"),
        Index("idx_follows_following", "following_id"),
    )


class Like(Base):
    """A user's like on a post or a video."""
    __tablename__ = "likes"

    id: int = Column(Integer, primary_key=True, index=True)
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)
    content_id: int = Column(Integer, nullable=False)
    content_type: str = Column(String, nullable=False)  # post, video
    created_at: datetime = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "content_id", "content_type", name="unique_user_content_like"),
        Index("idx_likes_content", "content_type", "content_id"),
    )
