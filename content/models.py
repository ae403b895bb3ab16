# src/content/models.py
from sqlalchemy import Column, Integer, String, ForeignKey, Text, DateTime, UniqueConstraint, Index
from sqlalchemy.orm import relationship
from database import Base
from datetime import datetime
from typing import Optional


class Post(Base):
    """Represents a media post."""
    __tablename__ = "posts"

    id: int = Column(Integer, primary_key=True, index=True)
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    caption: Optional[str] = Column(Text, nullable=True)
    media_url: str = Column(String, nullable=False)
    media_type: str = Column(String, nullable=False)  # image, video
    visibility: str = Column(String, nullable=False, default="public")  # public, connections
    created_at: datetime = Column(DateTime, default=datetime.utcnow, index=True)
    like_count: int = Column(Integer, nullable=False, default=0)
    comment_count: int = Column(Integer, nullable=False, default=0)

    user = relationship("User")


class Video(Base):
    """Represents a short-form video."""
    __tablename__ = "videos"

    id: int = Column(Integer, primary_key=True, index=True)
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    caption: Optional[str] = Column(Text, nullable=True)
    video_url: str = Column(String, nullable=False)
    thumbnail_url: Optional[str] = Column(String, nullable=True)
    created_at: datetime = Column(DateTime, default=datetime.utcnow, index=True)
    like_count: int = Column(Integer, nullable=False, default=0)
    comment_count: int = Column(Integer, nullable=False, default=0)
    share_count: int = Column(Integer, nullable=False, default=0)

    user = relationship("User")


class Story(Base):
    """Represents an ephemeral story, hidden from feeds once expired."""
    __tablename__ = "stories"

    id: int = Column(Integer, primary_key=True, index=True)
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    media_url: str = Column(String, nullable=False)
    media_type: str = Column(String, nullable=False)  # image, video
    created_at: datetime = Column(DateTime, default=datetime.utcnow)
    expires_at: datetime = Column(DateTime, nullable=False, index=True)
    view_count: int = Column(Integer, nullable=False, default=0)

    user = relationship("User")


class StoryView(Base):
    __tablename__ = "story_views"

    id: int = Column(Integer, primary_key=True, index=True)
    story_id: int = Column(Integer, ForeignKey("stories.id", ondelete="CASCADE"), nullable=False)
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)
    viewed_at: datetime = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (UniqueConstraint("user_id", "story_id", name="unique_story_view"),)


class Comment(Base):
    """Represents a user comment on a post or a video."""
    __tablename__ = "comments"

    id: int = Column(Integer, primary_key=True, index=True)
    user_id: int = Column(Integer, ForeignKey("users.id"), nullable=False)
    content_id: int = Column(Integer, nullable=False)
    content_type: str = Column(String, nullable=False)  # post, video
    text: str = Column(Text, nullable=False)
    created_at: datetime = Column(DateTime, default=datetime.utcnow)

    user = relationship("User")

    __table_args__ = (Index("idx_comments_content", "content_type", "content_id"),)


# Content kinds that can be liked and commented on.
CONTENT_MODELS = {"post": Post, "video": Video}
