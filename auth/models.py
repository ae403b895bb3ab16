# src/auth/models.py
from sqlalchemy import Column, Integer, String, Text, JSON
from database import Base
from typing import List, Optional


class User(Base):
    """Represents a user and their public profile."""
    __tablename__ = "users"

    id: int = Column(Integer, primary_key=True, index=True)
    username: str = Column(String, unique=True, index=True, nullable=False)
    password_hash: str = Column(String, nullable=False)
    full_name: str = Column(String, nullable=False)
    email: str = Column(String, unique=True, index=True, nullable=False)
    bio: Optional[str] = Column(Text, nullable=True)
    profile_picture: Optional[str] = Column(String, nullable=True)
    website: Optional[str] = Column(String, nullable=True)
    location: Optional[str] = Column(String, nullable=True)
    occupation: Optional[str] = Column(String, nullable=True)
    education: Optional[str] = Column(String, nullable=True)
    birthdate: Optional[str] = Column(String, nullable=True)
    interests: List[str] = Column(JSON, nullable=True, default=list)
    skills: List[str] = Column(JSON, nullable=True, default=list)
    languages: List[str] = Column(JSON, nullable=True, default=list)
    connection_preferences: List[str] = Column(JSON, nullable=True, default=list)

    facebook_url: Optional[str] = Column(String, nullable=True)
    instagram_url: Optional[str] = Column(String, nullable=True)
    x_url: Optional[str] = Column(String, nullable=True)
    linkedin_url: Optional[str] = Column(String, nullable=True)
    tiktok_url: Optional[str] = Column(String, nullable=True)
    whatsapp_number: Optional[str] = Column(String, nullable=True)

    # Denormalized counters, kept in step with follows/posts/videos.
    follower_count: int = Column(Integer, nullable=False, default=0)
    following_count: int = Column(Integer, nullable=False, default=0)
    post_count: int = Column(Integer, nullable=False, default=0)
