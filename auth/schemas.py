# src/auth/schemas.py
from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional
from schemas import ApiModel

ConnectionPreference = Literal["location", "professional", "education", "interests"]


class ProfileFields(ApiModel):
    """Editable profile attributes shared by registration and profile updates."""
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    occupation: Optional[str] = None
    education: Optional[str] = None
    birthdate: Optional[str] = None
    interests: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    connection_preferences: Optional[List[ConnectionPreference]] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    x_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    whatsapp_number: Optional[str] = None


class UserCreate(ProfileFields):
    """Schema for user registration."""
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1)
    email: EmailStr


class UserLogin(ApiModel):
    """Schema for user login; ``username`` may also be the account email."""
    username: str
    password: str


class UserProfileUpdate(ProfileFields):
    """Schema for profile updates. Identity fields and counters are not editable."""


class UserResponse(ApiModel):
    """A user as returned across the API boundary, without the password hash."""
    id: int
    username: str
    full_name: str
    email: str
    bio: Optional[str] = None
    profile_picture: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    occupation: Optional[str] = None
    education: Optional[str] = None
    birthdate: Optional[str] = None
    interests: Optional[List[str]] = None
    skills: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    connection_preferences: Optional[List[str]] = None
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    x_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    whatsapp_number: Optional[str] = None
    follower_count: int = 0
    following_count: int = 0
    post_count: int = 0


class UserWithProfile(UserResponse):
    """User annotated with the viewer's follow state."""
    is_following: bool = False


class Token(BaseModel):
    """Schema for token response."""
    access_token: str
    token_type: str


class OAuthProvidersResponse(ApiModel):
    providers: List[str]
