# src/content/schemas.py
from pydantic import Field
from datetime import datetime
from typing import Literal, Optional
from auth.schemas import UserResponse
from schemas import ApiModel

MediaType = Literal["image", "video"]
Visibility = Literal["public", "connections"]


class PostCreate(ApiModel):
    """Schema for creating a post."""
    caption: Optional[str] = None
    media_url: str = Field(..., min_length=1)
    media_type: MediaType
    visibility: Visibility = "public"


class PostUpdate(ApiModel):
    """Caption and visibility are the only mutable fields of a post."""
    caption: Optional[str] = None
    visibility: Optional[Visibility] = None


class PostResponse(ApiModel):
    id: int
    user_id: int
    caption: Optional[str] = None
    media_url: str
    media_type: str
    visibility: str
    created_at: datetime
    like_count: int
    comment_count: int


class PostWithUser(PostResponse):
    user: UserResponse
    is_liked: bool = False

    @classmethod
    def from_orm(cls, obj, is_liked: bool = False):
        return cls(
            **PostResponse.model_validate(obj).model_dump(),
            user=UserResponse.model_validate(obj.user),
            is_liked=is_liked,
        )


class VideoCreate(ApiModel):
    """Schema for creating a video."""
    caption: Optional[str] = None
    video_url: str = Field(..., min_length=1)
    thumbnail_url: Optional[str] = None


class VideoUpdate(ApiModel):
    caption: Optional[str] = None


class VideoResponse(ApiModel):
    id: int
    user_id: int
    caption: Optional[str] = None
    video_url: str
    thumbnail_url: Optional[str] = None
    created_at: datetime
    like_count: int
    comment_count: int
    share_count: int


class VideoWithUser(VideoResponse):
    user: UserResponse
    is_liked: bool = False

    @classmethod
    def from_orm(cls, obj, is_liked: bool = False):
        return cls(
            **VideoResponse.model_validate(obj).model_dump(),
            user=UserResponse.model_validate(obj.user),
            is_liked=is_liked,
        )


class StoryCreate(ApiModel):
    """Schema for creating a story. ``expires_at`` may only shorten the default lifetime."""
    media_url: str = Field(..., min_length=1)
    media_type: MediaType
    expires_at: Optional[datetime] = None


class StoryResponse(ApiModel):
    id: int
    user_id: int
    media_url: str
    media_type: str
    created_at: datetime
    expires_at: datetime
    view_count: int


class StoryWithUser(StoryResponse):
    user: UserResponse
    is_viewed: bool = False

    @classmethod
    def from_orm(cls, obj, is_viewed: bool = False):
        return cls(
            **StoryResponse.model_validate(obj).model_dump(),
            user=UserResponse.model_validate(obj.user),
            is_viewed=is_viewed,
        )


class CommentCreate(ApiModel):
    """Schema for creating a comment."""
    text: str = Field(..., min_length=1)


class CommentResponse(ApiModel):
    id: int
    user_id: int
    content_id: int
    content_type: str
    text: str
    created_at: datetime
    user: Optional[UserResponse] = None
