# src/users/routes.py
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from auth.models import User
from auth.routes import get_current_user, get_optional_user
from auth.schemas import UserResponse, UserWithProfile, UserProfileUpdate
from auth.services import AuthService
from config import settings
from content.schemas import PostResponse, VideoResponse, StoryResponse
from content.services import PostService, VideoService, StoryService
from database import get_db
from schemas import SuccessResponse
from social.services import SocialGraphService
from suggestions.schemas import SuggestedUser
from suggestions.services import SuggestionService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/search", response_model=List[UserWithProfile])
def search_users(
    q: str = "",
    limit: int = Query(10, ge=1, le=50),
    db: Session = Depends(get_db)
):
    """Search users by username or full name."""
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query is required")
    return AuthService.search_users(q.strip(), limit, db)


@router.get("/{user_id}", response_model=UserWithProfile)
def get_user(
    user_id: int,
    current_user_id: Optional[int] = Query(None, alias="currentUserId"),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Retrieve a user profile, annotated with whether the viewer follows them."""
    user = AuthService.get_user_or_404(user_id, db)
    viewer_id = current_user.id if current_user else current_user_id
    is_following = viewer_id is not None and SocialGraphService.is_following(viewer_id, user_id, db)
    return UserWithProfile(**UserResponse.model_validate(user).model_dump(), is_following=is_following)


@router.put("/{user_id}/profile", response_model=UserResponse)
def update_profile(
    user_id: int,
    profile_data: UserProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update the current user's profile."""
    AuthService.authorize(current_user, user_id)
    return AuthService.update_profile(current_user, profile_data, db)


@router.get("/{user_id}/posts", response_model=List[PostResponse])
def get_user_posts(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Retrieve a user's posts visible to the viewer."""
    AuthService.get_user_or_404(user_id, db)
    viewer_id = current_user.id if current_user else None
    return PostService.get_posts_by_user_id(user_id, viewer_id, db)


@router.get("/{user_id}/videos", response_model=List[VideoResponse])
def get_user_videos(user_id: int, db: Session = Depends(get_db)):
    AuthService.get_user_or_404(user_id, db)
    return VideoService.get_videos_by_user_id(user_id, db)


@router.get("/{user_id}/stories", response_model=List[StoryResponse])
def get_user_stories(user_id: int, db: Session = Depends(get_db)):
    AuthService.get_user_or_404(user_id, db)
    return StoryService.get_stories_by_user_id(user_id, db)


@router.get("/{user_id}/followers", response_model=List[UserResponse])
def get_followers(user_id: int, db: Session = Depends(get_db)):
    AuthService.get_user_or_404(user_id, db)
    return SocialGraphService.get_followers(user_id, db)


@router.get("/{user_id}/following", response_model=List[UserResponse])
def get_following(user_id: int, db: Session = Depends(get_db)):
    AuthService.get_user_or_404(user_id, db)
    return SocialGraphService.get_following(user_id, db)


@router.get("/{user_id}/suggested", response_model=List[SuggestedUser])
def get_suggested_users(
    user_id: int,
    limit: int = Query(settings.SUGGESTION_DEFAULT_LIMIT, ge=1, le=settings.SUGGESTION_MAX_LIMIT),
    db: Session = Depends(get_db)
):
    """Suggest users to follow, ranked by profile affinity."""
    return SuggestionService.get_suggested_users(user_id, db, limit=limit)


@router.post("/{user_id}/follow", response_model=SuccessResponse)
def follow_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Follow a user. Following twice is a no-op."""
    SocialGraphService.follow_user(current_user.id, user_id, db)
    return {"success": True}


@router.post("/{user_id}/unfollow", response_model=SuccessResponse)
def unfollow_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Unfollow a user. Unfollowing someone not followed is a no-op."""
    SocialGraphService.unfollow_user(current_user.id, user_id, db)
    return {"success": True}
