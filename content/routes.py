# src/content/routes.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
from content.services import PostService, VideoService, StoryService, CommentService
from content.schemas import (
    PostCreate, PostUpdate, PostResponse,
    VideoCreate, VideoUpdate, VideoResponse,
    StoryCreate, StoryResponse,
    CommentCreate, CommentResponse,
)
from auth.routes import get_current_user, get_optional_user
from auth.models import User
from database import get_db
from schemas import SuccessResponse
from social.services import SocialGraphService

router = APIRouter(tags=["content"])


# Posts

@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: PostCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a post from already-uploaded media."""
    return PostService.create_post(post_data, current_user, db)


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Retrieve a post by ID. Connections-only posts are hidden from non-followers."""
    viewer_id = current_user.id if current_user else None
    return PostService.get_visible_post(post_id, viewer_id, db)


@router.put("/posts/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    post_data: PostUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a post's caption or visibility."""
    return PostService.update_post(post_id, post_data, current_user, db)


@router.delete("/posts/{post_id}", response_model=SuccessResponse)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a post."""
    PostService.delete_post(post_id, current_user, db)
    return {"success": True}


@router.post("/posts/{post_id}/like", response_model=SuccessResponse)
def like_post(post_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    SocialGraphService.like_post(current_user.id, post_id, db)
    return {"success": True}


@router.post("/posts/{post_id}/unlike", response_model=SuccessResponse)
def unlike_post(post_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    SocialGraphService.unlike_post(current_user.id, post_id, db)
    return {"success": True}


@router.get("/posts/{post_id}/comments", response_model=List[CommentResponse])
def get_post_comments(
    post_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    """Retrieve comments for a post."""
    viewer_id = current_user.id if current_user else None
    return CommentService.get_comments("post", post_id, viewer_id, db)


@router.post("/posts/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_post_comment(
    post_id: int,
    comment_data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a comment on a post."""
    return CommentService.create_comment("post", post_id, comment_data, current_user, db)


# Videos

@router.post("/videos", response_model=VideoResponse, status_code=status.HTTP_201_CREATED)
def create_video(
    video_data: VideoCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return VideoService.create_video(video_data, current_user, db)


@router.get("/videos/{video_id}", response_model=VideoResponse)
def get_video(video_id: int, db: Session = Depends(get_db)):
    return VideoService.get_video(video_id, db)


@router.put("/videos/{video_id}", response_model=VideoResponse)
def update_video(
    video_id: int,
    video_data: VideoUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a video's caption."""
    return VideoService.update_video(video_id, video_data, current_user, db)


@router.delete("/videos/{video_id}", response_model=SuccessResponse)
def delete_video(
    video_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    VideoService.delete_video(video_id, current_user, db)
    return {"success": True}


@router.post("/videos/{video_id}/like", response_model=SuccessResponse)
def like_video(video_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    SocialGraphService.like_video(current_user.id, video_id, db)
    return {"success": True}


@router.post("/videos/{video_id}/unlike", response_model=SuccessResponse)
def unlike_video(video_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    SocialGraphService.unlike_video(current_user.id, video_id, db)
    return {"success": True}


@router.post("/videos/{video_id}/share", response_model=VideoResponse)
def share_video(video_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return VideoService.share_video(video_id, db)


@router.get("/videos/{video_id}/comments", response_model=List[CommentResponse])
def get_video_comments(video_id: int, db: Session = Depends(get_db)):
    return CommentService.get_comments("video", video_id, None, db)


@router.post("/videos/{video_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_video_comment(
    video_id: int,
    comment_data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return CommentService.create_comment("video", video_id, comment_data, current_user, db)


@router.delete("/comments/{comment_id}", response_model=SuccessResponse)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a comment."""
    CommentService.delete_comment(comment_id, current_user, db)
    return {"success": True}


# Stories

@router.post("/stories", response_model=StoryResponse, status_code=status.HTTP_201_CREATED)
def create_story(
    story_data: StoryCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Create a story; it expires after at most 24 hours."""
    return StoryService.create_story(story_data, current_user, db)


@router.get("/stories/{story_id}", response_model=StoryResponse)
def get_story(story_id: int, db: Session = Depends(get_db)):
    return StoryService.get_story(story_id, db)


@router.delete("/stories/{story_id}", response_model=SuccessResponse)
def delete_story(
    story_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Delete a story before it expires."""
    StoryService.delete_story(story_id, current_user, db)
    return {"success": True}


@router.post("/stories/{story_id}/view", response_model=SuccessResponse)
def view_story(story_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    """Mark a story as viewed. Repeat views are not counted."""
    StoryService.view_story(current_user.id, story_id, db)
    return {"success": True}
