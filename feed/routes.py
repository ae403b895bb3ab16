# src/feed/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List
from content.schemas import PostWithUser, VideoWithUser, StoryWithUser
from database import get_db
from feed.services import FeedService

router = APIRouter(prefix="/feed", tags=["feed"])


@router.get("/posts", response_model=List[PostWithUser])
def get_feed_posts(user_id: int = Query(..., alias="userId"), db: Session = Depends(get_db)):
    """Posts by the user and everyone they follow."""
    return FeedService.get_feed_posts(user_id, db)


@router.get("/videos", response_model=List[VideoWithUser])
def get_feed_videos(user_id: int = Query(..., alias="userId"), db: Session = Depends(get_db)):
    """Videos by the user and everyone they follow."""
    return FeedService.get_feed_videos(user_id, db)


@router.get("/stories", response_model=List[StoryWithUser])
def get_feed_stories(user_id: int = Query(..., alias="userId"), db: Session = Depends(get_db)):
    """Unexpired stories by the user and everyone they follow."""
    return FeedService.get_feed_stories(user_id, db)
