# src/scheduler/tasks.py
import logging
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import datetime, timedelta
from typing import Dict, Optional
from auth.models import User
from config import settings
from content.models import Post, Video, Story, StoryView, Comment
from database import SessionLocal
from social.models import Follow, Like

logger = logging.getLogger(__name__)


def purge_expired_stories(session_factory=SessionLocal, now: Optional[datetime] = None) -> int:
    """Delete stories (and their views) that expired more than STORY_RETENTION_HOURS ago."""
    logger.info("Starting purge_expired_stories task")
    cutoff = (now or datetime.utcnow()) - timedelta(hours=settings.STORY_RETENTION_HOURS)
    db: Session = session_factory()
    purged = 0
    try:
        story_ids = [row[0] for row in db.query(Story.id).filter(Story.expires_at < cutoff).all()]
        if story_ids:
            db.query(StoryView).filter(StoryView.story_id.in_(story_ids)).delete(synchronize_session=False)
            purged = db.query(Story).filter(Story.id.in_(story_ids)).delete(synchronize_session=False)
            db.commit()
        logger.info(f"Purged {purged} expired stories")
    except Exception as e:
        db.rollback()
        logger.error(f"Error in purge_expired_stories: {str(e)}", exc_info=True)
    finally:
        db.close()
    return purged


def _counts(db: Session, key_column, *filters) -> Dict[int, int]:
    query = db.query(key_column, func.count()).filter(*filters).group_by(key_column)
    return {key: count for key, count in query.all()}


def _fix(obj, attr: str, expected: int) -> int:
    actual = getattr(obj, attr) or 0
    if actual == expected:
        return 0
    logger.warning(f"{type(obj).__name__} {obj.id} {attr} drifted: {actual} -> {expected}")
    setattr(obj, attr, expected)
    return 1


def reconcile_counters(session_factory=SessionLocal) -> int:
    """Recompute every denormalized counter from its source relation and repair drift."""
    logger.info("Starting reconcile_counters task")
    db: Session = session_factory()
    fixed = 0
    try:
        followers = _counts(db, Follow.following_id)
        following = _counts(db, Follow.follower_id)
        posts = _counts(db, Post.user_id)
        videos = _counts(db, Video.user_id)
        for user in db.query(User).all():
            fixed += _fix(user, "follower_count", followers.get(user.id, 0))
            fixed += _fix(user, "following_count", following.get(user.id, 0))
            fixed += _fix(user, "post_count", posts.get(user.id, 0) + videos.get(user.id, 0))

        for model, content_type in ((Post, "post"), (Video, "video")):
            likes = _counts(db, Like.content_id, Like.content_type == content_type)
            comments = _counts(db, Comment.content_id, Comment.content_type == content_type)
            for item in db.query(model).all():
                fixed += _fix(item, "like_count", likes.get(item.id, 0))
                fixed += _fix(item, "comment_count", comments.get(item.id, 0))

        views = _counts(db, StoryView.story_id)
        for story in db.query(Story).all():
            fixed += _fix(story, "view_count", views.get(story.id, 0))

        db.commit()
        logger.info(f"Reconciled counters, {fixed} corrected")
    except Exception as e:
        db.rollback()
        logger.error(f"Error in reconcile_counters: {str(e)}", exc_info=True)
    finally:
        db.close()
    return fixed


def start_scheduler() -> BackgroundScheduler:
    """Start the background scheduler."""
    scheduler = BackgroundScheduler()
    scheduler.add_job(purge_expired_stories, 'interval', hours=1)
    scheduler.add_job(reconcile_counters, 'interval', days=1)
    scheduler.start()
    return scheduler
