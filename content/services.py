# src/content/services.py
import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from auth.models import User
from auth.services import AuthService
from content.models import CONTENT_MODELS, Post, Video, Story, StoryView, Comment
from content.schemas import PostCreate, PostUpdate, VideoCreate, VideoUpdate, StoryCreate, CommentCreate
from config import settings
from database import adjust_counter
from notifications.services import NotificationService
from social.models import Like
from social.services import SocialGraphService

logger = logging.getLogger(__name__)


def _get_or_404(model, object_id: int, db: Session, label: str):
    obj = db.query(model).filter(model.id == object_id).first()
    if not obj:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def _discard_engagement(content_type: str, content_id: int, db: Session) -> None:
    """Delete the likes, comments and notifications attached to a post or video."""
    db.query(Like).filter(Like.content_type == content_type, Like.content_id == content_id).delete(synchronize_session=False)
    db.query(Comment).filter(Comment.content_type == content_type, Comment.content_id == content_id).delete(synchronize_session=False)
    NotificationService.discard_for_content(content_type, content_id, db)


class PostService:
    @staticmethod
    def create_post(post_data: PostCreate, user: User, db: Session) -> Post:
        """Create a post with zeroed counters and bump the owner's post count."""
        db_post = Post(
            user_id=user.id,
            caption=post_data.caption,
            media_url=post_data.media_url,
            media_type=post_data.media_type,
            visibility=post_data.visibility,
            like_count=0,
            comment_count=0,
        )
        db.add(db_post)
        db.flush()
        adjust_counter(db, User.post_count, user.id, +1)
        db.commit()
        db.refresh(db_post)
        logger.info(f"Post {db_post.id} created by user {user.id}")
        return db_post

    @staticmethod
    def get_post(post_id: int, db: Session) -> Post:
        return _get_or_404(Post, post_id, db, "Post")

    @staticmethod
    def ensure_visible(post: Post, viewer_id: Optional[int], db: Session) -> Post:
        """Hide connections-only posts from everyone but the owner and their followers."""
        if not SocialGraphService.can_view(post.user_id, post.visibility, viewer_id, db):
            raise HTTPException(status_code=404, detail="Post not found")
        return post

    @staticmethod
    def get_visible_post(post_id: int, viewer_id: Optional[int], db: Session) -> Post:
        return PostService.ensure_visible(PostService.get_post(post_id, db), viewer_id, db)

    @staticmethod
    def get_posts_by_user_id(user_id: int, viewer_id: Optional[int], db: Session) -> List[Post]:
        """A user's posts, newest first. Connections-only posts need the viewer to be the owner or a follower."""
        query = db.query(Post).filter(Post.user_id == user_id)
        if not SocialGraphService.can_view(user_id, "connections", viewer_id, db):
            query = query.filter(Post.visibility == "public")
        return query.order_by(Post.created_at.desc(), Post.id.desc()).all()

    @staticmethod
    def update_post(post_id: int, post_data: PostUpdate, current_user: User, db: Session) -> Post:
        """Update a post's caption and visibility. Media cannot be replaced."""
        db_post = PostService.get_post(post_id, db)
        AuthService.authorize(current_user, db_post.user_id)
        changes = post_data.model_dump(exclude_unset=True)
        if "caption" in changes:
            db_post.caption = changes["caption"]
        if changes.get("visibility") is not None:
            db_post.visibility = changes["visibility"]
        db.commit()
        db.refresh(db_post)
        return db_post

    @staticmethod
    def delete_post(post_id: int, current_user: User, db: Session) -> None:
        """Delete a post with its likes, comments and notifications."""
        db_post = PostService.get_post(post_id, db)
        AuthService.authorize(current_user, db_post.user_id)
        _discard_engagement("post", post_id, db)
        owner_id = db_post.user_id
        db.delete(db_post)
        adjust_counter(db, User.post_count, owner_id, -1)
        db.commit()
        logger.info(f"Post {post_id} deleted by user {current_user.id}")


class VideoService:
    @staticmethod
    def create_video(video_data: VideoCreate, user: User, db: Session) -> Video:
        """Create a video. Videos count towards the owner's post count."""
        db_video = Video(
            user_id=user.id,
            caption=video_data.caption,
            video_url=video_data.video_url,
            thumbnail_url=video_data.thumbnail_url,
            like_count=0,
            comment_count=0,
            share_count=0,
        )
        db.add(db_video)
        db.flush()
        adjust_counter(db, User.post_count, user.id, +1)
        db.commit()
        db.refresh(db_video)
        logger.info(f"Video {db_video.id} created by user {user.id}")
        return db_video

    @staticmethod
    def get_video(video_id: int, db: Session) -> Video:
        return _get_or_404(Video, video_id, db, "Video")

    @staticmethod
    def get_videos_by_user_id(user_id: int, db: Session) -> List[Video]:
        return (
            db.query(Video)
            .filter(Video.user_id == user_id)
            .order_by(Video.created_at.desc(), Video.id.desc())
            .all()
        )

    @staticmethod
    def update_video(video_id: int, video_data: VideoUpdate, current_user: User, db: Session) -> Video:
        """Update a video's caption. The video file and thumbnail stay as uploaded."""
        db_video = VideoService.get_video(video_id, db)
        AuthService.authorize(current_user, db_video.user_id)
        changes = video_data.model_dump(exclude_unset=True)
        if "caption" in changes:
            db_video.caption = changes["caption"]
        db.commit()
        db.refresh(db_video)
        return db_video

    @staticmethod
    def delete_video(video_id: int, current_user: User, db: Session) -> None:
        db_video = VideoService.get_video(video_id, db)
        AuthService.authorize(current_user, db_video.user_id)
        _discard_engagement("video", video_id, db)
        owner_id = db_video.user_id
        db.delete(db_video)
        adjust_counter(db, User.post_count, owner_id, -1)
        db.commit()
        logger.info(f"Video {video_id} deleted by user {current_user.id}")

    @staticmethod
    def share_video(video_id: int, db: Session) -> Video:
        VideoService.get_video(video_id, db)
        adjust_counter(db, Video.share_count, video_id, +1)
        db.commit()
        return VideoService.get_video(video_id, db)


class StoryService:
    @staticmethod
    def resolve_expiry(requested: Optional[datetime], now: datetime) -> datetime:
        """Stories live at most STORY_TTL_HOURS; a client may only ask for less."""
        latest = now + timedelta(hours=settings.STORY_TTL_HOURS)
        if requested is None:
            return latest
        if requested.tzinfo is not None:
            requested = requested.astimezone(timezone.utc).replace(tzinfo=None)
        if requested <= now:
            raise HTTPException(status_code=400, detail="expiresAt must be in the future")
        return min(requested, latest)

    @staticmethod
    def create_story(story_data: StoryCreate, user: User, db: Session) -> Story:
        now = datetime.utcnow()
        db_story = Story(
            user_id=user.id,
            media_url=story_data.media_url,
            media_type=story_data.media_type,
            created_at=now,
            expires_at=StoryService.resolve_expiry(story_data.expires_at, now),
            view_count=0,
        )
        db.add(db_story)
        db.commit()
        db.refresh(db_story)
        return db_story

    @staticmethod
    def get_story(story_id: int, db: Session) -> Story:
        return _get_or_404(Story, story_id, db, "Story")

    @staticmethod
    def delete_story(story_id: int, current_user: User, db: Session) -> None:
        db_story = StoryService.get_story(story_id, db)
        AuthService.authorize(current_user, db_story.user_id)
        db.query(StoryView).filter(StoryView.story_id == story_id).delete(synchronize_session=False)
        db.delete(db_story)
        db.commit()
        logger.info(f"Story {story_id} deleted by user {current_user.id}")

    @staticmethod
    def get_stories_by_user_id(user_id: int, db: Session) -> List[Story]:
        """A user's unexpired stories, newest first."""
        return (
            db.query(Story)
            .filter(Story.user_id == user_id, Story.expires_at > datetime.utcnow())
            .order_by(Story.created_at.desc(), Story.id.desc())
            .all()
        )

    @staticmethod
    def is_story_viewed(user_id: int, story_id: int, db: Session) -> bool:
        return db.query(StoryView.id).filter(
            StoryView.user_id == user_id,
            StoryView.story_id == story_id
        ).first() is not None

    @staticmethod
    def view_story(user_id: int, story_id: int, db: Session) -> bool:
        """Record a view; only the first view by a user counts."""
        StoryService.get_story(story_id, db)
        if StoryService.is_story_viewed(user_id, story_id, db):
            return False
        db.add(StoryView(user_id=user_id, story_id=story_id))
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            return False
        adjust_counter(db, Story.view_count, story_id, +1)
        db.commit()
        return True


class CommentService:
    @staticmethod
    def _commentable(content_type: str, content_id: int, viewer_id: Optional[int], db: Session):
        target = _get_or_404(CONTENT_MODELS[content_type], content_id, db, content_type.capitalize())
        if content_type == "post":
            PostService.ensure_visible(target, viewer_id, db)
        return target

    @staticmethod
    def create_comment(content_type: str, content_id: int, comment_data: CommentCreate, user: User, db: Session) -> Comment:
        """Comment on a post or video and notify its owner."""
        model = CONTENT_MODELS[content_type]
        target = CommentService._commentable(content_type, content_id, user.id, db)
        db_comment = Comment(
            user_id=user.id,
            content_id=content_id,
            content_type=content_type,
            text=comment_data.text
        )
        db.add(db_comment)
        db.flush()
        adjust_counter(db, model.comment_count, content_id, +1)
        NotificationService.notify(
            target.user_id, "comment", user.id, db, content_id=content_id, content_type=content_type
        )
        db.commit()
        db.refresh(db_comment)
        return db_comment

    @staticmethod
    def get_comments(content_type: str, content_id: int, viewer_id: Optional[int], db: Session) -> List[Comment]:
        """Retrieve comments for a post or video, oldest first."""
        CommentService._commentable(content_type, content_id, viewer_id, db)
        return (
            db.query(Comment)
            .filter(Comment.content_type == content_type, Comment.content_id == content_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )

    @staticmethod
    def delete_comment(comment_id: int, current_user: User, db: Session) -> None:
        """Delete a comment along with the notification it raised."""
        db_comment = _get_or_404(Comment, comment_id, db, "Comment")
        AuthService.authorize(current_user, db_comment.user_id)
        model = CONTENT_MODELS[db_comment.content_type]
        content_type, content_id = db_comment.content_type, db_comment.content_id
        db.delete(db_comment)
        adjust_counter(db, model.comment_count, content_id, -1)
        NotificationService.retract("comment", current_user.id, content_type, content_id, db)
        db.commit()
