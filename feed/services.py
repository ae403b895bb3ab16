# src/feed/services.py
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload
from datetime import datetime
from typing import List
from auth.services import AuthService
from content.models import Post, Video, Story, StoryView
from content.schemas import PostWithUser, VideoWithUser, StoryWithUser
from social.services import SocialGraphService


class FeedService:
    """The requester's own content plus that of everyone they follow, newest first."""

    @staticmethod
    def _feed_query(model, user_id: int, db: Session):
        AuthService.get_user_or_404(user_id, db)
        following = SocialGraphService.following_ids_select(user_id)
        return (
            db.query(model)
            .options(joinedload(model.user))
            .filter(or_(model.user_id == user_id, model.user_id.in_(following)))
            .order_by(model.created_at.desc(), model.id.desc())
        )

    @staticmethod
    def get_feed_posts(user_id: int, db: Session) -> List[PostWithUser]:
        posts = FeedService._feed_query(Post, user_id, db).all()
        liked = SocialGraphService.liked_ids(user_id, "post", (p.id for p in posts), db)
        return [PostWithUser.from_orm(post, is_liked=post.id in liked) for post in posts]

    @staticmethod
    def get_feed_videos(user_id: int, db: Session) -> List[VideoWithUser]:
        videos = FeedService._feed_query(Video, user_id, db).all()
        liked = SocialGraphService.liked_ids(user_id, "video", (v.id for v in videos), db)
        return [VideoWithUser.from_orm(video, is_liked=video.id in liked) for video in videos]

    @staticmethod
    def get_feed_stories(user_id: int, db: Session) -> List[StoryWithUser]:
        stories = (
            FeedService._feed_query(Story, user_id, db)
            .filter(Story.expires_at > datetime.utcnow())
            .all()
        )
        story_ids = [s.id for s in stories]
        viewed = set()
        if story_ids:
            viewed = {
                row[0] for row in db.query(StoryView.story_id).filter(
                    StoryView.user_id == user_id,
                    StoryView.story_id.in_(story_ids)
                ).all()
            }
        return [StoryWithUser.from_orm(story, is_viewed=story.id in viewed) for story in stories]
