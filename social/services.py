# src/social/services.py
import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import Iterable, List, Optional, Set
from auth.models import User
from auth.services import AuthService
from content.models import CONTENT_MODELS
from database import adjust_counter
from notifications.services import NotificationService
from social.models import Follow, Like

logger = logging.getLogger(__name__)


class SocialGraphService:
    """Follow and like edges, with the counters and notifications they drive.

    Every mutation is idempotent: a redundant follow/unfollow/like/unlike is a
    no-op and returns False. Edge, counters and notification are committed
    together or not at all.
    """

    @staticmethod
    def is_following(follower_id: int, following_id: int, db: Session) -> bool:
        return db.query(Follow.id).filter(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id
        ).first() is not None

    @staticmethod
    def can_view(owner_id: int, visibility: str, viewer_id: Optional[int], db: Session) -> bool:
        """Connections-only content is visible to its owner and the owner's followers."""
        if visibility != "connections":
            return True
        if viewer_id is None:
            return False
        return viewer_id == owner_id or SocialGraphService.is_following(viewer_id, owner_id, db)

    @staticmethod
    def following_ids_select(user_id: int):
        """SELECT of the ids ``user_id`` follows, for use in IN clauses."""
        return select(Follow.following_id).where(Follow.follower_id == user_id)

    @staticmethod
    def get_followers(user_id: int, db: Session) -> List[User]:
        return (
            db.query(User)
            .join(Follow, Follow.follower_id == User.id)
            .filter(Follow.following_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
            .all()
        )

    @staticmethod
    def get_following(user_id: int, db: Session) -> List[User]:
        return (
            db.query(User)
            .join(Follow, Follow.following_id == User.id)
            .filter(Follow.follower_id == user_id)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
            .all()
        )

    @staticmethod
    def follow_user(follower_id: int, following_id: int, db: Session) -> bool:
        if follower_id == following_id:
            raise HTTPException(status_code=400, detail="Cannot follow yourself")
        AuthService.get_user_or_404(following_id, db)
        if SocialGraphService.is_following(follower_id, following_id, db):
            return False

        db.add(Follow(follower_id=follower_id, following_id=following_id))
        if not SocialGraphService._flush_edge(db):
            return False
        adjust_counter(db, User.following_count, follower_id, +1)
        adjust_counter(db, User.follower_count, following_id, +1)
        NotificationService.notify(following_id, "follow", follower_id, db, content_type="user")
        db.commit()
        logger.info(f"User {follower_id} followed {following_id}")
        return True

    @staticmethod
    def unfollow_user(follower_id: int, following_id: int, db: Session) -> bool:
        deleted = db.query(Follow).filter(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id
        ).delete(synchronize_session=False)
        if not deleted:
            return False
        adjust_counter(db, User.following_count, follower_id, -1)
        adjust_counter(db, User.follower_count, following_id, -1)
        db.commit()
        logger.info(f"User {follower_id} unfollowed {following_id}")
        return True

    @staticmethod
    def is_liked(user_id: int, content_id: int, content_type: str, db: Session) -> bool:
        return db.query(Like.id).filter(
            Like.user_id == user_id,
            Like.content_id == content_id,
            Like.content_type == content_type
        ).first() is not None

    @staticmethod
    def liked_ids(user_id: int, content_type: str, content_ids: Iterable[int], db: Session) -> Set[int]:
        """The subset of ``content_ids`` the user has liked."""
        content_ids = list(content_ids)
        if not content_ids:
            return set()
        rows = db.query(Like.content_id).filter(
            Like.user_id == user_id,
            Like.content_type == content_type,
            Like.content_id.in_(content_ids)
        ).all()
        return {row[0] for row in rows}

    @staticmethod
    def _visible_target(user_id: int, content_id: int, content_type: str, db: Session):
        model = CONTENT_MODELS[content_type]
        target = db.query(model).filter(model.id == content_id).first()
        visibility = getattr(target, "visibility", "public")
        if not target or not SocialGraphService.can_view(target.user_id, visibility, user_id, db):
            raise HTTPException(status_code=404, detail=f"{content_type.capitalize()} not found")
        return target

    @staticmethod
    def like(user_id: int, content_id: int, content_type: str, db: Session) -> bool:
        model = CONTENT_MODELS[content_type]
        target = SocialGraphService._visible_target(user_id, content_id, content_type, db)
        if SocialGraphService.is_liked(user_id, content_id, content_type, db):
            return False

        owner_id = target.user_id
        db.add(Like(user_id=user_id, content_id=content_id, content_type=content_type))
        if not SocialGraphService._flush_edge(db):
            return False
        adjust_counter(db, model.like_count, content_id, +1)
        NotificationService.notify(owner_id, "like", user_id, db, content_id=content_id, content_type=content_type)
        db.commit()
        return True

    @staticmethod
    def unlike(user_id: int, content_id: int, content_type: str, db: Session) -> bool:
        model = CONTENT_MODELS[content_type]
        SocialGraphService._visible_target(user_id, content_id, content_type, db)
        deleted = db.query(Like).filter(
            Like.user_id == user_id,
            Like.content_id == content_id,
            Like.content_type == content_type
        ).delete(synchronize_session=False)
        if not deleted:
            return False
        adjust_counter(db, model.like_count, content_id, -1)
        db.commit()
        return True

    @staticmethod
    def like_post(user_id: int, post_id: int, db: Session) -> bool:
        return SocialGraphService.like(user_id, post_id, "post", db)

    @staticmethod
    def unlike_post(user_id: int, post_id: int, db: Session) -> bool:
        return SocialGraphService.unlike(user_id, post_id, "post", db)

    @staticmethod
    def like_video(user_id: int, video_id: int, db: Session) -> bool:
        return SocialGraphService.like(user_id, video_id, "video", db)

    @staticmethod
    def unlike_video(user_id: int, video_id: int, db: Session) -> bool:
        return SocialGraphService.unlike(user_id, video_id, "video", db)

    @staticmethod
    def _flush_edge(db: Session) -> bool:
        """Flush a pending edge insert; a concurrent duplicate makes the whole call a no-op."""
        try:
            db.flush()
        except IntegrityError:
            db.rollback()
            return False
        return True
