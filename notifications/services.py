# src/notifications/services.py
import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from auth.models import User
from auth.services import AuthService
from notifications.models import Notification

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = ("like", "comment", "follow")


class NotificationService:
    @staticmethod
    def notify(
            recipient_id: int,
            type_: str,
            actor_id: int,
            db: Session,
            content_id: Optional[int] = None,
            content_type: Optional[str] = None
    ) -> Optional[Notification]:
        """Stage a notification in the caller's transaction. Nobody is notified of their own actions."""
        if recipient_id == actor_id:
            return None
        if type_ not in NOTIFICATION_TYPES:
            raise ValueError(f"Unknown notification type: {type_}")
        notification = Notification(
            user_id=recipient_id,
            type=type_,
            actor_id=actor_id,
            content_id=content_id,
            content_type=content_type,
            read=False,
        )
        db.add(notification)
        return notification

    @staticmethod
    def discard_for_content(content_type: str, content_id: int, db: Session) -> int:
        """Drop every notification pointing at a deleted post or video."""
        return db.query(Notification).filter(
            Notification.content_type == content_type,
            Notification.content_id == content_id
        ).delete(synchronize_session=False)

    @staticmethod
    def retract(type_: str, actor_id: int, content_type: str, content_id: int, db: Session) -> bool:
        """Remove the newest matching notification, e.g. when a comment is deleted."""
        notification = (
            db.query(Notification)
            .filter(
                Notification.type == type_,
                Notification.actor_id == actor_id,
                Notification.content_type == content_type,
                Notification.content_id == content_id
            )
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .first()
        )
        if not notification:
            return False
        db.delete(notification)
        return True

    @staticmethod
    def get_notifications_by_user_id(user_id: int, db: Session) -> List[Notification]:
        """Retrieve a user's notifications, newest first."""
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    @staticmethod
    def mark_notification_as_read(notification_id: int, current_user: User, db: Session) -> Notification:
        notification = db.query(Notification).filter(Notification.id == notification_id).first()
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        AuthService.authorize(current_user, notification.user_id)
        if not notification.read:
            notification.read = True
            db.commit()
        return notification
