# src/notifications/routes.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from auth.models import User
from auth.routes import get_current_user
from auth.services import AuthService
from database import get_db
from notifications.schemas import NotificationResponse
from notifications.services import NotificationService
from schemas import SuccessResponse

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationResponse])
def get_notifications(
    user_id: Optional[int] = Query(None, alias="userId"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Retrieve the current user's notifications."""
    if user_id is not None:
        AuthService.authorize(current_user, user_id)
    return NotificationService.get_notifications_by_user_id(current_user.id, db)


@router.post("/{notification_id}/read", response_model=SuccessResponse)
def mark_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Mark a notification as read."""
    NotificationService.mark_notification_as_read(notification_id, current_user, db)
    return {"success": True}
