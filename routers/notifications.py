# routers/notifications.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_session
from schemas.notification import NotificationResponse
from security import get_current_user
from services.context import CurrentUser
from services.notification_service import NotificationService

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("", response_model=List[NotificationResponse], summary="My notifications")
def list_notifications(
     unread_only: bool = False,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     notifications = NotificationService.list_for_user(db, current_user, unread_only)
     return [NotificationResponse.model_validate(n) for n in notifications]


@router.post("/{notification_id}/read", response_model=NotificationResponse, summary="Mark as read")
def mark_notification_read(
     notification_id: int,
     db: Session = Depends(get_session),
     current_user: CurrentUser = Depends(get_current_user)
):
     notification = NotificationService.mark_as_read(db, notification_id, current_user)
     return NotificationResponse.model_validate(notification)
