# services/notification_service.py
"""
Notification Service - in-app notifications with optional email delivery.

Rows are always written in the caller's transaction. When
NOTIFICATION_EMAILS_ENABLED=true the same text is emailed through Brevo;
delivery failures are logged and never fail the calling operation.
"""
import logging
import os
from typing import List, Optional

import requests
from sqlalchemy.orm import Session

from models import Notification, User
from services.context import CurrentUser
from services.exceptions import NotFoundError, UnauthorizedError
from utils.email import EmailDeliveryError, send_notification_email

logger = logging.getLogger(__name__)


def _emails_enabled() -> bool:
     return os.getenv("NOTIFICATION_EMAILS_ENABLED", "false").lower() == "true"


class NotificationService:
     """Service class for user notifications."""

     @staticmethod
     def create_notification(
          db: Session,
          user_id: int,
          title: str,
          message: str,
          notification_type: str,
          reference_id: Optional[int] = None
     ) -> Notification:
          notification = Notification(
               user_id=user_id,
               title=title,
               message=message,
               type=notification_type,
               reference_id=reference_id,
               is_read=False,
          )
          db.add(notification)
          db.flush()

          if _emails_enabled():
               NotificationService._email(db, user_id, title, message)

          return notification

     @staticmethod
     def _email(db: Session, user_id: int, title: str, message: str) -> None:
          user = db.query(User).filter(User.id == user_id).first()
          if user is None:
               return
          try:
               send_notification_email(user.email, title, message)
          except (EmailDeliveryError, requests.RequestException) as e:
               logger.warning("Notification email to user %s failed: %s", user_id, e)

     @staticmethod
     def list_for_user(db: Session, current_user: CurrentUser, unread_only: bool = False) -> List[Notification]:
          query = db.query(Notification).filter(Notification.user_id == current_user.id)
          if unread_only:
               query = query.filter(Notification.is_read.is_(False))
          return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

     @staticmethod
     def mark_as_read(db: Session, notification_id: int, current_user: CurrentUser) -> Notification:
          notification = db.query(Notification).filter(Notification.id == notification_id).first()
          if notification is None:
               raise NotFoundError.for_entity("Notification", notification_id)
          if notification.user_id != current_user.id:
               raise UnauthorizedError("You can only update your own notifications")
          notification.is_read = True
          db.flush()
          return notification
