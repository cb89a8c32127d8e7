"""Notification fan-out and the recipient's inbox operations."""
from __future__ import annotations

import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from farmer_social.core.errors import AuthorizationError, NotFoundError
from farmer_social.db.time import utcnow
from farmer_social.models import Notification, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:
    """Creates notification rows and serves them back to their recipients."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def notify(
        self,
        recipient_id: int,
        notification_type: NotificationType,
        title: str,
        message: str,
        *,
        related_post_id: int | None = None,
        related_comment_id: int | None = None,
        actor_id: int | None = None,
    ) -> Notification | None:
        """Persist an unread notification.

        Callers commit their own change first. A storage failure here is
        logged and rolled back without raising, so the triggering action
        stays in place.

        Returns:
            The stored notification, or ``None`` if it could not be written.
        """
        notification = Notification(
            recipient_id=recipient_id,
            type=notification_type.value,
            title=title,
            message=message,
            related_post_id=related_post_id,
            related_comment_id=related_comment_id,
            actor_id=actor_id,
        )
        try:
            self.db.add(notification)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                "Failed to create %s notification for user %s",
                notification_type.value,
                recipient_id,
            )
            return None
        return notification

    def list_for(
        self,
        recipient_id: int,
        *,
        page: int = 1,
        limit: int = 20,
        unread_only: bool = False,
    ) -> tuple[list[Notification], int, int]:
        """Return ``(notifications, total, unread_count)`` for one page, newest first."""
        criteria = [Notification.recipient_id == recipient_id]
        if unread_only:
            criteria.append(Notification.is_read.is_(False))

        notifications = list(
            self.db.scalars(
                select(Notification)
                .where(*criteria)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            ).unique()
        )
        total = self.db.scalar(
            select(func.count()).select_from(Notification).where(*criteria)
        ) or 0
        unread_count = self.db.scalar(
            select(func.count())
            .select_from(Notification)
            .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
        ) or 0
        return notifications, total, unread_count

    def _get_owned(self, recipient_id: int, notification_id: int) -> Notification:
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.recipient_id != recipient_id:
            raise AuthorizationError("Not authorized")
        return notification

    def mark_as_read(self, recipient_id: int, notification_id: int) -> Notification:
        notification = self._get_owned(recipient_id, notification_id)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = utcnow()
            self.db.commit()
        return notification

    def mark_all_as_read(self, recipient_id: int) -> int:
        """Mark every unread notification of the recipient as read; returns how many."""
        result = self.db.execute(
            update(Notification)
            .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=utcnow())
        )
        self.db.commit()
        return result.rowcount

    def delete(self, recipient_id: int, notification_id: int) -> None:
        notification = self._get_owned(recipient_id, notification_id)
        self.db.delete(notification)
        self.db.commit()
