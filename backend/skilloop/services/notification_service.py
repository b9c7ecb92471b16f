# backend/skilloop/services/notification_service.py
"""
In-app notifications.

Other services call ``notify`` inside their own transaction, so a
notification is written only when the action that triggered it commits.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.enums import NotificationType
from ..models.message import Notification
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class NotificationService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.notification_repository = RepositoryFactory.create_notification_repository(db)
        self.profile_repository = RepositoryFactory.create_profile_repository(db)

    def notify(
        self,
        user_id: Optional[str],
        notification_type: NotificationType,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Optional[Notification]:
        """Queue a notification in the current unit of work; no-op without a recipient."""
        if not user_id:
            return None
        notification = self.notification_repository.create(
            user_id=user_id,
            type=notification_type.value,
            title=title,
            message=message,
            data=data or {},
        )
        self.logger.debug(f"Queued {notification_type.value} notification for {user_id}")
        return notification

    def notify_admins(
        self,
        notification_type: NotificationType,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> int:
        admins = self.profile_repository.list_admins()
        for admin in admins:
            self.notify(admin.id, notification_type, title, message, data)
        return len(admins)

    @BaseService.measure_operation("list_notifications")
    def list_for_user(self, user_id: str, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        return self.notification_repository.list_for_user(user_id, unread_only=unread_only, limit=limit)

    def unread_count(self, user_id: str) -> int:
        return self.notification_repository.unread_count(user_id)

    @BaseService.measure_operation("mark_notifications_read")
    def mark_read(self, user_id: str, ids: Optional[Sequence[str]] = None) -> int:
        with self.transaction():
            updated = self.notification_repository.mark_read(user_id, ids)
        return updated
