# backend/skilloop/repositories/message_repository.py
"""Booking chat messages and in-app notifications."""

from datetime import datetime
import logging
from typing import List, Optional, Sequence

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.message import Message, Notification
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message]):
    def __init__(self, db: Session):
        super().__init__(db, Message)

    def list_for_booking(
        self, booking_id: str, since: Optional[datetime] = None, limit: int = 500
    ) -> List[Message]:
        """Oldest first; ``since`` lets polling clients fetch only new messages."""
        try:
            query = self.db.query(Message).filter(Message.booking_id == booking_id)
            if since is not None:
                query = query.filter(Message.created_at > since)
            return query.order_by(Message.created_at, Message.id).limit(limit).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing messages for booking {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to list messages: {str(e)}")

    def mark_read(self, booking_id: str, receiver_id: str) -> int:
        try:
            result = self.db.execute(
                update(Message)
                .where(
                    Message.booking_id == booking_id,
                    Message.receiver_id == receiver_id,
                    Message.is_read.is_(False),
                )
                .values(is_read=True)
                .execution_options(synchronize_session="fetch")
            )
            self.db.flush()
            return int(result.rowcount or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error marking messages read: {str(e)}")
            raise RepositoryException(f"Failed to mark messages read: {str(e)}")

    def unread_count(self, receiver_id: str) -> int:
        return self.count(receiver_id=receiver_id, is_read=False)

    def list_recent(self, booking_id: Optional[str] = None, limit: int = 100) -> List[Message]:
        try:
            query = self.db.query(Message)
            if booking_id:
                query = query.filter(Message.booking_id == booking_id)
            return query.order_by(Message.created_at.desc()).limit(limit).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing recent messages: {str(e)}")
            raise RepositoryException(f"Failed to list messages: {str(e)}")


class NotificationRepository(BaseRepository[Notification]):
    def __init__(self, db: Session):
        super().__init__(db, Notification)

    def list_for_user(self, user_id: str, unread_only: bool = False, limit: int = 50) -> List[Notification]:
        try:
            query = self.db.query(Notification).filter(Notification.user_id == user_id)
            if unread_only:
                query = query.filter(Notification.is_read.is_(False))
            return query.order_by(Notification.created_at.desc()).limit(limit).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing notifications for {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to list notifications: {str(e)}")

    def unread_count(self, user_id: str) -> int:
        return self.count(user_id=user_id, is_read=False)

    def mark_read(self, user_id: str, ids: Optional[Sequence[str]] = None) -> int:
        """Mark the user's notifications read; all of them when ``ids`` is empty."""
        try:
            stmt = update(Notification).where(
                Notification.user_id == user_id, Notification.is_read.is_(False)
            )
            if ids:
                stmt = stmt.where(Notification.id.in_(list(ids)))
            result = self.db.execute(
                stmt.values(is_read=True).execution_options(synchronize_session="fetch")
            )
            self.db.flush()
            return int(result.rowcount or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error marking notifications read: {str(e)}")
            raise RepositoryException(f"Failed to mark notifications read: {str(e)}")
