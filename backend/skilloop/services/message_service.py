# backend/skilloop/services/message_service.py
"""
Booking chat.

Each booking has one conversation between its client and its trainer.
There is no push delivery; clients poll with ``since`` and reading a
conversation marks the caller's incoming messages as read.
"""

from datetime import datetime
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import CHAT_ENABLED_STATUSES
from ..core.exceptions import BusinessRuleException, ForbiddenException, NotFoundException
from ..core.timezone_utils import ensure_utc
from ..models.booking import Booking
from ..models.message import Message
from ..models.profile import Profile
from ..repositories.factory import RepositoryFactory
from .base import BaseService

logger = logging.getLogger(__name__)


class MessageService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.message_repository = RepositoryFactory.create_message_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.profile_repository = RepositoryFactory.create_profile_repository(db)

    def _participant_booking(self, profile: Profile, booking_id: str) -> Booking:
        booking = self.booking_repository.get_by_id(booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        trainer_user_id = booking.trainer.user_id if booking.trainer else None
        if not booking.is_participant(profile.id, trainer_user_id):
            raise ForbiddenException(
                "Only booking participants can use this chat", code="NOT_PARTICIPANT"
            )
        return booking

    def _with_sender_names(self, messages: List[Message]) -> List[Dict[str, Any]]:
        sender_ids = list({m.sender_id for m in messages})
        names = {p.id: p.display_name for p in self.profile_repository.get_by_ids(sender_ids)}
        return [
            {
                "id": m.id,
                "booking_id": m.booking_id,
                "sender_id": m.sender_id,
                "receiver_id": m.receiver_id,
                "content": m.content,
                "message_type": m.message_type,
                "is_read": m.is_read,
                "created_at": m.created_at,
                "sender_name": names.get(m.sender_id),
            }
            for m in messages
        ]

    @BaseService.measure_operation("list_messages")
    def list_messages(
        self, profile: Profile, booking_id: str, since: Optional[datetime] = None
    ) -> Dict[str, Any]:
        booking = self._participant_booking(profile, booking_id)
        with self.transaction():
            marked = self.message_repository.mark_read(booking.id, profile.id)
        messages = self.message_repository.list_for_booking(
            booking.id, since=ensure_utc(since) if since else None
        )
        return {
            "booking_id": booking.id,
            "messages": self._with_sender_names(messages),
            "marked_read": marked,
        }

    @BaseService.measure_operation("send_message")
    def send_message(self, profile: Profile, booking_id: str, content: str) -> Dict[str, Any]:
        booking = self._participant_booking(profile, booking_id)
        if booking.status not in CHAT_ENABLED_STATUSES:
            raise BusinessRuleException(
                f"Chat is not available while the booking is {booking.status}",
                code="CHAT_NOT_AVAILABLE",
            )
        if booking.trainer is None:
            raise BusinessRuleException(
                "Chat opens once a trainer is assigned", code="CHAT_NOT_AVAILABLE"
            )

        receiver_id = (
            booking.trainer.user_id if profile.id == booking.student_id else booking.student_id
        )
        with self.transaction():
            message = self.message_repository.create(
                booking_id=booking.id,
                sender_id=profile.id,
                receiver_id=receiver_id,
                content=content,
                message_type="text",
                is_read=False,
            )
        return self._with_sender_names([message])[0]

    def unread_count(self, profile: Profile) -> int:
        return self.message_repository.unread_count(profile.id)

    @BaseService.measure_operation("admin_list_messages")
    def admin_list(self, booking_id: Optional[str] = None, limit: int = 100) -> List[Dict[str, Any]]:
        return self._with_sender_names(self.message_repository.list_recent(booking_id=booking_id, limit=limit))
