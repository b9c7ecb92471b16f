# backend/skilloop/repositories/feedback_repository.py
"""Feedback link and response data access."""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from ..models.feedback import FeedbackLink, FeedbackResponse
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class FeedbackLinkRepository(BaseRepository[FeedbackLink]):
    def __init__(self, db: Session):
        super().__init__(db, FeedbackLink)

    def get_by_token(self, token: str) -> Optional[FeedbackLink]:
        try:
            return (
                self.db.query(FeedbackLink)
                .options(joinedload(FeedbackLink.booking).joinedload(Booking.trainer))
                .filter(FeedbackLink.token == token)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading feedback link: {str(e)}")
            raise RepositoryException(f"Failed to load feedback link: {str(e)}")

    def get_active_for_booking(self, booking_id: str, now: datetime) -> Optional[FeedbackLink]:
        try:
            return (
                self.db.query(FeedbackLink)
                .filter(
                    FeedbackLink.booking_id == booking_id,
                    FeedbackLink.is_active.is_(True),
                    FeedbackLink.expires_at > now,
                )
                .order_by(FeedbackLink.created_at.desc())
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading active link for {booking_id}: {str(e)}")
            raise RepositoryException(f"Failed to load feedback link: {str(e)}")

    def list_active_for_bookings(self, booking_ids: List[str], now: datetime) -> List[FeedbackLink]:
        if not booking_ids:
            return []
        try:
            return (
                self.db.query(FeedbackLink)
                .filter(
                    FeedbackLink.booking_id.in_(booking_ids),
                    FeedbackLink.is_active.is_(True),
                    FeedbackLink.expires_at > now,
                )
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing active feedback links: {str(e)}")
            raise RepositoryException(f"Failed to list feedback links: {str(e)}")


class FeedbackResponseRepository(BaseRepository[FeedbackResponse]):
    def __init__(self, db: Session):
        super().__init__(db, FeedbackResponse)

    def list_for_trainer(self, trainer_id: Optional[str] = None) -> List[FeedbackResponse]:
        """Responses joined through link -> booking; all trainers when ``trainer_id`` is None."""
        try:
            query = (
                self.db.query(FeedbackResponse)
                .join(FeedbackLink, FeedbackResponse.feedback_link_id == FeedbackLink.id)
                .join(Booking, FeedbackLink.booking_id == Booking.id)
                .options(joinedload(FeedbackResponse.link).joinedload(FeedbackLink.booking))
            )
            if trainer_id is not None:
                query = query.filter(Booking.trainer_id == trainer_id)
            return query.order_by(FeedbackResponse.submitted_at.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing feedback responses: {str(e)}")
            raise RepositoryException(f"Failed to list feedback responses: {str(e)}")
