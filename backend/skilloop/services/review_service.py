# backend/skilloop/services/review_service.py
"""Client reviews of completed bookings."""

import logging
from typing import List

from sqlalchemy.orm import Session

from ..core.enums import BookingStatus, NotificationType
from ..core.exceptions import (
    BusinessRuleException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from ..models.profile import Profile
from ..models.review import Review
from ..repositories.factory import RepositoryFactory
from ..schemas.review import ReviewCreate
from .base import BaseService
from .notification_service import NotificationService
from .trainer_service import TrainerService

logger = logging.getLogger(__name__)


class ReviewService(BaseService):
    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        super().__init__(db)
        self.review_repository = RepositoryFactory.create_review_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)
        self.notification_service = notification_service or NotificationService(db)
        self.trainer_service = TrainerService(db, notification_service=self.notification_service)

    @BaseService.measure_operation("submit_review")
    def submit(self, student: Profile, data: ReviewCreate) -> Review:
        """
        Review a completed booking and refresh the trainer's cached rating.

        Raises:
            NotFoundException: booking does not exist
            ForbiddenException: booking belongs to someone else
            BusinessRuleException: booking is not completed or has no trainer
            ConflictException: booking already reviewed
        """
        booking = self.booking_repository.get_by_id(data.booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        if booking.student_id != student.id:
            raise ForbiddenException("You can only review your own bookings", code="NOT_CLIENT")
        if booking.status != BookingStatus.COMPLETED.value or not booking.trainer_id:
            raise BusinessRuleException(
                "Only completed sessions can be reviewed", code="BOOKING_NOT_COMPLETED"
            )
        if self.review_repository.get_by_booking(booking.id):
            raise ConflictException("This booking has already been reviewed", code="ALREADY_REVIEWED")

        with self.transaction():
            review = self.review_repository.create(
                booking_id=booking.id,
                student_id=student.id,
                trainer_id=booking.trainer_id,
                rating=data.rating,
                comment=data.comment,
                communication_rating=data.communication_rating,
                punctuality_rating=data.punctuality_rating,
                skills_rating=data.skills_rating,
                would_recommend=data.would_recommend,
            )
            trainer = self.trainer_service.refresh_rating(booking.trainer_id)
            self.notification_service.notify(
                trainer.user_id,
                NotificationType.REVIEW_RECEIVED,
                "New review",
                f"{student.display_name} rated '{booking.training_topic}' {data.rating}/5.",
                {"booking_id": booking.id, "review_id": review.id},
            )

        self.log_operation("submit_review", booking_id=booking.id, rating=data.rating)
        return review

    def list_for_trainer(self, trainer_id: str, limit: int = 50) -> List[Review]:
        if not self.trainer_repository.exists(id=trainer_id):
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        return self.review_repository.list_for_trainer(trainer_id, limit=limit)
