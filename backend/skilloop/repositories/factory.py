# backend/skilloop/repositories/factory.py
"""
Repository Factory for the Skilloop Platform

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from .base_repository import BaseRepository

# Avoid circular imports
if TYPE_CHECKING:
    from .booking_repository import BookingRepository
    from .content_repository import (
        JobRepository,
        PlatformSettingRepository,
        ServiceCategoryRepository,
        SuccessStoryRepository,
    )
    from .feedback_repository import FeedbackLinkRepository, FeedbackResponseRepository
    from .message_repository import MessageRepository, NotificationRepository
    from .payout_repository import PayoutBatchRepository, PayoutRepository
    from .profile_repository import ProfileRepository
    from .review_repository import ReviewRepository
    from .trainer_repository import AvailabilityRepository, TrainerPricingRepository, TrainerRepository
    from .training_request_repository import (
        TrainingApplicationRepository,
        TrainingRequestRepository,
    )


class RepositoryFactory:
    """
    Factory class for creating repository instances.

    Centralizes repository creation to ensure consistent initialization
    and makes it easy to swap implementations in tests.
    """

    @staticmethod
    def create_base_repository(db: Session, model) -> BaseRepository:
        """Create a generic base repository for any model."""
        return BaseRepository(db, model)

    @staticmethod
    def create_profile_repository(db: Session) -> "ProfileRepository":
        from .profile_repository import ProfileRepository

        return ProfileRepository(db)

    @staticmethod
    def create_trainer_repository(db: Session) -> "TrainerRepository":
        from .trainer_repository import TrainerRepository

        return TrainerRepository(db)

    @staticmethod
    def create_trainer_pricing_repository(db: Session) -> "TrainerPricingRepository":
        from .trainer_repository import TrainerPricingRepository

        return TrainerPricingRepository(db)

    @staticmethod
    def create_availability_repository(db: Session) -> "AvailabilityRepository":
        from .trainer_repository import AvailabilityRepository

        return AvailabilityRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_review_repository(db: Session) -> "ReviewRepository":
        from .review_repository import ReviewRepository

        return ReviewRepository(db)

    @staticmethod
    def create_payout_repository(db: Session) -> "PayoutRepository":
        from .payout_repository import PayoutRepository

        return PayoutRepository(db)

    @staticmethod
    def create_payout_batch_repository(db: Session) -> "PayoutBatchRepository":
        from .payout_repository import PayoutBatchRepository

        return PayoutBatchRepository(db)

    @staticmethod
    def create_message_repository(db: Session) -> "MessageRepository":
        from .message_repository import MessageRepository

        return MessageRepository(db)

    @staticmethod
    def create_notification_repository(db: Session) -> "NotificationRepository":
        from .message_repository import NotificationRepository

        return NotificationRepository(db)

    @staticmethod
    def create_training_request_repository(db: Session) -> "TrainingRequestRepository":
        from .training_request_repository import TrainingRequestRepository

        return TrainingRequestRepository(db)

    @staticmethod
    def create_training_application_repository(db: Session) -> "TrainingApplicationRepository":
        from .training_request_repository import TrainingApplicationRepository

        return TrainingApplicationRepository(db)

    @staticmethod
    def create_feedback_link_repository(db: Session) -> "FeedbackLinkRepository":
        from .feedback_repository import FeedbackLinkRepository

        return FeedbackLinkRepository(db)

    @staticmethod
    def create_feedback_response_repository(db: Session) -> "FeedbackResponseRepository":
        from .feedback_repository import FeedbackResponseRepository

        return FeedbackResponseRepository(db)

    @staticmethod
    def create_platform_setting_repository(db: Session) -> "PlatformSettingRepository":
        from .content_repository import PlatformSettingRepository

        return PlatformSettingRepository(db)

    @staticmethod
    def create_service_category_repository(db: Session) -> "ServiceCategoryRepository":
        from .content_repository import ServiceCategoryRepository

        return ServiceCategoryRepository(db)

    @staticmethod
    def create_job_repository(db: Session) -> "JobRepository":
        from .content_repository import JobRepository

        return JobRepository(db)

    @staticmethod
    def create_success_story_repository(db: Session) -> "SuccessStoryRepository":
        from .content_repository import SuccessStoryRepository

        return SuccessStoryRepository(db)
