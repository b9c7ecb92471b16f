# backend/skilloop/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...integrations.paypal_client import PayPalClient
from ...services.analytics_service import AnalyticsService
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.content_service import ContentService
from ...services.feedback_service import FeedbackService
from ...services.message_service import MessageService
from ...services.notification_service import NotificationService
from ...services.payment_service import PaymentService
from ...services.payout_service import PayoutService
from ...services.platform_settings_service import PlatformSettingsService
from ...services.pricing_service import PricingService
from ...services.profile_service import ProfileService
from ...services.review_service import ReviewService
from ...services.trainer_service import TrainerService
from ...services.training_request_service import TrainingRequestService
from .database import get_db


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    return NotificationService(db)


def get_settings_service(db: Session = Depends(get_db)) -> PlatformSettingsService:
    return PlatformSettingsService(db)


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


def get_pricing_service(
    db: Session = Depends(get_db),
    settings_service: PlatformSettingsService = Depends(get_settings_service),
) -> PricingService:
    return PricingService(db, settings_service=settings_service)


def get_trainer_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
    pricing_service: PricingService = Depends(get_pricing_service),
) -> TrainerService:
    return TrainerService(
        db, notification_service=notification_service, pricing_service=pricing_service
    )


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    return AvailabilityService(db)


def get_payout_service(
    db: Session = Depends(get_db),
    settings_service: PlatformSettingsService = Depends(get_settings_service),
) -> PayoutService:
    return PayoutService(db, settings_service=settings_service)


def get_booking_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
    pricing_service: PricingService = Depends(get_pricing_service),
    payout_service: PayoutService = Depends(get_payout_service),
    settings_service: PlatformSettingsService = Depends(get_settings_service),
) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Database session
        notification_service: Notification service instance

    Returns:
        BookingService instance
    """
    return BookingService(
        db,
        notification_service=notification_service,
        pricing_service=pricing_service,
        payout_service=payout_service,
        settings_service=settings_service,
    )


def get_paypal_client() -> PayPalClient:
    return PayPalClient.from_settings()


def get_payment_service(
    db: Session = Depends(get_db),
    paypal_client: PayPalClient = Depends(get_paypal_client),
    booking_service: BookingService = Depends(get_booking_service),
    notification_service: NotificationService = Depends(get_notification_service),
) -> PaymentService:
    return PaymentService(
        db,
        paypal_client=paypal_client,
        booking_service=booking_service,
        notification_service=notification_service,
    )


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    return MessageService(db)


def get_feedback_service(db: Session = Depends(get_db)) -> FeedbackService:
    return FeedbackService(db)


def get_review_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> ReviewService:
    return ReviewService(db, notification_service=notification_service)


def get_training_request_service(
    db: Session = Depends(get_db),
    notification_service: NotificationService = Depends(get_notification_service),
) -> TrainingRequestService:
    return TrainingRequestService(db, notification_service=notification_service)


def get_analytics_service(db: Session = Depends(get_db)) -> AnalyticsService:
    return AnalyticsService(db)


def get_content_service(db: Session = Depends(get_db)) -> ContentService:
    return ContentService(db)
