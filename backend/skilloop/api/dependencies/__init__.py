# backend/skilloop/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .auth import get_current_profile, get_current_trainer, require_admin
from .database import get_db
from .services import (
    get_analytics_service,
    get_availability_service,
    get_booking_service,
    get_content_service,
    get_feedback_service,
    get_message_service,
    get_notification_service,
    get_payment_service,
    get_paypal_client,
    get_payout_service,
    get_pricing_service,
    get_profile_service,
    get_review_service,
    get_settings_service,
    get_trainer_service,
    get_training_request_service,
)

__all__ = [
    # Auth
    "get_current_profile",
    "get_current_trainer",
    "require_admin",
    # Database
    "get_db",
    # Services
    "get_analytics_service",
    "get_availability_service",
    "get_booking_service",
    "get_content_service",
    "get_feedback_service",
    "get_message_service",
    "get_notification_service",
    "get_payment_service",
    "get_paypal_client",
    "get_payout_service",
    "get_pricing_service",
    "get_profile_service",
    "get_review_service",
    "get_settings_service",
    "get_trainer_service",
    "get_training_request_service",
]
