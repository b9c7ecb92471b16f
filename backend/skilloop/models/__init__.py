# backend/skilloop/models/__init__.py
"""
SQLAlchemy models.

Importing this package registers every table on ``Base.metadata``.
"""

from .booking import Booking
from .content import Job, PlatformSetting, ServiceCategory, SuccessStory
from .feedback import FeedbackLink, FeedbackResponse
from .message import Message, Notification
from .payout import PayoutBatch, TrainerPayout
from .profile import Profile
from .review import Review
from .trainer import Trainer, TrainerAvailability, TrainerPricing
from .training_request import TrainingApplication, TrainingRequest

__all__ = [
    "Booking",
    "FeedbackLink",
    "FeedbackResponse",
    "Job",
    "Message",
    "Notification",
    "PayoutBatch",
    "PlatformSetting",
    "Profile",
    "Review",
    "ServiceCategory",
    "SuccessStory",
    "Trainer",
    "TrainerAvailability",
    "TrainerPayout",
    "TrainerPricing",
    "TrainingApplication",
    "TrainingRequest",
]
