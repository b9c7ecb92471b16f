# backend/skilloop/services/trainer_service.py
"""
Trainer Service for the Skilloop Platform

Handles the trainer lifecycle:
- Applying to become a trainer (creates a pending profile)
- Public search and profile pages (approved trainers only)
- Self-service profile edits
- Admin moderation (approve / reject / suspend, tags)
"""

from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import RECENT_REVIEWS_LIMIT
from ..core.enums import NotificationType, ProfileRole, TrainerStatus
from ..core.exceptions import ConflictException, NotFoundException
from ..models.profile import Profile
from ..models.trainer import Trainer
from ..repositories.factory import RepositoryFactory
from ..schemas.trainer import TrainerApplication, TrainerUpdate
from .base import BaseService
from .notification_service import NotificationService
from .pricing_service import PricingService

logger = logging.getLogger(__name__)


class TrainerService(BaseService):
    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        pricing_service: Optional[PricingService] = None,
    ):
        super().__init__(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)
        self.review_repository = RepositoryFactory.create_review_repository(db)
        self.notification_service = notification_service or NotificationService(db)
        self.pricing_service = pricing_service or PricingService(db)

    def get_trainer(self, trainer_id: str) -> Trainer:
        trainer = self.trainer_repository.get_by_id(trainer_id)
        if not trainer:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        return trainer

    def get_for_user(self, user_id: str) -> Optional[Trainer]:
        return self.trainer_repository.get_by_user_id(user_id)

    @BaseService.measure_operation("apply_as_trainer")
    def apply(self, profile: Profile, data: TrainerApplication) -> Trainer:
        """Create a pending trainer profile for ``profile`` and alert admins."""
        if self.trainer_repository.get_by_user_id(profile.id):
            raise ConflictException(
                "You already have a trainer profile", code="TRAINER_PROFILE_EXISTS"
            )

        with self.transaction():
            trainer = self.trainer_repository.create(
                user_id=profile.id,
                name=data.name or profile.full_name or profile.email,
                title=data.title,
                specialization=data.specialization,
                experience_years=data.experience_years,
                hourly_rate=data.hourly_rate,
                bio=data.bio,
                skills=data.skills,
                location=data.location,
                timezone=data.timezone,
                languages_spoken=data.languages_spoken,
                certifications=data.certifications,
                status=TrainerStatus.PENDING.value,
            )
            if profile.role == ProfileRole.CLIENT.value:
                profile.role = ProfileRole.TRAINER.value
            self.notification_service.notify_admins(
                NotificationType.TRAINER_APPLICATION,
                "New trainer application",
                f"{trainer.name} applied to become a trainer ({trainer.specialization}).",
                {"trainer_id": trainer.id},
            )

        self.log_operation("apply_as_trainer", trainer_id=trainer.id, user_id=profile.id)
        return trainer

    @BaseService.measure_operation("search_trainers")
    def search(self, **filters: Any) -> List[Trainer]:
        return self.trainer_repository.search_public(**filters)

    @BaseService.measure_operation("get_public_trainer")
    def get_public_profile(self, trainer_id: str) -> Dict[str, Any]:
        trainer = self.get_trainer(trainer_id)
        if not trainer.is_approved:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        pricing = self.pricing_service.get_pricing(trainer.id)
        return {
            "trainer": trainer,
            "pricing": self.pricing_service.describe(pricing) if pricing else None,
            "recent_reviews": self.review_repository.list_for_trainer(
                trainer.id, limit=RECENT_REVIEWS_LIMIT
            ),
        }

    @BaseService.measure_operation("update_trainer_profile")
    def update_profile(self, trainer: Trainer, data: TrainerUpdate) -> Trainer:
        changes = data.model_dump(exclude_unset=True)
        with self.transaction():
            for key, value in changes.items():
                setattr(trainer, key, value)
            self.trainer_repository.flush()
        return trainer

    # Admin moderation

    def list_for_admin(self, status: Optional[str] = None, q: Optional[str] = None) -> List[Trainer]:
        return self.trainer_repository.list_for_admin(status=status, q=q)

    @BaseService.measure_operation("set_trainer_status")
    def set_status(self, trainer_id: str, status: TrainerStatus) -> Trainer:
        trainer = self.get_trainer(trainer_id)
        with self.transaction():
            trainer.set_status(status.value)
            if status == TrainerStatus.APPROVED:
                self.notification_service.notify(
                    trainer.user_id,
                    NotificationType.TRAINER_APPROVED,
                    "Trainer profile approved",
                    "Your trainer profile is live. Clients can now find and book you.",
                    {"trainer_id": trainer.id},
                )
            elif status == TrainerStatus.REJECTED:
                self.notification_service.notify(
                    trainer.user_id,
                    NotificationType.TRAINER_REJECTED,
                    "Trainer application not approved",
                    "Your trainer application was not approved. Update your profile and reapply.",
                    {"trainer_id": trainer.id},
                )
            self.trainer_repository.flush()
        return trainer

    def set_tags(self, trainer_id: str, tags: List[str]) -> Trainer:
        trainer = self.get_trainer(trainer_id)
        with self.transaction():
            trainer.tags = list(dict.fromkeys(tags))
            self.trainer_repository.flush()
        return trainer

    def refresh_rating(self, trainer_id: str) -> Trainer:
        """Recompute the cached rating from reviews. Caller commits."""
        trainer = self.get_trainer(trainer_id)
        average, count = self.review_repository.rating_stats(trainer_id)
        trainer.rating = (average or Decimal("0")).quantize(Decimal("0.01"))
        trainer.total_reviews = count
        self.trainer_repository.flush()
        return trainer
