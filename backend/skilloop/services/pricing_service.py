"""Trainer pricing: the stored rate plus what a client pays on top of it."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.enums import PricingType
from ..core.exceptions import NotFoundException, ValidationException
from ..models.trainer import Trainer, TrainerPricing
from ..repositories.factory import RepositoryFactory
from ..schemas.trainer import PricingUpsert
from . import ledger
from .base import BaseService
from .platform_settings_service import PlatformSettingsService


class PricingService(BaseService):
    """Read and upsert trainer pricing, attaching ledger breakdowns."""

    def __init__(self, db: Session, settings_service: Optional[PlatformSettingsService] = None) -> None:
        super().__init__(db)
        self.pricing_repository = RepositoryFactory.create_trainer_pricing_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)
        self.settings_service = settings_service or PlatformSettingsService(db)

    def _breakdown(self, rate: Decimal, settings: Dict[str, Decimal]) -> Dict[str, Decimal]:
        b = ledger.rate_breakdown(
            rate,
            commission_pct=settings["platform_commission"],
            gst_pct=settings["gst_rate"],
            platform_fee=settings["platform_fee"],
        )
        return {
            "base_rate": b.base_rate,
            "commission": b.commission,
            "gst": b.gst,
            "platform_fee": b.platform_fee,
            "total": b.total,
        }

    def describe(self, pricing: TrainerPricing) -> Dict[str, Any]:
        settings = self.settings_service.get_all()
        session_breakdown = None
        if pricing.pricing_type == PricingType.SESSION.value and pricing.session_rate is not None:
            session_breakdown = self._breakdown(Decimal(str(pricing.session_rate)), settings)
        return {
            "trainer_id": pricing.trainer_id,
            "pricing_type": pricing.pricing_type,
            "hourly_rate": pricing.hourly_rate,
            "session_rate": pricing.session_rate,
            "hourly_breakdown": self._breakdown(Decimal(str(pricing.hourly_rate)), settings),
            "session_breakdown": session_breakdown,
        }

    def get_pricing(self, trainer_id: str) -> Optional[TrainerPricing]:
        return self.pricing_repository.get_by_trainer_id(trainer_id)

    @BaseService.measure_operation("pricing.get")
    def get_pricing_details(self, trainer_id: str) -> Dict[str, Any]:
        if not self.trainer_repository.exists(id=trainer_id):
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        pricing = self.pricing_repository.get_by_trainer_id(trainer_id)
        if pricing is None:
            raise NotFoundException("Trainer has not set pricing", code="PRICING_NOT_SET")
        return self.describe(pricing)

    @BaseService.measure_operation("pricing.save")
    def save_pricing(self, trainer: Trainer, data: PricingUpsert) -> Dict[str, Any]:
        """Insert the trainer's pricing row or update it in place."""
        if data.hourly_rate <= 0:
            raise ValidationException("Hourly rate must be greater than zero", code="INVALID_RATE")
        session_rate = data.session_rate if data.pricing_type == PricingType.SESSION else None
        if data.pricing_type == PricingType.SESSION and (session_rate is None or session_rate <= 0):
            raise ValidationException(
                "Session rate must be greater than zero for session pricing", code="INVALID_RATE"
            )

        with self.transaction():
            pricing = self.pricing_repository.get_by_trainer_id(trainer.id)
            if pricing is None:
                pricing = self.pricing_repository.create(
                    trainer_id=trainer.id,
                    pricing_type=data.pricing_type.value,
                    hourly_rate=data.hourly_rate,
                    session_rate=session_rate,
                )
            else:
                pricing.pricing_type = data.pricing_type.value
                pricing.hourly_rate = data.hourly_rate
                pricing.session_rate = session_rate
                self.pricing_repository.flush()

        self.log_operation("pricing.save", trainer_id=trainer.id, pricing_type=data.pricing_type.value)
        return self.describe(pricing)

    def amount_for(self, trainer: Trainer, duration_hours: Decimal) -> Decimal:
        """Booking amount for a session of ``duration_hours`` with this trainer."""
        pricing = self.pricing_repository.get_by_trainer_id(trainer.id)
        if pricing is not None:
            return ledger.session_amount(
                pricing.pricing_type, pricing.hourly_rate, pricing.session_rate, duration_hours
            )
        if trainer.hourly_rate is None:
            raise ValidationException(
                "Trainer has not set a rate yet", code="PRICING_NOT_SET", details={"trainer_id": trainer.id}
            )
        return ledger.session_amount(PricingType.HOURLY.value, trainer.hourly_rate, None, duration_hours)
