# backend/skilloop/services/payout_service.py
"""
Payout Service for the Skilloop Platform

A trainer payout is created once per completed booking, split by the
ledger into platform commission and trainer net. Admins then group
pending payouts into batches and settle each batch in one step.
"""

from datetime import datetime
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import PAYOUT_BATCH_LIST_LIMIT
from ..core.enums import PayoutBatchStatus, PayoutStatus
from ..core.exceptions import BusinessRuleException, NotFoundException, ValidationException
from ..core.timezone_utils import utc_now
from ..models.booking import Booking
from ..models.payout import PayoutBatch, TrainerPayout
from ..models.profile import Profile
from ..models.trainer import Trainer
from ..repositories.factory import RepositoryFactory
from ..schemas.payout import PayoutBatchCreate
from . import ledger
from .base import BaseService
from .platform_settings_service import PlatformSettingsService

logger = logging.getLogger(__name__)


def default_batch_name(now: datetime) -> str:
    """``Payout Batch - Mar 05, 2026``"""
    return f"Payout Batch - {now.strftime('%b %d, %Y')}"


class PayoutService(BaseService):
    def __init__(self, db: Session, settings_service: Optional[PlatformSettingsService] = None):
        super().__init__(db)
        self.payout_repository = RepositoryFactory.create_payout_repository(db)
        self.batch_repository = RepositoryFactory.create_payout_batch_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.settings_service = settings_service or PlatformSettingsService(db)

    def create_for_booking(self, booking: Booking) -> TrainerPayout:
        """
        Record the trainer payout for a completed booking.

        Idempotent per booking. Runs inside the caller's transaction. The
        commission rate stored on the booking wins over the current setting.

        Raises:
            BusinessRuleException: the booking has no trainer assigned
        """
        existing = self.payout_repository.get_by_booking(booking.id)
        if existing:
            return existing
        if not booking.trainer_id:
            raise BusinessRuleException(
                "Cannot create a payout for a booking without an assigned trainer",
                code="TRAINER_NOT_ASSIGNED",
                details={"booking_id": booking.id},
            )

        commission_pct = booking.platform_commission_rate
        if commission_pct is None:
            commission_pct = self.settings_service.get("platform_commission")
        split = ledger.payout_split(booking.total_amount, commission_pct)
        payout = self.payout_repository.create(
            booking_id=booking.id,
            trainer_id=booking.trainer_id,
            gross_amount=split.gross,
            platform_commission=split.commission,
            net_amount=split.net,
            payout_status=PayoutStatus.PENDING.value,
        )
        self.logger.info(f"Created payout {payout.id} for booking {booking.id}: net {split.net}")
        return payout

    @BaseService.measure_operation("trainer_earnings")
    def earnings(self, trainer: Trainer) -> Dict[str, Any]:
        now = utc_now()
        bookings = self.booking_repository.list_for_trainer(trainer.id)
        summary = ledger.earnings_summary(bookings, now)
        payouts = self.payout_repository.list_for_trainer(trainer.id)
        return {
            "total_earnings": summary.total_earnings,
            "this_month": summary.this_month,
            "last_month": summary.last_month,
            "this_week": summary.this_week,
            "completed_bookings": summary.completed_bookings,
            "average_per_booking": summary.average_per_booking,
            "monthly_growth_pct": summary.monthly_growth_pct,
            "pending_payout_amount": ledger.sum_amounts(
                p.net_amount for p in payouts if p.payout_status == PayoutStatus.PENDING.value
            ),
            "paid_payout_amount": ledger.sum_amounts(
                p.net_amount for p in payouts if p.payout_status == PayoutStatus.PAID.value
            ),
            "as_of": now,
        }

    def list_for_trainer(self, trainer: Trainer) -> List[TrainerPayout]:
        return self.payout_repository.list_for_trainer(trainer.id)

    @BaseService.measure_operation("list_pending_payouts")
    def list_pending(self) -> Dict[str, Any]:
        payouts = self.payout_repository.list_pending_unbatched()
        items = []
        for payout in payouts:
            trainer = payout.trainer
            profile: Optional[Profile] = trainer.profile if trainer else None
            items.append(
                {
                    "id": payout.id,
                    "booking_id": payout.booking_id,
                    "trainer_id": payout.trainer_id,
                    "payout_batch_id": payout.payout_batch_id,
                    "gross_amount": payout.gross_amount,
                    "platform_commission": payout.platform_commission,
                    "net_amount": payout.net_amount,
                    "payout_status": payout.payout_status,
                    "paid_at": payout.paid_at,
                    "created_at": payout.created_at,
                    "trainer_name": trainer.name if trainer else None,
                    "trainer_email": profile.email if profile else None,
                    "training_topic": payout.booking.training_topic if payout.booking else None,
                    "booking_start_time": payout.booking.start_time if payout.booking else None,
                }
            )
        return {
            "payouts": items,
            "total_net_amount": ledger.sum_amounts(p.net_amount for p in payouts),
            "count": len(items),
        }

    @BaseService.measure_operation("create_payout_batch")
    def create_batch(self, admin: Profile, data: PayoutBatchCreate) -> PayoutBatch:
        """
        Group pending, unbatched payouts into a new batch.

        Raises:
            ValidationException: no payout ids were given
            BusinessRuleException: some ids are unknown, already paid or already batched
        """
        payout_ids = list(dict.fromkeys(data.payout_ids))
        if not payout_ids:
            raise ValidationException("Select at least one payout", code="NO_PAYOUTS_SELECTED")

        payouts = self.payout_repository.get_by_ids(payout_ids)
        found = {p.id: p for p in payouts}
        invalid = [
            payout_id
            for payout_id in payout_ids
            if payout_id not in found
            or found[payout_id].payout_status != PayoutStatus.PENDING.value
            or found[payout_id].payout_batch_id is not None
        ]
        if invalid:
            raise BusinessRuleException(
                "Some payouts are not pending or already belong to a batch",
                code="PAYOUTS_NOT_BATCHABLE",
                details={"payout_ids": invalid},
            )

        now = utc_now()
        with self.transaction():
            batch = self.batch_repository.create(
                batch_name=data.batch_name or default_batch_name(now),
                total_amount=ledger.sum_amounts(p.net_amount for p in payouts),
                trainer_count=len({p.trainer_id for p in payouts}),
                payout_count=len(payouts),
                status=PayoutBatchStatus.PENDING.value,
                created_by=admin.id,
                notes=data.notes,
            )
            for payout in payouts:
                payout.payout_batch_id = batch.id
            self.payout_repository.flush()

        self.log_operation(
            "create_payout_batch", batch_id=batch.id, payout_count=batch.payout_count, admin_id=admin.id
        )
        return batch

    def list_batches(self, limit: int = PAYOUT_BATCH_LIST_LIMIT) -> List[PayoutBatch]:
        return self.batch_repository.list_recent(limit=limit)

    @BaseService.measure_operation("mark_batch_paid")
    def mark_batch_paid(self, batch_id: str) -> PayoutBatch:
        batch = self.batch_repository.get_by_id(batch_id)
        if not batch:
            raise NotFoundException("Payout batch not found", code="BATCH_NOT_FOUND")
        if batch.status != PayoutBatchStatus.PENDING.value:
            raise BusinessRuleException(
                f"Batch is already {batch.status}",
                code="BATCH_NOT_PENDING",
                details={"status": batch.status},
            )

        now = utc_now()
        with self.transaction():
            batch.mark_completed(now)
            for payout in self.payout_repository.list_by_batch(batch.id):
                payout.mark_paid(now)
            self.batch_repository.flush()
        return batch
