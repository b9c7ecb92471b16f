# backend/skilloop/models/payout.py
"""
Trainer payouts and payout batches.

A payout is created once per completed booking. Admins group pending,
unbatched payouts into a batch and settle the batch in one step.
"""

from datetime import datetime, timezone
import logging

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class TrainerPayout(Base):
    __tablename__ = "trainer_payouts"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True)
    trainer_id = Column(String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False, index=True)
    payout_batch_id = Column(String(26), ForeignKey("payout_batches.id"), nullable=True, index=True)

    gross_amount = Column(Numeric(12, 2), nullable=False)
    platform_commission = Column(Numeric(12, 2), nullable=False)
    net_amount = Column(Numeric(12, 2), nullable=False)
    payout_status = Column(String(20), nullable=False, default="pending")
    paid_at = Column(DateTime(timezone=True), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    trainer = relationship("Trainer")
    booking = relationship("Booking")
    batch = relationship("PayoutBatch", back_populates="payouts")

    __table_args__ = (
        CheckConstraint("payout_status IN ('pending', 'paid')", name="ck_trainer_payouts_status"),
        CheckConstraint("net_amount >= 0", name="ck_trainer_payouts_net_non_negative"),
        Index("idx_trainer_payouts_status", "payout_status"),
    )

    def mark_paid(self, paid_at: datetime) -> None:
        self.payout_status = "paid"
        self.paid_at = paid_at


class PayoutBatch(Base):
    __tablename__ = "payout_batches"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    batch_name = Column(String(255), nullable=False)
    total_amount = Column(Numeric(14, 2), nullable=False, default=0)
    trainer_count = Column(Integer, nullable=False, default=0)
    payout_count = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="pending")
    created_by = Column(String(36), ForeignKey("profiles.id"), nullable=True)
    notes = Column(Text, nullable=True)
    processed_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    payouts = relationship("TrainerPayout", back_populates="batch")

    __table_args__ = (
        CheckConstraint("status IN ('pending', 'completed')", name="ck_payout_batches_status"),
    )

    def mark_completed(self, processed_at: datetime) -> None:
        self.status = "completed"
        self.processed_at = processed_at
        logger.info(f"Payout batch {self.id} completed with {self.payout_count} payouts")
