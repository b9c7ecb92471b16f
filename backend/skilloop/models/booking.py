# backend/skilloop/models/booking.py
"""
Booking model for the Skilloop platform.

A booking is a scheduled session between a client and a trainer. Direct
bookings name the trainer up front; package bookings are priced from a
service category and get a trainer assigned later by an admin, so
``trainer_id`` is nullable.

All money columns are written by ``services.ledger`` only.
"""

from datetime import datetime, timezone
import logging

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    student_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True)
    trainer_id = Column(String(26), ForeignKey("trainers.id"), nullable=True, index=True)

    training_topic = Column(String(255), nullable=False)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    duration_hours = Column(Numeric(6, 2), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    booking_type = Column(String(20), nullable=False, default="direct")
    notes = Column(Text, nullable=True)
    meeting_link = Column(String(500), nullable=True)

    # Client / organization details
    organization_name = Column(String(255), nullable=True)
    client_name = Column(String(255), nullable=True)
    client_email = Column(String(255), nullable=True)
    client_phone = Column(String(20), nullable=True)
    team_size = Column(Integer, nullable=True)
    special_requirements = Column(Text, nullable=True)
    service_category = Column(String(100), nullable=True)
    location_city = Column(String(100), nullable=True)
    location_area = Column(String(100), nullable=True)
    urgency_level = Column(String(20), nullable=True)

    # Money
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    client_payment_amount = Column(Numeric(12, 2), nullable=True)
    platform_fee_amount = Column(Numeric(12, 2), nullable=True)
    platform_fee_percentage = Column(Numeric(5, 2), nullable=True)
    platform_commission_rate = Column(Numeric(5, 2), nullable=True)
    platform_commission_amount = Column(Numeric(12, 2), nullable=True)
    trainer_payout_amount = Column(Numeric(12, 2), nullable=True)
    cancellation_fee_amount = Column(Numeric(12, 2), nullable=True)

    # Payment
    payment_status = Column(String(20), nullable=False, default="pending")
    payment_provider = Column(String(20), nullable=True)
    payment_transaction_id = Column(String(100), nullable=True)
    paypal_order_id = Column(String(100), nullable=True)
    payment_url = Column(String(500), nullable=True)
    payment_confirmed_at = Column(DateTime(timezone=True), nullable=True)

    # Assignment / lifecycle
    trainer_assignment_status = Column(String(20), nullable=True)
    auto_assigned_at = Column(DateTime(timezone=True), nullable=True)
    requires_agreement = Column(Boolean, nullable=False, default=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by_id = Column(String(36), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    student = relationship("Profile", foreign_keys=[student_id])
    trainer = relationship("Trainer", foreign_keys=[trainer_id])

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'assigned', 'delivering', "
            "'delivered', 'completed', 'cancelled')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'confirmed', 'failed')",
            name="ck_bookings_payment_status",
        ),
        CheckConstraint("booking_type IN ('direct', 'package')", name="ck_bookings_type"),
        CheckConstraint("end_time > start_time", name="ck_bookings_time_window"),
        CheckConstraint("total_amount >= 0", name="ck_bookings_amount_non_negative"),
        Index("idx_bookings_trainer_start", "trainer_id", "start_time"),
        Index("idx_bookings_student_start", "student_id", "start_time"),
        Index("idx_bookings_status", "status"),
    )

    def is_participant(self, profile_id: str, trainer_user_id: str | None = None) -> bool:
        """True for the booking client or the assigned trainer's account."""
        if self.student_id == profile_id:
            return True
        return trainer_user_id is not None and trainer_user_id == profile_id

    def cancel(self, cancelled_by_id: str, reason: str | None = None) -> None:
        """Mark the booking cancelled, keeping the reason in notes."""
        self.status = "cancelled"
        self.cancelled_at = datetime.now(timezone.utc)
        self.cancelled_by_id = cancelled_by_id
        if reason:
            note = f"Cancellation reason: {reason}"
            self.notes = f"{self.notes}\n\n{note}" if self.notes else note
        logger.info(f"Booking {self.id} cancelled by {cancelled_by_id}")

    def complete(self) -> None:
        self.status = "completed"
        self.completed_at = datetime.now(timezone.utc)
        logger.info(f"Booking {self.id} marked as completed")

    def __repr__(self) -> str:
        return f"<Booking {self.id} {self.training_topic!r} status={self.status}>"
