# backend/skilloop/models/trainer.py
"""
Trainer models: the public trainer profile, its pricing row and the
per-date availability slots a trainer publishes.
"""

from datetime import datetime, timezone
import logging

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base

logger = logging.getLogger(__name__)


class Trainer(Base):
    """
    Supply-side profile. Only approved trainers appear in public search
    and can receive direct bookings.
    """

    __tablename__ = "trainers"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    user_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, unique=True)

    name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    bio = Column(Text, nullable=True)
    specialization = Column(String(255), nullable=True)
    skills = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    languages_spoken = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)

    hourly_rate = Column(Numeric(10, 2), nullable=True)
    experience_years = Column(Integer, nullable=True)
    location = Column(String(255), nullable=True)
    timezone = Column(String(64), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    status = Column(String(20), nullable=False, default="pending")
    rating = Column(Numeric(3, 2), nullable=False, default=0)
    total_reviews = Column(Integer, nullable=False, default=0)
    instant_booking_available = Column(Boolean, nullable=False, default=False)
    minimum_booking_hours = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    profile = relationship("Profile", back_populates="trainer")
    pricing = relationship("TrainerPricing", back_populates="trainer", uselist=False, cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected', 'suspended')",
            name="ck_trainers_status",
        ),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_trainers_rating_range"),
        Index("idx_trainers_status", "status"),
    )

    @property
    def is_approved(self) -> bool:
        return self.status == "approved"

    def set_status(self, status: str) -> None:
        logger.info(f"Trainer {self.id} status {self.status} -> {status}")
        self.status = status

    def __repr__(self) -> str:
        return f"<Trainer {self.id} {self.name} status={self.status}>"


class TrainerPricing(Base):
    """Hourly or per-session rate. One row per trainer, written by upsert."""

    __tablename__ = "trainer_pricing"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    trainer_id = Column(String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False, unique=True)
    pricing_type = Column(String(20), nullable=False, default="hourly")
    hourly_rate = Column(Numeric(10, 2), nullable=False)
    session_rate = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    trainer = relationship("Trainer", back_populates="pricing")

    __table_args__ = (
        CheckConstraint("pricing_type IN ('hourly', 'session')", name="ck_trainer_pricing_type"),
        CheckConstraint("hourly_rate > 0", name="ck_trainer_pricing_hourly_positive"),
        CheckConstraint(
            "session_rate IS NULL OR session_rate > 0", name="ck_trainer_pricing_session_positive"
        ),
    )


class TrainerAvailability(Base):
    """A published time window on a specific date."""

    __tablename__ = "trainer_availability"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    trainer_id = Column(String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    is_booked = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_trainer_availability_window"),
        UniqueConstraint("trainer_id", "date", "start_time", name="uq_trainer_availability_start"),
        Index("idx_trainer_availability_trainer_date", "trainer_id", "date"),
    )
