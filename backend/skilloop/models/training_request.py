# backend/skilloop/models/training_request.py
"""
Training requests (client job posts) and trainer applications to them.
"""

from datetime import datetime, timezone

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
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class TrainingRequest(Base):
    __tablename__ = "training_requests"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    client_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    target_audience = Column(String(20), nullable=False, default="corporate")
    expected_start_date = Column(Date, nullable=True)
    expected_end_date = Column(Date, nullable=True)
    duration_hours = Column(Integer, nullable=False, default=8)
    delivery_mode = Column(String(20), nullable=False, default="online")
    location = Column(String(255), nullable=True)
    language_preference = Column(String(50), nullable=False, default="English")
    tools_required = Column(JSON, nullable=False, default=list)
    syllabus_content = Column(Text, nullable=True)
    allow_trainer_pricing = Column(Boolean, nullable=False, default=True)
    allow_trainer_syllabus = Column(Boolean, nullable=False, default=False)
    budget_min = Column(Numeric(12, 2), nullable=True)
    budget_max = Column(Numeric(12, 2), nullable=True)
    application_deadline = Column(DateTime(timezone=True), nullable=True)

    status = Column(String(20), nullable=False, default="open")
    selected_trainer_id = Column(String(26), ForeignKey("trainers.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    applications = relationship("TrainingApplication", back_populates="request", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "status IN ('open', 'in_progress', 'closed', 'completed', 'cancelled')",
            name="ck_training_requests_status",
        ),
        CheckConstraint(
            "target_audience IN ('college', 'corporate', 'custom')",
            name="ck_training_requests_audience",
        ),
        CheckConstraint(
            "delivery_mode IN ('online', 'offline', 'hybrid')",
            name="ck_training_requests_delivery_mode",
        ),
        Index("idx_training_requests_status_created", "status", "created_at"),
    )


class TrainingApplication(Base):
    __tablename__ = "training_applications"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    request_id = Column(String(26), ForeignKey("training_requests.id", ondelete="CASCADE"), nullable=False)
    trainer_id = Column(String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False, index=True)

    proposed_price = Column(Numeric(12, 2), nullable=False)
    proposed_start_date = Column(Date, nullable=True)
    proposed_end_date = Column(Date, nullable=True)
    proposed_duration_hours = Column(Integer, nullable=True)
    availability_notes = Column(Text, nullable=True)
    message_to_client = Column(Text, nullable=True)
    proposed_syllabus = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    request = relationship("TrainingRequest", back_populates="applications")
    trainer = relationship("Trainer")

    __table_args__ = (
        UniqueConstraint("request_id", "trainer_id", name="uq_training_applications_trainer"),
        CheckConstraint(
            "status IN ('pending', 'shortlisted', 'selected', 'rejected')",
            name="ck_training_applications_status",
        ),
        CheckConstraint("proposed_price > 0", name="ck_training_applications_price_positive"),
    )
