# backend/skilloop/models/review.py
"""
Review model.

One review per completed booking (DB unique constraint). Posting a review
refreshes the trainer's cached ``rating`` and ``total_reviews``.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
import ulid

from ..database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, unique=True)
    student_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    trainer_id = Column(String(26), ForeignKey("trainers.id", ondelete="CASCADE"), nullable=False, index=True)

    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    communication_rating = Column(Integer, nullable=True)
    punctuality_rating = Column(Integer, nullable=True)
    skills_rating = Column(Integer, nullable=True)
    would_recommend = Column(Boolean, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        CheckConstraint(
            "(comment IS NULL) OR (length(comment) <= 1000)",
            name="ck_reviews_comment_length",
        ),
        Index("idx_reviews_trainer_created", "trainer_id", "created_at"),
    )
