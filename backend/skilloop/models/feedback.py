# backend/skilloop/models/feedback.py
"""
Tokenized feedback links and the anonymous responses collected through them.

A link lets an external attendee rate a delivered session without an
account. It is valid while ``is_active`` and before ``expires_at``.
"""

from datetime import datetime, timezone

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
import ulid

from ..core.timezone_utils import ensure_utc
from ..database import Base


class FeedbackLink(Base):
    __tablename__ = "feedback_links"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    booking_id = Column(String(26), ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(64), nullable=False, unique=True)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    booking = relationship("Booking")
    responses = relationship("FeedbackResponse", back_populates="link")

    def is_valid(self, now: datetime) -> bool:
        return bool(self.is_active) and ensure_utc(self.expires_at) > ensure_utc(now)


class FeedbackResponse(Base):
    __tablename__ = "feedback_responses"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    feedback_link_id = Column(String(26), ForeignKey("feedback_links.id", ondelete="CASCADE"), nullable=False)
    respondent_name = Column(String(255), nullable=False)
    respondent_email = Column(String(255), nullable=False)
    organization_name = Column(String(255), nullable=True)
    rating = Column(Integer, nullable=False)
    communication_rating = Column(Integer, nullable=True)
    punctuality_rating = Column(Integer, nullable=True)
    skills_rating = Column(Integer, nullable=True)
    would_recommend = Column(Boolean, nullable=True)
    review_comment = Column(Text, nullable=True)

    submitted_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    link = relationship("FeedbackLink", back_populates="responses")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_feedback_responses_rating_range"),
        Index("idx_feedback_responses_link", "feedback_link_id"),
    )
