# backend/skilloop/models/profile.py
"""
Profile model.

One row per account of the hosted auth provider. The primary key is the
provider's user id (the ``sub`` claim), so profile ids are not ULIDs.
The role column drives authorization throughout the API.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, CheckConstraint, Column, DateTime, Index, String
from sqlalchemy.orm import relationship
import ulid

from ..database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=lambda: str(ulid.ULID()))
    email = Column(String(255), nullable=False, unique=True)
    full_name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default="client")
    phone = Column(String(20), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    company_name = Column(String(255), nullable=True)
    company_size = Column(String(50), nullable=True)
    industry = Column(String(100), nullable=True)
    notification_preferences = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    trainer = relationship("Trainer", back_populates="profile", uselist=False)

    __table_args__ = (
        CheckConstraint("role IN ('client', 'trainer', 'admin')", name="ck_profiles_role"),
        Index("idx_profiles_role", "role"),
    )

    @property
    def display_name(self) -> str:
        return self.full_name or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def __repr__(self) -> str:
        return f"<Profile {self.id} {self.email} role={self.role}>"
