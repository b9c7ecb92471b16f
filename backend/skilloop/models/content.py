# backend/skilloop/models/content.py
"""Admin-managed site content: platform settings, service categories, jobs, success stories."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
import ulid

from ..database import Base


class PlatformSetting(Base):
    """Numeric key/value business setting; booleans are stored as 1/0."""

    __tablename__ = "platform_settings"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    setting_key = Column(String(100), nullable=False, unique=True)
    setting_value = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=True,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class ServiceCategory(Base):
    """Packaged training offering; its base price seeds package quotes."""

    __tablename__ = "service_categories"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    name = Column(String(255), nullable=False)
    slug = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(12, 2), nullable=True)
    icon_name = Column(String(100), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))


class Job(Base):
    __tablename__ = "jobs"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    title = Column(String(255), nullable=False)
    department = Column(String(100), nullable=False)
    location = Column(String(255), nullable=False)
    type = Column(String(20), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(JSON, nullable=False, default=list)
    external_form_link = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        CheckConstraint(
            "type IN ('full-time', 'part-time', 'contract', 'internship')", name="ck_jobs_type"
        ),
    )


class SuccessStory(Base):
    __tablename__ = "success_stories"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    client_name = Column(String(255), nullable=False)
    client_company = Column(String(255), nullable=True)
    client_position = Column(String(255), nullable=True)
    client_avatar_url = Column(String(500), nullable=True)
    company_logo_url = Column(String(500), nullable=True)
    display_order = Column(Integer, nullable=False, default=0)
    is_featured = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
