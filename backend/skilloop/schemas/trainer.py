# backend/skilloop/schemas/trainer.py
"""Trainer profile, pricing and availability DTOs."""

from datetime import date, time
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.constants import (
    MAX_BIO_LENGTH,
    MAX_EXPERIENCE_YEARS,
    MAX_HOURLY_RATE,
    MAX_TRAINER_SKILLS,
    MIN_BIO_LENGTH,
    MIN_HOURLY_RATE,
    MIN_TRAINER_SKILLS,
)
from ..core.enums import PricingType, TrainerStatus
from .base import Money, ORMModel, StrictRequestModel, UTCDateTime
from .review import ReviewResponse


def _clean_list(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    return [v.strip() for v in values if v and v.strip()]


class TrainerApplication(StrictRequestModel):
    """Become-a-trainer form."""

    name: Optional[str] = Field(None, max_length=255)
    title: str = Field(..., min_length=2, max_length=255)
    specialization: str = Field(..., min_length=2, max_length=255)
    experience_years: int = Field(..., ge=0, le=MAX_EXPERIENCE_YEARS)
    hourly_rate: Decimal = Field(..., ge=MIN_HOURLY_RATE, le=MAX_HOURLY_RATE)
    bio: str = Field(..., min_length=MIN_BIO_LENGTH, max_length=MAX_BIO_LENGTH)
    skills: List[str] = Field(..., min_length=MIN_TRAINER_SKILLS, max_length=MAX_TRAINER_SKILLS)
    location: str = Field(..., min_length=1, max_length=255)
    timezone: str = Field(..., min_length=1, max_length=64)
    languages_spoken: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)

    @field_validator("skills", "languages_spoken", "certifications")
    @classmethod
    def _clean_lists(cls, v: List[str]) -> List[str]:
        return _clean_list(v) or []

    @field_validator("skills")
    @classmethod
    def _require_skill(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one skill is required")
        return v


class TrainerUpdate(StrictRequestModel):
    title: Optional[str] = Field(None, min_length=2, max_length=255)
    specialization: Optional[str] = Field(None, min_length=2, max_length=255)
    experience_years: Optional[int] = Field(None, ge=0, le=MAX_EXPERIENCE_YEARS)
    hourly_rate: Optional[Decimal] = Field(None, ge=MIN_HOURLY_RATE, le=MAX_HOURLY_RATE)
    bio: Optional[str] = Field(None, min_length=MIN_BIO_LENGTH, max_length=MAX_BIO_LENGTH)
    skills: Optional[List[str]] = Field(None, min_length=MIN_TRAINER_SKILLS, max_length=MAX_TRAINER_SKILLS)
    location: Optional[str] = Field(None, max_length=255)
    timezone: Optional[str] = Field(None, max_length=64)
    avatar_url: Optional[str] = Field(None, max_length=500)
    languages_spoken: Optional[List[str]] = None
    instant_booking_available: Optional[bool] = None
    minimum_booking_hours: Optional[int] = Field(None, ge=1, le=24)

    @field_validator("skills", "languages_spoken")
    @classmethod
    def _clean_lists(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_list(v)


class TrainerStatusUpdate(BaseModel):
    status: TrainerStatus


class TrainerTagsUpdate(BaseModel):
    tags: List[str] = Field(default_factory=list, max_length=20)

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, v: List[str]) -> List[str]:
        return _clean_list(v) or []


class TrainerSummary(ORMModel):
    id: str
    user_id: str
    name: str
    title: str
    specialization: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    hourly_rate: Optional[Money] = None
    experience_years: Optional[int] = None
    location: Optional[str] = None
    avatar_url: Optional[str] = None
    rating: Money
    total_reviews: int
    status: str


class TrainerDetail(TrainerSummary):
    bio: Optional[str] = None
    timezone: Optional[str] = None
    languages_spoken: List[str] = Field(default_factory=list)
    certifications: List[str] = Field(default_factory=list)
    instant_booking_available: bool = False
    minimum_booking_hours: Optional[int] = None
    created_at: UTCDateTime


class AdminTrainerItem(TrainerDetail):
    email: Optional[str] = None


# Pricing


class PricingUpsert(StrictRequestModel):
    pricing_type: PricingType = PricingType.HOURLY
    hourly_rate: Decimal = Field(..., gt=0)
    session_rate: Optional[Decimal] = Field(None, gt=0)


class RateBreakdownResponse(BaseModel):
    base_rate: Money
    commission: Money
    gst: Money
    platform_fee: Money
    total: Money


class PricingResponse(BaseModel):
    trainer_id: str
    pricing_type: str
    hourly_rate: Money
    session_rate: Optional[Money] = None
    hourly_breakdown: RateBreakdownResponse
    session_breakdown: Optional[RateBreakdownResponse] = None


# Availability


class AvailabilitySlotCreate(StrictRequestModel):
    date: date
    start_time: time
    end_time: time


class AvailabilitySlotResponse(ORMModel):
    id: str
    trainer_id: str
    date: date
    start_time: time
    end_time: time
    is_available: bool
    is_booked: bool


class PublicTrainerProfile(BaseModel):
    trainer: TrainerDetail
    pricing: Optional[PricingResponse] = None
    recent_reviews: List[ReviewResponse] = Field(default_factory=list)
