# backend/skilloop/schemas/booking.py
"""Booking request/response DTOs."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from ..core.constants import MAX_SPECIAL_REQUIREMENTS_LENGTH, PHONE_PATTERN
from ..core.enums import BookingStatus
from .base import Money, ORMModel, StrictRequestModel, UTCDateTime


class BookingCreate(StrictRequestModel):
    """Direct booking of a specific trainer for a time window."""

    trainer_id: str
    training_topic: str = Field(..., min_length=2, max_length=255)
    start_time: datetime
    end_time: datetime
    organization_name: Optional[str] = Field(None, max_length=255)
    special_requirements: Optional[str] = Field(None, max_length=MAX_SPECIAL_REQUIREMENTS_LENGTH)
    notes: Optional[str] = Field(None, max_length=2000)
    team_size: Optional[int] = Field(None, ge=1, le=1000)


class PackageQuoteRequest(StrictRequestModel):
    category_slug: str
    team_size: str = Field(..., description="Team size band: 1-5, 6-15, 16-30 or 30+")
    duration: str = Field(..., description="half-day, full-day, 2-days or week")


class PackageBookingCreate(PackageQuoteRequest):
    preferred_date: Optional[datetime] = None
    organization_name: str = Field(..., min_length=2, max_length=255)
    client_name: str = Field(..., min_length=2, max_length=255)
    client_email: EmailStr
    phone: str = Field(..., pattern=PHONE_PATTERN)
    training_topic: Optional[str] = Field(None, max_length=255)
    requirements: Optional[str] = Field(None, max_length=MAX_SPECIAL_REQUIREMENTS_LENGTH)
    location_city: Optional[str] = Field(None, max_length=100)
    urgency_level: Optional[str] = Field(None, max_length=20)


class PackageQuoteResponse(BaseModel):
    category_slug: str
    category_name: str
    base_price: Money
    team_multiplier: Money
    duration_multiplier: int
    duration_hours: int
    team_size: int
    total_amount: Money
    platform_fee_percentage: Money
    platform_fee_amount: Money
    client_payment_amount: Money


class ConflictCheckRequest(StrictRequestModel):
    trainer_id: Optional[str] = None
    start_time: datetime
    end_time: datetime
    exclude_booking_id: Optional[str] = None


class ConflictingBooking(BaseModel):
    id: str
    status: str
    training_topic: str
    start_time: UTCDateTime
    end_time: UTCDateTime


class ConflictCheckResponse(BaseModel):
    has_conflict: bool
    message: Optional[str] = None
    conflicting_booking: Optional[ConflictingBooking] = None


class BookingCancel(StrictRequestModel):
    reason: Optional[str] = Field(None, max_length=500)


class BookingStatusUpdate(StrictRequestModel):
    status: BookingStatus
    trainer_id: Optional[str] = None
    meeting_link: Optional[str] = Field(None, max_length=500)


class BookingResponse(ORMModel):
    id: str
    student_id: str
    trainer_id: Optional[str] = None
    training_topic: str
    start_time: UTCDateTime
    end_time: UTCDateTime
    duration_hours: Money
    status: str
    booking_type: str
    notes: Optional[str] = None
    meeting_link: Optional[str] = None
    organization_name: Optional[str] = None
    client_name: Optional[str] = None
    client_email: Optional[str] = None
    team_size: Optional[int] = None
    special_requirements: Optional[str] = None
    service_category: Optional[str] = None
    total_amount: Money
    client_payment_amount: Optional[Money] = None
    platform_fee_amount: Optional[Money] = None
    platform_commission_rate: Optional[Money] = None
    platform_commission_amount: Optional[Money] = None
    trainer_payout_amount: Optional[Money] = None
    cancellation_fee_amount: Optional[Money] = None
    payment_status: str
    payment_url: Optional[str] = None
    trainer_assignment_status: Optional[str] = None
    created_at: UTCDateTime


class ClientBookingItem(BookingResponse):
    trainer_name: Optional[str] = None
    trainer_email: Optional[str] = None


class TrainerBookingItem(BookingResponse):
    client_display_name: str
    client_display_email: str
    feedback_token: Optional[str] = None


class TrainerBookingSummary(BaseModel):
    total: int
    active: int
    finished: int
    earnings: Money


class TrainerBookingsResponse(BaseModel):
    bookings: List[TrainerBookingItem]
    summary: TrainerBookingSummary


class AdminBookingItem(BookingResponse):
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    trainer_name: Optional[str] = None


class AdminBookingStats(BaseModel):
    total_bookings: int
    total_revenue: Money
    completed_bookings: int
    pending_bookings: int
    cancelled_revenue: Money


class AdminBookingsResponse(BaseModel):
    bookings: List[AdminBookingItem]
    stats: AdminBookingStats


class ScheduleDay(BaseModel):
    date: date
    bookings: List[BookingResponse]


class WeeklySchedule(BaseModel):
    week_start: date
    week_end: date
    timezone: str
    days: List[ScheduleDay]
