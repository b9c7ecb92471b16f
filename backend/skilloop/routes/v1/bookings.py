# backend/skilloop/routes/v1/bookings.py
"""
Booking routes - API v1

Versioned booking endpoints under /api/v1/bookings.
All business logic delegated to BookingService and MessageService.

Endpoints:
    POST /                        → Book a trainer directly
    POST /package                 → Book a training package (no trainer yet)
    POST /package/quote           → Price a package without booking
    POST /check-conflicts         → Probe a time window for conflicts
    GET /me                       → Caller's bookings as client
    GET /{booking_id}             → Booking detail (participant or admin)
    POST /{booking_id}/complete   → Client confirms a delivered session
    POST /{booking_id}/cancel     → Cancel a booking
    GET /{booking_id}/messages    → Booking chat (marks incoming read)
    POST /{booking_id}/messages   → Send a chat message
"""

from datetime import datetime
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_booking_service, get_current_profile, get_message_service
from ...models.profile import Profile
from ...schemas.booking import (
    BookingCancel,
    BookingCreate,
    BookingResponse,
    ClientBookingItem,
    ConflictCheckRequest,
    ConflictCheckResponse,
    PackageBookingCreate,
    PackageQuoteRequest,
    PackageQuoteResponse,
)
from ...schemas.message import MessageCreate, MessageListResponse, MessageResponse
from ...services.booking_service import BookingService
from ...services.message_service import MessageService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings-v1"])


# =============================================================================
# Static routes first (before dynamic routes with path parameters)
# =============================================================================


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreate,
    profile: Profile = Depends(get_current_profile),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    """
    Book an approved trainer for a time window.

    Fails with 409 when the trainer or the caller already has a pending or
    confirmed booking overlapping the window.
    """
    return BookingResponse.model_validate(service.create_direct(profile, payload))


@router.post("/package/quote", response_model=PackageQuoteResponse)
def quote_package(
    payload: PackageQuoteRequest,
    service: BookingService = Depends(get_booking_service),
) -> PackageQuoteResponse:
    return PackageQuoteResponse(**service.quote_package(payload))


@router.post("/package", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_package_booking(
    payload: PackageBookingCreate,
    profile: Profile = Depends(get_current_profile),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(service.create_package(profile, payload))


@router.post("/check-conflicts", response_model=ConflictCheckResponse)
def check_conflicts(
    payload: ConflictCheckRequest,
    profile: Profile = Depends(get_current_profile),
    service: BookingService = Depends(get_booking_service),
) -> ConflictCheckResponse:
    return ConflictCheckResponse(**service.check_conflicts(profile, payload))


@router.get("/me", response_model=List[ClientBookingItem])
def list_my_bookings(
    profile: Profile = Depends(get_current_profile),
    service: BookingService = Depends(get_booking_service),
) -> List[ClientBookingItem]:
    return [ClientBookingItem(**item) for item in service.list_for_client(profile)]


# =============================================================================
# Dynamic routes
# =============================================================================


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: str,
    profile: Profile = Depends(get_current_profile),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(service.get_for_participant(booking_id, profile))


@router.post("/{booking_id}/complete", response_model=BookingResponse)
def complete_booking(
    booking_id: str,
    profile: Profile = Depends(get_current_profile),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(service.complete_by_client(profile, booking_id))


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    booking_id: str,
    payload: Optional[BookingCancel] = None,
    profile: Profile = Depends(get_current_profile),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    reason = payload.reason if payload else None
    return BookingResponse.model_validate(service.cancel(profile, booking_id, reason))


@router.get("/{booking_id}/messages", response_model=MessageListResponse)
def list_booking_messages(
    booking_id: str,
    since: Optional[datetime] = None,
    profile: Profile = Depends(get_current_profile),
    service: MessageService = Depends(get_message_service),
) -> MessageListResponse:
    """Oldest first; poll with ``since`` for new messages."""
    return MessageListResponse(**service.list_messages(profile, booking_id, since=since))


@router.post(
    "/{booking_id}/messages",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def send_booking_message(
    booking_id: str,
    payload: MessageCreate,
    profile: Profile = Depends(get_current_profile),
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    return MessageResponse(**service.send_message(profile, booking_id, payload.content))
