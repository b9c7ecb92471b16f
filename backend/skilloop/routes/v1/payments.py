# backend/skilloop/routes/v1/payments.py
"""
Payment routes - API v1

PayPal checkout for bookings. The client creates an order, approves it on
PayPal, and the frontend calls capture with the returned order id.

Endpoints:
    POST /paypal/orders                → Create a PayPal order for a booking
    POST /paypal/capture               → Capture an approved order
    GET /bookings/{booking_id}/status  → Payment status for a participant
"""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_profile, get_payment_service
from ...models.profile import Profile
from ...schemas.booking import BookingResponse
from ...schemas.payment import (
    CaptureOrderRequest,
    CreateOrderRequest,
    CreateOrderResponse,
    PaymentStatusResponse,
)
from ...services.payment_service import PaymentService

router = APIRouter(tags=["payments-v1"])


@router.post("/paypal/orders", response_model=CreateOrderResponse)
def create_paypal_order(
    payload: CreateOrderRequest,
    profile: Profile = Depends(get_current_profile),
    service: PaymentService = Depends(get_payment_service),
) -> CreateOrderResponse:
    return CreateOrderResponse(**service.create_order(profile, payload.booking_id))


@router.post("/paypal/capture", response_model=BookingResponse)
def capture_paypal_order(
    payload: CaptureOrderRequest,
    profile: Profile = Depends(get_current_profile),
    service: PaymentService = Depends(get_payment_service),
) -> BookingResponse:
    booking = service.capture_order(profile, payload.booking_id, payload.order_id)
    return BookingResponse.model_validate(booking)


@router.get("/bookings/{booking_id}/status", response_model=PaymentStatusResponse)
def get_payment_status(
    booking_id: str,
    profile: Profile = Depends(get_current_profile),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentStatusResponse:
    return PaymentStatusResponse(**service.payment_status(profile, booking_id))
