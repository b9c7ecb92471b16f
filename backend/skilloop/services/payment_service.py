# backend/skilloop/services/payment_service.py
"""
Payment Service for the Skilloop Platform

Checkout runs through PayPal. The network calls happen outside any
database transaction; the booking row is only written once PayPal has
answered.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import BookingStatus, NotificationType, PaymentStatus
from ..core.exceptions import BusinessRuleException, ForbiddenException, ValidationException
from ..core.timezone_utils import utc_now
from ..integrations.paypal_client import PayPalClient
from ..models.booking import Booking
from ..models.profile import Profile
from ..monitoring.prometheus_metrics import prometheus_metrics
from . import ledger
from .base import BaseService
from .booking_service import BookingService
from .notification_service import NotificationService

logger = logging.getLogger(__name__)

PAYPAL = "paypal"


class PaymentService(BaseService):
    def __init__(
        self,
        db: Session,
        paypal_client: Optional[PayPalClient] = None,
        booking_service: Optional[BookingService] = None,
        notification_service: Optional[NotificationService] = None,
    ):
        super().__init__(db)
        self.paypal = paypal_client or PayPalClient.from_settings()
        self.notification_service = notification_service or NotificationService(db)
        self.booking_service = booking_service or BookingService(
            db, notification_service=self.notification_service
        )

    def _client_booking(self, profile: Profile, booking_id: str) -> Booking:
        booking = self.booking_service.get_booking(booking_id)
        if booking.student_id != profile.id:
            raise ForbiddenException("Only the client can pay for this booking", code="NOT_CLIENT")
        return booking

    @staticmethod
    def amount_due(booking: Booking):
        return ledger.money(booking.client_payment_amount or booking.total_amount)

    @BaseService.measure_operation("create_paypal_order")
    def create_order(self, profile: Profile, booking_id: str) -> Dict[str, Any]:
        booking = self._client_booking(profile, booking_id)
        if booking.status != BookingStatus.PENDING.value:
            raise BusinessRuleException(
                f"Booking is {booking.status} and cannot be paid", code="NOT_PAYABLE"
            )
        if booking.payment_status == PaymentStatus.CONFIRMED.value:
            raise BusinessRuleException("Booking is already paid", code="ALREADY_PAID")

        amount = self.amount_due(booking)
        base = settings.frontend_url.rstrip("/")
        order = self.paypal.create_order(
            booking_id=booking.id,
            amount=amount,
            currency=settings.currency,
            return_url=f"{base}/payment/success?booking_id={booking.id}",
            cancel_url=f"{base}/payment/cancel?booking_id={booking.id}",
            description=booking.training_topic,
        )

        with self.transaction():
            booking.payment_provider = PAYPAL
            booking.paypal_order_id = order.order_id
            booking.payment_transaction_id = order.order_id
            booking.payment_url = order.approval_url
            booking.payment_status = PaymentStatus.PENDING.value

        self.log_operation("create_paypal_order", booking_id=booking.id, order_id=order.order_id)
        return {
            "booking_id": booking.id,
            "order_id": order.order_id,
            "approval_url": order.approval_url,
            "amount": amount,
            "currency": settings.currency,
        }

    @BaseService.measure_operation("capture_paypal_order")
    def capture_order(self, profile: Profile, booking_id: str, order_id: str) -> Booking:
        """
        Capture an approved order and confirm the booking.

        Only pending bookings can be captured. A capture that PayPal does not
        report as COMPLETED marks the payment failed and leaves the booking
        status alone.
        """
        booking = self._client_booking(profile, booking_id)
        if booking.paypal_order_id and booking.paypal_order_id != order_id:
            raise ValidationException(
                "Order does not belong to this booking", code="ORDER_MISMATCH"
            )
        if booking.payment_status == PaymentStatus.CONFIRMED.value:
            return booking
        if booking.status != BookingStatus.PENDING.value:
            raise BusinessRuleException(
                f"Booking is {booking.status} and cannot be paid", code="NOT_PAYABLE"
            )

        result = self.paypal.capture_order(order_id)

        with self.transaction():
            if result.capture_id:
                booking.payment_transaction_id = result.capture_id
            booking.payment_provider = PAYPAL
            if result.completed:
                booking.payment_status = PaymentStatus.CONFIRMED.value
                booking.payment_confirmed_at = utc_now()
                booking.status = BookingStatus.CONFIRMED.value
                self.notification_service.notify(
                    booking.student_id,
                    NotificationType.BOOKING_CONFIRMED,
                    "Payment Confirmed",
                    f'Your payment for "{booking.training_topic}" has been confirmed.',
                    {"booking_id": booking.id},
                )
                if booking.trainer is not None:
                    self.notification_service.notify(
                        booking.trainer.user_id,
                        NotificationType.PAYMENT_RECEIVED,
                        "Payment Received",
                        f'Payment received for training session "{booking.training_topic}".',
                        {"booking_id": booking.id},
                    )
            else:
                booking.payment_status = PaymentStatus.FAILED.value
                booking.payment_confirmed_at = None

        prometheus_metrics.inc_payment_capture(PAYPAL, booking.payment_status)
        self.log_operation(
            "capture_paypal_order", booking_id=booking.id, capture_status=result.status
        )
        return booking

    def payment_status(self, profile: Profile, booking_id: str) -> Dict[str, Any]:
        booking = self.booking_service.get_for_participant(booking_id, profile)
        return {
            "booking_id": booking.id,
            "status": booking.status,
            "payment_status": booking.payment_status,
            "payment_provider": booking.payment_provider,
            "payment_transaction_id": booking.payment_transaction_id,
            "payment_confirmed_at": booking.payment_confirmed_at,
            "amount": self.amount_due(booking),
        }
