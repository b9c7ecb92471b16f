# backend/skilloop/schemas/payment.py
from typing import Optional

from pydantic import BaseModel

from .base import Money, StrictRequestModel, UTCDateTime


class CreateOrderRequest(StrictRequestModel):
    booking_id: str


class CreateOrderResponse(BaseModel):
    booking_id: str
    order_id: str
    approval_url: Optional[str] = None
    amount: Money
    currency: str


class CaptureOrderRequest(StrictRequestModel):
    booking_id: str
    order_id: str


class PaymentStatusResponse(BaseModel):
    booking_id: str
    status: str
    payment_status: str
    payment_provider: Optional[str] = None
    payment_transaction_id: Optional[str] = None
    payment_confirmed_at: Optional[UTCDateTime] = None
    amount: Money