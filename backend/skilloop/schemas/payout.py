# backend/skilloop/schemas/payout.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .base import Money, ORMModel, StrictRequestModel, UTCDateTime


class PayoutResponse(ORMModel):
    id: str
    booking_id: str
    trainer_id: str
    payout_batch_id: Optional[str] = None
    gross_amount: Money
    platform_commission: Money
    net_amount: Money
    payout_status: str
    paid_at: Optional[UTCDateTime] = None
    created_at: UTCDateTime


class PendingPayoutItem(PayoutResponse):
    trainer_name: Optional[str] = None
    trainer_email: Optional[str] = None
    training_topic: Optional[str] = None
    booking_start_time: Optional[UTCDateTime] = None


class PendingPayoutsResponse(BaseModel):
    payouts: List[PendingPayoutItem]
    total_net_amount: Money
    count: int


class PayoutBatchCreate(StrictRequestModel):
    payout_ids: List[str] = Field(default_factory=list)
    batch_name: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=2000)


class PayoutBatchResponse(ORMModel):
    id: str
    batch_name: str
    total_amount: Money
    trainer_count: int
    payout_count: int
    status: str
    created_by: Optional[str] = None
    notes: Optional[str] = None
    processed_at: Optional[UTCDateTime] = None
    created_at: UTCDateTime


class EarningsResponse(BaseModel):
    total_earnings: Money
    this_month: Money
    last_month: Money
    this_week: Money
    completed_bookings: int
    average_per_booking: Money
    monthly_growth_pct: Money
    pending_payout_amount: Money
    paid_payout_amount: Money
    as_of: datetime
