# backend/skilloop/schemas/settings.py
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from .base import Money, StrictRequestModel


class PlatformSettingsResponse(BaseModel):
    platform_commission: Money
    gst_rate: Money
    manual_pricing_override: bool
    minimum_booking_amount: Money
    maximum_booking_hours: Money
    cancellation_fee: Money
    platform_fee: Money
    client_platform_fee_percentage: Money


class PlatformSettingsUpdate(StrictRequestModel):
    """Partial update; omitted keys keep their stored value."""

    platform_commission: Optional[Decimal] = Field(None, ge=0, le=50)
    gst_rate: Optional[Decimal] = Field(None, ge=0, le=30)
    manual_pricing_override: Optional[bool] = None
    minimum_booking_amount: Optional[Decimal] = Field(None, ge=0)
    maximum_booking_hours: Optional[Decimal] = Field(None, ge=1, le=24)
    cancellation_fee: Optional[Decimal] = Field(None, ge=0, le=100)
    platform_fee: Optional[Decimal] = Field(None, ge=0)
    client_platform_fee_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
