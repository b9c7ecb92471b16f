# backend/skilloop/services/ledger.py
"""
Ledger: every money calculation on the platform.

Quotes, rate breakdowns, session amounts, commission splits, revenue totals
and trainer earnings all go through these functions so that the admin
dashboard, trainer earnings page and payout batches agree to the paisa.

All inputs are coerced to Decimal and all outputs are rounded half-up to
two decimal places. Percentages are whole-number percent (10 means 10%).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional, Union

from ..core.constants import (
    DEFAULT_PACKAGE_BASE_PRICE,
    DURATION_MULTIPLIERS,
    PACKAGE_BLOCK_HOURS,
    TEAM_SIZE_MULTIPLIERS,
)
from ..core.enums import BookingStatus, PricingType, REVENUE_STATUSES
from ..core.exceptions import ValidationException
from ..core.timezone_utils import ensure_utc, week_start

Number = Union[Decimal, int, float, str, None]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """Coerce a numeric-ish value to Decimal; None becomes zero."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationException(f"Invalid amount: {value!r}", code="INVALID_AMOUNT") from exc


def money(value: Number) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount: Number, pct: Number) -> Decimal:
    return money(to_decimal(amount) * to_decimal(pct) / HUNDRED)


@dataclass(frozen=True)
class PackageQuote:
    base_price: Decimal
    team_multiplier: Decimal
    duration_multiplier: int
    duration_hours: int
    team_size: int
    total_amount: Decimal
    platform_fee_percentage: Decimal
    platform_fee_amount: Decimal
    client_payment_amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_price": self.base_price,
            "team_multiplier": self.team_multiplier,
            "duration_multiplier": self.duration_multiplier,
            "duration_hours": self.duration_hours,
            "team_size": self.team_size,
            "total_amount": self.total_amount,
            "platform_fee_percentage": self.platform_fee_percentage,
            "platform_fee_amount": self.platform_fee_amount,
            "client_payment_amount": self.client_payment_amount,
        }


@dataclass(frozen=True)
class RateBreakdown:
    base_rate: Decimal
    commission: Decimal
    gst: Decimal
    platform_fee: Decimal
    total: Decimal


@dataclass(frozen=True)
class PayoutSplit:
    gross: Decimal
    commission_rate: Decimal
    commission: Decimal
    net: Decimal


@dataclass(frozen=True)
class EarningsSummary:
    total_earnings: Decimal
    this_month: Decimal
    last_month: Decimal
    this_week: Decimal
    completed_bookings: int
    average_per_booking: Decimal
    monthly_growth_pct: Decimal


def team_size_from_band(band: str) -> int:
    """Lower bound of a team-size band: '6-15' -> 6, '30+' -> 30."""
    head = band.replace("+", "").split("-")[0].strip()
    try:
        return int(head)
    except ValueError as exc:
        raise ValidationException(f"Invalid team size '{band}'", code="INVALID_TEAM_SIZE") from exc


def package_quote(
    base_price: Number,
    team_size_band: str,
    duration_band: str,
    platform_fee_pct: Number,
) -> PackageQuote:
    """
    Price a category package.

    total = base x team multiplier x duration multiplier; the client pays
    total plus the platform fee percentage on top.
    """
    if team_size_band not in TEAM_SIZE_MULTIPLIERS:
        raise ValidationException(
            f"Unknown team size '{team_size_band}'",
            code="INVALID_TEAM_SIZE",
            details={"allowed": sorted(TEAM_SIZE_MULTIPLIERS)},
        )
    if duration_band not in DURATION_MULTIPLIERS:
        raise ValidationException(
            f"Unknown duration '{duration_band}'",
            code="INVALID_DURATION",
            details={"allowed": sorted(DURATION_MULTIPLIERS)},
        )

    base = money(base_price) if base_price is not None else money(DEFAULT_PACKAGE_BASE_PRICE)
    team_multiplier = TEAM_SIZE_MULTIPLIERS[team_size_band]
    duration_multiplier = DURATION_MULTIPLIERS[duration_band]
    total = money(base * team_multiplier * duration_multiplier)
    fee_pct = to_decimal(platform_fee_pct)
    fee = percent_of(total, fee_pct)

    return PackageQuote(
        base_price=base,
        team_multiplier=team_multiplier,
        duration_multiplier=duration_multiplier,
        duration_hours=duration_multiplier * PACKAGE_BLOCK_HOURS,
        team_size=team_size_from_band(team_size_band),
        total_amount=total,
        platform_fee_percentage=fee_pct,
        platform_fee_amount=fee,
        client_payment_amount=money(total + fee),
    )


def rate_breakdown(
    base_rate: Number, commission_pct: Number, gst_pct: Number, platform_fee: Number
) -> RateBreakdown:
    """What a client pays for one unit of a trainer's rate."""
    base = money(base_rate)
    commission = percent_of(base, commission_pct)
    gst = percent_of(base, gst_pct)
    fee = money(platform_fee)
    return RateBreakdown(
        base_rate=base,
        commission=commission,
        gst=gst,
        platform_fee=fee,
        total=money(base + commission + gst + fee),
    )


def session_amount(
    pricing_type: Optional[str],
    hourly_rate: Number,
    session_rate: Number,
    duration_hours: Number,
) -> Decimal:
    """Booking amount from a trainer's pricing: a flat session rate or hourly x hours."""
    if pricing_type == PricingType.SESSION.value and session_rate is not None:
        return money(session_rate)
    return money(to_decimal(hourly_rate) * to_decimal(duration_hours))


def payout_split(gross: Number, commission_pct: Number) -> PayoutSplit:
    """Split a booking amount into platform commission and trainer net."""
    gross_amount = money(gross)
    rate = to_decimal(commission_pct)
    commission = percent_of(gross_amount, rate)
    return PayoutSplit(
        gross=gross_amount,
        commission_rate=rate,
        commission=commission,
        net=money(gross_amount - commission),
    )


def cancellation_fee(total: Number, fee_pct: Number) -> Decimal:
    return percent_of(total, fee_pct)


def sum_amounts(values: Iterable[Number]) -> Decimal:
    return money(sum((to_decimal(v) for v in values), Decimal("0")))


def confirmed_revenue(bookings: Iterable[Any]) -> Decimal:
    """Total of bookings whose payment has been secured."""
    return sum_amounts(b.total_amount for b in bookings if b.status in REVENUE_STATUSES)


def cancelled_revenue(bookings: Iterable[Any]) -> Decimal:
    return sum_amounts(
        b.total_amount for b in bookings if b.status == BookingStatus.CANCELLED.value
    )


def growth_pct(recent: Number, previous: Number) -> Decimal:
    """
    Period-over-period growth in percent.

    Growth from zero is reported as 100 when there is any recent activity
    and 0 otherwise.
    """
    recent_d = to_decimal(recent)
    previous_d = to_decimal(previous)
    if previous_d == 0:
        return Decimal("100.00") if recent_d > 0 else ZERO
    return money((recent_d - previous_d) / previous_d * HUNDRED)


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _previous_month_start(day: date) -> date:
    first = _month_start(day)
    return _month_start(first - timedelta(days=1))


def earnings_summary(bookings: Iterable[Any], now: datetime) -> EarningsSummary:
    """
    Trainer earnings from completed bookings, bucketed by session start.

    Weeks start on Sunday.
    """
    today = ensure_utc(now).date()
    this_month_start = _month_start(today)
    last_month_start = _previous_month_start(today)
    this_week_start = week_start(today)

    total = this_month = last_month = this_week = Decimal("0")
    count = 0
    for booking in bookings:
        if booking.status != BookingStatus.COMPLETED.value:
            continue
        amount = to_decimal(booking.total_amount)
        started = ensure_utc(booking.start_time).date()
        total += amount
        count += 1
        if started >= this_month_start:
            this_month += amount
        elif last_month_start <= started < this_month_start:
            last_month += amount
        if started >= this_week_start:
            this_week += amount

    last_month_d = money(last_month)
    this_month_d = money(this_month)
    if last_month_d > 0:
        growth = money((this_month_d - last_month_d) / last_month_d * HUNDRED)
    else:
        growth = ZERO

    return EarningsSummary(
        total_earnings=money(total),
        this_month=this_month_d,
        last_month=last_month_d,
        this_week=money(this_week),
        completed_bookings=count,
        average_per_booking=money(total / count) if count else ZERO,
        monthly_growth_pct=growth,
    )
