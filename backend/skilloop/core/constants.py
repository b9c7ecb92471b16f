"""Application-wide constants for the Skilloop platform."""

from __future__ import annotations

from decimal import Decimal
import os

BRAND_NAME = "Skilloop Training Platform"

API_TITLE = f"{BRAND_NAME} API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Trainer marketplace: discovery, bookings, checkout, chat, feedback and payouts"

# Booking time window constraints
MIN_BOOKING_MINUTES = 15
MAX_BOOKING_HOURS = 24

# Text constraints
MIN_BIO_LENGTH = 50
MAX_BIO_LENGTH = 1000
MAX_REVIEW_COMMENT_LENGTH = 1000
MAX_SPECIAL_REQUIREMENTS_LENGTH = 500
MAX_MESSAGE_LENGTH = 5000
MIN_TRAINER_SKILLS = 1
MAX_TRAINER_SKILLS = 10

# Trainer application bounds (hourly rate in INR)
MIN_HOURLY_RATE = 100
MAX_HOURLY_RATE = 50000
MAX_EXPERIENCE_YEARS = 50

PHONE_PATTERN = r"^\+?[1-9]\d{1,14}$"

# Query limits
DEFAULT_QUERY_LIMIT = 100
MAX_QUERY_LIMIT = 500
PAYOUT_BATCH_LIST_LIMIT = 20
RECENT_REVIEWS_LIMIT = 10

# Package booking
DEFAULT_PACKAGE_BASE_PRICE = Decimal("5000")
PACKAGE_BLOCK_HOURS = 4

TEAM_SIZE_MULTIPLIERS = {
    "1-5": Decimal("1"),
    "6-15": Decimal("1.5"),
    "16-30": Decimal("2"),
    "30+": Decimal("3"),
}

DURATION_MULTIPLIERS = {
    "half-day": 1,
    "full-day": 2,
    "2-days": 4,
    "week": 20,
}

# Growth comparison window for trainer leaderboards
GROWTH_WINDOW_DAYS = 30

# Platform setting defaults; percentages are whole-number percent
PLATFORM_SETTING_DEFAULTS = {
    "platform_commission": Decimal("10"),
    "gst_rate": Decimal("18"),
    "manual_pricing_override": Decimal("0"),
    "minimum_booking_amount": Decimal("500"),
    "maximum_booking_hours": Decimal("8"),
    "cancellation_fee": Decimal("5"),
    "platform_fee": Decimal("50"),
    "client_platform_fee_percentage": Decimal("20"),
}

PLATFORM_SETTING_DESCRIPTIONS = {
    "platform_commission": "Platform commission percentage charged on trainer earnings",
    "gst_rate": "GST rate percentage applied to trainer rates",
    "manual_pricing_override": "Allow admins to override trainer pricing manually",
    "minimum_booking_amount": "Minimum amount for a single booking",
    "maximum_booking_hours": "Maximum hours allowed for a single booking",
    "cancellation_fee": "Cancellation fee percentage",
    "platform_fee": "Flat platform fee added to each session rate",
    "client_platform_fee_percentage": "Platform fee percentage charged to clients on package bookings",
}

DEFAULT_DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:5173",
]


def _split_env(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [origin.strip() for origin in value.split(",") if origin.strip()]


ALLOWED_ORIGINS = _split_env("CORS_ALLOWED_ORIGINS") or DEFAULT_DEV_ORIGINS
