# backend/skilloop/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import (
    admin,
    admin_content,
    admin_payouts,
    bookings,
    content,
    feedback,
    messages,
    notifications,
    payments,
    profiles,
    reviews,
    settings,
    trainers,
    training_requests,
)

__all__ = [
    "admin",
    "admin_content",
    "admin_payouts",
    "bookings",
    "content",
    "feedback",
    "messages",
    "notifications",
    "payments",
    "profiles",
    "reviews",
    "settings",
    "trainers",
    "training_requests",
]
