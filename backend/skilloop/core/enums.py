# backend/skilloop/core/enums.py
"""Status and type vocabularies shared by models, schemas and services."""

from enum import Enum


class ProfileRole(str, Enum):
    CLIENT = "client"
    TRAINER = "trainer"
    ADMIN = "admin"


class TrainerStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    SUSPENDED = "suspended"


class BookingStatus(str, Enum):
    """
    Booking lifecycle.

    pending -> confirmed (payment captured) -> assigned -> delivering
    -> delivered -> completed, with cancelled reachable early on.
    """

    PENDING = "pending"
    CONFIRMED = "confirmed"
    ASSIGNED = "assigned"
    DELIVERING = "delivering"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class TrainerAssignmentStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class BookingType(str, Enum):
    DIRECT = "direct"
    PACKAGE = "package"


class PricingType(str, Enum):
    HOURLY = "hourly"
    SESSION = "session"


class PayoutStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"


class PayoutBatchStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class TrainingRequestStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    CLOSED = "closed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    SELECTED = "selected"
    REJECTED = "rejected"


class TargetAudience(str, Enum):
    COLLEGE = "college"
    CORPORATE = "corporate"
    CUSTOM = "custom"


class DeliveryMode(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    HYBRID = "hybrid"


class JobType(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    INTERNSHIP = "internship"


class NotificationType(str, Enum):
    BOOKING_CREATED = "booking_created"
    BOOKING_CONFIRMED = "booking_confirmed"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_COMPLETED = "booking_completed"
    BOOKING_STATUS_CHANGED = "booking_status_changed"
    TRAINING_REQUEST_CREATED = "training_request_created"
    TRAINING_APPLICATION_RECEIVED = "training_application_received"
    TRAINING_APPLICATION_ACCEPTED = "training_application_accepted"
    TRAINING_APPLICATION_REJECTED = "training_application_rejected"
    TRAINER_APPLICATION = "trainer_application"
    TRAINER_APPROVED = "trainer_approved"
    TRAINER_REJECTED = "trainer_rejected"
    PAYMENT_RECEIVED = "payment_received"
    REVIEW_RECEIVED = "review_received"
    SYSTEM_ANNOUNCEMENT = "system_announcement"
    SYSTEM_ALERT = "system_alert"


# Booking statuses that hold a trainer's or client's time
BLOCKING_BOOKING_STATUSES = (BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value)

# Booking statuses that block a trainer from publishing an overlapping slot
SLOT_BLOCKING_STATUSES = (
    BookingStatus.CONFIRMED.value,
    BookingStatus.ASSIGNED.value,
    BookingStatus.DELIVERING.value,
)

# Statuses in which the booking chat is open
CHAT_ENABLED_STATUSES = (
    BookingStatus.CONFIRMED.value,
    BookingStatus.ASSIGNED.value,
    BookingStatus.DELIVERING.value,
    BookingStatus.DELIVERED.value,
    BookingStatus.COMPLETED.value,
)

# Statuses whose amount counts as confirmed revenue
REVENUE_STATUSES = (
    BookingStatus.CONFIRMED.value,
    BookingStatus.ASSIGNED.value,
    BookingStatus.DELIVERING.value,
    BookingStatus.DELIVERED.value,
    BookingStatus.COMPLETED.value,
)

CANCELLABLE_STATUSES = (
    BookingStatus.PENDING.value,
    BookingStatus.CONFIRMED.value,
    BookingStatus.ASSIGNED.value,
)

FEEDBACK_ELIGIBLE_STATUSES = (BookingStatus.DELIVERED.value, BookingStatus.COMPLETED.value)

# Trainer-driven progression
TRAINER_STATUS_FLOW = {
    BookingStatus.ASSIGNED.value: BookingStatus.DELIVERING.value,
    BookingStatus.DELIVERING.value: BookingStatus.DELIVERED.value,
}
