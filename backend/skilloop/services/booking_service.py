# backend/skilloop/services/booking_service.py
"""
Booking Service for the Skilloop Platform

Handles all booking-related business logic including:
- Direct bookings of an approved trainer, with conflict detection
- Package bookings priced from a service category (trainer assigned later)
- Client and trainer booking listings
- The status flow: trainer progression, admin overrides, client completion
- Cancellation with the platform cancellation fee
- The admin booking overview

Every amount is computed by ``services.ledger``.
"""

from datetime import datetime, timedelta
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.constants import MAX_BOOKING_HOURS, MIN_BOOKING_MINUTES
from ..core.enums import (
    BLOCKING_BOOKING_STATUSES,
    CANCELLABLE_STATUSES,
    TRAINER_STATUS_FLOW,
    BookingStatus,
    BookingType,
    NotificationType,
    PaymentStatus,
    TrainerAssignmentStatus,
)
from ..core.exceptions import (
    BookingConflictException,
    BusinessRuleException,
    ForbiddenException,
    InvalidStatusTransitionException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import Booking
from ..models.profile import Profile
from ..models.trainer import Trainer
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..schemas.booking import (
    BookingCreate,
    BookingStatusUpdate,
    ConflictCheckRequest,
    PackageBookingCreate,
    PackageQuoteRequest,
)
from . import ledger
from .base import BaseService
from .notification_service import NotificationService
from .payout_service import PayoutService
from .platform_settings_service import PlatformSettingsService
from .pricing_service import PricingService

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT_NAME = "Unknown Client"
UNKNOWN_CLIENT_EMAIL = "No email available"

ACTIVE_TRAINER_STATUSES = (BookingStatus.ASSIGNED.value, BookingStatus.DELIVERING.value)
FINISHED_TRAINER_STATUSES = (BookingStatus.DELIVERED.value, BookingStatus.COMPLETED.value)


def _format_window(booking: Booking) -> str:
    start = ensure_utc(booking.start_time)
    end = ensure_utc(booking.end_time)
    return f"{start.strftime('%Y-%m-%d %H:%M')}-{end.strftime('%H:%M')} UTC"


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Centralizes booking business logic; routes only translate HTTP.
    """

    def __init__(
        self,
        db: Session,
        notification_service: Optional[NotificationService] = None,
        pricing_service: Optional[PricingService] = None,
        payout_service: Optional[PayoutService] = None,
        settings_service: Optional[PlatformSettingsService] = None,
    ):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)
        self.category_repository = RepositoryFactory.create_service_category_repository(db)
        self.feedback_link_repository = RepositoryFactory.create_feedback_link_repository(db)
        self.settings_service = settings_service or PlatformSettingsService(db)
        self.notification_service = notification_service or NotificationService(db)
        self.pricing_service = pricing_service or PricingService(db, self.settings_service)
        self.payout_service = payout_service or PayoutService(db, self.settings_service)

    # Validation helpers

    def validate_booking_time(
        self,
        start_time: datetime,
        end_time: datetime,
        max_hours: Decimal,
        now: Optional[datetime] = None,
    ) -> Decimal:
        """
        Check a requested window and return its length in hours.

        Rules are applied in order: not in the past, end after start, at
        least 15 minutes, at most 24 hours, at most the platform maximum.
        """
        start = ensure_utc(start_time)
        end = ensure_utc(end_time)
        now = ensure_utc(now or utc_now())

        if start < now:
            raise ValidationException("Cannot book a session in the past", code="BOOKING_IN_PAST")
        if end <= start:
            raise ValidationException("End time must be after start time", code="INVALID_TIME_RANGE")

        duration = end - start
        if duration < timedelta(minutes=MIN_BOOKING_MINUTES):
            raise ValidationException(
                f"Booking must be at least {MIN_BOOKING_MINUTES} minutes",
                code="BOOKING_TOO_SHORT",
            )
        if duration > timedelta(hours=MAX_BOOKING_HOURS):
            raise ValidationException(
                f"Booking cannot exceed {MAX_BOOKING_HOURS} hours", code="BOOKING_TOO_LONG"
            )

        hours = ledger.money(Decimal(int(duration.total_seconds())) / Decimal(3600))
        if hours > ledger.to_decimal(max_hours):
            raise ValidationException(
                f"Booking cannot exceed {ledger.to_decimal(max_hours).normalize()} hours",
                code="BOOKING_EXCEEDS_MAX_HOURS",
                details={"maximum_booking_hours": str(max_hours)},
            )
        return hours

    def find_conflict(
        self,
        start_time: datetime,
        end_time: datetime,
        trainer_id: Optional[str] = None,
        student_id: Optional[str] = None,
        exclude_booking_id: Optional[str] = None,
    ) -> Optional[Tuple[str, Booking]]:
        """First overlapping live booking, checking the trainer before the client."""
        start = ensure_utc(start_time)
        end = ensure_utc(end_time)
        if trainer_id:
            clashes = self.booking_repository.find_overlapping(
                start,
                end,
                BLOCKING_BOOKING_STATUSES,
                trainer_id=trainer_id,
                exclude_booking_id=exclude_booking_id,
            )
            if clashes:
                return "trainer", clashes[0]
        if student_id:
            clashes = self.booking_repository.find_overlapping(
                start,
                end,
                BLOCKING_BOOKING_STATUSES,
                student_id=student_id,
                exclude_booking_id=exclude_booking_id,
            )
            if clashes:
                return "client", clashes[0]
        return None

    @staticmethod
    def _conflict_message(scope: str, booking: Booking) -> str:
        if scope == "trainer":
            return f"The trainer already has a booking at {_format_window(booking)}"
        return f"You already have a booking at {_format_window(booking)}"

    @staticmethod
    def _conflict_details(scope: str, booking: Booking) -> Dict[str, Any]:
        return {
            "conflict_scope": scope,
            "conflicting_booking": {
                "id": booking.id,
                "status": booking.status,
                "training_topic": booking.training_topic,
                "start_time": ensure_utc(booking.start_time).isoformat(),
                "end_time": ensure_utc(booking.end_time).isoformat(),
            },
        }

    @BaseService.measure_operation("check_conflicts")
    def check_conflicts(self, profile: Profile, data: ConflictCheckRequest) -> Dict[str, Any]:
        if ensure_utc(data.end_time) <= ensure_utc(data.start_time):
            raise ValidationException("End time must be after start time", code="INVALID_TIME_RANGE")
        found = self.find_conflict(
            data.start_time,
            data.end_time,
            trainer_id=data.trainer_id,
            student_id=profile.id,
            exclude_booking_id=data.exclude_booking_id,
        )
        if not found:
            return {"has_conflict": False, "message": None, "conflicting_booking": None}
        scope, booking = found
        return {
            "has_conflict": True,
            "message": self._conflict_message(scope, booking),
            "conflicting_booking": self._conflict_details(scope, booking)["conflicting_booking"],
        }

    # Creation

    @BaseService.measure_operation("create_booking")
    def create_direct(self, student: Profile, data: BookingCreate) -> Booking:
        """
        Book an approved trainer for a time window.

        Raises:
            NotFoundException: trainer does not exist
            ValidationException: the window is invalid
            BusinessRuleException: trainer not bookable or amount below the minimum
            BookingConflictException: trainer or client already booked
        """
        self.log_operation("create_booking", student_id=student.id, trainer_id=data.trainer_id)

        trainer = self.trainer_repository.get_by_id(data.trainer_id)
        if not trainer:
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        if not trainer.is_approved:
            raise BusinessRuleException(
                "This trainer is not accepting bookings", code="TRAINER_NOT_APPROVED"
            )
        if trainer.user_id == student.id:
            raise ValidationException("You cannot book yourself", code="SELF_BOOKING")

        settings = self.settings_service.get_all()
        start = ensure_utc(data.start_time)
        end = ensure_utc(data.end_time)
        hours = self.validate_booking_time(start, end, settings["maximum_booking_hours"])

        found = self.find_conflict(start, end, trainer_id=trainer.id, student_id=student.id)
        if found:
            scope, clash = found
            raise BookingConflictException(
                self._conflict_message(scope, clash), details=self._conflict_details(scope, clash)
            )

        amount = self.pricing_service.amount_for(trainer, hours)
        minimum = settings["minimum_booking_amount"]
        if amount < minimum:
            raise BusinessRuleException(
                f"Booking amount {amount} is below the minimum of {ledger.money(minimum)}",
                code="BELOW_MINIMUM_AMOUNT",
                details={"amount": str(amount), "minimum": str(ledger.money(minimum))},
            )
        split = ledger.payout_split(amount, settings["platform_commission"])

        with self.transaction():
            booking = self.booking_repository.create(
                student_id=student.id,
                trainer_id=trainer.id,
                training_topic=data.training_topic,
                start_time=start,
                end_time=end,
                duration_hours=hours,
                status=BookingStatus.PENDING.value,
                booking_type=BookingType.DIRECT.value,
                notes=data.notes,
                organization_name=data.organization_name or student.company_name,
                client_name=student.full_name,
                client_email=student.email,
                client_phone=student.phone,
                team_size=data.team_size,
                special_requirements=data.special_requirements,
                total_amount=amount,
                client_payment_amount=amount,
                platform_commission_rate=split.commission_rate,
                platform_commission_amount=split.commission,
                trainer_payout_amount=split.net,
                payment_status=PaymentStatus.PENDING.value,
            )
            self.notification_service.notify(
                trainer.user_id,
                NotificationType.BOOKING_CREATED,
                "New booking request",
                f"{student.display_name} booked '{booking.training_topic}' on "
                f"{start.strftime('%b %d, %Y %H:%M')} UTC.",
                {"booking_id": booking.id},
            )

        prometheus_metrics.inc_booking_created(BookingType.DIRECT.value)
        self.logger.info(f"Booking {booking.id} created for trainer {trainer.id}")
        return booking

    def _get_category(self, slug: str):
        category = self.category_repository.get_by_slug(slug)
        if not category or not category.is_active:
            raise NotFoundException("Service category not found", code="CATEGORY_NOT_FOUND")
        return category

    @BaseService.measure_operation("quote_package")
    def quote_package(self, data: PackageQuoteRequest) -> Dict[str, Any]:
        category = self._get_category(data.category_slug)
        quote = ledger.package_quote(
            category.base_price,
            data.team_size,
            data.duration,
            self.settings_service.get("client_platform_fee_percentage"),
        )
        return {"category_slug": category.slug, "category_name": category.name, **quote.to_dict()}

    @BaseService.measure_operation("create_package_booking")
    def create_package(self, student: Profile, data: PackageBookingCreate) -> Booking:
        """
        Book a category package. No trainer is attached yet; an admin
        assigns one later through the status endpoint.
        """
        category = self._get_category(data.category_slug)
        settings = self.settings_service.get_all()
        quote = ledger.package_quote(
            category.base_price,
            data.team_size,
            data.duration,
            settings["client_platform_fee_percentage"],
        )

        now = utc_now()
        if data.preferred_date is not None:
            start = ensure_utc(data.preferred_date)
            if start < now:
                raise ValidationException(
                    "Preferred date cannot be in the past", code="BOOKING_IN_PAST"
                )
        else:
            start = (now + timedelta(days=1)).replace(microsecond=0)
        end = start + timedelta(hours=quote.duration_hours)
        split = ledger.payout_split(quote.total_amount, settings["platform_commission"])

        with self.transaction():
            booking = self.booking_repository.create(
                student_id=student.id,
                trainer_id=None,
                training_topic=data.training_topic or category.name,
                start_time=start,
                end_time=end,
                duration_hours=Decimal(quote.duration_hours),
                status=BookingStatus.PENDING.value,
                booking_type=BookingType.PACKAGE.value,
                organization_name=data.organization_name,
                client_name=data.client_name,
                client_email=str(data.client_email),
                client_phone=data.phone,
                team_size=quote.team_size,
                special_requirements=data.requirements,
                service_category=category.slug,
                location_city=data.location_city,
                urgency_level=data.urgency_level,
                total_amount=quote.total_amount,
                client_payment_amount=quote.client_payment_amount,
                platform_fee_amount=quote.platform_fee_amount,
                platform_fee_percentage=quote.platform_fee_percentage,
                platform_commission_rate=split.commission_rate,
                platform_commission_amount=split.commission,
                trainer_payout_amount=split.net,
                payment_status=PaymentStatus.PENDING.value,
                trainer_assignment_status=TrainerAssignmentStatus.PENDING.value,
            )
            self.notification_service.notify_admins(
                NotificationType.BOOKING_CREATED,
                "New package booking",
                f"{data.organization_name} requested '{category.name}' "
                f"({data.team_size} people, {data.duration}). A trainer needs to be assigned.",
                {"booking_id": booking.id},
            )

        prometheus_metrics.inc_booking_created(BookingType.PACKAGE.value)
        return booking

    # Reads

    def get_booking(self, booking_id: str) -> Booking:
        booking = self.booking_repository.get_by_id(booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BOOKING_NOT_FOUND")
        return booking

    def get_for_participant(self, booking_id: str, profile: Profile) -> Booking:
        """Booking visible to its client, its trainer, or an admin."""
        booking = self.get_booking(booking_id)
        if profile.is_admin:
            return booking
        trainer_user_id = booking.trainer.user_id if booking.trainer else None
        if not booking.is_participant(profile.id, trainer_user_id):
            raise ForbiddenException("You do not have access to this booking", code="NOT_PARTICIPANT")
        return booking

    @BaseService.measure_operation("list_client_bookings")
    def list_for_client(self, student: Profile) -> List[Dict[str, Any]]:
        items = []
        for booking in self.booking_repository.list_for_student(student.id):
            trainer = booking.trainer
            item = self._booking_fields(booking)
            item["trainer_name"] = trainer.name if trainer else None
            item["trainer_email"] = trainer.profile.email if trainer and trainer.profile else None
            items.append(item)
        return items

    @BaseService.measure_operation("list_trainer_bookings")
    def list_for_trainer(self, trainer: Trainer, status: Optional[str] = None) -> Dict[str, Any]:
        bookings = self.booking_repository.list_for_trainer(trainer.id, status=status)
        links = self.feedback_link_repository.list_active_for_bookings(
            [b.id for b in bookings], utc_now()
        )
        tokens = {link.booking_id: link.token for link in links}

        items = []
        for booking in bookings:
            item = self._booking_fields(booking)
            student = booking.student
            item["client_display_name"] = (
                booking.client_name or (student.full_name if student else None) or UNKNOWN_CLIENT_NAME
            )
            item["client_display_email"] = (
                booking.client_email or (student.email if student else None) or UNKNOWN_CLIENT_EMAIL
            )
            item["feedback_token"] = tokens.get(booking.id)
            items.append(item)

        summary = {
            "total": len(bookings),
            "active": sum(1 for b in bookings if b.status in ACTIVE_TRAINER_STATUSES),
            "finished": sum(1 for b in bookings if b.status in FINISHED_TRAINER_STATUSES),
            "earnings": ledger.earnings_summary(bookings, utc_now()).total_earnings,
        }
        return {"bookings": items, "summary": summary}

    @staticmethod
    def _booking_fields(booking: Booking) -> Dict[str, Any]:
        return {column.name: getattr(booking, column.name) for column in Booking.__table__.columns}

    # Status flow

    def _owned_by_trainer(self, trainer: Trainer, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.trainer_id != trainer.id:
            raise ForbiddenException("This booking is not assigned to you", code="NOT_ASSIGNED_TRAINER")
        return booking

    def _notify_status(self, booking: Booking, recipient_id: Optional[str]) -> None:
        self.notification_service.notify(
            recipient_id,
            NotificationType.BOOKING_STATUS_CHANGED,
            "Booking updated",
            f"'{booking.training_topic}' is now {booking.status}.",
            {"booking_id": booking.id, "status": booking.status},
        )

    @BaseService.measure_operation("advance_booking")
    def advance_status(self, trainer: Trainer, booking_id: str) -> Booking:
        """Trainer progression: assigned -> delivering -> delivered."""
        booking = self._owned_by_trainer(trainer, booking_id)
        target = TRAINER_STATUS_FLOW.get(booking.status)
        if target is None:
            raise InvalidStatusTransitionException("booking", booking.status, "next")

        with self.transaction():
            booking.status = target
            self._notify_status(booking, booking.student_id)
            self.booking_repository.flush()

        self.log_operation("advance_booking", booking_id=booking.id, status=target)
        return booking

    @BaseService.measure_operation("admin_update_booking_status")
    def admin_update_status(self, admin: Profile, booking_id: str, data: BookingStatusUpdate) -> Booking:
        """
        Admin override. ``assigned`` with a trainer id assigns that trainer;
        ``completed`` records the trainer payout.
        """
        booking = self.get_booking(booking_id)
        target = data.status.value

        with self.transaction():
            if data.trainer_id:
                trainer = self.trainer_repository.get_by_id(data.trainer_id)
                if not trainer:
                    raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
                if not trainer.is_approved:
                    raise BusinessRuleException(
                        "Only approved trainers can be assigned", code="TRAINER_NOT_APPROVED"
                    )
                booking.trainer_id = trainer.id
                booking.trainer = trainer
                booking.auto_assigned_at = utc_now()
                booking.trainer_assignment_status = TrainerAssignmentStatus.ACCEPTED.value
            elif target == BookingStatus.ASSIGNED.value and not booking.trainer_id:
                raise ValidationException(
                    "trainer_id is required to assign a booking", code="TRAINER_REQUIRED"
                )

            if data.meeting_link is not None:
                booking.meeting_link = data.meeting_link

            if target == BookingStatus.CANCELLED.value:
                booking.cancel(admin.id)
            elif target == BookingStatus.COMPLETED.value:
                booking.complete()
                self.payout_service.create_for_booking(booking)
            else:
                booking.status = target

            self._notify_status(booking, booking.student_id)
            if booking.trainer is not None:
                self._notify_status(booking, booking.trainer.user_id)
            self.booking_repository.flush()

        self.log_operation("admin_update_booking_status", booking_id=booking.id, status=target)
        return booking

    @BaseService.measure_operation("complete_booking")
    def complete_by_client(self, student: Profile, booking_id: str) -> Booking:
        booking = self.get_booking(booking_id)
        if booking.student_id != student.id:
            raise ForbiddenException("Only the client can complete this booking", code="NOT_CLIENT")
        if booking.status != BookingStatus.DELIVERED.value:
            raise InvalidStatusTransitionException(
                "booking", booking.status, BookingStatus.COMPLETED.value
            )

        with self.transaction():
            booking.complete()
            self.payout_service.create_for_booking(booking)
            self.notification_service.notify(
                booking.trainer.user_id if booking.trainer else None,
                NotificationType.BOOKING_COMPLETED,
                "Booking completed",
                f"{student.display_name} marked '{booking.training_topic}' as completed.",
                {"booking_id": booking.id},
            )
            self.booking_repository.flush()
        return booking

    @BaseService.measure_operation("cancel_booking")
    def cancel(self, profile: Profile, booking_id: str, reason: Optional[str] = None) -> Booking:
        """
        Cancel a booking on behalf of either participant.

        Raises:
            NotFoundException: booking does not exist
            ForbiddenException: caller is not a participant
            BusinessRuleException: booking is past the cancellable statuses
        """
        booking = self.get_booking(booking_id)
        trainer_user_id = booking.trainer.user_id if booking.trainer else None
        if not booking.is_participant(profile.id, trainer_user_id):
            raise ForbiddenException("You cannot cancel this booking", code="NOT_PARTICIPANT")
        if booking.status not in CANCELLABLE_STATUSES:
            raise BusinessRuleException(
                f"Booking cannot be cancelled - current status: {booking.status}",
                code="NOT_CANCELLABLE",
            )

        fee = ledger.cancellation_fee(booking.total_amount, self.settings_service.get("cancellation_fee"))
        other_party = trainer_user_id if profile.id == booking.student_id else booking.student_id

        with self.transaction():
            booking.cancel(profile.id, reason)
            booking.cancellation_fee_amount = fee
            self.notification_service.notify(
                other_party,
                NotificationType.BOOKING_CANCELLED,
                "Booking cancelled",
                f"'{booking.training_topic}' was cancelled by {profile.display_name}.",
                {"booking_id": booking.id, "reason": reason},
            )
            self.booking_repository.flush()

        self.log_operation("cancel_booking", booking_id=booking.id, cancelled_by=profile.id)
        return booking

    # Admin

    @BaseService.measure_operation("admin_booking_overview")
    def admin_overview(self, status: Optional[str] = None, q: Optional[str] = None) -> Dict[str, Any]:
        bookings = self.booking_repository.search(status=status, q=q)
        items = []
        for booking in bookings:
            item = self._booking_fields(booking)
            item["student_name"] = booking.student.full_name if booking.student else booking.client_name
            item["student_email"] = booking.student.email if booking.student else booking.client_email
            item["trainer_name"] = booking.trainer.name if booking.trainer else None
            items.append(item)

        stats = {
            "total_bookings": len(bookings),
            "total_revenue": ledger.confirmed_revenue(bookings),
            "completed_bookings": sum(1 for b in bookings if b.status == BookingStatus.COMPLETED.value),
            "pending_bookings": sum(1 for b in bookings if b.status == BookingStatus.PENDING.value),
            "cancelled_revenue": ledger.cancelled_revenue(bookings),
        }
        return {"bookings": items, "stats": stats}
