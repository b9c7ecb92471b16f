"""
BookingService business rules with mocked repositories.

Repositories and collaborating services are MagicMocks so each rule is
exercised without a database.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from skilloop.core.constants import PLATFORM_SETTING_DEFAULTS
from skilloop.core.exceptions import (
    BookingConflictException,
    BusinessRuleException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from skilloop.models.booking import Booking
from skilloop.schemas.booking import BookingCreate
from skilloop.services.booking_service import BookingService

NOW = datetime(2026, 5, 4, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def service() -> BookingService:
    settings_service = MagicMock()
    settings_service.get_all.return_value = dict(PLATFORM_SETTING_DEFAULTS)
    settings_service.get.side_effect = lambda key: PLATFORM_SETTING_DEFAULTS[key]

    svc = BookingService(
        MagicMock(),
        notification_service=MagicMock(),
        pricing_service=MagicMock(),
        payout_service=MagicMock(),
        settings_service=settings_service,
    )
    svc.booking_repository = MagicMock()
    svc.booking_repository.find_overlapping.return_value = []
    svc.booking_repository.create.side_effect = lambda **fields: SimpleNamespace(id="booking-1", **fields)
    svc.trainer_repository = MagicMock()
    svc.category_repository = MagicMock()
    svc.feedback_link_repository = MagicMock()
    return svc


@pytest.fixture
def student():
    return SimpleNamespace(
        id="student-1",
        email="client@example.com",
        full_name="Priya Client",
        display_name="Priya Client",
        phone=None,
        company_name="Acme",
        is_admin=False,
    )


@pytest.fixture
def trainer():
    return SimpleNamespace(id="trainer-1", user_id="trainer-user-1", name="Tariq", is_approved=True)


def _payload(start: datetime, hours: int = 2) -> BookingCreate:
    return BookingCreate(
        trainer_id="trainer-1",
        training_topic="Kubernetes Fundamentals",
        start_time=start,
        end_time=start + timedelta(hours=hours),
    )


def _future_start() -> datetime:
    return (datetime.now(timezone.utc) + timedelta(days=2)).replace(minute=0, second=0, microsecond=0)


class TestValidateBookingTime:
    """Window checks applied before anything is written."""

    def test_returns_duration_in_hours(self, service):
        start = NOW + timedelta(days=1)
        hours = service.validate_booking_time(start, start + timedelta(minutes=90), Decimal("8"), now=NOW)
        assert hours == Decimal("1.50")

    @pytest.mark.parametrize(
        "offset, length, code",
        [
            (timedelta(hours=-1), timedelta(hours=1), "BOOKING_IN_PAST"),
            (timedelta(days=1), timedelta(0), "INVALID_TIME_RANGE"),
            (timedelta(days=1), timedelta(minutes=10), "BOOKING_TOO_SHORT"),
            (timedelta(days=1), timedelta(hours=25), "BOOKING_TOO_LONG"),
            (timedelta(days=1), timedelta(hours=9), "BOOKING_EXCEEDS_MAX_HOURS"),
        ],
    )
    def test_rejects_invalid_windows(self, service, offset, length, code):
        start = NOW + offset
        with pytest.raises(ValidationException) as exc:
            service.validate_booking_time(start, start + length, Decimal("8"), now=NOW)
        assert exc.value.code == code

    def test_naive_times_are_treated_as_utc(self, service):
        start = (NOW + timedelta(days=1)).replace(tzinfo=None)
        assert service.validate_booking_time(start, start + timedelta(hours=2), Decimal("8"), now=NOW) == Decimal(
            "2.00"
        )


class TestCreateDirect:
    def test_unknown_trainer(self, service, student):
        service.trainer_repository.get_by_id.return_value = None
        with pytest.raises(NotFoundException):
            service.create_direct(student, _payload(_future_start()))

    def test_unapproved_trainer(self, service, student, trainer):
        trainer.is_approved = False
        service.trainer_repository.get_by_id.return_value = trainer
        with pytest.raises(BusinessRuleException) as exc:
            service.create_direct(student, _payload(_future_start()))
        assert exc.value.code == "TRAINER_NOT_APPROVED"

    def test_cannot_book_yourself(self, service, student, trainer):
        trainer.user_id = student.id
        service.trainer_repository.get_by_id.return_value = trainer
        with pytest.raises(ValidationException) as exc:
            service.create_direct(student, _payload(_future_start()))
        assert exc.value.code == "SELF_BOOKING"

    def test_trainer_conflict_is_reported_with_details(self, service, student, trainer):
        start = _future_start()
        clash = SimpleNamespace(
            id="existing",
            status="confirmed",
            training_topic="Terraform",
            start_time=start - timedelta(hours=1),
            end_time=start + timedelta(hours=1),
        )
        service.trainer_repository.get_by_id.return_value = trainer
        service.booking_repository.find_overlapping.side_effect = [[clash]]

        with pytest.raises(BookingConflictException) as exc:
            service.create_direct(student, _payload(start))

        assert exc.value.details["conflict_scope"] == "trainer"
        assert exc.value.details["conflicting_booking"]["id"] == "existing"
        service.booking_repository.create.assert_not_called()

    def test_client_conflict_checked_after_trainer(self, service, student, trainer):
        start = _future_start()
        clash = SimpleNamespace(
            id="mine", status="pending", training_topic="Go", start_time=start, end_time=start + timedelta(hours=1)
        )
        service.trainer_repository.get_by_id.return_value = trainer
        service.booking_repository.find_overlapping.side_effect = [[], [clash]]

        with pytest.raises(BookingConflictException) as exc:
            service.create_direct(student, _payload(start))
        assert exc.value.details["conflict_scope"] == "client"

    def test_below_minimum_amount(self, service, student, trainer):
        service.trainer_repository.get_by_id.return_value = trainer
        service.pricing_service.amount_for.return_value = Decimal("200.00")

        with pytest.raises(BusinessRuleException) as exc:
            service.create_direct(student, _payload(_future_start()))
        assert exc.value.code == "BELOW_MINIMUM_AMOUNT"

    def test_creates_pending_booking_with_commission_split(self, service, student, trainer):
        service.trainer_repository.get_by_id.return_value = trainer
        service.pricing_service.amount_for.return_value = Decimal("2000.00")

        with patch.object(service, "transaction"):
            booking = service.create_direct(student, _payload(_future_start()))

        assert booking.status == "pending"
        assert booking.booking_type == "direct"
        assert booking.total_amount == Decimal("2000.00")
        assert booking.platform_commission_amount == Decimal("200.00")
        assert booking.trainer_payout_amount == Decimal("1800.00")
        assert booking.organization_name == "Acme"
        service.notification_service.notify.assert_called_once()
        assert service.notification_service.notify.call_args.args[0] == "trainer-user-1"


def _booking(**fields) -> Booking:
    start = NOW + timedelta(days=3)
    defaults = dict(
        id="booking-1",
        student_id="student-1",
        trainer_id="trainer-1",
        training_topic="Kubernetes Fundamentals",
        start_time=start,
        end_time=start + timedelta(hours=2),
        status="confirmed",
        total_amount=Decimal("2000.00"),
    )
    defaults.update(fields)
    return Booking(**defaults)


class TestStatusFlow:
    def test_trainer_advances_assigned_to_delivering(self, service):
        booking = _booking(status="assigned")
        service.booking_repository.get_by_id.return_value = booking

        with patch.object(service, "transaction"):
            result = service.advance_status(SimpleNamespace(id="trainer-1"), booking.id)

        assert result.status == "delivering"
        assert service.notification_service.notify.call_args.args[0] == "student-1"

    def test_trainer_cannot_advance_delivered(self, service):
        service.booking_repository.get_by_id.return_value = _booking(status="delivered")
        with pytest.raises(BusinessRuleException) as exc:
            service.advance_status(SimpleNamespace(id="trainer-1"), "booking-1")
        assert exc.value.code == "INVALID_STATUS_TRANSITION"

    def test_only_assigned_trainer_can_advance(self, service):
        service.booking_repository.get_by_id.return_value = _booking(status="assigned")
        with pytest.raises(ForbiddenException):
            service.advance_status(SimpleNamespace(id="someone-else"), "booking-1")

    def test_client_completes_delivered_booking_and_payout_is_recorded(self, service, student):
        booking = _booking(status="delivered")
        service.booking_repository.get_by_id.return_value = booking

        with patch.object(service, "transaction"):
            result = service.complete_by_client(student, booking.id)

        assert result.status == "completed"
        assert result.completed_at is not None
        service.payout_service.create_for_booking.assert_called_once_with(booking)

    def test_client_cannot_complete_before_delivery(self, service, student):
        service.booking_repository.get_by_id.return_value = _booking(status="assigned")
        with pytest.raises(BusinessRuleException):
            service.complete_by_client(student, "booking-1")


class TestCancel:
    def test_cancel_records_fee_and_reason(self, service, student):
        booking = _booking(status="confirmed")
        service.booking_repository.get_by_id.return_value = booking

        with patch.object(service, "transaction"):
            result = service.cancel(student, booking.id, reason="Team offsite moved")

        assert result.status == "cancelled"
        assert result.cancelled_by_id == "student-1"
        assert result.cancellation_fee_amount == Decimal("100.00")
        assert "Team offsite moved" in result.notes

    def test_delivering_booking_cannot_be_cancelled(self, service, student):
        service.booking_repository.get_by_id.return_value = _booking(status="delivering")
        with pytest.raises(BusinessRuleException) as exc:
            service.cancel(student, "booking-1")
        assert exc.value.code == "NOT_CANCELLABLE"

    def test_outsider_cannot_cancel(self, service):
        service.booking_repository.get_by_id.return_value = _booking()
        outsider = SimpleNamespace(id="other", display_name="Other", is_admin=False)
        with pytest.raises(ForbiddenException):
            service.cancel(outsider, "booking-1")
