# backend/skilloop/services/availability_service.py
"""
Availability Service for the Skilloop Platform

Trainers publish dated time windows. Slot times are wall-clock times in the
trainer's own timezone; bookings are stored in UTC, so every overlap check
converts the slot to UTC first.
"""

from datetime import date, datetime, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import SLOT_BLOCKING_STATUSES
from ..core.exceptions import (
    AvailabilityConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..core.timezone_utils import (
    ensure_utc,
    get_timezone,
    local_day_bounds_utc,
    today_in,
    to_local,
    week_start,
)
from ..models.trainer import Trainer, TrainerAvailability
from ..repositories.factory import RepositoryFactory
from ..schemas.trainer import AvailabilitySlotCreate
from .base import BaseService

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)

    def _slot_bounds_utc(self, trainer: Trainer, slot_date: date, start, end):
        tz = get_timezone(trainer.timezone)
        start_local = tz.localize(datetime.combine(slot_date, start))
        end_local = tz.localize(datetime.combine(slot_date, end))
        return ensure_utc(start_local), ensure_utc(end_local)

    @BaseService.measure_operation("list_availability")
    def list_slots(self, trainer_id: str, on_date: Optional[date] = None) -> List[TrainerAvailability]:
        if not self.trainer_repository.exists(id=trainer_id):
            raise NotFoundException("Trainer not found", code="TRAINER_NOT_FOUND")
        if on_date is None:
            trainer = self.trainer_repository.get_by_id(trainer_id, load_relationships=False)
            return self.availability_repository.list_for_trainer(
                trainer_id, from_date=today_in(trainer.timezone)
            )
        return self.availability_repository.list_for_trainer(trainer_id, on_date=on_date)

    @BaseService.measure_operation("add_availability")
    def add_slot(self, trainer: Trainer, data: AvailabilitySlotCreate) -> TrainerAvailability:
        """
        Publish a slot.

        Raises:
            ValidationException: start is not before end
            AvailabilityConflictException: the window overlaps a live booking
        """
        if data.start_time >= data.end_time:
            raise ValidationException(
                "Start time must be before end time",
                code="INVALID_TIME_RANGE",
                details={"start_time": data.start_time.isoformat(), "end_time": data.end_time.isoformat()},
            )

        slot_start, slot_end = self._slot_bounds_utc(trainer, data.date, data.start_time, data.end_time)
        conflicts = self.booking_repository.find_overlapping(
            slot_start, slot_end, SLOT_BLOCKING_STATUSES, trainer_id=trainer.id
        )
        if conflicts:
            booked = conflicts[0]
            booked_start = to_local(booked.start_time, trainer.timezone)
            booked_end = to_local(booked.end_time, trainer.timezone)
            raise AvailabilityConflictException(
                slot_date=data.date.isoformat(),
                new_range=f"{data.start_time.strftime('%H:%M')}-{data.end_time.strftime('%H:%M')}",
                booking_range=f"{booked_start.strftime('%H:%M')}-{booked_end.strftime('%H:%M')}",
            )

        with self.transaction():
            slot = self.availability_repository.create(
                trainer_id=trainer.id,
                date=data.date,
                start_time=data.start_time,
                end_time=data.end_time,
                is_available=True,
                is_booked=False,
            )

        self.log_operation("add_availability", trainer_id=trainer.id, slot_id=slot.id)
        return slot

    def _get_owned_slot(self, trainer: Trainer, slot_id: str) -> TrainerAvailability:
        slot = self.availability_repository.get_by_id(slot_id)
        if not slot:
            raise NotFoundException("Availability slot not found", code="SLOT_NOT_FOUND")
        if slot.trainer_id != trainer.id:
            raise ForbiddenException("You can only change your own availability", code="NOT_OWNER")
        return slot

    @BaseService.measure_operation("toggle_availability")
    def toggle_slot(self, trainer: Trainer, slot_id: str) -> TrainerAvailability:
        slot = self._get_owned_slot(trainer, slot_id)
        with self.transaction():
            slot.is_available = not slot.is_available
            self.availability_repository.flush()
        return slot

    @BaseService.measure_operation("delete_availability")
    def delete_slot(self, trainer: Trainer, slot_id: str) -> None:
        slot = self._get_owned_slot(trainer, slot_id)
        with self.transaction():
            self.availability_repository.delete(slot.id)
        self.log_operation("delete_availability", trainer_id=trainer.id, slot_id=slot_id)

    @BaseService.measure_operation("weekly_schedule")
    def weekly_schedule(self, trainer: Trainer, start: Optional[date] = None) -> Dict[str, Any]:
        """
        Seven day buckets of the trainer's bookings.

        ``start`` defaults to the Sunday of the current week in the trainer's
        timezone; any other date is snapped back to its own Sunday.
        """
        tz_name = get_timezone(trainer.timezone).zone
        first_day = week_start(start or today_in(tz_name))
        last_day = first_day + timedelta(days=6)

        window_start, _ = local_day_bounds_utc(first_day, tz_name)
        _, window_end = local_day_bounds_utc(last_day, tz_name)
        bookings = self.booking_repository.list_for_trainer(
            trainer.id, start_from=window_start, start_before=window_end
        )

        buckets: Dict[date, List[Any]] = {first_day + timedelta(days=i): [] for i in range(7)}
        for booking in sorted(bookings, key=lambda b: b.start_time):
            local_day = to_local(booking.start_time, tz_name).date()
            if local_day in buckets:
                buckets[local_day].append(booking)

        return {
            "week_start": first_day,
            "week_end": last_day,
            "timezone": tz_name,
            "days": [{"date": day, "bookings": items} for day, items in buckets.items()],
        }
