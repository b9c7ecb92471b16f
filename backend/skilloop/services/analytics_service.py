# backend/skilloop/services/analytics_service.py
"""
Admin analytics.

Aggregation happens in Python over the booking list; the platform's volume
keeps this well inside a single request.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.constants import GROWTH_WINDOW_DAYS
from ..core.enums import REVENUE_STATUSES, BookingStatus
from ..core.timezone_utils import ensure_utc, utc_now
from ..models.booking import Booking
from ..models.trainer import Trainer
from ..repositories.factory import RepositoryFactory
from . import ledger
from .base import BaseService

logger = logging.getLogger(__name__)


def month_key(value: datetime) -> str:
    return ensure_utc(value).strftime("%Y-%m")


class AnalyticsService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.booking_repository = RepositoryFactory.create_booking_repository(db)
        self.profile_repository = RepositoryFactory.create_profile_repository(db)
        self.trainer_repository = RepositoryFactory.create_trainer_repository(db)

    @BaseService.measure_operation("analytics_overview")
    def overview(self) -> Dict[str, Any]:
        bookings = self.booking_repository.list_all()

        counts: Dict[str, int] = defaultdict(int)
        revenue: Dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
        for booking in bookings:
            key = month_key(booking.created_at)
            counts[key] += 1
            if booking.status in REVENUE_STATUSES:
                revenue[key] += ledger.to_decimal(booking.total_amount)

        registrations: Dict[str, int] = defaultdict(int)
        created = self.profile_repository.list_created_at()
        for value in created:
            registrations[month_key(value)] += 1

        return {
            "monthly_bookings": [
                {"month": key, "bookings": counts[key], "revenue": ledger.money(revenue[key])}
                for key in sorted(counts)
            ],
            "monthly_registrations": [
                {"month": key, "users": registrations[key]} for key in sorted(registrations)
            ],
            "specializations": self.trainer_repository.specialization_counts(),
            "total_revenue": ledger.confirmed_revenue(bookings),
            "total_bookings": len(bookings),
            "total_users": len(created),
        }

    @staticmethod
    def _performance(trainer: Trainer, bookings: List[Booking], now: datetime) -> Dict[str, Any]:
        completed = [b for b in bookings if b.status == BookingStatus.COMPLETED.value]
        window = timedelta(days=GROWTH_WINDOW_DAYS)
        recent = sum(1 for b in bookings if ensure_utc(b.created_at) >= now - window)
        previous = sum(
            1 for b in bookings if now - 2 * window <= ensure_utc(b.created_at) < now - window
        )
        total = len(bookings)
        return {
            "trainer_id": trainer.id,
            "name": trainer.name,
            "specialization": trainer.specialization,
            "total_bookings": total,
            "completed_bookings": len(completed),
            "total_earnings": ledger.sum_amounts(b.total_amount for b in completed),
            "average_rating": ledger.money(trainer.rating or 0),
            "completion_rate": ledger.money(Decimal(len(completed)) * 100 / total) if total else ledger.ZERO,
            "growth_rate": ledger.growth_pct(recent, previous),
        }

    @BaseService.measure_operation("top_trainers")
    def top_trainers(self, limit: int = 5, now: Optional[datetime] = None) -> Dict[str, List[Dict[str, Any]]]:
        now = ensure_utc(now) if now else utc_now()
        by_trainer: Dict[str, List[Booking]] = defaultdict(list)
        for booking in self.booking_repository.list_all():
            if booking.trainer_id:
                by_trainer[booking.trainer_id].append(booking)

        trainers = self.trainer_repository.find_by(status="approved")
        rows = [self._performance(t, by_trainer.get(t.id, []), now) for t in trainers]

        def top(key: str) -> List[Dict[str, Any]]:
            return sorted(rows, key=lambda row: (-row[key], row["name"]))[:limit]

        return {
            "by_earnings": top("total_earnings"),
            "by_rating": top("average_rating"),
            "by_bookings": top("total_bookings"),
            "fastest_growing": top("growth_rate"),
        }
