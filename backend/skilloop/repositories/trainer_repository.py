# backend/skilloop/repositories/trainer_repository.py
"""
Trainer Repository for the Skilloop Platform

Covers the trainer profile itself plus its pricing row and availability
slots, which are always read and written in a trainer's context.
"""

from datetime import date
from decimal import Decimal
import logging
from typing import Dict, List, Optional

from sqlalchemy import String, cast, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.trainer import Trainer, TrainerAvailability, TrainerPricing
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TrainerRepository(BaseRepository[Trainer]):
    def __init__(self, db: Session):
        super().__init__(db, Trainer)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(joinedload(Trainer.profile), joinedload(Trainer.pricing))

    def get_by_user_id(self, user_id: str) -> Optional[Trainer]:
        try:
            return (
                self._apply_eager_loading(self.db.query(Trainer))
                .filter(Trainer.user_id == user_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting trainer for user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve trainer: {str(e)}")

    @staticmethod
    def _text_filter(query: Query, q: str) -> Query:
        pattern = f"%{q.strip()}%"
        return query.filter(
            or_(
                Trainer.name.ilike(pattern),
                Trainer.title.ilike(pattern),
                Trainer.specialization.ilike(pattern),
                cast(Trainer.skills, String).ilike(pattern),
            )
        )

    def search_public(
        self,
        q: Optional[str] = None,
        specialization: Optional[str] = None,
        location: Optional[str] = None,
        min_rate: Optional[Decimal] = None,
        max_rate: Optional[Decimal] = None,
        min_rating: Optional[Decimal] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Trainer]:
        """Approved trainers only, best rated first."""
        try:
            query = self.db.query(Trainer).filter(Trainer.status == "approved")
            if q:
                query = self._text_filter(query, q)
            if specialization:
                query = query.filter(Trainer.specialization.ilike(f"%{specialization.strip()}%"))
            if location:
                query = query.filter(Trainer.location.ilike(f"%{location.strip()}%"))
            if min_rate is not None:
                query = query.filter(Trainer.hourly_rate >= min_rate)
            if max_rate is not None:
                query = query.filter(Trainer.hourly_rate <= max_rate)
            if min_rating is not None:
                query = query.filter(Trainer.rating >= min_rating)
            return (
                query.order_by(Trainer.rating.desc(), Trainer.total_reviews.desc(), Trainer.id)
                .offset(offset)
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching trainers: {str(e)}")
            raise RepositoryException(f"Failed to search trainers: {str(e)}")

    def list_for_admin(self, status: Optional[str] = None, q: Optional[str] = None) -> List[Trainer]:
        try:
            query = self._apply_eager_loading(self.db.query(Trainer))
            if status:
                query = query.filter(Trainer.status == status)
            if q:
                query = self._text_filter(query, q)
            return query.order_by(Trainer.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing trainers: {str(e)}")
            raise RepositoryException(f"Failed to list trainers: {str(e)}")

    def specialization_counts(self) -> Dict[str, int]:
        """Approved trainer count per specialization."""
        try:
            rows = (
                self.db.query(Trainer.specialization, func.count(Trainer.id))
                .filter(Trainer.status == "approved")
                .group_by(Trainer.specialization)
                .all()
            )
            return {(name or "Other"): int(count) for name, count in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting specializations: {str(e)}")
            raise RepositoryException(f"Failed to count specializations: {str(e)}")


class TrainerPricingRepository(BaseRepository[TrainerPricing]):
    def __init__(self, db: Session):
        super().__init__(db, TrainerPricing)

    def get_by_trainer_id(self, trainer_id: str) -> Optional[TrainerPricing]:
        return self.find_one_by(trainer_id=trainer_id)


class AvailabilityRepository(BaseRepository[TrainerAvailability]):
    def __init__(self, db: Session):
        super().__init__(db, TrainerAvailability)

    def list_for_trainer(
        self, trainer_id: str, on_date: Optional[date] = None, from_date: Optional[date] = None
    ) -> List[TrainerAvailability]:
        try:
            query = self.db.query(TrainerAvailability).filter(
                TrainerAvailability.trainer_id == trainer_id
            )
            if on_date is not None:
                query = query.filter(TrainerAvailability.date == on_date)
            elif from_date is not None:
                query = query.filter(TrainerAvailability.date >= from_date)
            return query.order_by(TrainerAvailability.date, TrainerAvailability.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing availability for {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to list availability: {str(e)}")
