# backend/skilloop/repositories/review_repository.py
"""Review data access and per-trainer rating aggregates."""

from decimal import Decimal
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.review import Review
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ReviewRepository(BaseRepository[Review]):
    def __init__(self, db: Session):
        super().__init__(db, Review)

    def get_by_booking(self, booking_id: str) -> Optional[Review]:
        return self.find_one_by(booking_id=booking_id)

    def list_for_trainer(self, trainer_id: str, limit: int = 50) -> List[Review]:
        try:
            return (
                self.db.query(Review)
                .filter(Review.trainer_id == trainer_id)
                .order_by(Review.created_at.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing reviews for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to list reviews: {str(e)}")

    def rating_stats(self, trainer_id: str) -> Tuple[Optional[Decimal], int]:
        """(average rating, review count) for a trainer."""
        try:
            avg, count = (
                self.db.query(func.avg(Review.rating), func.count(Review.id))
                .filter(Review.trainer_id == trainer_id)
                .one()
            )
            return (Decimal(str(avg)) if avg is not None else None), int(count or 0)
        except SQLAlchemyError as e:
            self.logger.error(f"Error aggregating ratings for {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to aggregate ratings: {str(e)}")

    def average_by_trainer(self) -> Dict[str, Decimal]:
        try:
            rows = (
                self.db.query(Review.trainer_id, func.avg(Review.rating))
                .group_by(Review.trainer_id)
                .all()
            )
            return {trainer_id: Decimal(str(avg)) for trainer_id, avg in rows if avg is not None}
        except SQLAlchemyError as e:
            self.logger.error(f"Error aggregating ratings: {str(e)}")
            raise RepositoryException(f"Failed to aggregate ratings: {str(e)}")
