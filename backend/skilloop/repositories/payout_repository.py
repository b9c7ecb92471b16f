# backend/skilloop/repositories/payout_repository.py
"""Trainer payout and payout batch data access."""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.payout import PayoutBatch, TrainerPayout
from ..models.trainer import Trainer
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class PayoutRepository(BaseRepository[TrainerPayout]):
    def __init__(self, db: Session):
        super().__init__(db, TrainerPayout)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(TrainerPayout.trainer).joinedload(Trainer.profile),
            joinedload(TrainerPayout.booking),
        )

    def get_by_booking(self, booking_id: str) -> Optional[TrainerPayout]:
        return self.find_one_by(booking_id=booking_id)

    def list_pending_unbatched(self) -> List[TrainerPayout]:
        """Pending payouts not yet in a batch, newest first."""
        try:
            return (
                self._apply_eager_loading(self.db.query(TrainerPayout))
                .filter(
                    TrainerPayout.payout_status == "pending",
                    TrainerPayout.payout_batch_id.is_(None),
                )
                .order_by(TrainerPayout.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing pending payouts: {str(e)}")
            raise RepositoryException(f"Failed to list pending payouts: {str(e)}")

    def list_for_trainer(self, trainer_id: str) -> List[TrainerPayout]:
        try:
            return (
                self._apply_eager_loading(self.db.query(TrainerPayout))
                .filter(TrainerPayout.trainer_id == trainer_id)
                .order_by(TrainerPayout.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing payouts for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to list payouts: {str(e)}")

    def list_by_batch(self, batch_id: str) -> List[TrainerPayout]:
        return self.find_by(payout_batch_id=batch_id)


class PayoutBatchRepository(BaseRepository[PayoutBatch]):
    def __init__(self, db: Session):
        super().__init__(db, PayoutBatch)

    def list_recent(self, limit: int = 20) -> List[PayoutBatch]:
        try:
            return (
                self.db.query(PayoutBatch)
                .order_by(PayoutBatch.created_at.desc())
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing payout batches: {str(e)}")
            raise RepositoryException(f"Failed to list payout batches: {str(e)}")
