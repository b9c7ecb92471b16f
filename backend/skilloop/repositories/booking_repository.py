# backend/skilloop/repositories/booking_repository.py
"""
Booking Repository for the Skilloop Platform

This repository handles:
- Booking CRUD operations
- Client and trainer booking listings
- Time-overlap conflict lookups
- Admin search across topic, client and trainer names
"""

from datetime import datetime
import logging
from typing import List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, aliased, joinedload

from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from ..models.profile import Profile
from ..models.trainer import Trainer
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)
        self.logger = logging.getLogger(__name__)

    def _apply_eager_loading(self, query: Query) -> Query:
        return query.options(
            joinedload(Booking.student),
            joinedload(Booking.trainer).joinedload(Trainer.profile),
        )

    # Conflict queries

    def find_overlapping(
        self,
        start_time: datetime,
        end_time: datetime,
        statuses: Sequence[str],
        trainer_id: Optional[str] = None,
        student_id: Optional[str] = None,
        exclude_booking_id: Optional[str] = None,
    ) -> List[Booking]:
        """
        Bookings for a trainer or a client that overlap [start_time, end_time).

        Two ranges overlap when start < other.end and end > other.start, so
        back-to-back sessions do not conflict.
        """
        if trainer_id is None and student_id is None:
            raise ValueError("trainer_id or student_id is required")
        try:
            query = self.db.query(Booking).filter(
                Booking.status.in_(list(statuses)),
                Booking.start_time < end_time,
                Booking.end_time > start_time,
            )
            if trainer_id is not None:
                query = query.filter(Booking.trainer_id == trainer_id)
            if student_id is not None:
                query = query.filter(Booking.student_id == student_id)
            if exclude_booking_id:
                query = query.filter(Booking.id != exclude_booking_id)
            return query.order_by(Booking.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking booking overlap: {str(e)}")
            raise RepositoryException(f"Failed to check booking conflicts: {str(e)}")

    # Listings

    def list_for_student(self, student_id: str) -> List[Booking]:
        try:
            return (
                self._apply_eager_loading(self.db.query(Booking))
                .filter(Booking.student_id == student_id)
                .order_by(Booking.start_time.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for client {student_id}: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")

    def list_for_trainer(
        self,
        trainer_id: str,
        status: Optional[str] = None,
        start_from: Optional[datetime] = None,
        start_before: Optional[datetime] = None,
    ) -> List[Booking]:
        try:
            query = self._apply_eager_loading(self.db.query(Booking)).filter(
                Booking.trainer_id == trainer_id
            )
            if status:
                query = query.filter(Booking.status == status)
            if start_from is not None:
                query = query.filter(Booking.start_time >= start_from)
            if start_before is not None:
                query = query.filter(Booking.start_time < start_before)
            return query.order_by(Booking.start_time.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to list trainer bookings: {str(e)}")

    def search(self, status: Optional[str] = None, q: Optional[str] = None) -> List[Booking]:
        """Admin listing; ``q`` matches topic, client name or trainer name."""
        try:
            student = aliased(Profile)
            query = (
                self._apply_eager_loading(self.db.query(Booking))
                .outerjoin(student, Booking.student_id == student.id)
                .outerjoin(Trainer, Booking.trainer_id == Trainer.id)
            )
            if status:
                query = query.filter(Booking.status == status)
            if q:
                pattern = f"%{q.strip()}%"
                query = query.filter(
                    or_(
                        Booking.training_topic.ilike(pattern),
                        student.full_name.ilike(pattern),
                        Booking.client_name.ilike(pattern),
                        Trainer.name.ilike(pattern),
                    )
                )
            return query.order_by(Booking.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching bookings: {str(e)}")
            raise RepositoryException(f"Failed to search bookings: {str(e)}")

    def list_all(self) -> List[Booking]:
        """Every booking, for aggregate reporting."""
        try:
            return self.db.query(Booking).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading bookings: {str(e)}")
            raise RepositoryException(f"Failed to load bookings: {str(e)}")
