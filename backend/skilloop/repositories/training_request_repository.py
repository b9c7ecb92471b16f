# backend/skilloop/repositories/training_request_repository.py
"""Training request feed and trainer application data access."""

from datetime import datetime
import logging
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ..core.exceptions import RepositoryException
from ..models.training_request import TrainingApplication, TrainingRequest
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TrainingRequestRepository(BaseRepository[TrainingRequest]):
    def __init__(self, db: Session):
        super().__init__(db, TrainingRequest)

    def list_open(self, now: datetime, q: Optional[str] = None, limit: int = 50, offset: int = 0) -> List[TrainingRequest]:
        """Open requests still accepting applications, newest first."""
        try:
            query = self.db.query(TrainingRequest).filter(
                TrainingRequest.status == "open",
                or_(
                    TrainingRequest.application_deadline.is_(None),
                    TrainingRequest.application_deadline > now,
                ),
            )
            if q:
                pattern = f"%{q.strip()}%"
                query = query.filter(
                    or_(
                        TrainingRequest.title.ilike(pattern),
                        TrainingRequest.description.ilike(pattern),
                    )
                )
            return query.order_by(TrainingRequest.created_at.desc()).offset(offset).limit(limit).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing open training requests: {str(e)}")
            raise RepositoryException(f"Failed to list training requests: {str(e)}")

    def list_for_client(self, client_id: str) -> List[TrainingRequest]:
        try:
            return (
                self.db.query(TrainingRequest)
                .filter(TrainingRequest.client_id == client_id)
                .order_by(TrainingRequest.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing requests for client {client_id}: {str(e)}")
            raise RepositoryException(f"Failed to list training requests: {str(e)}")

    def list_by_status(self, status: Optional[str] = None) -> List[TrainingRequest]:
        try:
            query = self.db.query(TrainingRequest)
            if status:
                query = query.filter(TrainingRequest.status == status)
            return query.order_by(TrainingRequest.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing training requests: {str(e)}")
            raise RepositoryException(f"Failed to list training requests: {str(e)}")


class TrainingApplicationRepository(BaseRepository[TrainingApplication]):
    def __init__(self, db: Session):
        super().__init__(db, TrainingApplication)

    def get_for_trainer(self, request_id: str, trainer_id: str) -> Optional[TrainingApplication]:
        return self.find_one_by(request_id=request_id, trainer_id=trainer_id)

    def list_for_request(self, request_id: str) -> List[TrainingApplication]:
        try:
            return (
                self.db.query(TrainingApplication)
                .options(joinedload(TrainingApplication.trainer))
                .filter(TrainingApplication.request_id == request_id)
                .order_by(TrainingApplication.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing applications for {request_id}: {str(e)}")
            raise RepositoryException(f"Failed to list applications: {str(e)}")

    def list_for_trainer(self, trainer_id: str, status: Optional[str] = None) -> List[TrainingApplication]:
        try:
            query = (
                self.db.query(TrainingApplication)
                .options(joinedload(TrainingApplication.request))
                .filter(TrainingApplication.trainer_id == trainer_id)
            )
            if status:
                query = query.filter(TrainingApplication.status == status)
            return query.order_by(TrainingApplication.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing applications for trainer {trainer_id}: {str(e)}")
            raise RepositoryException(f"Failed to list applications: {str(e)}")

    def counts_by_request(self, request_ids: List[str]) -> Dict[str, int]:
        if not request_ids:
            return {}
        try:
            rows = (
                self.db.query(TrainingApplication.request_id, func.count(TrainingApplication.id))
                .filter(TrainingApplication.request_id.in_(request_ids))
                .group_by(TrainingApplication.request_id)
                .all()
            )
            return {request_id: int(count) for request_id, count in rows}
        except SQLAlchemyError as e:
            self.logger.error(f"Error counting applications: {str(e)}")
            raise RepositoryException(f"Failed to count applications: {str(e)}")
