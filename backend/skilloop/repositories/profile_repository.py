# backend/skilloop/repositories/profile_repository.py
"""Profile data access."""

from datetime import datetime
import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.profile import Profile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class ProfileRepository(BaseRepository[Profile]):
    def __init__(self, db: Session):
        super().__init__(db, Profile)

    def get_by_email(self, email: str) -> Optional[Profile]:
        return self.find_one_by(email=email.lower())

    def list_admins(self) -> List[Profile]:
        return self.find_by(role="admin")

    def search(
        self,
        role: Optional[str] = None,
        q: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Profile]:
        """Admin user listing filtered by role and a name/email/company match."""
        try:
            query = self.db.query(Profile)
            if role:
                query = query.filter(Profile.role == role)
            if q:
                pattern = f"%{q.strip()}%"
                query = query.filter(
                    or_(
                        Profile.full_name.ilike(pattern),
                        Profile.email.ilike(pattern),
                        Profile.company_name.ilike(pattern),
                    )
                )
            return query.order_by(Profile.created_at.desc()).offset(offset).limit(limit).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error searching profiles: {str(e)}")
            raise RepositoryException(f"Failed to search profiles: {str(e)}")

    def list_created_at(self) -> List[datetime]:
        try:
            return [row[0] for row in self.db.query(Profile.created_at).all()]
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading registration dates: {str(e)}")
            raise RepositoryException(f"Failed to load registration dates: {str(e)}")
