# backend/skilloop/repositories/content_repository.py
"""Platform settings and public site content."""

from decimal import Decimal
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.content import Job, PlatformSetting, ServiceCategory, SuccessStory
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class PlatformSettingRepository(BaseRepository[PlatformSetting]):
    def __init__(self, db: Session):
        super().__init__(db, PlatformSetting)

    def get_by_key(self, key: str) -> Optional[PlatformSetting]:
        return self.find_one_by(setting_key=key)

    def list_all(self) -> List[PlatformSetting]:
        try:
            return self.db.query(PlatformSetting).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading platform settings: {str(e)}")
            raise RepositoryException(f"Failed to load platform settings: {str(e)}")

    def upsert(self, key: str, value: Decimal, description: Optional[str] = None) -> PlatformSetting:
        """Insert or update by ``setting_key``."""
        existing = self.get_by_key(key)
        if existing is None:
            return self.create(setting_key=key, setting_value=value, description=description)
        existing.setting_value = value
        if description is not None:
            existing.description = description
        self.flush()
        return existing


class ServiceCategoryRepository(BaseRepository[ServiceCategory]):
    def __init__(self, db: Session):
        super().__init__(db, ServiceCategory)

    def get_by_slug(self, slug: str) -> Optional[ServiceCategory]:
        return self.find_one_by(slug=slug)

    def list_ordered(self, active_only: bool = True) -> List[ServiceCategory]:
        try:
            query = self.db.query(ServiceCategory)
            if active_only:
                query = query.filter(ServiceCategory.is_active.is_(True))
            return query.order_by(ServiceCategory.display_order, ServiceCategory.name).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing categories: {str(e)}")
            raise RepositoryException(f"Failed to list categories: {str(e)}")


class JobRepository(BaseRepository[Job]):
    def __init__(self, db: Session):
        super().__init__(db, Job)

    def list_newest(self) -> List[Job]:
        try:
            return self.db.query(Job).order_by(Job.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing jobs: {str(e)}")
            raise RepositoryException(f"Failed to list jobs: {str(e)}")


class SuccessStoryRepository(BaseRepository[SuccessStory]):
    def __init__(self, db: Session):
        super().__init__(db, SuccessStory)

    def list_ordered(self, featured_only: bool = False) -> List[SuccessStory]:
        try:
            query = self.db.query(SuccessStory)
            if featured_only:
                query = query.filter(SuccessStory.is_featured.is_(True))
            return query.order_by(SuccessStory.display_order, SuccessStory.created_at.desc()).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing success stories: {str(e)}")
            raise RepositoryException(f"Failed to list success stories: {str(e)}")
