# backend/skilloop/services/content_service.py
"""Public site content: service categories, job postings and success stories."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, NotFoundException
from ..models.content import Job, ServiceCategory, SuccessStory
from ..repositories.factory import RepositoryFactory
from ..schemas.content import (
    CategoryCreate,
    CategoryUpdate,
    JobCreate,
    JobUpdate,
    SuccessStoryCreate,
    SuccessStoryUpdate,
)
from .base import BaseService

logger = logging.getLogger(__name__)


def _enum_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: getattr(value, "value", value) for key, value in fields.items()}


class ContentService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.category_repository = RepositoryFactory.create_service_category_repository(db)
        self.job_repository = RepositoryFactory.create_job_repository(db)
        self.story_repository = RepositoryFactory.create_success_story_repository(db)

    # Categories

    def list_categories(self, active_only: bool = True) -> List[ServiceCategory]:
        return self.category_repository.list_ordered(active_only=active_only)

    def get_category(self, slug: str) -> ServiceCategory:
        category = self.category_repository.get_by_slug(slug)
        if not category or not category.is_active:
            raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND")
        return category

    def _ensure_slug_free(self, slug: str) -> None:
        if self.category_repository.get_by_slug(slug):
            raise ConflictException(
                f"A category with slug '{slug}' already exists", code="SLUG_TAKEN"
            )

    @BaseService.measure_operation("create_category")
    def create_category(self, data: CategoryCreate) -> ServiceCategory:
        self._ensure_slug_free(data.slug)
        with self.transaction():
            category = self.category_repository.create(**data.model_dump())
        self.log_operation("create_category", slug=category.slug)
        return category

    @BaseService.measure_operation("update_category")
    def update_category(self, category_id: str, data: CategoryUpdate) -> ServiceCategory:
        category = self.category_repository.get_by_id(category_id)
        if not category:
            raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND")
        changes = data.model_dump(exclude_unset=True)
        if changes.get("slug") and changes["slug"] != category.slug:
            self._ensure_slug_free(changes["slug"])
        with self.transaction():
            for field, value in changes.items():
                setattr(category, field, value)
        return category

    def delete_category(self, category_id: str) -> None:
        with self.transaction():
            if not self.category_repository.delete(category_id):
                raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND")

    # Jobs

    def list_jobs(self) -> List[Job]:
        return self.job_repository.list_newest()

    @BaseService.measure_operation("create_job")
    def create_job(self, data: JobCreate) -> Job:
        with self.transaction():
            job = self.job_repository.create(**_enum_values(data.model_dump()))
        return job

    def update_job(self, job_id: str, data: JobUpdate) -> Job:
        job = self.job_repository.get_by_id(job_id)
        if not job:
            raise NotFoundException("Job not found", code="JOB_NOT_FOUND")
        with self.transaction():
            for field, value in _enum_values(data.model_dump(exclude_unset=True)).items():
                setattr(job, field, value)
        return job

    def delete_job(self, job_id: str) -> None:
        with self.transaction():
            if not self.job_repository.delete(job_id):
                raise NotFoundException("Job not found", code="JOB_NOT_FOUND")

    # Success stories

    def list_stories(self, featured_only: bool = False) -> List[SuccessStory]:
        return self.story_repository.list_ordered(featured_only=featured_only)

    def create_story(self, data: SuccessStoryCreate) -> SuccessStory:
        with self.transaction():
            story = self.story_repository.create(**data.model_dump())
        return story

    def update_story(self, story_id: str, data: SuccessStoryUpdate) -> SuccessStory:
        story = self.story_repository.get_by_id(story_id)
        if not story:
            raise NotFoundException("Success story not found", code="STORY_NOT_FOUND")
        with self.transaction():
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(story, field, value)
        return story

    def delete_story(self, story_id: str) -> None:
        with self.transaction():
            if not self.story_repository.delete(story_id):
                raise NotFoundException("Success story not found", code="STORY_NOT_FOUND")
