# backend/skilloop/routes/v1/admin_content.py
"""
Admin content routes - API v1

Endpoints:
    POST /categories, PATCH|DELETE /categories/{id}
    POST /jobs, PATCH|DELETE /jobs/{id}
    POST /success-stories, PATCH|DELETE /success-stories/{id}
"""

from fastapi import APIRouter, Depends, Response, status

from ...api.dependencies import get_content_service, require_admin
from ...schemas.content import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    JobCreate,
    JobResponse,
    JobUpdate,
    SuccessStoryCreate,
    SuccessStoryResponse,
    SuccessStoryUpdate,
)
from ...services.content_service import ContentService

router = APIRouter(tags=["admin-content-v1"], dependencies=[Depends(require_admin)])


@router.post("/categories", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate, service: ContentService = Depends(get_content_service)
) -> CategoryResponse:
    return CategoryResponse.model_validate(service.create_category(payload))


@router.patch("/categories/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str, payload: CategoryUpdate, service: ContentService = Depends(get_content_service)
) -> CategoryResponse:
    return CategoryResponse.model_validate(service.update_category(category_id, payload))


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: str, service: ContentService = Depends(get_content_service)) -> Response:
    service.delete_category(category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
def create_job(payload: JobCreate, service: ContentService = Depends(get_content_service)) -> JobResponse:
    return JobResponse.model_validate(service.create_job(payload))


@router.patch("/jobs/{job_id}", response_model=JobResponse)
def update_job(
    job_id: str, payload: JobUpdate, service: ContentService = Depends(get_content_service)
) -> JobResponse:
    return JobResponse.model_validate(service.update_job(job_id, payload))


@router.delete("/jobs/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_job(job_id: str, service: ContentService = Depends(get_content_service)) -> Response:
    service.delete_job(job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/success-stories", response_model=SuccessStoryResponse, status_code=status.HTTP_201_CREATED
)
def create_success_story(
    payload: SuccessStoryCreate, service: ContentService = Depends(get_content_service)
) -> SuccessStoryResponse:
    return SuccessStoryResponse.model_validate(service.create_story(payload))


@router.patch("/success-stories/{story_id}", response_model=SuccessStoryResponse)
def update_success_story(
    story_id: str,
    payload: SuccessStoryUpdate,
    service: ContentService = Depends(get_content_service),
) -> SuccessStoryResponse:
    return SuccessStoryResponse.model_validate(service.update_story(story_id, payload))


@router.delete("/success-stories/{story_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_success_story(story_id: str, service: ContentService = Depends(get_content_service)) -> Response:
    service.delete_story(story_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
