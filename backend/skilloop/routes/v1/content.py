# backend/skilloop/routes/v1/content.py
"""
Public site content - API v1

Endpoints:
    GET /categories          → Active service categories by display order
    GET /categories/{slug}   → One category
    GET /jobs                → Job postings, newest first
    GET /success-stories     → Success stories by display order
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_content_service
from ...schemas.content import CategoryResponse, JobResponse, SuccessStoryResponse
from ...services.content_service import ContentService

router = APIRouter(tags=["content-v1"])


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(service: ContentService = Depends(get_content_service)) -> List[CategoryResponse]:
    return [CategoryResponse.model_validate(c) for c in service.list_categories()]


@router.get("/categories/{slug}", response_model=CategoryResponse)
def get_category(slug: str, service: ContentService = Depends(get_content_service)) -> CategoryResponse:
    return CategoryResponse.model_validate(service.get_category(slug))


@router.get("/jobs", response_model=List[JobResponse])
def list_jobs(service: ContentService = Depends(get_content_service)) -> List[JobResponse]:
    return [JobResponse.model_validate(j) for j in service.list_jobs()]


@router.get("/success-stories", response_model=List[SuccessStoryResponse])
def list_success_stories(
    featured: bool = Query(False),
    service: ContentService = Depends(get_content_service),
) -> List[SuccessStoryResponse]:
    return [SuccessStoryResponse.model_validate(s) for s in service.list_stories(featured_only=featured)]
