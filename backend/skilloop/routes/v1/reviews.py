# backend/skilloop/routes/v1/reviews.py
"""
Reviews routes - API v1

Endpoints:
    POST /  → Review a completed booking (client)

Trainer review listings live at /trainers/{trainer_id}/reviews.
"""

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_current_profile, get_review_service
from ...models.profile import Profile
from ...schemas.review import ReviewCreate, ReviewResponse
from ...services.review_service import ReviewService

router = APIRouter(tags=["reviews-v1"])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def submit_review(
    payload: ReviewCreate,
    profile: Profile = Depends(get_current_profile),
    service: ReviewService = Depends(get_review_service),
) -> ReviewResponse:
    return ReviewResponse.model_validate(service.submit(profile, payload))
