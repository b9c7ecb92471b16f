# backend/skilloop/routes/v1/profiles.py
"""
Profile routes - API v1

Endpoints:
    GET /me    → Caller's profile
    PATCH /me  → Update the caller's profile
"""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_profile, get_profile_service
from ...models.profile import Profile
from ...schemas.profile import ProfileResponse, ProfileUpdate
from ...services.profile_service import ProfileService

router = APIRouter(tags=["profiles-v1"])


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(profile: Profile = Depends(get_current_profile)) -> ProfileResponse:
    return ProfileResponse.model_validate(profile)


@router.patch("/me", response_model=ProfileResponse)
def update_my_profile(
    payload: ProfileUpdate,
    profile: Profile = Depends(get_current_profile),
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    return ProfileResponse.model_validate(service.update_profile(profile, payload))
