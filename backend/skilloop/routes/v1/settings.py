# backend/skilloop/routes/v1/settings.py
"""Public platform settings - API v1."""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_settings_service
from ...schemas.settings import PlatformSettingsResponse
from ...services.platform_settings_service import PlatformSettingsService

router = APIRouter(tags=["settings-v1"])


@router.get("", response_model=PlatformSettingsResponse)
def get_platform_settings(
    service: PlatformSettingsService = Depends(get_settings_service),
) -> PlatformSettingsResponse:
    """Current settings merged over the built-in defaults."""
    return PlatformSettingsResponse(**service.as_public_dict())
