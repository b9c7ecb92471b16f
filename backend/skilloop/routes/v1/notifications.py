# backend/skilloop/routes/v1/notifications.py
"""Notification inbox routes - API v1."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import get_current_profile, get_notification_service
from ...models.profile import Profile
from ...schemas.base import CountResponse
from ...schemas.message import MarkReadRequest, NotificationResponse
from ...services.notification_service import NotificationService

router = APIRouter(tags=["notifications-v1"])


@router.get("", response_model=List[NotificationResponse])
def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(50, ge=1, le=200),
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> List[NotificationResponse]:
    """List notifications for the current user, newest first."""
    notifications = service.list_for_user(profile.id, unread_only=unread_only, limit=limit)
    return [NotificationResponse.model_validate(n) for n in notifications]


@router.get("/unread-count", response_model=CountResponse)
def get_unread_count(
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> CountResponse:
    return CountResponse(count=service.unread_count(profile.id))


@router.post("/mark-read", response_model=CountResponse)
def mark_notifications_read(
    payload: Optional[MarkReadRequest] = None,
    profile: Profile = Depends(get_current_profile),
    service: NotificationService = Depends(get_notification_service),
) -> CountResponse:
    """Mark the given notifications read, or all of them when no ids are sent."""
    return CountResponse(count=service.mark_read(profile.id, payload.ids if payload else None))
