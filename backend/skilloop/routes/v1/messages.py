# backend/skilloop/routes/v1/messages.py
"""Message routes - API v1. Conversations themselves live under /bookings/{id}/messages."""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_profile, get_message_service
from ...models.profile import Profile
from ...schemas.base import CountResponse
from ...services.message_service import MessageService

router = APIRouter(tags=["messages-v1"])


@router.get("/unread-count", response_model=CountResponse)
def get_unread_message_count(
    profile: Profile = Depends(get_current_profile),
    service: MessageService = Depends(get_message_service),
) -> CountResponse:
    return CountResponse(count=service.unread_count(profile))
