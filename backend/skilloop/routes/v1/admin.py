# backend/skilloop/routes/v1/admin.py
"""
Admin routes - API v1

Moderation, platform settings, booking oversight and analytics. Every route
requires an admin profile.

Endpoints:
    PUT /settings                         → Update platform settings
    GET /trainers                         → Trainers by status / text
    PATCH /trainers/{trainer_id}/status   → Approve, reject, suspend
    PATCH /trainers/{trainer_id}/tags     → Replace trainer tags
    GET /users                            → Users by role / text
    PATCH /users/{profile_id}/role        → Change a user's role
    GET /bookings                         → Bookings with revenue stats
    PATCH /bookings/{booking_id}/status   → Set status / assign trainer
    GET /messages                         → Chat audit
    GET /training-requests                → Requests by status
    PATCH /training-requests/{id}/status  → Override request status
    GET /feedback                         → Per-trainer feedback stats
    GET /analytics                        → Monthly bookings, revenue, users
    GET /analytics/top-trainers           → Trainer leaderboards
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ...api.dependencies import (
    get_analytics_service,
    get_booking_service,
    get_feedback_service,
    get_message_service,
    get_profile_service,
    get_settings_service,
    get_trainer_service,
    get_training_request_service,
    require_admin,
)
from ...models.profile import Profile
from ...models.trainer import Trainer
from ...schemas.analytics import AnalyticsOverview, TopTrainersResponse
from ...schemas.booking import AdminBookingsResponse, BookingResponse, BookingStatusUpdate
from ...schemas.feedback import AdminTrainerFeedback
from ...schemas.message import MessageResponse
from ...schemas.profile import ProfileResponse, RoleUpdate, UserSummary
from ...schemas.settings import PlatformSettingsResponse, PlatformSettingsUpdate
from ...schemas.trainer import AdminTrainerItem, TrainerStatusUpdate, TrainerTagsUpdate
from ...schemas.training_request import RequestStatusUpdate, TrainingRequestResponse
from ...services.analytics_service import AnalyticsService
from ...services.booking_service import BookingService
from ...services.feedback_service import FeedbackService
from ...services.message_service import MessageService
from ...services.platform_settings_service import PlatformSettingsService
from ...services.profile_service import ProfileService
from ...services.trainer_service import TrainerService
from ...services.training_request_service import TrainingRequestService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-v1"], dependencies=[Depends(require_admin)])


def _admin_trainer_item(trainer: Trainer) -> AdminTrainerItem:
    item = AdminTrainerItem.model_validate(trainer)
    item.email = trainer.profile.email if trainer.profile else None
    return item


@router.put("/settings", response_model=PlatformSettingsResponse)
def update_platform_settings(
    payload: PlatformSettingsUpdate,
    service: PlatformSettingsService = Depends(get_settings_service),
) -> PlatformSettingsResponse:
    return PlatformSettingsResponse(**service.update(payload.model_dump(exclude_unset=True)))


# Trainers


@router.get("/trainers", response_model=List[AdminTrainerItem])
def list_trainers(
    status_filter: Optional[str] = Query(None, alias="status"),
    q: Optional[str] = Query(None, max_length=100),
    service: TrainerService = Depends(get_trainer_service),
) -> List[AdminTrainerItem]:
    return [_admin_trainer_item(t) for t in service.list_for_admin(status=status_filter, q=q)]


@router.patch("/trainers/{trainer_id}/status", response_model=AdminTrainerItem)
def set_trainer_status(
    trainer_id: str,
    payload: TrainerStatusUpdate,
    service: TrainerService = Depends(get_trainer_service),
) -> AdminTrainerItem:
    return _admin_trainer_item(service.set_status(trainer_id, payload.status))


@router.patch("/trainers/{trainer_id}/tags", response_model=AdminTrainerItem)
def set_trainer_tags(
    trainer_id: str,
    payload: TrainerTagsUpdate,
    service: TrainerService = Depends(get_trainer_service),
) -> AdminTrainerItem:
    return _admin_trainer_item(service.set_tags(trainer_id, payload.tags))


# Users


@router.get("/users", response_model=List[UserSummary])
def list_users(
    role: Optional[str] = None,
    q: Optional[str] = Query(None, max_length=100),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    service: ProfileService = Depends(get_profile_service),
) -> List[UserSummary]:
    return [
        UserSummary(**item)
        for item in service.list_users(role=role, q=q, limit=limit, offset=offset)
    ]


@router.patch("/users/{profile_id}/role", response_model=ProfileResponse)
def set_user_role(
    profile_id: str,
    payload: RoleUpdate,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    return ProfileResponse.model_validate(service.set_role(profile_id, payload.role))


# Bookings


@router.get("/bookings", response_model=AdminBookingsResponse)
def list_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    q: Optional[str] = Query(None, max_length=100),
    service: BookingService = Depends(get_booking_service),
) -> AdminBookingsResponse:
    return AdminBookingsResponse(**service.admin_overview(status=status_filter, q=q))


@router.patch("/bookings/{booking_id}/status", response_model=BookingResponse)
def set_booking_status(
    booking_id: str,
    payload: BookingStatusUpdate,
    admin: Profile = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(service.admin_update_status(admin, booking_id, payload))


@router.get("/messages", response_model=List[MessageResponse])
def audit_messages(
    booking_id: Optional[str] = None,
    limit: int = Query(100, ge=1, le=500),
    service: MessageService = Depends(get_message_service),
) -> List[MessageResponse]:
    return [MessageResponse(**m) for m in service.admin_list(booking_id=booking_id, limit=limit)]


# Training requests


@router.get("/training-requests", response_model=List[TrainingRequestResponse])
def list_training_requests(
    status_filter: Optional[str] = Query(None, alias="status"),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> List[TrainingRequestResponse]:
    return [TrainingRequestResponse.model_validate(r) for r in service.admin_list(status_filter)]


@router.patch("/training-requests/{request_id}/status", response_model=TrainingRequestResponse)
def set_training_request_status(
    request_id: str,
    payload: RequestStatusUpdate,
    service: TrainingRequestService = Depends(get_training_request_service),
) -> TrainingRequestResponse:
    return TrainingRequestResponse.model_validate(service.admin_set_status(request_id, payload.status))


@router.get("/feedback", response_model=List[AdminTrainerFeedback])
def feedback_overview(
    q: Optional[str] = Query(None, max_length=100),
    service: FeedbackService = Depends(get_feedback_service),
) -> List[AdminTrainerFeedback]:
    return [AdminTrainerFeedback(**row) for row in service.admin_overview(q=q)]


# Analytics


@router.get("/analytics", response_model=AnalyticsOverview)
def analytics_overview(
    service: AnalyticsService = Depends(get_analytics_service),
) -> AnalyticsOverview:
    return AnalyticsOverview(**service.overview())


@router.get("/analytics/top-trainers", response_model=TopTrainersResponse)
def top_trainers(
    limit: int = Query(5, ge=1, le=50),
    service: AnalyticsService = Depends(get_analytics_service),
) -> TopTrainersResponse:
    return TopTrainersResponse(**service.top_trainers(limit=limit))
