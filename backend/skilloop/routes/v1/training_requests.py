# backend/skilloop/routes/v1/training_requests.py
"""
Training request routes - API v1

Endpoints (/training-requests):
    POST /                           → Post a training request (client)
    GET /                            → Open request feed (public)
    GET /mine                        → Caller's requests with application counts
    POST /{request_id}/close         → Close a request (owner)
    POST /{request_id}/applications  → Apply to a request (approved trainer)
    GET /{request_id}/applications   → Applications with trainer details (owner)

Endpoints (/training-applications):
    PATCH /{application_id}/status   → Shortlist, select or reject (request owner)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from ...api.dependencies import (
    get_current_profile,
    get_current_trainer,
    get_training_request_service,
)
from ...models.profile import Profile
from ...models.trainer import Trainer
from ...schemas.training_request import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    ClientTrainingRequestItem,
    RequestApplicationItem,
    TrainingRequestCreate,
    TrainingRequestResponse,
)
from ...services.training_request_service import TrainingRequestService

router = APIRouter(tags=["training-requests-v1"])
applications_router = APIRouter(tags=["training-requests-v1"])


@router.post("", response_model=TrainingRequestResponse, status_code=status.HTTP_201_CREATED)
def create_training_request(
    payload: TrainingRequestCreate,
    profile: Profile = Depends(get_current_profile),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> TrainingRequestResponse:
    return TrainingRequestResponse.model_validate(service.create(profile, payload))


@router.get("", response_model=List[TrainingRequestResponse])
def list_open_training_requests(
    q: Optional[str] = Query(None, max_length=100),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> List[TrainingRequestResponse]:
    """Open requests still accepting applications, newest first."""
    return [
        TrainingRequestResponse.model_validate(r)
        for r in service.feed(q=q, limit=limit, offset=offset)
    ]


@router.get("/mine", response_model=List[ClientTrainingRequestItem])
def list_my_training_requests(
    profile: Profile = Depends(get_current_profile),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> List[ClientTrainingRequestItem]:
    return [ClientTrainingRequestItem(**item) for item in service.list_mine(profile)]


@router.post("/{request_id}/close", response_model=TrainingRequestResponse)
def close_training_request(
    request_id: str,
    profile: Profile = Depends(get_current_profile),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> TrainingRequestResponse:
    return TrainingRequestResponse.model_validate(service.close(profile, request_id))


@router.post(
    "/{request_id}/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
)
def apply_to_training_request(
    request_id: str,
    payload: ApplicationCreate,
    trainer: Trainer = Depends(get_current_trainer),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> ApplicationResponse:
    return ApplicationResponse.model_validate(service.apply(trainer, request_id, payload))


@router.get("/{request_id}/applications", response_model=List[RequestApplicationItem])
def list_request_applications(
    request_id: str,
    profile: Profile = Depends(get_current_profile),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> List[RequestApplicationItem]:
    return [RequestApplicationItem(**item) for item in service.list_applications(profile, request_id)]


@applications_router.patch("/{application_id}/status", response_model=ApplicationResponse)
def set_application_status(
    application_id: str,
    payload: ApplicationStatusUpdate,
    profile: Profile = Depends(get_current_profile),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> ApplicationResponse:
    application = service.set_application_status(profile, application_id, payload.status)
    return ApplicationResponse.model_validate(application)
