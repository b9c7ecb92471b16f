# backend/skilloop/routes/v1/trainers.py
"""
Trainer routes - API v1

Public trainer discovery plus the trainer's own workspace under /me.
All business logic delegated to the services.

Endpoints:
    GET /                                   → Search approved trainers (public)
    POST /apply                             → Apply to become a trainer
    GET /me                                 → Own trainer profile
    PATCH /me                               → Update own trainer profile
    PUT /me/pricing                         → Upsert own pricing
    POST /me/availability                   → Add an availability slot
    PATCH /me/availability/{slot_id}/toggle → Flip slot availability
    DELETE /me/availability/{slot_id}       → Remove a slot
    GET /me/schedule                        → Weekly booking schedule
    GET /me/bookings                        → Assigned bookings with summary
    POST /me/bookings/{id}/advance          → assigned → delivering → delivered
    POST /me/bookings/{id}/feedback-link    → Get or create a feedback link
    POST /me/feedback-links/{id}/deactivate → Deactivate a feedback link
    GET /me/feedback                        → Feedback responses with stats
    GET /me/earnings                        → Earnings summary
    GET /me/payouts                         → Payout history
    GET /me/applications                    → Training request applications
    GET /{trainer_id}                       → Public profile (public)
    GET /{trainer_id}/pricing               → Pricing with breakdowns (public)
    GET /{trainer_id}/availability          → Availability slots (public)
    GET /{trainer_id}/reviews               → Reviews, newest first (public)
"""

from datetime import date
from decimal import Decimal
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from ...api.dependencies import (
    get_availability_service,
    get_booking_service,
    get_current_profile,
    get_current_trainer,
    get_feedback_service,
    get_payout_service,
    get_pricing_service,
    get_review_service,
    get_trainer_service,
    get_training_request_service,
)
from ...models.profile import Profile
from ...models.trainer import Trainer
from ...schemas.booking import BookingResponse, TrainerBookingsResponse, WeeklySchedule
from ...schemas.feedback import FeedbackLinkResponse, TrainerFeedbackResponse
from ...schemas.payout import EarningsResponse, PayoutResponse
from ...schemas.review import ReviewResponse
from ...schemas.trainer import (
    AvailabilitySlotCreate,
    AvailabilitySlotResponse,
    PricingResponse,
    PricingUpsert,
    PublicTrainerProfile,
    TrainerApplication,
    TrainerDetail,
    TrainerSummary,
    TrainerUpdate,
)
from ...schemas.training_request import TrainerApplicationItem
from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.feedback_service import FeedbackService
from ...services.payout_service import PayoutService
from ...services.pricing_service import PricingService
from ...services.review_service import ReviewService
from ...services.trainer_service import TrainerService
from ...services.training_request_service import TrainingRequestService

logger = logging.getLogger(__name__)

# V1 router - no prefix here, will be added when mounting in main.py
router = APIRouter(tags=["trainers-v1"])


# =============================================================================
# Static routes first (before dynamic routes with path parameters)
# =============================================================================


@router.get("", response_model=List[TrainerSummary])
def search_trainers(
    q: Optional[str] = Query(None, max_length=100),
    specialization: Optional[str] = None,
    location: Optional[str] = None,
    min_rate: Optional[Decimal] = Query(None, ge=0),
    max_rate: Optional[Decimal] = Query(None, ge=0),
    min_rating: Optional[Decimal] = Query(None, ge=0, le=5),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: TrainerService = Depends(get_trainer_service),
) -> List[TrainerSummary]:
    trainers = service.search(
        q=q,
        specialization=specialization,
        location=location,
        min_rate=min_rate,
        max_rate=max_rate,
        min_rating=min_rating,
        limit=limit,
        offset=offset,
    )
    return [TrainerSummary.model_validate(t) for t in trainers]


@router.post("/apply", response_model=TrainerDetail, status_code=status.HTTP_201_CREATED)
def apply_as_trainer(
    payload: TrainerApplication,
    profile: Profile = Depends(get_current_profile),
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerDetail:
    return TrainerDetail.model_validate(service.apply(profile, payload))


@router.get("/me", response_model=TrainerDetail)
def get_my_trainer_profile(trainer: Trainer = Depends(get_current_trainer)) -> TrainerDetail:
    return TrainerDetail.model_validate(trainer)


@router.patch("/me", response_model=TrainerDetail)
def update_my_trainer_profile(
    payload: TrainerUpdate,
    trainer: Trainer = Depends(get_current_trainer),
    service: TrainerService = Depends(get_trainer_service),
) -> TrainerDetail:
    return TrainerDetail.model_validate(service.update_profile(trainer, payload))


@router.put("/me/pricing", response_model=PricingResponse)
def upsert_my_pricing(
    payload: PricingUpsert,
    trainer: Trainer = Depends(get_current_trainer),
    service: PricingService = Depends(get_pricing_service),
) -> PricingResponse:
    return PricingResponse(**service.save_pricing(trainer, payload))


@router.post(
    "/me/availability",
    response_model=AvailabilitySlotResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_availability_slot(
    payload: AvailabilitySlotCreate,
    trainer: Trainer = Depends(get_current_trainer),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilitySlotResponse:
    return AvailabilitySlotResponse.model_validate(service.add_slot(trainer, payload))


@router.patch("/me/availability/{slot_id}/toggle", response_model=AvailabilitySlotResponse)
def toggle_availability_slot(
    slot_id: str,
    trainer: Trainer = Depends(get_current_trainer),
    service: AvailabilityService = Depends(get_availability_service),
) -> AvailabilitySlotResponse:
    return AvailabilitySlotResponse.model_validate(service.toggle_slot(trainer, slot_id))


@router.delete("/me/availability/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_availability_slot(
    slot_id: str,
    trainer: Trainer = Depends(get_current_trainer),
    service: AvailabilityService = Depends(get_availability_service),
) -> Response:
    service.delete_slot(trainer, slot_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me/schedule", response_model=WeeklySchedule)
def get_my_schedule(
    week_start: Optional[date] = None,
    trainer: Trainer = Depends(get_current_trainer),
    service: AvailabilityService = Depends(get_availability_service),
) -> WeeklySchedule:
    """Seven day buckets of bookings; the week starts on Sunday in the trainer's timezone."""
    schedule = service.weekly_schedule(trainer, start=week_start)
    return WeeklySchedule(
        week_start=schedule["week_start"],
        week_end=schedule["week_end"],
        timezone=schedule["timezone"],
        days=[
            {
                "date": day["date"],
                "bookings": [BookingResponse.model_validate(b) for b in day["bookings"]],
            }
            for day in schedule["days"]
        ],
    )


@router.get("/me/bookings", response_model=TrainerBookingsResponse)
def list_my_trainer_bookings(
    status_filter: Optional[str] = Query(None, alias="status"),
    trainer: Trainer = Depends(get_current_trainer),
    service: BookingService = Depends(get_booking_service),
) -> TrainerBookingsResponse:
    return TrainerBookingsResponse(**service.list_for_trainer(trainer, status=status_filter))


@router.post("/me/bookings/{booking_id}/advance", response_model=BookingResponse)
def advance_booking_status(
    booking_id: str,
    trainer: Trainer = Depends(get_current_trainer),
    service: BookingService = Depends(get_booking_service),
) -> BookingResponse:
    return BookingResponse.model_validate(service.advance_status(trainer, booking_id))


@router.post("/me/bookings/{booking_id}/feedback-link", response_model=FeedbackLinkResponse)
def create_feedback_link(
    booking_id: str,
    trainer: Trainer = Depends(get_current_trainer),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackLinkResponse:
    return FeedbackLinkResponse(**service.create_link(trainer, booking_id))


@router.post("/me/feedback-links/{link_id}/deactivate", response_model=FeedbackLinkResponse)
def deactivate_feedback_link(
    link_id: str,
    trainer: Trainer = Depends(get_current_trainer),
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackLinkResponse:
    return FeedbackLinkResponse(**service.describe_link(service.deactivate(trainer, link_id)))


@router.get("/me/feedback", response_model=TrainerFeedbackResponse)
def list_my_feedback(
    trainer: Trainer = Depends(get_current_trainer),
    service: FeedbackService = Depends(get_feedback_service),
) -> TrainerFeedbackResponse:
    return TrainerFeedbackResponse(**service.trainer_feedback(trainer))


@router.get("/me/earnings", response_model=EarningsResponse)
def get_my_earnings(
    trainer: Trainer = Depends(get_current_trainer),
    service: PayoutService = Depends(get_payout_service),
) -> EarningsResponse:
    return EarningsResponse(**service.earnings(trainer))


@router.get("/me/payouts", response_model=List[PayoutResponse])
def list_my_payouts(
    trainer: Trainer = Depends(get_current_trainer),
    service: PayoutService = Depends(get_payout_service),
) -> List[PayoutResponse]:
    return [PayoutResponse.model_validate(p) for p in service.list_for_trainer(trainer)]


@router.get("/me/applications", response_model=List[TrainerApplicationItem])
def list_my_applications(
    status_filter: Optional[str] = Query(None, alias="status"),
    trainer: Trainer = Depends(get_current_trainer),
    service: TrainingRequestService = Depends(get_training_request_service),
) -> List[TrainerApplicationItem]:
    return [
        TrainerApplicationItem(**item)
        for item in service.trainer_applications(trainer, status=status_filter)
    ]


# =============================================================================
# Dynamic routes
# =============================================================================


@router.get("/{trainer_id}", response_model=PublicTrainerProfile)
def get_trainer_profile(
    trainer_id: str,
    service: TrainerService = Depends(get_trainer_service),
) -> PublicTrainerProfile:
    data = service.get_public_profile(trainer_id)
    return PublicTrainerProfile(
        trainer=TrainerDetail.model_validate(data["trainer"]),
        pricing=PricingResponse(**data["pricing"]) if data["pricing"] else None,
        recent_reviews=[ReviewResponse.model_validate(r) for r in data["recent_reviews"]],
    )


@router.get("/{trainer_id}/pricing", response_model=PricingResponse)
def get_trainer_pricing(
    trainer_id: str,
    service: PricingService = Depends(get_pricing_service),
) -> PricingResponse:
    return PricingResponse(**service.get_pricing_details(trainer_id))


@router.get("/{trainer_id}/availability", response_model=List[AvailabilitySlotResponse])
def list_trainer_availability(
    trainer_id: str,
    on_date: Optional[date] = Query(None, alias="date"),
    service: AvailabilityService = Depends(get_availability_service),
) -> List[AvailabilitySlotResponse]:
    return [
        AvailabilitySlotResponse.model_validate(slot)
        for slot in service.list_slots(trainer_id, on_date=on_date)
    ]


@router.get("/{trainer_id}/reviews", response_model=List[ReviewResponse])
def list_trainer_reviews(
    trainer_id: str,
    limit: int = Query(50, ge=1, le=200),
    service: ReviewService = Depends(get_review_service),
) -> List[ReviewResponse]:
    return [ReviewResponse.model_validate(r) for r in service.list_for_trainer(trainer_id, limit=limit)]
