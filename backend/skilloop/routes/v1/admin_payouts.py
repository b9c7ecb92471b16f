# backend/skilloop/routes/v1/admin_payouts.py
"""
Admin payout routes - API v1

Endpoints:
    GET /pending                        → Pending payouts not yet in a batch
    POST /batches                       → Group payouts into a batch
    GET /batches                        → Latest batches
    POST /batches/{batch_id}/mark-paid  → Complete a batch and pay its payouts
"""

from typing import List

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_payout_service, require_admin
from ...models.profile import Profile
from ...schemas.payout import PayoutBatchCreate, PayoutBatchResponse, PendingPayoutsResponse
from ...services.payout_service import PayoutService

router = APIRouter(tags=["admin-payouts-v1"], dependencies=[Depends(require_admin)])


@router.get("/pending", response_model=PendingPayoutsResponse)
def list_pending_payouts(
    service: PayoutService = Depends(get_payout_service),
) -> PendingPayoutsResponse:
    return PendingPayoutsResponse(**service.list_pending())


@router.post("/batches", response_model=PayoutBatchResponse, status_code=status.HTTP_201_CREATED)
def create_payout_batch(
    payload: PayoutBatchCreate,
    admin: Profile = Depends(require_admin),
    service: PayoutService = Depends(get_payout_service),
) -> PayoutBatchResponse:
    return PayoutBatchResponse.model_validate(service.create_batch(admin, payload))


@router.get("/batches", response_model=List[PayoutBatchResponse])
def list_payout_batches(
    service: PayoutService = Depends(get_payout_service),
) -> List[PayoutBatchResponse]:
    return [PayoutBatchResponse.model_validate(b) for b in service.list_batches()]


@router.post("/batches/{batch_id}/mark-paid", response_model=PayoutBatchResponse)
def mark_batch_paid(
    batch_id: str,
    service: PayoutService = Depends(get_payout_service),
) -> PayoutBatchResponse:
    return PayoutBatchResponse.model_validate(service.mark_batch_paid(batch_id))
