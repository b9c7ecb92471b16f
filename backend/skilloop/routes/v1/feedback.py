# backend/skilloop/routes/v1/feedback.py
"""
Public feedback routes - API v1

No authentication: the token in the path is the credential.

Endpoints:
    GET /{token}   → Session context for the feedback form
    POST /{token}  → Submit a response
"""

from fastapi import APIRouter, Depends, status

from ...api.dependencies import get_feedback_service
from ...schemas.feedback import FeedbackContext, FeedbackResponseItem, FeedbackSubmit
from ...services.feedback_service import FeedbackService

router = APIRouter(tags=["feedback-v1"])


@router.get("/{token}", response_model=FeedbackContext)
def get_feedback_context(
    token: str,
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackContext:
    return FeedbackContext(**service.get_context(token))


@router.post("/{token}", response_model=FeedbackResponseItem, status_code=status.HTTP_201_CREATED)
def submit_feedback(
    token: str,
    payload: FeedbackSubmit,
    service: FeedbackService = Depends(get_feedback_service),
) -> FeedbackResponseItem:
    return FeedbackResponseItem.model_validate(service.submit(token, payload))
