# backend/skilloop/schemas/feedback.py
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from .base import Money, ORMModel, StrictRequestModel, UTCDateTime


class FeedbackLinkResponse(ORMModel):
    id: str
    booking_id: str
    token: str
    is_active: bool
    expires_at: UTCDateTime
    url: Optional[str] = None


class FeedbackContext(BaseModel):
    """What the public feedback page shows about the session."""

    training_topic: str
    start_time: UTCDateTime
    trainer_name: Optional[str] = None
    trainer_title: Optional[str] = None


class FeedbackSubmit(StrictRequestModel):
    respondent_name: str = Field(..., min_length=1, max_length=255)
    respondent_email: EmailStr
    organization_name: Optional[str] = Field(None, max_length=255)
    rating: int = Field(..., ge=1, le=5)
    communication_rating: Optional[int] = Field(None, ge=1, le=5)
    punctuality_rating: Optional[int] = Field(None, ge=1, le=5)
    skills_rating: Optional[int] = Field(None, ge=1, le=5)
    would_recommend: Optional[bool] = None
    review_comment: Optional[str] = Field(None, max_length=2000)


class FeedbackResponseItem(ORMModel):
    id: str
    feedback_link_id: str
    respondent_name: str
    respondent_email: str
    organization_name: Optional[str] = None
    rating: int
    communication_rating: Optional[int] = None
    punctuality_rating: Optional[int] = None
    skills_rating: Optional[int] = None
    would_recommend: Optional[bool] = None
    review_comment: Optional[str] = None
    submitted_at: UTCDateTime
    training_topic: Optional[str] = None


class FeedbackStats(BaseModel):
    total_responses: int
    average_rating: Money
    recommendation_rate: Money


class TrainerFeedbackResponse(BaseModel):
    responses: List[FeedbackResponseItem]
    stats: FeedbackStats


class AdminTrainerFeedback(BaseModel):
    trainer_id: str
    trainer_name: str
    stats: FeedbackStats
    active_links: int
