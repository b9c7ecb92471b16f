# backend/skilloop/schemas/review.py
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.functional_validators import field_validator

from ..core.constants import MAX_REVIEW_COMMENT_LENGTH
from .base import ORMModel, StrictRequestModel, UTCDateTime


class ReviewCreate(StrictRequestModel):
    booking_id: str
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=MAX_REVIEW_COMMENT_LENGTH)
    communication_rating: Optional[int] = Field(None, ge=1, le=5)
    punctuality_rating: Optional[int] = Field(None, ge=1, le=5)
    skills_rating: Optional[int] = Field(None, ge=1, le=5)
    would_recommend: Optional[bool] = None

    @field_validator("comment")
    @classmethod
    def _clean_text(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class ReviewResponse(ORMModel):
    id: str
    booking_id: str
    trainer_id: str
    rating: int
    comment: Optional[str] = None
    communication_rating: Optional[int] = None
    punctuality_rating: Optional[int] = None
    skills_rating: Optional[int] = None
    would_recommend: Optional[bool] = None
    created_at: UTCDateTime


class TrainerRatingResponse(BaseModel):
    trainer_id: str
    rating: float
    total_reviews: int
