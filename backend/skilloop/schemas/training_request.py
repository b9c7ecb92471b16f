# backend/skilloop/schemas/training_request.py
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..core.enums import ApplicationStatus, DeliveryMode, TargetAudience, TrainingRequestStatus
from .base import Money, ORMModel, StrictRequestModel, UTCDateTime


class TrainingRequestCreate(StrictRequestModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    target_audience: TargetAudience = TargetAudience.CORPORATE
    expected_start_date: Optional[date] = None
    expected_end_date: Optional[date] = None
    duration_hours: int = Field(8, ge=1, le=1000)
    delivery_mode: DeliveryMode = DeliveryMode.ONLINE
    location: Optional[str] = Field(None, max_length=255)
    language_preference: str = Field("English", max_length=50)
    tools_required: List[str] = Field(default_factory=list)
    syllabus_content: Optional[str] = None
    allow_trainer_pricing: bool = True
    allow_trainer_syllabus: bool = False
    budget_min: Optional[Decimal] = Field(None, ge=0)
    budget_max: Optional[Decimal] = Field(None, ge=0)
    application_deadline: Optional[datetime] = None

    @field_validator("tools_required")
    @classmethod
    def _clean_tools(cls, v: List[str]) -> List[str]:
        return [tool.strip() for tool in v if tool and tool.strip()]

    @model_validator(mode="after")
    def _ranges(self) -> "TrainingRequestCreate":
        if (
            self.budget_min is not None
            and self.budget_max is not None
            and self.budget_min > self.budget_max
        ):
            raise ValueError("budget_min cannot exceed budget_max")
        if (
            self.expected_start_date is not None
            and self.expected_end_date is not None
            and self.expected_start_date > self.expected_end_date
        ):
            raise ValueError("expected_start_date cannot be after expected_end_date")
        return self


class TrainingRequestResponse(ORMModel):
    id: str
    client_id: str
    title: str
    description: Optional[str] = None
    target_audience: str
    expected_start_date: Optional[date] = None
    expected_end_date: Optional[date] = None
    duration_hours: int
    delivery_mode: str
    location: Optional[str] = None
    language_preference: str
    tools_required: List[str] = Field(default_factory=list)
    syllabus_content: Optional[str] = None
    allow_trainer_pricing: bool
    allow_trainer_syllabus: bool
    budget_min: Optional[Money] = None
    budget_max: Optional[Money] = None
    application_deadline: Optional[UTCDateTime] = None
    status: str
    selected_trainer_id: Optional[str] = None
    created_at: UTCDateTime


class ClientTrainingRequestItem(TrainingRequestResponse):
    application_count: int = 0


class RequestStatusUpdate(StrictRequestModel):
    status: TrainingRequestStatus


class ApplicationCreate(StrictRequestModel):
    proposed_price: Decimal = Field(..., gt=0)
    proposed_start_date: Optional[date] = None
    proposed_end_date: Optional[date] = None
    proposed_duration_hours: Optional[int] = Field(None, ge=1, le=1000)
    availability_notes: Optional[str] = Field(None, max_length=2000)
    message_to_client: Optional[str] = Field(None, max_length=5000)
    proposed_syllabus: Optional[str] = None


class ApplicationStatusUpdate(StrictRequestModel):
    status: ApplicationStatus

    @field_validator("status")
    @classmethod
    def _decision_only(cls, v: ApplicationStatus) -> ApplicationStatus:
        if v == ApplicationStatus.PENDING:
            raise ValueError("status must be shortlisted, selected or rejected")
        return v


class ApplicationResponse(ORMModel):
    id: str
    request_id: str
    trainer_id: str
    proposed_price: Money
    proposed_start_date: Optional[date] = None
    proposed_end_date: Optional[date] = None
    proposed_duration_hours: Optional[int] = None
    availability_notes: Optional[str] = None
    message_to_client: Optional[str] = None
    proposed_syllabus: Optional[str] = None
    status: str
    created_at: UTCDateTime


class ApplicantTrainer(BaseModel):
    id: str
    name: str
    title: str
    rating: Money
    total_reviews: int
    experience_years: Optional[int] = None


class RequestApplicationItem(ApplicationResponse):
    trainer: ApplicantTrainer


class TrainerApplicationItem(ApplicationResponse):
    request: TrainingRequestResponse
