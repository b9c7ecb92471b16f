# backend/skilloop/schemas/profile.py
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.constants import PHONE_PATTERN
from ..core.enums import ProfileRole
from .base import ORMModel, StrictRequestModel, UTCDateTime


class ProfileResponse(ORMModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    company_name: Optional[str] = None
    company_size: Optional[str] = None
    industry: Optional[str] = None
    notification_preferences: Optional[Dict[str, Any]] = None
    created_at: UTCDateTime


class ProfileUpdate(StrictRequestModel):
    full_name: Optional[str] = Field(None, min_length=2, max_length=255)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)
    avatar_url: Optional[str] = Field(None, max_length=500)
    company_name: Optional[str] = Field(None, max_length=255)
    company_size: Optional[str] = Field(None, max_length=50)
    industry: Optional[str] = Field(None, max_length=100)
    notification_preferences: Optional[Dict[str, bool]] = None

    @field_validator("phone", mode="before")
    @classmethod
    def _strip_phone_formatting(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.replace(" ", "").replace("-", "")
        return v


class RoleUpdate(BaseModel):
    role: ProfileRole


class UserSummary(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    company_name: Optional[str] = None
    has_trainer_profile: bool = False
    created_at: UTCDateTime
