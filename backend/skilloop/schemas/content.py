# backend/skilloop/schemas/content.py
"""Service categories, job postings and success stories."""

from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from ..core.enums import JobType
from .base import Money, ORMModel, StrictRequestModel, UTCDateTime

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CategoryCreate(StrictRequestModel):
    name: str = Field(..., min_length=2, max_length=255)
    slug: str = Field(..., min_length=2, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    base_price: Optional[Decimal] = Field(None, gt=0)
    icon_name: Optional[str] = Field(None, max_length=100)
    display_order: int = 0
    is_active: bool = True


class CategoryUpdate(StrictRequestModel):
    name: Optional[str] = Field(None, min_length=2, max_length=255)
    slug: Optional[str] = Field(None, min_length=2, max_length=100, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    base_price: Optional[Decimal] = Field(None, gt=0)
    icon_name: Optional[str] = Field(None, max_length=100)
    display_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryResponse(ORMModel):
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    base_price: Optional[Money] = None
    icon_name: Optional[str] = None
    display_order: int
    is_active: bool


class JobCreate(StrictRequestModel):
    title: str = Field(..., min_length=2, max_length=255)
    department: str = Field(..., min_length=1, max_length=100)
    location: str = Field(..., min_length=1, max_length=255)
    type: JobType
    description: str = Field(..., min_length=1)
    requirements: List[str] = Field(default_factory=list)
    external_form_link: Optional[str] = Field(None, max_length=500)


class JobUpdate(StrictRequestModel):
    title: Optional[str] = Field(None, min_length=2, max_length=255)
    department: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    type: Optional[JobType] = None
    description: Optional[str] = None
    requirements: Optional[List[str]] = None
    external_form_link: Optional[str] = Field(None, max_length=500)


class JobResponse(ORMModel):
    id: str
    title: str
    department: str
    location: str
    type: str
    description: str
    requirements: List[str] = Field(default_factory=list)
    external_form_link: Optional[str] = None
    created_at: UTCDateTime


class SuccessStoryCreate(StrictRequestModel):
    title: str = Field(..., min_length=2, max_length=255)
    content: str = Field(..., min_length=1)
    client_name: str = Field(..., min_length=1, max_length=255)
    client_company: Optional[str] = Field(None, max_length=255)
    client_position: Optional[str] = Field(None, max_length=255)
    client_avatar_url: Optional[str] = Field(None, max_length=500)
    company_logo_url: Optional[str] = Field(None, max_length=500)
    display_order: int = 0
    is_featured: bool = False


class SuccessStoryUpdate(StrictRequestModel):
    title: Optional[str] = Field(None, min_length=2, max_length=255)
    content: Optional[str] = None
    client_name: Optional[str] = Field(None, max_length=255)
    client_company: Optional[str] = Field(None, max_length=255)
    client_position: Optional[str] = Field(None, max_length=255)
    client_avatar_url: Optional[str] = Field(None, max_length=500)
    company_logo_url: Optional[str] = Field(None, max_length=500)
    display_order: Optional[int] = None
    is_featured: Optional[bool] = None


class SuccessStoryResponse(ORMModel):
    id: str
    title: str
    content: str
    client_name: str
    client_company: Optional[str] = None
    client_position: Optional[str] = None
    client_avatar_url: Optional[str] = None
    company_logo_url: Optional[str] = None
    display_order: int
    is_featured: bool
    created_at: UTCDateTime
