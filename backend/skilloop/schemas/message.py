# backend/skilloop/schemas/message.py
"""Chat message and notification DTOs."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..core.constants import MAX_MESSAGE_LENGTH
from .base import ORMModel, StrictRequestModel, UTCDateTime


class MessageCreate(StrictRequestModel):
    content: str = Field(..., max_length=MAX_MESSAGE_LENGTH)

    @field_validator("content")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Message content cannot be empty")
        return v


class MessageResponse(ORMModel):
    id: str
    booking_id: str
    sender_id: str
    receiver_id: str
    content: str
    message_type: str
    is_read: bool
    created_at: UTCDateTime
    sender_name: Optional[str] = None


class MessageListResponse(BaseModel):
    booking_id: str
    messages: List[MessageResponse]
    marked_read: int = 0


class NotificationResponse(ORMModel):
    id: str
    type: str
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    is_read: bool
    created_at: UTCDateTime


class MarkReadRequest(StrictRequestModel):
    ids: Optional[List[str]] = None
