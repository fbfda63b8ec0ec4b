"""Pydantic schemas for messages and outbound send requests."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.schemas.omnichannel import MessageDirection, MessageStatus, Platform


class SendMessageRequest(BaseModel):
    """Outbound send request (API → send pipeline)."""

    conversation_id: UUID
    platform: Platform
    recipient_id: str = Field(..., min_length=1)  # phone number or IG user id
    content: str = Field(..., min_length=1)
    content_type: str = "text"


class MessageStatusUpdate(BaseModel):
    status: MessageStatus


class MessageRead(BaseModel):
    id: UUID
    conversation_id: UUID
    platform: Platform
    direction: MessageDirection
    content: str
    content_type: str
    status: MessageStatus
    external_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
