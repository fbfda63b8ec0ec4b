"""Pydantic schemas for conversations."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from app.schemas.contact import ContactSummary
from app.schemas.message import MessageRead
from app.schemas.omnichannel import Platform


class ConversationRead(BaseModel):
    """Conversation row with its joined contact (read-time projection)."""

    id: UUID
    contact_id: UUID
    platform: Platform
    external_id: Optional[str] = None
    last_message_at: datetime
    last_message_text: Optional[str] = None
    unread_count: int
    created_at: datetime
    updated_at: datetime
    contact: Optional[ContactSummary] = None

    model_config = {"from_attributes": True}


class ConversationDetail(ConversationRead):
    """Conversation with its most recent messages, newest first."""

    messages: list[MessageRead] = []
