"""
Platform-agnostic event contracts.

Adapters decode webhook payloads into these shapes; everything downstream
of an adapter works only with them.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class Platform(str, Enum):
    """Supported chat platforms."""

    WHATSAPP = "whatsapp"
    INSTAGRAM = "instagram"


class MessageDirection(str, Enum):
    INBOUND = "inbound"
    OUTBOUND = "outbound"


class MessageStatus(str, Enum):
    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"


class ProfileHint(BaseModel):
    """Profile data a platform supplied alongside (or for) a sender."""

    name: Optional[str] = None
    avatar_url: Optional[str] = None


class InboundEvent(BaseModel):
    """One inbound message decoded from a webhook delivery (adapter → core)."""

    platform: Platform
    sender_id: str
    sender_name: Optional[str] = None  # WhatsApp contacts[].profile.name
    text: str = ""
    content_type: str = "text"
    external_message_id: str
    timestamp: Optional[datetime] = None


class StatusEvent(BaseModel):
    """Delivery status reported by the platform for a message we sent."""

    platform: Platform
    external_message_id: str
    status: MessageStatus
    recipient_id: Optional[str] = None
