"""
Meta webhook payload schemas.

WhatsApp Cloud API and Instagram Messaging share the outer
``{"object": ..., "entry": [...]}`` envelope but deliver messages in
different places (``entry[].changes[].value`` vs ``entry[].messaging[]``),
so each platform gets its own payload model and decode path.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

# -----------------------------------------------------------------------------
# WhatsApp Cloud API
# -----------------------------------------------------------------------------


class WhatsAppProfile(BaseModel):
    name: Optional[str] = None


class WhatsAppContact(BaseModel):
    """value.contacts[] entry: sender profile for a wa_id."""

    wa_id: str
    profile: WhatsAppProfile = Field(default_factory=WhatsAppProfile)


class WhatsAppText(BaseModel):
    body: str = ""


class WhatsAppMessage(BaseModel):
    id: str
    from_: str = Field(alias="from")
    timestamp: Optional[str] = None
    type: str = "text"
    text: Optional[WhatsAppText] = None

    model_config = {"populate_by_name": True}


class WhatsAppStatus(BaseModel):
    """value.statuses[] entry: delivery update for a message we sent."""

    id: str
    status: str
    timestamp: Optional[str] = None
    recipient_id: Optional[str] = None


class WhatsAppMetadata(BaseModel):
    display_phone_number: Optional[str] = None
    phone_number_id: Optional[str] = None


class WhatsAppValue(BaseModel):
    messaging_product: Optional[str] = None
    metadata: Optional[WhatsAppMetadata] = None
    contacts: list[WhatsAppContact] = Field(default_factory=list)
    messages: list[WhatsAppMessage] = Field(default_factory=list)
    statuses: list[WhatsAppStatus] = Field(default_factory=list)


class WhatsAppChange(BaseModel):
    field: str
    value: WhatsAppValue = Field(default_factory=WhatsAppValue)


class WhatsAppEntry(BaseModel):
    id: Optional[str] = None
    changes: list[WhatsAppChange] = Field(default_factory=list)


class WhatsAppWebhookPayload(BaseModel):
    object: Optional[str] = None
    entry: list[WhatsAppEntry] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Instagram Messaging
# -----------------------------------------------------------------------------


class InstagramParticipant(BaseModel):
    id: str


class InstagramMessage(BaseModel):
    mid: str
    text: Optional[str] = None
    is_echo: bool = False


class InstagramMessaging(BaseModel):
    sender: InstagramParticipant
    recipient: Optional[InstagramParticipant] = None
    timestamp: Optional[int] = None
    message: Optional[InstagramMessage] = None


class InstagramEntry(BaseModel):
    id: Optional[str] = None
    time: Optional[int] = None
    messaging: list[InstagramMessaging] = Field(default_factory=list)


class InstagramWebhookPayload(BaseModel):
    object: Optional[str] = None
    entry: list[InstagramEntry] = Field(default_factory=list)
