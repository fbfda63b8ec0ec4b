"""Pydantic schemas for contacts."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import AliasChoices, BaseModel, Field


class ContactCreate(BaseModel):
    """Request schema for creating a contact."""

    name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = None
    email: Optional[str] = None
    whatsapp_id: Optional[str] = None
    instagram_id: Optional[str] = None
    avatar_url: Optional[str] = None
    metadata: Optional[str] = None


class ContactSummary(BaseModel):
    """Contact fields joined onto conversation rows."""

    id: UUID
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    whatsapp_id: Optional[str] = None
    instagram_id: Optional[str] = None
    avatar_url: Optional[str] = None

    model_config = {"from_attributes": True}


class ContactRead(ContactSummary):
    """Response schema for a contact."""

    # ORM exposes the "metadata" column as contact_metadata
    metadata: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("contact_metadata", "metadata")
    )
    created_at: datetime
    updated_at: datetime
