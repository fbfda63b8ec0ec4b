"""Conversation model: one thread per (contact, platform)."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin, utcnow


class Conversation(Base, TimestampMixin):
    """
    Thread between a contact and the business on a single platform.

    last_message_at / last_message_text / unread_count are a denormalized
    summary maintained by the message ledger, never edited directly.
    """

    __tablename__ = "conversations"

    __table_args__ = (
        UniqueConstraint(
            "contact_id", "platform", name="uq_conversations_contact_platform"
        ),
        Index("ix_conversations_last_message_at", "last_message_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    contact_id = Column(
        Uuid, ForeignKey("contacts.id", ondelete="CASCADE"), nullable=False
    )
    platform = Column(String(32), nullable=False)
    external_id = Column(String(255), nullable=True)  # platform thread id
    last_message_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_message_text = Column(Text, nullable=True)
    unread_count = Column(Integer, nullable=False, default=0)

    contact = relationship("Contact", back_populates="conversations")
