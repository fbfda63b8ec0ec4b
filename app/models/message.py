"""
Message model: one immutable inbound or outbound communication.

Only status (and external_id for outbound sends) change after insert.
"""

from __future__ import annotations

import uuid

from sqlalchemy import Column, ForeignKey, Index, String, Text, UniqueConstraint, Uuid

from app.db import Base
from app.models.mixins import TimestampMixin


class Message(Base, TimestampMixin):
    __tablename__ = "messages"

    __table_args__ = (
        UniqueConstraint(
            "platform", "external_id", name="uq_messages_platform_external_id"
        ),
        Index("ix_messages_conversation_created", "conversation_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    conversation_id = Column(
        Uuid, ForeignKey("conversations.id", ondelete="CASCADE"), nullable=False
    )
    platform = Column(String(32), nullable=False)
    direction = Column(String(16), nullable=False)  # 'inbound' | 'outbound'
    content = Column(Text, nullable=False, default="")
    content_type = Column(String(32), nullable=False, default="text")
    status = Column(String(16), nullable=False)
    external_id = Column(String(255), nullable=True)  # platform message id
