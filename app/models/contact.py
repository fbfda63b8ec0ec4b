"""Contact model: a person reachable on one or more platforms."""

from __future__ import annotations

import uuid

from sqlalchemy import Column, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db import Base
from app.models.mixins import TimestampMixin


class Contact(Base, TimestampMixin):
    """
    One row per real-world person.

    whatsapp_id / instagram_id are the per-platform identity keys used to
    deduplicate webhook deliveries; each is unique when set.
    """

    __tablename__ = "contacts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=True)
    email = Column(String(255), nullable=True)
    whatsapp_id = Column(String(64), unique=True, nullable=True)
    instagram_id = Column(String(64), unique=True, nullable=True)
    avatar_url = Column(Text, nullable=True)
    extra = Column(
        "metadata", Text, nullable=True
    )  # DB column "metadata"; avoid shadowing Base.metadata

    conversations = relationship("Conversation", back_populates="contact")

    @property
    def contact_metadata(self) -> str | None:
        """Expose DB column 'metadata' for serialization (avoid shadowing Base.metadata)."""
        return self.extra
