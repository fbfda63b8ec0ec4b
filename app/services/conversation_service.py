"""Conversation queries and read-state updates."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Query, Session, joinedload

from app.models.conversation import Conversation
from app.models.message import Message
from app.models.mixins import utcnow
from app.schemas.omnichannel import Platform


class ConversationService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_conversation(self, conversation_id: UUID) -> Optional[Conversation]:
        return (
            self.db.query(Conversation)
            .options(joinedload(Conversation.contact))
            .filter(Conversation.id == conversation_id)
            .first()
        )

    def get_by_contact_and_platform(
        self, contact_id: UUID, platform: Platform
    ) -> Optional[Conversation]:
        return (
            self.db.query(Conversation)
            .filter(
                Conversation.contact_id == contact_id,
                Conversation.platform == Platform(platform).value,
            )
            .first()
        )

    def get_conversations_query(self, platform: Optional[Platform] = None) -> Query:
        """Conversations with their contact, most recent activity first."""
        query = self.db.query(Conversation).options(joinedload(Conversation.contact))
        if platform is not None:
            query = query.filter(Conversation.platform == Platform(platform).value)
        return query.order_by(Conversation.last_message_at.desc(), Conversation.id)

    def get_recent_messages(self, conversation_id: UUID, limit: int = 50) -> list[Message]:
        """Newest first."""
        return (
            self.db.query(Message)
            .filter(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc(), Message.id)
            .limit(limit)
            .all()
        )

    def mark_read(self, conversation_id: UUID) -> Optional[Conversation]:
        """Reset unread_count to 0. Returns None if the conversation does not exist."""
        result = self.db.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(unread_count=0, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        if result.rowcount == 0:
            return None
        conversation = self.get_conversation(conversation_id)
        self.db.refresh(conversation)
        return conversation
