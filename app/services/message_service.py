"""
Message ledger.

Appends messages and keeps the owning conversation's summary
(last_message_at, last_message_text, unread_count) in step, in the same
transaction. Summary updates are single UPDATE statements, so concurrent
inbound messages never lose an unread increment.
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.conversation import Conversation
from app.models.message import Message
from app.models.mixins import utcnow
from app.schemas.omnichannel import InboundEvent, MessageDirection, MessageStatus, Platform

logger = logging.getLogger(__name__)

# Forward order of delivery receipts
STATUS_RANK = {
    MessageStatus.PENDING.value: 0,
    MessageStatus.SENT.value: 1,
    MessageStatus.DELIVERED.value: 2,
    MessageStatus.READ.value: 3,
}


class MessageService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_message(self, message_id: UUID) -> Optional[Message]:
        return self.db.query(Message).filter(Message.id == message_id).first()

    def append(self, message: Message) -> Message:
        """Stage a message insert. Does not commit."""
        self.db.add(message)
        self.db.flush()
        return message

    def update_summary(
        self,
        conversation_id: UUID,
        snippet: str,
        *,
        increment_unread: bool = True,
    ) -> None:
        """Stage the conversation summary update. Does not commit."""
        values = {
            "last_message_at": utcnow(),
            "last_message_text": snippet,
            "updated_at": utcnow(),
        }
        if increment_unread:
            values["unread_count"] = Conversation.unread_count + 1
        self.db.execute(
            update(Conversation)
            .where(Conversation.id == conversation_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    def record_inbound(
        self,
        conversation: Conversation,
        event: InboundEvent,
        status: MessageStatus = MessageStatus.DELIVERED,
    ) -> Optional[Message]:
        """
        Persist an inbound message and bump the conversation summary atomically.

        Returns None when (platform, external_message_id) was already stored,
        which is how webhook redeliveries are absorbed.
        """
        message = Message(
            conversation_id=conversation.id,
            platform=Platform(event.platform).value,
            direction=MessageDirection.INBOUND.value,
            content=event.text,
            content_type=event.content_type,
            status=MessageStatus(status).value,
            external_id=event.external_message_id,
        )
        try:
            self.append(message)
            self.update_summary(conversation.id, event.text, increment_unread=True)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if self.get_by_external_id(event.platform, event.external_message_id) is None:
                raise
            logger.info(
                "Duplicate %s message %s ignored",
                event.platform.value,
                event.external_message_id,
            )
            return None
        self.db.refresh(message)
        return message

    def record_outbound(self, message: Message) -> Message:
        """Persist an outbound message; only successful sends touch the summary."""
        self.append(message)
        if message.status == MessageStatus.SENT.value:
            self.update_summary(
                message.conversation_id, message.content, increment_unread=False
            )
        self.db.commit()
        self.db.refresh(message)
        return message

    def update_status(self, message_id: UUID, status: MessageStatus) -> Optional[Message]:
        """Change only status (and updated_at). Returns None if the message is unknown."""
        message = self.get_message(message_id)
        if message is None:
            return None
        message.status = MessageStatus(status).value
        message.updated_at = utcnow()
        self.db.commit()
        self.db.refresh(message)
        return message

    def get_by_external_id(
        self,
        platform: Platform,
        external_id: str,
        direction: Optional[MessageDirection] = None,
    ) -> Optional[Message]:
        query = self.db.query(Message).filter(
            Message.platform == Platform(platform).value,
            Message.external_id == external_id,
        )
        if direction is not None:
            query = query.filter(Message.direction == MessageDirection(direction).value)
        return query.first()

    def update_status_by_external_id(
        self, platform: Platform, external_id: str, status: MessageStatus
    ) -> Optional[Message]:
        """
        Apply a platform delivery receipt to the message we sent.

        Receipts arrive out of order; one ranking below the stored status is
        ignored and the message is returned unchanged. ``failed`` always applies.
        Returns None when no outbound message has that external id.
        """
        message = self.get_by_external_id(platform, external_id, MessageDirection.OUTBOUND)
        if message is None:
            return None
        status = MessageStatus(status)
        current = STATUS_RANK.get(message.status)
        stale = (
            status != MessageStatus.FAILED
            and current is not None
            and STATUS_RANK[status.value] < current
        )
        if stale:
            logger.debug(
                "Ignoring stale %s receipt for %s (already %s)",
                status.value,
                external_id,
                message.status,
            )
            return message
        return self.update_status(message.id, status)
