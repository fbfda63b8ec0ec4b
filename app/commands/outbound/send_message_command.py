"""
Command to send an outbound text message to a contact.

Resolves the credentialed adapter, checks the conversation, sends through
the partner API and records the message in the ledger.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.adapters import AdapterRegistry
from app.exceptions import ConfigurationError, NotFoundError, SendFailure, ValidationFailure
from app.models.message import Message
from app.schemas.message import SendMessageRequest
from app.schemas.omnichannel import MessageDirection, MessageStatus
from app.services.conversation_service import ConversationService
from app.services.message_service import MessageService

logger = logging.getLogger(__name__)


class SendMessageCommand:
    def __init__(self, db: Session, adapters: AdapterRegistry) -> None:
        self.db = db
        self._adapters = adapters
        self.conversation_service = ConversationService(db)
        self.message_service = MessageService(db)

    def execute(self, body: SendMessageRequest) -> Message:
        """
        Send the message and persist it.

        Args:
            body: Send request (conversation, platform, recipient, content).

        Returns:
            Message: the stored outbound message with status ``sent``.

        Raises:
            ConfigurationError: the platform has no credentials (nothing stored).
            NotFoundError: the conversation does not exist.
            ValidationFailure: the conversation belongs to another platform.
            SendFailure: the partner API failed; a ``failed`` row is stored.
        """
        adapter = self._adapters.get(body.platform)
        if adapter is None:
            raise ConfigurationError(
                f"Platform {body.platform.value} is not configured"
            )

        conversation = self.conversation_service.get_conversation(body.conversation_id)
        if conversation is None:
            raise NotFoundError("Conversation not found")
        if conversation.platform != body.platform.value:
            raise ValidationFailure(
                f"Conversation is on {conversation.platform}, not {body.platform.value}"
            )

        message = Message(
            conversation_id=conversation.id,
            platform=body.platform.value,
            direction=MessageDirection.OUTBOUND.value,
            content=body.content,
            content_type=body.content_type,
            status=MessageStatus.PENDING.value,
        )

        try:
            external_id = adapter.send_outbound(body.recipient_id, body.content)
        except SendFailure as e:
            logger.warning(
                "Send to %s via %s failed: %s", body.recipient_id, body.platform.value, e
            )
            message.status = MessageStatus.FAILED.value
            try:
                self.message_service.record_outbound(message)
            except SQLAlchemyError:
                self.db.rollback()
                logger.exception("Failed to record failed send for %s", conversation.id)
            raise

        message.external_id = external_id
        message.status = MessageStatus.SENT.value
        return self.message_service.record_outbound(message)
