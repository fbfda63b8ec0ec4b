"""
Background persistence of decoded webhook events.

Runs after the webhook has been acknowledged. Each event gets its own
session scope, so one bad event never blocks the rest of the batch.
"""

from __future__ import annotations

import logging
from contextlib import AbstractContextManager
from typing import Callable, Iterable, Optional

from sqlalchemy.orm import Session

from app.adapters import AdapterRegistry
from app.models.message import Message
from app.schemas.omnichannel import InboundEvent, MessageStatus, ProfileHint, StatusEvent
from app.services.entity_resolver import EntityResolver
from app.services.message_service import MessageService

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AbstractContextManager[Session]]


class InboundProcessor:
    def __init__(
        self,
        session_scope: SessionScope,
        adapters: Optional[AdapterRegistry] = None,
    ) -> None:
        self.session_scope = session_scope
        self.adapters = adapters if adapters is not None else {}

    def process_event(self, event: InboundEvent) -> Optional[Message]:
        """
        Resolve contact and conversation, then record the message.

        Returns:
            Message: the stored message, or None when it was a redelivery.
        """
        hint = ProfileHint(name=event.sender_name) if event.sender_name else None
        with self.session_scope() as db:
            resolver = EntityResolver(db, adapter=self.adapters.get(event.platform))
            contact = resolver.resolve_contact(event.platform, event.sender_id, hint)
            resolver.refresh_profile(contact, hint)
            conversation = resolver.resolve_conversation(
                contact, event.platform, external_id=event.sender_id
            )
            return MessageService(db).record_inbound(
                conversation, event, status=MessageStatus.DELIVERED
            )

    def process_status(self, status: StatusEvent) -> Optional[Message]:
        with self.session_scope() as db:
            message = MessageService(db).update_status_by_external_id(
                status.platform, status.external_message_id, status.status
            )
        if message is None:
            logger.debug(
                "Status %s for unknown %s message %s",
                status.status.value,
                status.platform.value,
                status.external_message_id,
            )
        return message

    def process(
        self,
        events: Iterable[InboundEvent],
        statuses: Iterable[StatusEvent] = (),
    ) -> int:
        """Process a decoded delivery. Returns the number of new messages stored."""
        stored = 0
        for event in events:
            try:
                if self.process_event(event) is not None:
                    stored += 1
            except Exception:
                logger.exception(
                    "Failed to process %s message %s from %s",
                    event.platform.value,
                    event.external_message_id,
                    event.sender_id,
                )
        for status in statuses:
            try:
                self.process_status(status)
            except Exception:
                logger.exception(
                    "Failed to apply status %s to %s message %s",
                    status.status.value,
                    status.platform.value,
                    status.external_message_id,
                )
        return stored
