from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.core.dispatcher import EventDispatcher
from app.db import get_db
from app.exceptions import NotFoundError
from app.models.contact import Contact
from app.models.conversation import Conversation
from app.services.contact_service import ContactService
from app.services.conversation_service import ConversationService


def get_conversation_by_id(
    conversation_id: UUID,
    db: Session = Depends(get_db),
) -> Conversation:
    """FastAPI dependency to get a conversation (with its contact) by ID."""
    conversation = ConversationService(db).get_conversation(conversation_id)
    if conversation is None:
        raise NotFoundError("Conversation not found")
    return conversation


def get_contact_by_id(
    contact_id: UUID,
    db: Session = Depends(get_db),
) -> Contact:
    """FastAPI dependency to get a contact by ID."""
    contact = ContactService(db).get_contact(contact_id)
    if contact is None:
        raise NotFoundError("Contact not found")
    return contact


def get_dispatcher(request: Request) -> EventDispatcher:
    """The webhook dispatcher created with the app."""
    return request.app.state.webhook_dispatcher
