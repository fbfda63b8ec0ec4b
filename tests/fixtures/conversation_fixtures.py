"""Fixtures for conversation and message models."""

import pytest

from app.models.conversation import Conversation
from app.models.message import Message
from app.schemas.omnichannel import MessageDirection, MessageStatus, Platform


@pytest.fixture(scope="function")
def setup_whatsapp_conversation(db, setup_whatsapp_contact):
    conversation = Conversation(
        contact_id=setup_whatsapp_contact.id,
        platform=Platform.WHATSAPP.value,
        external_id=setup_whatsapp_contact.whatsapp_id,
        unread_count=0,
    )
    db.add(conversation)
    db.commit()
    db.refresh(conversation)
    return conversation


@pytest.fixture(scope="function")
def setup_instagram_conversation(db, setup_instagram_contact):
    conversation = Conversation(
        contact_id=setup_instagram_contact.id,
        platform=Platform.INSTAGRAM.value,
        external_id=setup_instagram_contact.instagram_id,
        unread_count=0,
    )
    db.add(conversation)
    db.commit()
    db.refresh(conversation)
    return conversation


@pytest.fixture(scope="function")
def setup_outbound_message(db, faker, setup_whatsapp_conversation):
    """A sent WhatsApp message awaiting delivery receipts."""
    message = Message(
        conversation_id=setup_whatsapp_conversation.id,
        platform=Platform.WHATSAPP.value,
        direction=MessageDirection.OUTBOUND.value,
        content=faker.sentence(),
        content_type="text",
        status=MessageStatus.SENT.value,
        external_id="wamid." + faker.uuid4(),
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message
