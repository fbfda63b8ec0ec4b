"""
Messages API: outbound send and status transitions.

Sending goes through SendMessageCommand; the response is the stored message.
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.adapters import AdapterRegistry, get_adapter_registry
from app.commands.outbound.send_message_command import SendMessageCommand
from app.db import get_db
from app.exceptions import NotFoundError
from app.schemas.message import MessageRead, MessageStatusUpdate, SendMessageRequest
from app.services.message_service import MessageService

router = APIRouter(
    prefix="/api/messages",
    tags=["messages"],
    responses={404: {"description": "Not found"}},
)


@router.post("", response_model=MessageRead)
def send_message(
    body: SendMessageRequest,
    adapters: AdapterRegistry = Depends(get_adapter_registry),
    db: Session = Depends(get_db),
) -> MessageRead:
    """Send a text message to a contact and record it."""
    message = SendMessageCommand(db, adapters).execute(body)
    return MessageRead.model_validate(message)


@router.patch("/{message_id}/status", response_model=MessageRead)
def update_message_status(
    message_id: UUID,
    body: MessageStatusUpdate,
    db: Session = Depends(get_db),
) -> MessageRead:
    message = MessageService(db).update_status(message_id, body.status)
    if message is None:
        raise NotFoundError("Message not found")
    return MessageRead.model_validate(message)
