"""Conversations API: inbox listing, detail with recent messages, mark read."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session

from app.db import get_db
from app.models.conversation import Conversation
from app.routers.utils.dependencies import get_conversation_by_id
from app.schemas.conversation import ConversationDetail, ConversationRead
from app.schemas.message import MessageRead
from app.schemas.omnichannel import Platform
from app.services.conversation_service import ConversationService

router = APIRouter(
    prefix="/api/conversations",
    tags=["conversations"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Page[ConversationRead])
def list_conversations(
    platform: Optional[Platform] = None,
    params: Params = Depends(),
    db: Session = Depends(get_db),
) -> Page[ConversationRead]:
    """List conversations by most recent activity, each with its contact."""
    query = ConversationService(db).get_conversations_query(platform)
    return paginate(query, params=params)


@router.get("/{conversation_id}", response_model=ConversationDetail)
def get_conversation(
    message_limit: int = Query(50, ge=1, le=500),
    conversation: Conversation = Depends(get_conversation_by_id),
    db: Session = Depends(get_db),
) -> ConversationDetail:
    messages = ConversationService(db).get_recent_messages(conversation.id, message_limit)
    summary = ConversationRead.model_validate(conversation)
    return ConversationDetail(
        **summary.model_dump(),
        messages=[MessageRead.model_validate(m) for m in messages],
    )


@router.post("/{conversation_id}/read", response_model=ConversationRead)
def mark_conversation_read(
    conversation: Conversation = Depends(get_conversation_by_id),
    db: Session = Depends(get_db),
) -> ConversationRead:
    """Reset the unread counter."""
    updated = ConversationService(db).mark_read(conversation.id)
    return ConversationRead.model_validate(updated)
