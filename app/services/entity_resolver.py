"""
Find-or-create for contacts and conversations keyed by platform identity.

Concurrent deliveries for a new sender race on the unique constraints
(contacts.whatsapp_id / instagram_id, conversations(contact_id, platform)).
The loser's insert fails with IntegrityError; it rolls back and re-reads the
winner's row, so at most one row exists per identity.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.adapters.base import BasePlatformAdapter
from app.adapters.instagram import InstagramAdapter
from app.exceptions import SendFailure
from app.models.contact import Contact
from app.models.conversation import Conversation
from app.models.mixins import utcnow
from app.schemas.omnichannel import Platform, ProfileHint
from app.services.contact_service import ContactService
from app.services.conversation_service import ConversationService

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EntityResolver:
    def __init__(self, db: Session, adapter: Optional[BasePlatformAdapter] = None) -> None:
        self.db = db
        self.adapter = adapter
        self.contact_service = ContactService(db)
        self.conversation_service = ConversationService(db)

    def _insert_or_refind(self, row: T, find: Callable[[], Optional[T]]) -> T:
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = find()
            if existing is None:
                raise
            return existing
        self.db.refresh(row)
        return row

    def resolve_contact(
        self,
        platform: Platform,
        platform_id: str,
        hint: Optional[ProfileHint] = None,
    ) -> Contact:
        """
        Return the contact for (platform, platform_id), creating it on first sight.

        Args:
            platform: Platform the sender wrote from.
            platform_id: wa_id for WhatsApp, IGSID for Instagram.
            hint: Profile data already present in the payload, if any.

        Returns:
            Contact: existing or newly created; exactly one per identity.
        """
        platform = Platform(platform)

        def find() -> Optional[Contact]:
            return self.contact_service.get_by_platform_id(platform, platform_id)

        contact = find()
        if contact is not None:
            return contact

        hint = hint or ProfileHint()
        if platform == Platform.WHATSAPP:
            contact = Contact(
                name=hint.name or platform_id,
                phone=platform_id,
                whatsapp_id=platform_id,
            )
        else:
            profile = hint if hint.name else self._fetch_instagram_profile(platform_id)
            contact = Contact(
                name=profile.name or platform_id,
                instagram_id=platform_id,
                avatar_url=profile.avatar_url,
            )
        return self._insert_or_refind(contact, find)

    def _fetch_instagram_profile(self, user_id: str) -> ProfileHint:
        """Best effort; a failed lookup falls back to the raw id."""
        if not isinstance(self.adapter, InstagramAdapter) or not self.adapter.can_send:
            return ProfileHint()
        try:
            profile = self.adapter.get_user_profile(user_id)
        except SendFailure as e:
            logger.warning("Instagram profile lookup failed for %s: %s", user_id, e)
            return ProfileHint()
        return ProfileHint(
            name=profile.get("name") or profile.get("username"),
            avatar_url=profile.get("profile_picture_url"),
        )

    def refresh_profile(self, contact: Contact, hint: Optional[ProfileHint]) -> Contact:
        """Update the display name when the platform reports a different one."""
        if hint is None or not hint.name or hint.name == contact.name:
            return contact
        contact.name = hint.name
        self.db.commit()
        return contact

    def resolve_conversation(
        self,
        contact: Contact,
        platform: Platform,
        external_id: Optional[str] = None,
    ) -> Conversation:
        """Return the single conversation for (contact, platform), creating it if needed."""
        platform = Platform(platform)

        def find() -> Optional[Conversation]:
            return self.conversation_service.get_by_contact_and_platform(contact.id, platform)

        conversation = find()
        if conversation is not None:
            return conversation
        conversation = Conversation(
            contact_id=contact.id,
            platform=platform.value,
            external_id=external_id,
            last_message_at=utcnow(),
            unread_count=0,
        )
        return self._insert_or_refind(conversation, find)
