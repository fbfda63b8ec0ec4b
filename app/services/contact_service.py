"""Contact CRUD and lookup by platform identity."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from app.exceptions import ValidationFailure
from app.models.contact import Contact
from app.schemas.contact import ContactCreate
from app.schemas.omnichannel import Platform

PLATFORM_ID_COLUMNS = {
    Platform.WHATSAPP: Contact.whatsapp_id,
    Platform.INSTAGRAM: Contact.instagram_id,
}


class ContactService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_contact(self, contact_id: UUID) -> Optional[Contact]:
        return self.db.query(Contact).filter(Contact.id == contact_id).first()

    def get_by_platform_id(self, platform: Platform, platform_id: str) -> Optional[Contact]:
        column = PLATFORM_ID_COLUMNS[Platform(platform)]
        return self.db.query(Contact).filter(column == platform_id).first()

    def get_contacts_query(self) -> Query:
        """Query for paginated listing, most recently updated first."""
        return self.db.query(Contact).order_by(Contact.updated_at.desc(), Contact.id)

    def create_contact(self, data: ContactCreate) -> Contact:
        values = data.model_dump(exclude={"metadata"})
        contact = Contact(**values, extra=data.metadata)
        self.db.add(contact)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ValidationFailure(
                "A contact with this WhatsApp or Instagram id already exists"
            ) from e
        self.db.refresh(contact)
        return contact
