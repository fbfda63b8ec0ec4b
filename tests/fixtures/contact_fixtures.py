"""Fixtures for contact model."""

import pytest

from app.models.contact import Contact


@pytest.fixture(scope="function")
def setup_whatsapp_contact(db, faker):
    """A contact first seen on WhatsApp."""
    wa_id = faker.numerify("62812########")
    contact = Contact(name=faker.name(), phone=wa_id, whatsapp_id=wa_id)
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


@pytest.fixture(scope="function")
def setup_instagram_contact(db, faker):
    """A contact first seen on Instagram."""
    contact = Contact(
        name=faker.user_name(),
        instagram_id=faker.numerify("17841#########"),
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact
