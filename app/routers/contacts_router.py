"""Contacts API."""

from fastapi import APIRouter, Depends
from fastapi_pagination import Page, Params
from fastapi_pagination.ext.sqlalchemy import paginate
from sqlalchemy.orm import Session

from app.db import get_db
from app.infra.logging_config import get_logger
from app.models.contact import Contact
from app.routers.utils.dependencies import get_contact_by_id
from app.schemas.contact import ContactCreate, ContactRead
from app.services.contact_service import ContactService

logger = get_logger("contacts")

router = APIRouter(
    prefix="/api/contacts",
    tags=["contacts"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=Page[ContactRead])
def list_contacts(
    params: Params = Depends(),
    db: Session = Depends(get_db),
) -> Page[ContactRead]:
    return paginate(ContactService(db).get_contacts_query(), params=params)


@router.post("", response_model=ContactRead, status_code=201)
def create_contact(
    data: ContactCreate,
    db: Session = Depends(get_db),
) -> ContactRead:
    contact = ContactService(db).create_contact(data)
    logger.info("Created contact %s", contact.id)
    return ContactRead.model_validate(contact)


@router.get("/{contact_id}", response_model=ContactRead)
def get_contact(contact: Contact = Depends(get_contact_by_id)) -> ContactRead:
    return ContactRead.model_validate(contact)
