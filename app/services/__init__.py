from app.services.contact_service import ContactService
from app.services.conversation_service import ConversationService
from app.services.entity_resolver import EntityResolver
from app.services.inbound_processor import InboundProcessor
from app.services.message_service import MessageService

__all__ = [
    "ContactService",
    "ConversationService",
    "EntityResolver",
    "InboundProcessor",
    "MessageService",
]
