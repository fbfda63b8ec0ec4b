from app.models.contact import Contact
from app.models.conversation import Conversation
from app.models.message import Message

__all__ = [
    "Contact",
    "Conversation",
    "Message",
]
