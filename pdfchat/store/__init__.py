"""Persistence for documents, chats and messages.

Responsibilities:
    - Relational tables for documents, chats and ordered messages (SQLAlchemy)
    - Object storage for uploaded file bytes
    - Point reads and append-only inserts used by the streaming relay

Public coroutines never block the event loop; ORM work runs in worker threads.
"""

from pdfchat.store.config import StoreConfig, get_store_config
from pdfchat.store.database import Chat, Document, Message, MessageRole
from pdfchat.store.files import FileStore, sanitize_filename
from pdfchat.store.repository import ChatStore

__all__ = [
    "Chat",
    "ChatStore",
    "Document",
    "FileStore",
    "Message",
    "MessageRole",
    "StoreConfig",
    "get_store_config",
    "sanitize_filename",
]
