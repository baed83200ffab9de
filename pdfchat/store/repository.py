"""Chat and document store backed by SQLAlchemy.

Every public method is a coroutine that runs one short ORM session in a
worker thread via asyncio.to_thread, so blocking database I/O never stalls
the event loop. Each method is its own commit; nothing here spans the model
call of a turn.
"""

import asyncio
import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from pdfchat.errors import EmptyDocument, InvalidRequest, NotFound, StorageError
from pdfchat.store.config import StoreConfig, get_store_config
from pdfchat.store.database import (
    Chat,
    Document,
    Message,
    MessageRole,
    create_db_engine,
    create_session_factory,
    create_tables,
)

logger = logging.getLogger(__name__)


class ChatStore:
    """Point reads and inserts for documents, chats and messages."""

    def __init__(self, engine: Engine) -> None:
        """Initialize the store.

        Args:
            engine: SQLAlchemy engine for the relational database.
        """
        self._engine = engine
        self._session_factory: sessionmaker[Session] = create_session_factory(engine)

    @classmethod
    def from_config(cls, config: StoreConfig | None = None) -> "ChatStore":
        """Build a store from configuration and make sure its tables exist."""
        config = config or get_store_config()
        store = cls(create_db_engine(config.database_url))
        store.create_tables()
        return store

    def create_tables(self) -> None:
        create_tables(self._engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Yield a session, translating database errors to StorageError."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Database operation failed: {e}") from e
        finally:
            session.close()

    # --- Documents ---

    def _create_document(self, file_path: str, content: str) -> Document:
        with self._session() as session:
            document = Document(file_path=file_path, content=content)
            session.add(document)
            session.commit()
            return document

    async def create_document(self, file_path: str, content: str) -> Document:
        """Insert a document record for stored bytes and their extracted text."""
        document = await asyncio.to_thread(self._create_document, file_path, content)
        logger.info(f"Created document {document.id} ({len(content)} chars)")
        return document

    # --- Chats ---

    def _create_chat(self, document_id: str, title: str) -> Chat:
        with self._session() as session:
            document = session.get(Document, document_id)
            if document is None:
                raise NotFound(f"Document not found: {document_id}")
            if not document.content.strip():
                raise EmptyDocument(f"Document has no text: {document_id}")

            chat = Chat(document_id=document_id, title=title)
            session.add(chat)
            session.commit()
            return chat

    async def create_chat(self, document_id: str, title: str) -> Chat:
        """Create a chat over an existing document with non-empty text.

        Raises:
            NotFound: If the document does not exist.
            EmptyDocument: If the document text is blank.
        """
        chat = await asyncio.to_thread(self._create_chat, document_id, title)
        logger.info(f"Created chat {chat.id} for document {document_id}")
        return chat

    def _list_chats(self) -> list[Chat]:
        with self._session() as session:
            stmt = select(Chat).order_by(Chat.created_at.desc(), Chat.id)
            return list(session.scalars(stmt))

    async def list_chats(self) -> list[Chat]:
        """Return all chats, most recent first."""
        return await asyncio.to_thread(self._list_chats)

    def _delete_chat(self, chat_id: str) -> None:
        with self._session() as session:
            chat = session.get(Chat, chat_id)
            if chat is None:
                raise NotFound(f"Chat not found: {chat_id}")
            session.delete(chat)
            session.commit()

    async def delete_chat(self, chat_id: str) -> None:
        """Delete a chat together with all of its messages.

        Raises:
            NotFound: If the chat does not exist.
        """
        await asyncio.to_thread(self._delete_chat, chat_id)
        logger.info(f"Deleted chat {chat_id}")

    def _get_document_text_for_chat(self, chat_id: str) -> str:
        with self._session() as session:
            stmt = (
                select(Document.content)
                .join(Chat, Chat.document_id == Document.id)
                .where(Chat.id == chat_id)
            )
            content = session.scalars(stmt).first()
            if content is None:
                raise NotFound(f"Chat not found: {chat_id}")
            return content

    async def get_document_text_for_chat(self, chat_id: str) -> str:
        """Read the full text of the document behind a chat.

        Always reads through to the database.

        Raises:
            NotFound: If the chat or its document does not exist.
        """
        return await asyncio.to_thread(self._get_document_text_for_chat, chat_id)

    # --- Messages ---

    def _append_message(self, chat_id: str, role: MessageRole, content: str) -> Message:
        with self._session() as session:
            message = Message(chat_id=chat_id, role=role.value, content=content)
            session.add(message)
            session.commit()
            return message

    async def append_message(self, chat_id: str, role: MessageRole | str, content: str) -> Message:
        """Append a message to a chat.

        Args:
            chat_id: Target chat.
            role: "user" or "assistant".
            content: Message text.

        Returns:
            The persisted Message.

        Raises:
            InvalidRequest: If role is not a known message role.
            StorageError: If the insert fails (including unknown chat ids).
        """
        try:
            role = MessageRole(role)
        except ValueError as e:
            raise InvalidRequest(f"Unknown message role: {role}") from e

        return await asyncio.to_thread(self._append_message, chat_id, role, content)

    def _list_messages(self, chat_id: str) -> list[Message]:
        with self._session() as session:
            if session.get(Chat, chat_id) is None:
                raise NotFound(f"Chat not found: {chat_id}")
            stmt = (
                select(Message)
                .where(Message.chat_id == chat_id)
                .order_by(Message.created_at, Message.id)
            )
            return list(session.scalars(stmt))

    async def list_messages(self, chat_id: str) -> list[Message]:
        """Return a chat's messages in conversational (append) order.

        Raises:
            NotFound: If the chat does not exist.
        """
        return await asyncio.to_thread(self._list_messages, chat_id)

    def dispose(self) -> None:
        self._engine.dispose()
