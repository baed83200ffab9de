"""Chat turn orchestration: validate, read context, persist, relay.

handle_turn does everything that can fail cleanly (validation, context read,
user message write) before returning; the returned TurnStream carries the
provider call. The two message writes are independent commits.
"""

import logging
from collections.abc import AsyncIterator
from typing import Protocol

from pdfchat.errors import EmptyDocument, InvalidRequest
from pdfchat.relay.config import RelayConfig, get_relay_config
from pdfchat.relay.turn import TurnStream
from pdfchat.store import ChatStore, MessageRole

logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    def stream(self, document_text: str, message: str) -> AsyncIterator[str]: ...


class ChatRelay:
    """Runs chat turns against a document-grounded completion provider."""

    def __init__(
        self,
        store: ChatStore,
        provider: CompletionProvider,
        config: RelayConfig | None = None,
    ) -> None:
        self._store = store
        self._provider = provider
        self._config = config or get_relay_config()

    async def handle_turn(self, chat_id: str, user_text: str) -> TurnStream:
        """Prepare a turn and return the stream relaying its response.

        Args:
            chat_id: Chat to converse in.
            user_text: The user's message, persisted verbatim.

        Returns:
            A TurnStream; iterating it yields UTF-8 encoded fragments.

        Raises:
            InvalidRequest: If chat_id or user_text is empty.
            NotFound: If the chat does not exist.
            EmptyDocument: If the chat's document has no text.
            StorageError: If the context read or user message write fails.
        """
        if not chat_id or not chat_id.strip():
            raise InvalidRequest("Chat ID is required")
        if not user_text or not user_text.strip():
            raise InvalidRequest("Message is required")

        document_text = await self._store.get_document_text_for_chat(chat_id)
        if not document_text.strip():
            logger.warning(f"Document content is empty for chat {chat_id}")
            raise EmptyDocument(f"Document content is empty for chat {chat_id}")
        logger.info(f"Turn for chat {chat_id}: context has {len(document_text)} chars")

        await self._store.append_message(chat_id, MessageRole.USER, user_text)

        async def save_assistant_message(text: str) -> None:
            await self._store.append_message(chat_id, MessageRole.ASSISTANT, text)

        return TurnStream(
            self._provider.stream(document_text, user_text),
            save_assistant_message,
            queue_size=self._config.queue_size,
            timeout=self._config.timeout_seconds,
            label=chat_id,
        )
