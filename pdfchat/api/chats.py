"""Chat listing, history and deletion endpoints.

No ownership checks: any caller can read or delete any chat.
"""

import logging

from fastapi import APIRouter, Depends

from pdfchat.api.dependencies import get_chat_store
from pdfchat.api.errors import to_http_exception
from pdfchat.errors import PDFChatError
from pdfchat.models.schemas import ChatOut, DeleteResponse, MessageOut
from pdfchat.store import ChatStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chats", tags=["chats"])


@router.get("", response_model=list[ChatOut])
async def list_chats(store: ChatStore = Depends(get_chat_store)) -> list[ChatOut]:
    """List all chats, most recent first."""
    try:
        chats = await store.list_chats()
    except PDFChatError as e:
        raise to_http_exception(e) from e

    logger.info(f"Fetched {len(chats)} chats")
    return [ChatOut.model_validate(chat) for chat in chats]


@router.get("/{chat_id}/messages", response_model=list[MessageOut])
async def list_messages(
    chat_id: str,
    store: ChatStore = Depends(get_chat_store),
) -> list[MessageOut]:
    """Return a chat's messages in conversational order.

    Raises:
        404: Unknown chat.
    """
    try:
        messages = await store.list_messages(chat_id)
    except PDFChatError as e:
        raise to_http_exception(e) from e

    return [MessageOut.model_validate(message) for message in messages]


@router.delete("/{chat_id}", response_model=DeleteResponse)
async def delete_chat(
    chat_id: str,
    store: ChatStore = Depends(get_chat_store),
) -> DeleteResponse:
    """Delete a chat and all of its messages.

    Raises:
        404: Unknown chat.
    """
    try:
        await store.delete_chat(chat_id)
    except PDFChatError as e:
        raise to_http_exception(e) from e

    return DeleteResponse(message="Chat deleted successfully")
