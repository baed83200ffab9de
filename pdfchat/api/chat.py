"""POST /api/chat - stream one chat turn.

The response body is raw text: fragments concatenated in arrival order, with
no event framing. Everything that can fail cleanly is checked before the
response starts, so those failures get a normal status code. Once streaming
has begun, a failure can only be signalled by cutting the body short.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from pdfchat.api.dependencies import get_chat_relay
from pdfchat.api.errors import to_http_exception
from pdfchat.errors import PDFChatError
from pdfchat.models.schemas import ChatTurnRequest
from pdfchat.relay import ChatRelay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/chat")
async def chat_turn(
    request: ChatTurnRequest,
    relay: ChatRelay = Depends(get_chat_relay),
) -> StreamingResponse:
    """Stream the assistant's answer to a message about the chat's document.

    Returns:
        text/plain streaming response of raw fragments.

    Raises:
        400: Empty chat id or message.
        404: Unknown chat, or its document has no text.
        500: Storage failure before streaming.
        502: Provider failed before producing any output.
    """
    logger.info(f"Chat turn for {request.chat_id}: {request.message[:100]!r}")

    try:
        turn = await relay.handle_turn(request.chat_id, request.message)
        await turn.start()
    except PDFChatError as e:
        raise to_http_exception(e) from e

    return StreamingResponse(
        turn,
        media_type="text/plain; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
