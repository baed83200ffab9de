from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Base for API payloads exchanged with the browser in camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ChatTurnRequest(_CamelModel):
    """Request payload for the streaming chat turn endpoint.

    Attributes:
        chat_id: Chat the message belongs to.
        message: User's question, persisted verbatim.
    """

    chat_id: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)

    @field_validator("chat_id", "message", mode="before")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        """Treat whitespace-only values as empty; keep non-blank values as sent."""
        if isinstance(v, str) and not v.strip():
            return ""
        return v


class ChatOut(_CamelModel):
    """A chat session as listed in the sidebar."""

    id: str
    title: str
    document_id: str
    created_at: datetime


class MessageOut(_CamelModel):
    """A persisted chat message."""

    id: int
    chat_id: str
    role: str
    content: str
    created_at: datetime


class UploadResponse(_CamelModel):
    """Response after an upload created a document and its chat.

    Attributes:
        message: Human-readable outcome.
        chat: The chat created for the uploaded document.
    """

    message: str
    chat: ChatOut


class DeleteResponse(_CamelModel):
    message: str
