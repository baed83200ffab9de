"""Pydantic models for API requests and responses.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - ChatTurnRequest: Incoming chat turn payload
    - ChatOut: Chat session details
    - MessageOut: Persisted chat message
    - UploadResponse: Upload outcome with the created chat
    - DeleteResponse: Deletion outcome
"""

from pdfchat.models.schemas import ChatOut, ChatTurnRequest, DeleteResponse, MessageOut, UploadResponse

__all__ = ["ChatOut", "ChatTurnRequest", "DeleteResponse", "MessageOut", "UploadResponse"]
