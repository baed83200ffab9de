"""FastAPI endpoints for document chat.

HTTP and streaming routes with async request handling.

Endpoints:
    - GET /health: Service health status
    - POST /api/upload: Document upload, creates a chat
    - GET /api/chats: Chats, most recent first
    - GET /api/chats/{id}/messages: Chat history
    - DELETE /api/chats/{id}: Delete a chat and its messages
    - POST /api/chat: Stream one chat turn as raw text
"""

from pdfchat.api.app import app, create_app

__all__ = ["app", "create_app"]
