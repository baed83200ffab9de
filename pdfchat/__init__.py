"""PDF Chat - converse with an assistant grounded in an uploaded document.

Combines FastAPI for HTTP streaming, Agno for the model call, SQLAlchemy for
persistence, NiceGUI for the browser UI, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and the streamed chat turn
    - relay: per-turn producer/consumer relay and message persistence
    - provider: document-grounded completions
    - store: documents, chats, messages and uploaded bytes
    - parsing: PDF and plain-text extraction
    - ui: Web interface for chat interactions
    - models: Request/response schemas
"""

__version__ = "0.1.0"
