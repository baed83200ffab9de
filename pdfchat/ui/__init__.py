"""NiceGUI interface - thin visualization layer for chat interactions.

Responsibilities:
    - Chat list with selection and deletion
    - Document upload that opens a new chat
    - Message history and incremental rendering of streamed answers
    - Fallback error text when a stream ends abnormally

Contains minimal business logic. Delegates all operations to the API.
"""
