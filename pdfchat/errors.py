"""Domain errors shared by the store, provider and relay layers.

The API layer translates these into HTTP status codes; everything below it
raises them and lets callers decide.
"""


class PDFChatError(Exception):
    """Base class for all pdfchat domain errors."""

    pass


class InvalidRequest(PDFChatError):
    """Raised when required input is missing or empty."""

    pass


class NotFound(PDFChatError):
    """Raised when a chat or document does not exist."""

    pass


class EmptyDocument(NotFound):
    """Raised when a chat's document has no extracted text."""

    pass


class ProviderFailure(PDFChatError):
    """Raised when the completion provider call or its stream fails."""

    pass


class StorageError(PDFChatError):
    """Raised when a read or write against the store fails."""

    pass
