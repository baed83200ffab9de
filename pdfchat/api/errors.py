"""Translation of domain errors into HTTP errors."""

import logging

from fastapi import HTTPException, status

from pdfchat.errors import InvalidRequest, NotFound, PDFChatError, ProviderFailure, StorageError

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[PDFChatError], int]] = [
    (InvalidRequest, status.HTTP_400_BAD_REQUEST),
    (NotFound, status.HTTP_404_NOT_FOUND),  # includes EmptyDocument
    (ProviderFailure, status.HTTP_502_BAD_GATEWAY),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def to_http_exception(error: PDFChatError) -> HTTPException:
    """Map a domain error to an HTTPException carrying its message.

    Args:
        error: The domain error raised below the API layer.

    Returns:
        HTTPException with the matching status code.
    """
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            break
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if status_code >= 500:
        logger.error(f"{type(error).__name__}: {error}")
    else:
        logger.warning(f"{type(error).__name__}: {error}")

    return HTTPException(status_code=status_code, detail=str(error))
