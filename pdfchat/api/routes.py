"""Upload endpoint for document ingestion.

Handles file upload, validation, text extraction, storage of the bytes and
the extracted text, and creation of the chat for the new document.
"""

import logging
from pathlib import PurePath

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status

from pdfchat.api.dependencies import get_chat_store, get_file_store, get_settings
from pdfchat.api.errors import to_http_exception
from pdfchat.errors import PDFChatError
from pdfchat.models.schemas import ChatOut, UploadResponse
from pdfchat.parsing import SUPPORTED_EXTENSIONS, PDFParseError, extract_text
from pdfchat.store import ChatStore, FileStore, StoreConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["upload"])


def _validate_file_extension(filename: str | None) -> str:
    """Validate that the file has a supported extension.

    Args:
        filename: The uploaded filename.

    Returns:
        The validated filename.

    Raises:
        HTTPException: 400 if the filename is missing or the extension is invalid.
    """
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Filename is required",
        )

    if PurePath(filename).suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF or plain text (.txt, .md) files are accepted",
        )

    return filename


async def _read_and_validate_size(file: UploadFile, max_size: int) -> bytes:
    """Read file content and validate size.

    Args:
        file: The uploaded file.
        max_size: Largest accepted upload in bytes.

    Returns:
        File content as bytes.

    Raises:
        HTTPException: 413 if file exceeds size limit.
    """
    content = await file.read()

    if len(content) > max_size:
        size_mb = len(content) / (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=(
                f"File size ({size_mb:.1f}MB) exceeds maximum allowed "
                f"({max_size // (1024 * 1024)}MB)"
            ),
        )

    return content


@router.post("/upload", response_model=UploadResponse)
async def upload_document(
    file: UploadFile,
    store: ChatStore = Depends(get_chat_store),
    files: FileStore = Depends(get_file_store),
    settings: StoreConfig = Depends(get_settings),
) -> UploadResponse:
    """Upload a document and open a chat over it.

    Extracts the text, stores the original bytes and the text, then creates
    a chat titled with the original filename.

    Args:
        file: The uploaded file (multipart/form-data).

    Returns:
        UploadResponse with the created chat.

    Raises:
        400: Invalid file (wrong type, empty, corrupt, no extractable text).
        413: File exceeds the size limit.
        500: Storage failure.
    """
    filename = _validate_file_extension(file.filename)
    content = await _read_and_validate_size(file, settings.max_upload_size)

    try:
        text = extract_text(filename, content, max_size=settings.max_upload_size)
    except PDFParseError as e:
        logger.warning(f"Parse error for {filename}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e

    # A chat must never point at a document without text
    if not text.strip():
        logger.warning(f"No extractable text in {filename}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Document contains no extractable text",
        )

    try:
        file_path = await files.save(filename, content)
    except PDFChatError as e:
        raise to_http_exception(e) from e

    try:
        document = await store.create_document(file_path, text)
        chat = await store.create_chat(document.id, title=filename)
    except PDFChatError as e:
        # Nothing references the stored bytes yet
        try:
            await files.delete(file_path)
        except PDFChatError as cleanup_error:
            logger.error(f"Could not remove orphaned upload {file_path}: {cleanup_error}")
        raise to_http_exception(e) from e

    logger.info(f"Ingested {filename} as document {document.id}, chat {chat.id}")

    return UploadResponse(
        message="File uploaded successfully",
        chat=ChatOut.model_validate(chat),
    )
