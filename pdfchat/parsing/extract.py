"""Upload text extraction dispatched on file extension.

PDFs go through pypdf; plain-text formats are decoded as UTF-8.
"""

import logging
from pathlib import PurePath

from pdfchat.parsing.pdf_parser import MAX_FILE_SIZE, PDFParseError, parse_pdf

logger = logging.getLogger(__name__)

PDF_EXTENSIONS = frozenset({".pdf"})
TEXT_EXTENSIONS = frozenset({".txt", ".md"})
SUPPORTED_EXTENSIONS = PDF_EXTENSIONS | TEXT_EXTENSIONS


class UnsupportedFileType(PDFParseError):
    """Raised for uploads whose extension we cannot extract text from."""

    pass


def extract_text(filename: str, content: bytes, max_size: int = MAX_FILE_SIZE) -> str:
    """Extract plain text from an uploaded file.

    Args:
        filename: Original filename, used to pick the extractor.
        content: Raw file bytes.
        max_size: Largest accepted input in bytes.

    Returns:
        The extracted text (may be blank for image-only PDFs).

    Raises:
        UnsupportedFileType: If the extension is not supported.
        PDFParseError: If the file is empty, too large or unreadable.
    """
    ext = PurePath(filename).suffix.lower()

    if ext in PDF_EXTENSIONS:
        return parse_pdf(content, max_size=max_size).text

    if ext not in TEXT_EXTENSIONS:
        supported = ", ".join(sorted(SUPPORTED_EXTENSIONS))
        raise UnsupportedFileType(f"Unsupported file type '{ext or filename}'. Use PDF or {supported}")

    if not content:
        raise PDFParseError("Empty file provided")
    if len(content) > max_size:
        raise PDFParseError(
            f"File size ({len(content) / (1024 * 1024):.1f}MB) exceeds maximum allowed "
            f"({max_size // (1024 * 1024)}MB)"
        )

    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PDFParseError(f"Text file is not valid UTF-8: {e}") from e
