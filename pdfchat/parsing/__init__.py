"""Text extraction for uploaded documents.

Responsibilities:
    - PDF text extraction with pypdf
    - UTF-8 decoding of plain-text uploads
    - Upload validation (empty, oversized, wrong type, corrupt)

The extracted text is stored whole and embedded verbatim in prompts.
"""

from pdfchat.parsing.extract import SUPPORTED_EXTENSIONS, UnsupportedFileType, extract_text
from pdfchat.parsing.pdf_parser import MAX_FILE_SIZE, PDFContent, PDFParseError, parse_pdf

__all__ = [
    "MAX_FILE_SIZE",
    "PDFContent",
    "PDFParseError",
    "SUPPORTED_EXTENSIONS",
    "UnsupportedFileType",
    "extract_text",
    "parse_pdf",
]
