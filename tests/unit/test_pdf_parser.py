"""Unit tests for PDF parsing and upload text extraction."""

from collections.abc import Callable

import pytest
import pytest_check as check

from pdfchat.parsing import (
    MAX_FILE_SIZE,
    PDFParseError,
    UnsupportedFileType,
    extract_text,
    parse_pdf,
)


class TestParsePdfValid:
    """Tests for successful PDF parsing."""

    def test_extracts_text_and_page_count(self, make_pdf: Callable[[list[str]], bytes]) -> None:
        """Valid PDF returns text content and correct page count."""
        result = parse_pdf(make_pdf(["Invoice total: $42"]))

        check.greater(len(result.text), 0)
        check.is_in("Invoice total: $42", result.text)
        check.equal(result.pages, 1)

    def test_empty_page_pdf_succeeds(self, make_pdf: Callable[[list[str]], bytes]) -> None:
        """PDF with an empty page parses without error and yields blank text."""
        result = parse_pdf(make_pdf([]))

        check.equal(result.pages, 1)
        check.equal(result.text.strip(), "")


class TestParsePdfRejection:
    """Tests for PDF validation and rejection."""

    def test_rejects_empty_bytes(self) -> None:
        with pytest.raises(PDFParseError, match="Empty file"):
            parse_pdf(b"")

    def test_rejects_non_pdf_file(self) -> None:
        with pytest.raises(PDFParseError, match="Invalid PDF"):
            parse_pdf(b"This is not a real PDF file")

    def test_rejects_oversized_file(self) -> None:
        oversized = b"%PDF-1.4" + b"\x00" * (MAX_FILE_SIZE + 1)

        with pytest.raises(PDFParseError, match="exceeds maximum"):
            parse_pdf(oversized)

    def test_respects_custom_max_size(self, make_pdf: Callable[[list[str]], bytes]) -> None:
        with pytest.raises(PDFParseError, match="exceeds maximum"):
            parse_pdf(make_pdf(["hello"]), max_size=16)

    def test_rejects_truncated_pdf(self) -> None:
        with pytest.raises(PDFParseError, match="Corrupt|Failed"):
            parse_pdf(b"%PDF-1.4\n1 0 obj\n<<")


class TestExtractText:
    """Tests for extension-based extraction."""

    def test_pdf_goes_through_pypdf(self, make_pdf: Callable[[list[str]], bytes]) -> None:
        text = extract_text("Report.PDF", make_pdf(["Quarterly numbers"]))

        assert "Quarterly numbers" in text

    def test_plain_text_is_decoded(self) -> None:
        assert extract_text("notes.txt", "Größe: 42".encode()) == "Größe: 42"

    def test_markdown_is_decoded(self) -> None:
        assert extract_text("README.md", b"# Title\nBody") == "# Title\nBody"

    def test_rejects_unsupported_extension(self) -> None:
        with pytest.raises(UnsupportedFileType, match="Unsupported file type"):
            extract_text("image.jpg", b"\xff\xd8\xff\xe0")

    def test_rejects_invalid_utf8(self) -> None:
        with pytest.raises(PDFParseError, match="UTF-8"):
            extract_text("notes.txt", b"\xff\xfe\xfa")

    def test_rejects_empty_text_file(self) -> None:
        with pytest.raises(PDFParseError, match="Empty file"):
            extract_text("notes.txt", b"")
