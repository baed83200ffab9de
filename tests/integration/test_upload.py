"""Integration tests for the document upload endpoint.

Runs the real FastAPI app against a temporary SQLite database and object
store. No model calls are made during upload.
"""

from collections.abc import Callable
from unittest.mock import patch

import pytest_check as check
from httpx import AsyncClient

from pdfchat.errors import StorageError
from pdfchat.models.schemas import UploadResponse
from pdfchat.store import ChatStore, FileStore


class TestDocumentUpload:
    """Integration tests for POST /api/upload."""

    async def test_upload_pdf_creates_chat(
        self,
        async_client: AsyncClient,
        make_pdf: Callable[[list[str]], bytes],
        store: ChatStore,
    ) -> None:
        """Valid PDF returns the new chat titled with the original filename."""
        response = await async_client.post(
            "/api/upload",
            files={"file": ("invoice.pdf", make_pdf(["Invoice total: $42"]), "application/pdf")},
        )

        assert response.status_code == 200
        data = UploadResponse.model_validate(response.json())
        check.equal(data.message, "File uploaded successfully")
        check.equal(data.chat.title, "invoice.pdf")

        text = await store.get_document_text_for_chat(data.chat.id)
        check.is_in("Invoice total: $42", text)

    async def test_response_uses_camel_case(
        self, async_client: AsyncClient, make_pdf: Callable[[list[str]], bytes]
    ) -> None:
        """Chat fields are serialized the way the browser client reads them."""
        response = await async_client.post(
            "/api/upload",
            files={"file": ("a.pdf", make_pdf(["hello"]), "application/pdf")},
        )

        chat = response.json()["chat"]
        check.equal(set(chat), {"id", "title", "documentId", "createdAt"})

    async def test_upload_stores_original_bytes(
        self,
        async_client: AsyncClient,
        make_pdf: Callable[[list[str]], bytes],
        file_store: FileStore,
    ) -> None:
        content = make_pdf(["stored"])

        await async_client.post(
            "/api/upload",
            files={"file": ("my report.pdf", content, "application/pdf")},
        )

        stored = list(file_store.resolve("public").iterdir())
        check.equal(len(stored), 1)
        check.is_true(stored[0].name.endswith("_my_report.pdf"))
        check.equal(stored[0].read_bytes(), content)

    async def test_upload_plain_text(self, async_client: AsyncClient, store: ChatStore) -> None:
        response = await async_client.post(
            "/api/upload",
            files={"file": ("notes.txt", b"Meeting at noon.", "text/plain")},
        )

        assert response.status_code == 200
        chat_id = response.json()["chat"]["id"]
        assert await store.get_document_text_for_chat(chat_id) == "Meeting at noon."

    async def test_reject_unsupported_extension(self, async_client: AsyncClient) -> None:
        """Image file with .jpg extension is rejected with 400."""
        jpeg_header = bytes([0xFF, 0xD8, 0xFF, 0xE0, 0x00, 0x10, 0x4A, 0x46])

        response = await async_client.post(
            "/api/upload",
            files={"file": ("image.jpg", jpeg_header, "image/jpeg")},
        )

        assert response.status_code == 400
        assert "PDF" in response.json()["detail"]

    async def test_reject_fake_pdf_extension(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/upload",
            files={"file": ("fake.pdf", b"just text with a .pdf extension", "application/pdf")},
        )

        assert response.status_code == 400
        assert "Invalid PDF" in response.json()["detail"]

    async def test_reject_oversized_file(self, async_client: AsyncClient) -> None:
        """File exceeding the 10MB limit is rejected with 413."""
        oversized_content = b"%PDF-1.4\n" + (b"x" * (10 * 1024 * 1024 + 1024))

        response = await async_client.post(
            "/api/upload",
            files={"file": ("large.pdf", oversized_content, "application/pdf")},
        )

        assert response.status_code == 413
        assert "exceeds maximum" in response.json()["detail"]

    async def test_reject_empty_file(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/upload",
            files={"file": ("empty.pdf", b"", "application/pdf")},
        )

        assert response.status_code == 400

    async def test_reject_pdf_without_text_creates_nothing(
        self,
        async_client: AsyncClient,
        make_pdf: Callable[[list[str]], bytes],
        store: ChatStore,
    ) -> None:
        """A scanned-style PDF with no text layer never gets a chat."""
        response = await async_client.post(
            "/api/upload",
            files={"file": ("scan.pdf", make_pdf([]), "application/pdf")},
        )

        check.equal(response.status_code, 400)
        check.is_in("no extractable text", response.json()["detail"])
        check.equal(await store.list_chats(), [])

    async def test_reject_missing_filename(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/upload",
            files={"file": ("", b"%PDF-1.4\n", "application/pdf")},
        )

        # Empty filename rejected - 422 from FastAPI validation or 400 from our check
        assert response.status_code in (400, 422)

    async def test_failed_record_write_removes_stored_bytes(
        self,
        async_client: AsyncClient,
        make_pdf: Callable[[list[str]], bytes],
        store: ChatStore,
        file_store: FileStore,
    ) -> None:
        """Bytes saved before a database failure do not stay behind."""
        with patch.object(store, "create_document", side_effect=StorageError("database is locked")):
            response = await async_client.post(
                "/api/upload",
                files={"file": ("invoice.pdf", make_pdf(["Invoice total: $42"]), "application/pdf")},
            )

        check.equal(response.status_code, 500)
        check.equal(list(file_store.resolve("public").iterdir()), [])


class TestUploadErrorHandling:
    """Tests for request-shape errors on the upload endpoint."""

    async def test_wrong_http_method_returns_405(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/upload")
        assert response.status_code == 405

    async def test_missing_file_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post("/api/upload")
        assert response.status_code == 422

    async def test_wrong_form_field_name_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/upload",
            files={"wrong_field": ("test.pdf", b"%PDF-1.4\n", "application/pdf")},
        )
        assert response.status_code == 422

    async def test_cors_headers_present(self, async_client: AsyncClient) -> None:
        """Response includes CORS headers for cross-origin requests."""
        response = await async_client.post(
            "/api/upload",
            files={"file": ("test.pdf", b"not a pdf", "application/pdf")},
            headers={"Origin": "http://localhost:3000"},
        )

        assert "access-control-allow-origin" in response.headers
