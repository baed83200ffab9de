"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - make_pdf: Builds small single-page PDFs with known text
    - engine / store / file_store: Temporary SQLite database and object store
    - insert_chat: Inserts a document + chat directly, bypassing upload checks
    - provider: Scripted completion provider that records its calls
    - async_client: HTTPX client for API testing with dependencies overridden
"""

import os

# Keep provider config importable without a real key
os.environ.setdefault("OPENAI_API_KEY", "sk-test-key")

from collections.abc import AsyncGenerator, AsyncIterator, Callable, Iterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import Engine
from sqlalchemy.orm import Session

from pdfchat.api import app
from pdfchat.api.dependencies import (
    get_chat_store,
    get_completion_provider,
    get_file_store,
    get_relay_settings,
    get_settings,
)
from pdfchat.relay import RelayConfig
from pdfchat.store import Chat, ChatStore, Document, FileStore, StoreConfig
from pdfchat.store.database import create_db_engine, create_tables


def _escape_pdf_text(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: list[str]) -> bytes:
    """Build a minimal one-page PDF drawing each line with Helvetica."""
    ops = ["BT", "/F1 12 Tf", "72 720 Td", "14 TL"]
    for line in lines:
        ops.append(f"({_escape_pdf_text(line)}) Tj T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1") if lines else b""

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n".encode()
    out += f"startxref\n{xref_offset}\n%%EOF\n".encode()
    return bytes(out)


class ScriptedProvider:
    """Completion provider that replays fragments and optionally fails.

    Attributes:
        calls: (document_text, message) for every stream that was started.
    """

    def __init__(self, fragments: list[str] | None = None, error: Exception | None = None) -> None:
        self.fragments = ["Hel", "lo"] if fragments is None else fragments
        self.error = error
        self.calls: list[tuple[str, str]] = []
        self.closed = False

    async def stream(self, document_text: str, message: str) -> AsyncIterator[str]:
        self.calls.append((document_text, message))
        try:
            for fragment in self.fragments:
                yield fragment
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


@pytest.fixture
def make_pdf() -> Callable[[list[str]], bytes]:
    """Return the PDF builder."""
    return build_pdf


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    """Create a SQLite database in a temporary directory."""
    db_engine = create_db_engine(f"sqlite:///{tmp_path / 'pdfchat.db'}")
    create_tables(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def store(engine: Engine) -> ChatStore:
    return ChatStore(engine)


@pytest.fixture
def file_store(tmp_path: Path) -> FileStore:
    return FileStore(tmp_path / "storage")


@pytest.fixture
def insert_chat(engine: Engine) -> Callable[[str], str]:
    """Insert a document with the given text plus a chat over it.

    Returns:
        Function returning the new chat id.
    """

    def _insert(text: str, title: str = "doc.pdf") -> str:
        with Session(engine, expire_on_commit=False) as session:
            document = Document(file_path=f"public/{title}", content=text)
            session.add(document)
            session.flush()
            chat = Chat(title=title, document_id=document.id)
            session.add(chat)
            session.commit()
            return chat.id

    return _insert


@pytest.fixture
def provider() -> ScriptedProvider:
    return ScriptedProvider()


@pytest.fixture
async def async_client(
    tmp_path: Path,
    store: ChatStore,
    file_store: FileStore,
    provider: ScriptedProvider,
) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Store, object store and provider are replaced with test doubles.

    Yields:
        Configured AsyncClient for making test requests.
    """
    settings = StoreConfig(
        database_url=f"sqlite:///{tmp_path / 'pdfchat.db'}",
        storage_dir=str(tmp_path / "storage"),
    )
    app.dependency_overrides[get_chat_store] = lambda: store
    app.dependency_overrides[get_file_store] = lambda: file_store
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_completion_provider] = lambda: provider
    app.dependency_overrides[get_relay_settings] = lambda: RelayConfig(queue_size=4, timeout_seconds=5)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
