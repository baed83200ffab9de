"""Object storage for uploaded file bytes on the local filesystem."""

import asyncio
import logging
import re
import time
from pathlib import Path

from pdfchat.errors import StorageError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")
_PUBLIC_PREFIX = "public"


def sanitize_filename(filename: str) -> str:
    """Replace every character outside [a-zA-Z0-9._-] with an underscore."""
    return _UNSAFE_CHARS.sub("_", filename)


class FileStore:
    """Stores uploaded bytes under ``<root>/public/<millis>_<name>``.

    The returned file path is relative to the root so records stay valid if
    the storage directory moves.
    """

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    def resolve(self, file_path: str) -> Path:
        """Map a stored file path back to its location on disk."""
        return self._root / file_path

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def save(self, filename: str, data: bytes) -> str:
        """Store uploaded bytes under a unique, sanitized name.

        Existing files at the same path are overwritten.

        Args:
            filename: Original client filename.
            data: File content.

        Returns:
            Relative file path of the stored object.

        Raises:
            StorageError: If the bytes cannot be written.
        """
        unique_name = f"{int(time.time() * 1000)}_{sanitize_filename(filename)}"
        file_path = f"{_PUBLIC_PREFIX}/{unique_name}"

        try:
            await asyncio.to_thread(self._write, self.resolve(file_path), data)
        except OSError as e:
            raise StorageError(f"Failed to store file: {e}") from e

        logger.info(f"Stored upload at {file_path} ({len(data)} bytes)")
        return file_path

    async def delete(self, file_path: str) -> None:
        """Remove a stored object. Missing objects are ignored.

        Raises:
            StorageError: If the file exists but cannot be removed.
        """
        try:
            await asyncio.to_thread(self.resolve(file_path).unlink, missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove stored file: {e}") from e

        logger.info(f"Removed stored upload {file_path}")
