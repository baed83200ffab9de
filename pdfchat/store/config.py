"""Store configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

DEFAULT_MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB


class StoreConfig(BaseModel):
    """Configuration for the document and chat stores.

    Attributes:
        database_url: SQLAlchemy URL for the relational store.
        storage_dir: Root directory of the object store for uploaded bytes.
        max_upload_size: Largest accepted upload in bytes.
    """

    database_url: str = Field(
        default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///data/pdfchat.db"),
        description="SQLAlchemy database URL",
    )
    storage_dir: str = Field(
        default_factory=lambda: os.getenv("STORAGE_DIR", "data/storage"),
        description="Directory holding uploaded files",
    )
    max_upload_size: int = Field(
        default_factory=lambda: int(os.getenv("MAX_UPLOAD_SIZE", str(DEFAULT_MAX_UPLOAD_SIZE))),
        ge=1,
        description="Maximum upload size in bytes",
    )


def get_store_config() -> StoreConfig:
    """Create store configuration from environment."""
    return StoreConfig()
