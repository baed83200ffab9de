"""FastAPI dependency injection for stores, provider and relay.

Expensive objects are cached with @lru_cache so they are created once and
reused across requests. Tests replace them through app.dependency_overrides.
"""

from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from pdfchat.provider import get_completion_service
from pdfchat.relay import ChatRelay, CompletionProvider, RelayConfig, get_relay_config
from pdfchat.store import ChatStore, FileStore, StoreConfig, get_store_config

# --- Cached Singletons ---


@lru_cache
def get_settings() -> StoreConfig:
    """Get cached store configuration."""
    return get_store_config()


@lru_cache
def get_relay_settings() -> RelayConfig:
    """Get cached relay configuration."""
    return get_relay_config()


@lru_cache
def get_chat_store() -> ChatStore:
    """Get cached chat store (owns the database engine)."""
    return ChatStore.from_config(get_settings())


@lru_cache
def get_file_store() -> FileStore:
    """Get cached object store for uploaded bytes."""
    return FileStore(Path(get_settings().storage_dir))


def get_completion_provider() -> CompletionProvider:
    """Get the completion provider (singleton inside the provider package)."""
    return get_completion_service()


# --- Composed Services ---


def get_chat_relay(
    store: ChatStore = Depends(get_chat_store),
    provider: CompletionProvider = Depends(get_completion_provider),
    config: RelayConfig = Depends(get_relay_settings),
) -> ChatRelay:
    """Get a chat relay wired to the injected store and provider."""
    return ChatRelay(store=store, provider=provider, config=config)
