"""Completion provider for document-grounded chat.

Streams model output for one turn at a time.

Responsibilities:
    - Model client initialization with OpenAI-compatible APIs
    - System instruction construction embedding the document text
    - Fragment streaming and provider error translation

Leverages the Agno framework for the model call.
Maintains clean separation from the HTTP layer and from persistence.
"""

from pdfchat.provider.completion import CompletionService, get_completion_service
from pdfchat.provider.config import ProviderConfig, get_provider_config
from pdfchat.provider.prompts import build_system_prompt

__all__ = [
    "CompletionService",
    "ProviderConfig",
    "build_system_prompt",
    "get_completion_service",
    "get_provider_config",
]
