"""Settings for the document-grounded completion provider.

The whole document travels in the system instruction on every turn, so the
only knobs here are which OpenAI-compatible endpoint and model answer, and
how long an answer may get.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()


def _api_key_from_env() -> str:
    # LLM_API_KEY wins; an empty value falls through to OPENAI_API_KEY
    return os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY", "")


class ProviderConfig(BaseModel):
    """Model endpoint used to answer questions about a chat's document.

    Attributes:
        api_key: Key for the model endpoint (LLM_API_KEY or OPENAI_API_KEY).
        base_url: LLM_BASE_URL for self-hosted or proxy endpoints; None means OpenAI.
        model_name: LLM_MODEL, the model that reads the document and answers.
        temperature: Sampling temperature for answers.
        max_tokens: Upper bound on the length of one streamed answer.
    """

    model_config = ConfigDict(validate_default=True, protected_namespaces=())

    api_key: str = Field(default_factory=_api_key_from_env)
    base_url: str | None = Field(default_factory=lambda: os.getenv("LLM_BASE_URL") or None)
    model_name: str = Field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o"))
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, ge=1, le=128000)

    @field_validator("api_key")
    @classmethod
    def require_api_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("API key required. Set LLM_API_KEY or OPENAI_API_KEY in .env")
        return v.strip()


def get_provider_config() -> ProviderConfig:
    """Read provider settings from the environment.

    Raises:
        ValidationError: If no API key is configured.
    """
    return ProviderConfig()
