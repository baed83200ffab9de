"""Relay configuration with environment variable loading."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

load_dotenv()


class RelayConfig(BaseModel):
    """Configuration for the streaming relay.

    Attributes:
        queue_size: Fragments the producer may run ahead of the consumer.
        timeout_seconds: Budget for a whole provider stream (None disables it).
    """

    model_config = ConfigDict(validate_default=True)

    queue_size: int = Field(
        default_factory=lambda: int(os.getenv("RELAY_QUEUE_SIZE", "32")),
        ge=1,
        description="Bounded queue size between provider and response",
    )
    timeout_seconds: float | None = Field(
        default_factory=lambda: os.getenv("RELAY_TIMEOUT_SECONDS") or None,
        description="Provider stream timeout in seconds",
    )

    @field_validator("timeout_seconds")
    @classmethod
    def disable_zero_timeout(cls, v: float | None) -> float | None:
        """Treat a zero or negative timeout as no timeout."""
        if v is not None and v <= 0:
            return None
        return v


def get_relay_config() -> RelayConfig:
    """Create relay configuration from environment."""
    return RelayConfig()
