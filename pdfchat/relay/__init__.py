"""Streaming relay for chat turns.

Responsibilities:
    - Input validation and read-through document context lookup
    - User message persistence before the model call
    - Producer/consumer relay of provider fragments to the response body
    - Assistant message persistence once the provider stream completes
"""

from pdfchat.relay.config import RelayConfig, get_relay_config
from pdfchat.relay.service import ChatRelay, CompletionProvider
from pdfchat.relay.turn import TurnStream

__all__ = ["ChatRelay", "CompletionProvider", "RelayConfig", "TurnStream", "get_relay_config"]
