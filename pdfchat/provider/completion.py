"""Agno-backed completion provider with streaming support.

Core module for talking to the language model.

Architecture Decisions:

1. **One Agent per turn** - The system instruction embeds the full text of the
   chat's document, so it differs per chat. The model client is shared and
   reused; only the lightweight Agent wrapper is rebuilt per turn.

2. **No history, no storage** - The Agent gets no db, so agno replays no
   prior messages. Each turn sends exactly the document-bearing system
   instruction followed by the user's message. Chat persistence lives in
   pdfchat.store, not in agno.

3. **Singleton Pattern** - Model client creation is done once; the service is
   reused across all requests.

4. **Streaming Generator** - Agno emits run events with metadata. We pass on
   only the content of RunContent events and turn RunError events and raised
   exceptions into ProviderFailure so the relay sees a single error type.
"""

import logging
from collections.abc import AsyncGenerator

from agno.agent import Agent
from agno.models.openai import OpenAIChat
from agno.run.agent import RunEvent

from pdfchat.errors import ProviderFailure
from pdfchat.provider.config import ProviderConfig, get_provider_config
from pdfchat.provider.prompts import build_system_prompt

logger = logging.getLogger(__name__)


class CompletionService:
    """Service for streaming document-grounded completions.

    Wraps Agno's Agent with:
    - A shared OpenAIChat model client
    - A per-turn system instruction carrying the document text
    - Clean fragment streaming for the relay
    - Centralized error translation
    """

    def __init__(self, config: ProviderConfig | None = None) -> None:
        """Initialize the completion service.

        Args:
            config: Optional provider configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_provider_config()
        self._model = self._create_model()

    def _create_model(self) -> OpenAIChat:
        """Create the OpenAI chat model client.

        Returns:
            Configured OpenAIChat instance.
        """
        return OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

    def _create_agent(self, document_text: str) -> Agent:
        """Create an Agent whose system message carries the document.

        Args:
            document_text: Full extracted text of the chat's document.

        Returns:
            Agent with no storage, no knowledge and no history.
        """
        return Agent(
            model=self._model,
            system_message=build_system_prompt(document_text),
            markdown=False,
        )

    async def stream(
        self,
        document_text: str,
        message: str,
    ) -> AsyncGenerator[str]:
        """Stream response fragments for a single turn.

        Args:
            document_text: Full text embedded in the system instruction.
            message: The user's message, sent as the only conversational turn.

        Yields:
            Content fragments as they arrive. Empty deltas are skipped.

        Raises:
            ProviderFailure: If the request or the stream fails.
        """
        agent = self._create_agent(document_text)

        try:
            async for event in agent.arun(message, stream=True):
                kind = getattr(event, "event", None)
                if kind == RunEvent.run_error.value:
                    raise ProviderFailure(f"Model run failed: {event.content}")
                if kind == RunEvent.run_content.value and event.content:
                    yield event.content
        except ProviderFailure:
            raise
        except Exception as e:
            logger.error(f"Completion stream failed: {e}")
            raise ProviderFailure(f"Completion request failed: {e}") from e


# Module-level singleton instance
_completion_service: CompletionService | None = None


def get_completion_service() -> CompletionService:
    """Get or create the global completion service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The CompletionService instance.
    """
    global _completion_service
    if _completion_service is None:
        _completion_service = CompletionService()
    return _completion_service
