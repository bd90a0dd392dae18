"""Agno agent service that streams coaching responses from Gemini.

Core module for the coach's conversation handling.

Design notes:

1. **Stateless agent** - The browser owns chat history and sends the whole
   conversation with every request, so the agent has no storage and never
   adds history of its own.

2. **Singleton** - Building the Gemini client is not free, so one service
   instance is shared across requests.

3. **Service wrapper** - Decouples the API from Agno's interface. Agno's event
   types have changed between releases; only this module knows about them.

4. **Streaming generator** - Agno yields run events with metadata. We pass on
   just the content strings, which is all the plain-text endpoint needs.
"""

import logging
from collections.abc import AsyncGenerator

from agno.agent import Agent
from agno.models.google import Gemini
from agno.run.agent import RunContentEvent, RunErrorEvent

from indie_coach.agent.config import CoachConfig, get_coach_config
from indie_coach.agent.history import to_agent_messages, with_book_summary_context
from indie_coach.agent.prompts import SYSTEM_INSTRUCTION
from indie_coach.models.schemas import Message

logger = logging.getLogger(__name__)


class CoachServiceError(Exception):
    """Raised when the model fails to produce a response."""

    pass


class EmptyConversationError(CoachServiceError):
    """Raised when no usable messages remain after normalization."""

    pass


class CoachService:
    """Service for streaming Indie Coach responses.

    Wraps Agno's Agent with:
    - The Gemini chat model and the coach system instruction
    - History normalization for the Gemini turn rules
    - A clean streaming interface for the chat endpoint
    """

    def __init__(self, config: CoachConfig | None = None) -> None:
        """Initialize the coach service.

        Args:
            config: Optional coach configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_coach_config()
        self._agent = self._create_agent()

    def _create_agent(self) -> Agent:
        """Create the Agno agent instance.

        Returns:
            Agent with the Gemini model and the coach system message.
        """
        model = Gemini(
            id=self._config.chat_model,
            api_key=self._config.api_key,
            temperature=self._config.temperature,
            max_output_tokens=self._config.max_output_tokens,
        )

        return Agent(
            model=model,
            # Used verbatim; Agno's own formatting hints would fight the tag rules.
            system_message=SYSTEM_INSTRUCTION,
            markdown=False,
            telemetry=False,
        )

    async def stream_response(
        self,
        messages: list[Message],
        book_summary: bool = False,
    ) -> AsyncGenerator[str]:
        """Stream response chunks for a conversation.

        Args:
            messages: Full conversation, oldest first, ending with the
                user's latest message.
            book_summary: Prepend the book summary as context.

        Yields:
            Response text chunks as they arrive.

        Raises:
            EmptyConversationError: If nothing sendable remains.
            CoachServiceError: If the model call fails.
        """
        if book_summary:
            messages = with_book_summary_context(messages)

        agent_messages = to_agent_messages(messages)
        if not agent_messages:
            raise EmptyConversationError("Cannot process empty or invalid message history.")

        logger.info(f"Streaming response for {len(agent_messages)} messages")

        try:
            async for event in self._agent.arun(input=agent_messages, stream=True):
                if isinstance(event, RunErrorEvent):
                    raise CoachServiceError(event.content or "The model run failed.")
                if isinstance(event, RunContentEvent) and event.content:
                    yield str(event.content)
        except CoachServiceError:
            raise
        except Exception as e:
            logger.error(f"Model streaming failed: {e}")
            raise CoachServiceError(str(e)) from e


# Module-level singleton instance
_coach_service: CoachService | None = None


def get_coach_service() -> CoachService:
    """Get or create the global coach service.

    Returns:
        The CoachService instance.

    Raises:
        ValidationError: If the API key is missing.
    """
    global _coach_service
    if _coach_service is None:
        _coach_service = CoachService()
    return _coach_service
