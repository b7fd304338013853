import logging
from typing import List, Optional, Sequence

from ..exceptions import UpstreamError
from ..models.schemas import ConversationTurn
from .generative_service import (
    Content, GenerationConfig, GenerativeService, SYSTEM, USER, default_generation_config
)
from .history import history_to_contents
from .sanitizer import sanitize_output

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = Content(
    role=SYSTEM,
    text=(
        "You are a professional legal assistant. Provide clear, formal responses without using "
        "markdown formatting (no **, *, _, etc.). Use proper grammar and complete sentences. "
        "Structure your response in a professional manner with appropriate paragraphs."
    ),
)

FORMAL_RESPONSE_PREFIX = "Please provide a formal response to: "

GENERATION_FAILED_MESSAGE = "Failed to get response from AI. Please check server logs for more details."


class GenerationInvoker:
    """Single point of contact with the generative service for free-text answers.

    Each call makes exactly one attempt. There is no retry or backoff: a failed
    call surfaces immediately as ``UpstreamError``.
    """

    def __init__(
        self,
        service: GenerativeService,
        config: Optional[GenerationConfig] = None
    ):
        self.service = service
        self.config = config or default_generation_config()

    def build_contents(
        self,
        prompt_text: str,
        history: Optional[Sequence[ConversationTurn]] = None
    ) -> List[Content]:
        """System instruction, then prior turns, then the current request."""
        return [
            SYSTEM_INSTRUCTION,
            *history_to_contents(history),
            Content(role=USER, text=f"{FORMAL_RESPONSE_PREFIX}{prompt_text}"),
        ]

    async def generate(
        self,
        prompt_text: str,
        history: Optional[Sequence[ConversationTurn]] = None
    ) -> str:
        """Generate a sanitized, markup-free answer to ``prompt_text``."""
        contents = self.build_contents(prompt_text, history)

        try:
            result = await self.service.invoke(contents, self.config)
        except Exception as e:
            logger.exception(f"Error calling generative service: {str(e)}")
            raise UpstreamError(GENERATION_FAILED_MESSAGE) from e

        if result is None or not result.text:
            metadata = result.metadata if result is not None else {}
            logger.error(f"Empty or invalid response from AI model: {metadata}")
            raise UpstreamError(GENERATION_FAILED_MESSAGE)

        logger.debug(f"AI response received: {result.metadata}")
        return sanitize_output(result.text)
