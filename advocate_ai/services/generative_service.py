"""Interface to the external generative language service.

Everything above this module talks to the model through
``GenerativeService.invoke(contents, config)``; the Anthropic implementation
below is the only place that knows about the provider SDK.
"""

import anthropic
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..config import settings

logger = logging.getLogger(__name__)

SYSTEM = "system"
USER = "user"
MODEL = "model"

JSON_MIME_TYPE = "application/json"

# Tool name used to force schema-shaped output from Claude
EXTRACTION_TOOL_NAME = "record_extraction"


@dataclass(frozen=True)
class Content:
    role: str
    text: str


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float
    top_p: float
    top_k: int
    max_output_tokens: int

    def __post_init__(self):
        if not 0 <= self.temperature <= 2:
            raise ValueError(f"temperature must be within [0, 2], got {self.temperature}")
        if not 0 <= self.top_p <= 1:
            raise ValueError(f"top_p must be within [0, 1], got {self.top_p}")
        if self.top_k < 0:
            raise ValueError(f"top_k must be >= 0, got {self.top_k}")
        if self.max_output_tokens <= 0:
            raise ValueError(f"max_output_tokens must be > 0, got {self.max_output_tokens}")


@dataclass(frozen=True)
class JsonResponseConfig:
    response_schema: Dict[str, Any]
    response_mime_type: str = JSON_MIME_TYPE
    max_output_tokens: int = 2048


@dataclass
class GenerationResult:
    text: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def default_generation_config() -> GenerationConfig:
    """The fixed generation parameters for free-text answers."""
    return GenerationConfig(
        temperature=settings.temperature,
        top_p=settings.top_p,
        top_k=settings.top_k,
        max_output_tokens=settings.max_output_tokens,
    )


class GenerativeService:
    """Opaque request/response access to a generative language model."""

    async def invoke(
        self,
        contents: List[Content],
        config: Union[GenerationConfig, JsonResponseConfig]
    ) -> Optional[GenerationResult]:
        raise NotImplementedError


class AnthropicGenerativeService(GenerativeService):
    def __init__(self, client: Optional[anthropic.AsyncAnthropic] = None):
        # One attempt per call; failures surface to the caller instead of being retried
        self.client = client or anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key, max_retries=0)
        self.model = settings.claude_model

    async def invoke(
        self,
        contents: List[Content],
        config: Union[GenerationConfig, JsonResponseConfig]
    ) -> Optional[GenerationResult]:
        """Send ``contents`` to Claude and return the response text.

        Leading system contents become the ``system`` prompt; ``model`` turns
        are sent as assistant messages. JSON requests force a single tool call
        whose input schema is the requested response schema, and the tool
        input is returned as JSON text.
        """
        system_prompt = "\n\n".join(c.text for c in contents if c.role == SYSTEM)
        messages = [
            {"role": "assistant" if c.role == MODEL else "user", "content": c.text}
            for c in contents if c.role != SYSTEM
        ]

        request: Dict[str, Any] = {"model": self.model, "messages": messages}
        if system_prompt:
            request["system"] = system_prompt

        if isinstance(config, JsonResponseConfig):
            request["max_tokens"] = config.max_output_tokens
            request["tools"] = [{
                "name": EXTRACTION_TOOL_NAME,
                "description": "Record the information extracted from the text.",
                "input_schema": config.response_schema,
            }]
            request["tool_choice"] = {"type": "tool", "name": EXTRACTION_TOOL_NAME}
        else:
            request.update(
                max_tokens=config.max_output_tokens,
                temperature=config.temperature,
                top_p=config.top_p,
                top_k=config.top_k,
            )

        response = await self.client.messages.create(**request)
        logger.debug(f"Claude response: stop_reason={response.stop_reason}, usage={response.usage}")

        metadata = {"model": response.model, "stop_reason": response.stop_reason}
        if isinstance(config, JsonResponseConfig):
            for block in response.content:
                if block.type == "tool_use":
                    return GenerationResult(text=json.dumps(block.input), metadata=metadata)

        texts = [block.text for block in response.content if block.type == "text"]
        return GenerationResult(text="".join(texts) if texts else None, metadata=metadata)
