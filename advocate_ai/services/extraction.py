import json
import logging
from typing import Any, Dict, Optional

from ..exceptions import UpstreamError, ValidationError
from .generative_service import Content, GenerativeService, JsonResponseConfig, USER

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Failed to extract information."
NO_RESPONSE_FRAGMENT = (
    "AI did not return a valid JSON format or an unexpected error occurred on the AI side."
)


def build_extraction_prompt(text: str, schema: Dict[str, Any]) -> str:
    return (
        "From the following text, extract information according to the provided JSON schema. "
        "Ensure the output is ONLY the JSON object, do not add any conversational text or "
        "markdown formatting outside the JSON.\n\n"
        f"Text: \"{text}\"\n\n"
        f"Schema: {json.dumps(schema)}\n\n"
        "Output:"
    )


class StructuredExtractionEngine:
    """Schema-constrained extraction of a JSON object from free text.

    The returned payload must parse as a JSON object as-is. Wrapped, prefixed
    or non-object payloads are rejected rather than repaired.
    """

    def __init__(self, service: GenerativeService):
        self.service = service

    async def extract(self, text: Optional[str], schema: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Text to analyze is required for AI extraction.")
        if schema is None:
            raise ValidationError("Extraction schema is required for AI extraction.")
        if not isinstance(schema, dict):
            raise ValidationError("Extraction schema must be a JSON object.")

        contents = [Content(role=USER, text=build_extraction_prompt(text, schema))]
        config = JsonResponseConfig(response_schema=schema)

        try:
            result = await self.service.invoke(contents, config)
        except Exception as e:
            logger.exception(f"Error extracting information with generative service: {str(e)}")
            raise UpstreamError(EXTRACTION_FAILED_MESSAGE, response_fragment=NO_RESPONSE_FRAGMENT) from e

        raw = result.text if result is not None else None
        if not raw:
            metadata = result.metadata if result is not None else {}
            logger.error(f"Empty response from generative service during extraction: {metadata}")
            raise UpstreamError(EXTRACTION_FAILED_MESSAGE, response_fragment=NO_RESPONSE_FRAGMENT)

        try:
            extracted = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Extraction response is not valid JSON: {str(e)}; raw response: {raw!r}; {result.metadata}")
            raise UpstreamError(EXTRACTION_FAILED_MESSAGE, response_fragment=raw) from e

        if not isinstance(extracted, dict):
            logger.error(f"Extraction response root is {type(extracted).__name__}, expected object")
            raise UpstreamError(EXTRACTION_FAILED_MESSAGE, response_fragment=raw)

        return extracted
