"""Domain errors for the AI document services.

The API layer maps each class to an HTTP response in ``main.py``:
validation errors are the caller's fault (400), upstream and persistence
errors are ours or the model provider's (500).
"""

from typing import Optional


class AdvocateAIError(Exception):
    """Base class for domain errors."""

    error_code = "advocate_ai_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class ValidationError(AdvocateAIError):
    """Missing or malformed input supplied by the caller."""

    error_code = "validation_error"


class UpstreamError(AdvocateAIError):
    """The generative service failed or returned an unusable payload."""

    error_code = "upstream_error"

    # Raw response text kept in error details is capped at this many characters
    FRAGMENT_LIMIT = 200

    def __init__(self, message: str, response_fragment: Optional[str] = None):
        super().__init__(message)
        if response_fragment is not None:
            response_fragment = response_fragment[:self.FRAGMENT_LIMIT]
        self.response_fragment = response_fragment


class PersistenceError(AdvocateAIError):
    """A draft could not be written to the store."""

    error_code = "persistence_error"
