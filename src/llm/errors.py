"""Error taxonomy for the generation and transcription pipelines.

Lower layers raise their own exceptions (TransportError, JSONExtractionError,
ModelResponseError, DocumentValidationError). The orchestrators pass every one
of them through `classify_error()`, so callers only ever see PipelineError
with one of the ErrorCategory values below.

Classification order:
  1. PipelineError                 → unchanged
  2. Transport timeout             → TIMEOUT
  3. Transport connection failure  → NETWORK_FAILURE
  4. Message markers (table below) → QUOTA_EXCEEDED / AUTHENTICATION_FAILURE
  5. Transport status 429 / 401,403 → QUOTA_EXCEEDED / AUTHENTICATION_FAILURE
  6. Parser / response-shape error → MALFORMED_RESPONSE
  7. Validator error               → VALIDATION_FAILURE
  8. Anything else                 → UPSTREAM_SERVER_ERROR
"""

from enum import Enum
from typing import Optional

from src.llm.client import ModelResponseError
from src.llm.invoker import TransportError
from src.llm.parser import JSONExtractionError
from src.llm.retry import AttemptOutcome
from src.llm.validators import DocumentValidationError


class ErrorCategory(str, Enum):
    INVALID_INPUT = "InvalidInput"
    AUTHENTICATION_FAILURE = "AuthenticationFailure"
    QUOTA_EXCEEDED = "QuotaExceeded"
    TIMEOUT = "Timeout"
    NETWORK_FAILURE = "NetworkFailure"
    MALFORMED_RESPONSE = "MalformedResponse"
    VALIDATION_FAILURE = "ValidationFailure"
    UPSTREAM_SERVER_ERROR = "UpstreamServerError"


# Substrings (lowercase) looked for in upstream error text. First match wins.
MESSAGE_MARKERS: tuple[tuple[str, ErrorCategory], ...] = (
    ("quota", ErrorCategory.QUOTA_EXCEEDED),
    ("resource_exhausted", ErrorCategory.QUOTA_EXCEEDED),
    ("rate limit", ErrorCategory.QUOTA_EXCEEDED),
    ("authentication", ErrorCategory.AUTHENTICATION_FAILURE),
    ("api key not valid", ErrorCategory.AUTHENTICATION_FAILURE),
    ("unauthenticated", ErrorCategory.AUTHENTICATION_FAILURE),
    ("permission_denied", ErrorCategory.AUTHENTICATION_FAILURE),
)

STATUS_CATEGORIES: dict[int, ErrorCategory] = {
    401: ErrorCategory.AUTHENTICATION_FAILURE,
    403: ErrorCategory.AUTHENTICATION_FAILURE,
    429: ErrorCategory.QUOTA_EXCEEDED,
}

USER_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.INVALID_INPUT: "Input is too short or empty. Please provide more content.",
    ErrorCategory.AUTHENTICATION_FAILURE: "Authentication failed. Please check API configuration.",
    ErrorCategory.QUOTA_EXCEEDED: "API quota exceeded. Please try again in a few minutes.",
    ErrorCategory.TIMEOUT: "The request timed out. Please try again with shorter content.",
    ErrorCategory.NETWORK_FAILURE: "Could not reach the AI service. Please check your connection and try again.",
    ErrorCategory.MALFORMED_RESPONSE: "Failed to generate a valid response format. Please try again.",
    ErrorCategory.VALIDATION_FAILURE: "The generated result was incomplete. Please provide more content and try again.",
    ErrorCategory.UPSTREAM_SERVER_ERROR: "The AI service is having trouble right now. Please try again later.",
}


class PipelineError(Exception):
    """The only error type that leaves an orchestrator.

    Attributes:
        category: Stable ErrorCategory for branching and metrics
        layer: Where the failure originated (input, transport, client,
            extractor, validator, configuration)
        user_message: Short, actionable text safe to show to an end user
    """

    def __init__(
        self,
        category: ErrorCategory,
        message: str,
        layer: str,
        user_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.category = category
        self.layer = layer
        self.user_message = user_message or USER_MESSAGES[category]

    def __str__(self) -> str:
        return f"{self.category.value}: {super().__str__()}"


def match_marker(message: str) -> Optional[ErrorCategory]:
    """Return the category of the first marker found in `message`."""
    lowered = message.lower()
    for marker, category in MESSAGE_MARKERS:
        if marker in lowered:
            return category
    return None


def classify_error(exc: BaseException) -> PipelineError:
    """Map any failure from a pipeline stage to a PipelineError."""
    if isinstance(exc, PipelineError):
        return exc

    message = str(exc)

    if isinstance(exc, TransportError):
        if exc.outcome is AttemptOutcome.TIMEOUT:
            return PipelineError(ErrorCategory.TIMEOUT, message, layer="transport")
        if exc.outcome is AttemptOutcome.CONNECTION_ERROR:
            return PipelineError(ErrorCategory.NETWORK_FAILURE, message, layer="transport")
        category = match_marker(message) or STATUS_CATEGORIES.get(exc.status_code)
        return PipelineError(
            category or ErrorCategory.UPSTREAM_SERVER_ERROR, message, layer="transport",
        )

    if isinstance(exc, ModelResponseError):
        category = match_marker(message) or ErrorCategory.MALFORMED_RESPONSE
        return PipelineError(category, message, layer="client")

    if isinstance(exc, JSONExtractionError):
        return PipelineError(ErrorCategory.MALFORMED_RESPONSE, message, layer="extractor")

    if isinstance(exc, DocumentValidationError):
        return PipelineError(ErrorCategory.VALIDATION_FAILURE, message, layer="validator")

    category = match_marker(message) or ErrorCategory.UPSTREAM_SERVER_ERROR
    return PipelineError(category, message, layer="unknown")
