"""Tests for the central error classification table."""

import pytest

from src.llm.client import ModelResponseError
from src.llm.errors import (
    USER_MESSAGES,
    ErrorCategory,
    PipelineError,
    classify_error,
    match_marker,
)
from src.llm.invoker import TransportError
from src.llm.parser import JSONExtractionError
from src.llm.retry import AttemptOutcome
from src.llm.validators import DocumentValidationError


def transport(message: str, outcome=AttemptOutcome.SERVER_ERROR, status_code=None) -> TransportError:
    return TransportError(message, outcome=outcome, status_code=status_code)


@pytest.mark.parametrize("exc, category, layer", [
    (transport("Request timed out after 100ms", AttemptOutcome.TIMEOUT),
     ErrorCategory.TIMEOUT, "transport"),
    (transport("Connection error: ConnectError", AttemptOutcome.CONNECTION_ERROR),
     ErrorCategory.NETWORK_FAILURE, "transport"),
    (transport("Client error: 429 - Quota exceeded for metric", AttemptOutcome.CLIENT_ERROR, 429),
     ErrorCategory.QUOTA_EXCEEDED, "transport"),
    (transport("Client error: 429 - slow down", AttemptOutcome.CLIENT_ERROR, 429),
     ErrorCategory.QUOTA_EXCEEDED, "transport"),
    (transport('Client error: 400 - {"status": "INVALID_ARGUMENT", "message": "API key not valid"}',
               AttemptOutcome.CLIENT_ERROR, 400),
     ErrorCategory.AUTHENTICATION_FAILURE, "transport"),
    (transport("Client error: 403 - forbidden", AttemptOutcome.CLIENT_ERROR, 403),
     ErrorCategory.AUTHENTICATION_FAILURE, "transport"),
    (transport("Server error: 503 - RESOURCE_EXHAUSTED", AttemptOutcome.SERVER_ERROR, 503),
     ErrorCategory.QUOTA_EXCEEDED, "transport"),
    (transport("Server error: 500 - internal", AttemptOutcome.SERVER_ERROR, 500),
     ErrorCategory.UPSTREAM_SERVER_ERROR, "transport"),
    (transport("Client error: 404 - model not found", AttemptOutcome.CLIENT_ERROR, 404),
     ErrorCategory.UPSTREAM_SERVER_ERROR, "transport"),
    (JSONExtractionError("Failed to parse JSON", raw_output="nope"),
     ErrorCategory.MALFORMED_RESPONSE, "extractor"),
    (ModelResponseError("No candidates in model response"),
     ErrorCategory.MALFORMED_RESPONSE, "client"),
    (DocumentValidationError("too short", rule="min_sections"),
     ErrorCategory.VALIDATION_FAILURE, "validator"),
    (RuntimeError("something odd"),
     ErrorCategory.UPSTREAM_SERVER_ERROR, "unknown"),
])
def test_classification(exc, category, layer):
    error = classify_error(exc)
    assert error.category is category
    assert error.layer == layer
    assert error.user_message == USER_MESSAGES[category]


def test_timeout_wins_over_markers():
    """A timeout is a timeout even if the text mentions quota."""
    exc = transport("quota probe timed out", AttemptOutcome.TIMEOUT)
    assert classify_error(exc).category is ErrorCategory.TIMEOUT


def test_quota_marker_checked_before_auth_marker():
    assert match_marker("authentication ok but quota exhausted") is ErrorCategory.QUOTA_EXCEEDED


def test_markers_are_case_insensitive():
    assert match_marker("QUOTA exceeded") is ErrorCategory.QUOTA_EXCEEDED
    assert match_marker("Authentication failed") is ErrorCategory.AUTHENTICATION_FAILURE
    assert match_marker("all good") is None


def test_pipeline_error_passes_through():
    error = PipelineError(ErrorCategory.INVALID_INPUT, "too short", layer="input")
    assert classify_error(error) is error


def test_every_category_has_a_user_message():
    assert set(USER_MESSAGES) == set(ErrorCategory)


def test_str_includes_category():
    error = PipelineError(ErrorCategory.TIMEOUT, "slow", layer="transport")
    assert str(error) == "Timeout: slow"
