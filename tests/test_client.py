"""Tests for Gemini request/response shaping."""

import base64

import httpx
import pytest

from src.llm.client import (
    EmptyResponseError,
    GeminiClient,
    ModelResponseError,
    audio_part,
    build_client,
    candidate_text,
)
from tests.helpers import gemini_body


def test_candidate_text_joins_parts():
    data = {"candidates": [{"content": {"parts": [{"text": "Hello, "}, {"text": "world"}]}}]}
    assert candidate_text(data) == "Hello, world"


@pytest.mark.parametrize("data", [
    {},
    {"candidates": []},
    {"candidates": [{"finishReason": "SAFETY"}]},
    {"candidates": [{"content": {"parts": None}}]},
    ["not", "a", "dict"],
])
def test_candidate_text_missing(data):
    with pytest.raises(ModelResponseError):
        candidate_text(data)


def test_candidate_text_reports_block_reason():
    with pytest.raises(ModelResponseError, match="blocked: SAFETY"):
        candidate_text({"promptFeedback": {"blockReason": "SAFETY"}})


def test_blank_candidate_is_empty_response():
    with pytest.raises(EmptyResponseError, match="finishReason=MAX_TOKENS"):
        candidate_text({"candidates": [{"content": {"parts": [{"text": " "}]}, "finishReason": "MAX_TOKENS"}]})


def test_candidate_text_on_helper_body():
    assert candidate_text(gemini_body("ok")) == "ok"


def test_audio_part_is_base64():
    part = audio_part(b"\x00\x01", "audio/ogg")
    assert part["inline_data"]["mime_type"] == "audio/ogg"
    assert base64.b64decode(part["inline_data"]["data"]) == b"\x00\x01"


def test_url_and_defaults():
    client = build_client(httpx.AsyncClient(), api_key="k", base_url="https://example.test/")
    assert client.url == "https://example.test/v1beta/models/gemini-1.5-flash:generateContent"
    assert client.is_available()


def test_request_shape():
    client = GeminiClient(httpx.AsyncClient(), api_key="")
    body = client.build_request([{"text": "hi"}], temperature=0.2, max_output_tokens=100)
    assert body["contents"] == [{"parts": [{"text": "hi"}]}]
    assert body["generationConfig"]["candidateCount"] == 1
    assert len(body["safetySettings"]) == 4
    assert not client.is_available()


def test_null_and_non_string_text_parts_are_skipped():
    data = {"candidates": [{"content": {"parts": [{"text": None}, {"text": "Hi"}, {"text": 3}]}}]}
    assert candidate_text(data) == "Hi"


def test_only_null_text_is_empty_response():
    with pytest.raises(EmptyResponseError):
        candidate_text({"candidates": [{"content": {"parts": [{"text": None}]}}]})
