"""Gemini client.

Thin wrapper over the Gemini `generateContent` REST endpoint. It knows how to
shape a request (parts, generation config, safety settings) and how to pull
the text of the first candidate out of a response. Retries, timeouts and
status handling are delegated to `invoke()`.

The API key travels in the `x-goog-api-key` header rather than the query
string, so it never shows up in URLs or logs.
"""

import asyncio
import base64
from typing import Any, Optional

import httpx

from src.llm.invoker import Sleep, invoke
from src.llm.retry import RetryPolicy
from src.utils.logging import log, get_logger

MODULE = "llm.client"
logger = get_logger()

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_MODEL = "gemini-1.5-flash"

# The presentation prompt asks for emojis and free-form narration, which the
# default filters are prone to block mid-answer.
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


class ModelResponseError(Exception):
    """Raised when a 2xx response carries no usable candidate text."""


class EmptyResponseError(ModelResponseError):
    """The candidate exists but its text is blank."""


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


def audio_part(audio: bytes, mime_type: str = "audio/wav") -> dict[str, Any]:
    return {
        "inline_data": {
            "mime_type": mime_type,
            "data": base64.b64encode(audio).decode("ascii"),
        }
    }


def candidate_text(data: Any) -> str:
    """Pull the text of the first candidate out of a response body.

    Raises:
        ModelResponseError: If the body has no candidate text
    """
    try:
        candidate = data["candidates"][0]
        parts = candidate["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        reason = ""
        if isinstance(data, dict):
            feedback = data.get("promptFeedback") or {}
            if feedback.get("blockReason"):
                reason = f" (blocked: {feedback['blockReason']})"
        raise ModelResponseError(f"No candidates in model response{reason}") from None

    if not isinstance(parts, list):
        raise ModelResponseError("Model response candidate has no parts")

    # Non-text parts (and null text) contribute nothing
    text = "".join(
        part["text"] for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )
    if not text.strip():
        finish = candidate.get("finishReason") if isinstance(candidate, dict) else None
        raise EmptyResponseError(
            "Model response contained no text" + (f" (finishReason={finish})" if finish else "")
        )
    return text


class GeminiClient:
    """Client for one Gemini model.

    Holds only configuration and the shared httpx.AsyncClient; every call is
    independent.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        sleep: Sleep = asyncio.sleep,
    ):
        self.http = http
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.sleep = sleep

    def is_available(self) -> bool:
        """Check if an API key is configured."""
        return bool(self.api_key)

    @property
    def url(self) -> str:
        return f"{self.base_url}/v1beta/models/{self.model}:generateContent"

    def build_request(
        self,
        parts: list[dict[str, Any]],
        *,
        temperature: float,
        max_output_tokens: int,
        top_p: float = 0.8,
        top_k: int = 40,
    ) -> dict[str, Any]:
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
                "topP": top_p,
                "topK": top_k,
                "candidateCount": 1,
            },
            "safetySettings": SAFETY_SETTINGS,
        }

    async def generate_content(
        self,
        parts: list[dict[str, Any]],
        *,
        policy: RetryPolicy,
        timeout_ms: int,
        temperature: float,
        max_output_tokens: int,
        top_k: int = 40,
        activity_name: str = "generate_content",
    ) -> str:
        """Send `parts` to the model and return the first candidate's text.

        Raises:
            TransportError: If the endpoint could not be reached successfully
            ModelResponseError: If the response has no usable text
        """
        body = self.build_request(
            parts, temperature=temperature, max_output_tokens=max_output_tokens, top_k=top_k,
        )
        result = await invoke(
            self.http,
            self.url,
            body,
            policy=policy,
            timeout_ms=timeout_ms,
            headers={"x-goog-api-key": self.api_key},
            sleep=self.sleep,
            activity_name=activity_name,
        )

        try:
            data = result.response.json()
        except ValueError as e:
            raise ModelResponseError(f"Model response is not JSON: {e}") from e

        text = candidate_text(data)
        log.debug(logger, MODULE, "response_done", f"Model response received for {activity_name}",
                  model=self.model, attempts=len(result.attempts),
                  latency_ms=result.latency_ms, raw_length=len(text))
        return text


def build_client(
    http: httpx.AsyncClient,
    api_key: str,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
) -> GeminiClient:
    """Create a client, falling back to the default model and endpoint."""
    client = GeminiClient(
        http,
        api_key=api_key,
        model=model or DEFAULT_MODEL,
        base_url=base_url or DEFAULT_BASE_URL,
    )
    log.debug(logger, MODULE, "client_init", "Gemini client created",
              base_url=client.base_url, model=client.model, configured=client.is_available())
    return client
