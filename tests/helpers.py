"""Fakes for the model endpoint (no network)."""

import asyncio
import inspect
import json

import httpx

from src.llm.client import GeminiClient

API_KEY = "test-key"


def gemini_body(text: str) -> dict:
    """A generateContent response whose first candidate says `text`."""
    return {
        "candidates": [
            {"content": {"parts": [{"text": text}], "role": "model"}, "finishReason": "STOP"}
        ]
    }


def ok(text: str) -> httpx.Response:
    return httpx.Response(200, json=gemini_body(text))


def presentation_json(sections: int = 5, **overrides) -> str:
    data = {
        "title": "🎯 Smart Inventory for Bakeries",
        "oneLiner": "✨ Computer vision keeps shelves stocked",
        "language": "en",
        "structure": [
            {"section": f"📋 Section {i + 1}", "content": f"Content for section {i + 1}"}
            for i in range(sections)
        ],
    }
    data.update(overrides)
    return json.dumps(data, ensure_ascii=False)


def connection_refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("Connection refused", request=request)


async def hang(request: httpx.Request) -> httpx.Response:
    await asyncio.sleep(10)
    return ok("too late")


class ScriptedEndpoint:
    """Plays back a script of responses, one per request.

    Each item is an httpx.Response or a callable taking the request (sync or
    async). The last item repeats once the script runs out.
    """

    def __init__(self, *script):
        self.script = list(script)
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        index = min(len(self.requests) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, httpx.Response):
            # Fresh copy so a repeated item is never a consumed response
            return httpx.Response(item.status_code, headers=item.headers, content=item.content)
        result = item(request)
        if inspect.isawaitable(result):
            result = await result
        return result

    @property
    def calls(self) -> int:
        return len(self.requests)

    def body(self, index: int = 0) -> dict:
        return json.loads(self.requests[index].content)


class SleepRecorder:
    """Stands in for asyncio.sleep; records delays without waiting."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_client(endpoint: ScriptedEndpoint, sleep=None, api_key: str = API_KEY) -> GeminiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(endpoint))
    return GeminiClient(http, api_key=api_key, sleep=sleep or SleepRecorder())
