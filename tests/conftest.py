"""Shared test fixtures for the genai-client test suite."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Callable

import httpx
import pytest

from genai_client.api.client import Client
from genai_client.api.types import Content, GenerateContentResponse

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_response_json(
    text: str | None = None,
    function_calls: list[tuple[str, dict[str, Any]]] | None = None,
) -> dict[str, Any]:
    """Build a minimal ``generateContent`` response body."""
    parts: list[dict[str, Any]] = []
    if text is not None:
        parts.append({"text": text})
    for name, args in function_calls or []:
        parts.append({"functionCall": {"name": name, "args": args}})
    return {"candidates": [{"content": {"role": "model", "parts": parts}}]}


def make_response(
    text: str | None = None,
    function_calls: list[tuple[str, dict[str, Any]]] | None = None,
) -> GenerateContentResponse:
    return GenerateContentResponse.from_json(make_response_json(text, function_calls))


def sse_body(*payloads: dict[str, Any] | str) -> bytes:
    """Frame each payload as one ``data:`` event."""
    lines = []
    for payload in payloads:
        data = payload if isinstance(payload, str) else json.dumps(payload)
        lines.append(f"data: {data}\n\n")
    return "".join(lines).encode("utf-8")


async def chunked(*chunks: bytes) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


def make_client(handler: Callable[[httpx.Request], httpx.Response]) -> Client:
    """Create a Client whose HTTP traffic is answered by *handler*."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Client(
        api_key="test-key",
        base_url="http://testserver/",
        http_client=http,
    )


# ---------------------------------------------------------------------------
# Scripted model
# ---------------------------------------------------------------------------

class ScriptedModel:
    """A fake single-shot model call that replays canned responses.

    Records the contents it was called with.  Once the script runs out the
    last response is repeated.
    """

    def __init__(self, *responses: GenerateContentResponse) -> None:
        self._responses = list(responses)
        self.calls: list[list[Content]] = []

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def __call__(self, contents: list[Content]) -> GenerateContentResponse:
        self.calls.append(list(contents))
        index = min(len(self.calls) - 1, len(self._responses) - 1)
        return self._responses[index]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials and GENAI_* overrides out of tests."""
    for var in (
        "GOOGLE_API_KEY",
        "GEMINI_API_KEY",
        "GENAI_BASE_URL",
        "GENAI_API_VERSION",
        "GENAI_TIMEOUT",
        "GENAI_DEFAULT_MODEL",
        "GENAI_AFC_MAX_CALLS",
        "GENAI_AFC_DISABLE",
        "GENAI_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def user_prompt() -> list[Content]:
    return [Content.from_text("What's the weather in Tokyo?")]
