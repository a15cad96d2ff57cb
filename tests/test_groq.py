"""Integration tests for the chat-completion client."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from tests.conftest import COMPLETIONS_URL, completion_json, sse_body
from transcript_advisor.config import Settings
from transcript_advisor.groq import (
    CompletionError,
    CredentialsError,
    StreamAccumulator,
    complete,
    stream_completion,
)

if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock

MESSAGES = [
    {"role": "system", "content": "You are helpful."},
    {"role": "user", "content": "Hi"},
]


# === StreamAccumulator ===


def test_accumulator_handles_lines_split_across_chunks() -> None:
    """A data line cut in half by the network is parsed once complete."""
    body = sse_body("Hello", ", world").decode()
    cut = body.index("world") - 3
    acc = StreamAccumulator()
    assert acc.feed(body[:cut]) == ["Hello"]
    assert acc.feed(body[cut:]) == [", world"]
    assert acc.finish() == []
    assert acc.text == "Hello, world"


def test_accumulator_skips_noise() -> None:
    """Comments, [DONE], malformed JSON and role-only deltas yield nothing."""
    acc = StreamAccumulator()
    chunk = (
        ": keep-alive\n"
        'data: {"choices":[{"delta":{"role":"assistant"}}]}\n'
        "data: {not json\n"
        'data: {"choices":[]}\n'
        'data: {"choices":[{"delta":{"content":"ok"}}]}\r\n'
        "data: [DONE]\n"
    )
    assert acc.feed(chunk) == ["ok"]
    assert acc.text == "ok"


def test_accumulator_finish_flushes_unterminated_line() -> None:
    acc = StreamAccumulator()
    assert acc.feed('data: {"choices":[{"delta":{"content":"tail"}}]}') == []
    assert acc.finish() == ["tail"]


# === complete() ===


async def test_complete_non_streaming(httpx_mock: HTTPXMock, settings: Settings) -> None:
    """Non-streaming request posts the full body and returns the message content."""
    httpx_mock.add_response(
        url=COMPLETIONS_URL, method="POST", json=completion_json("## Analysis")
    )
    result = await complete(settings, MESSAGES)
    assert result == "## Analysis"

    request = httpx_mock.get_request()
    assert request is not None
    assert request.headers["Authorization"] == "Bearer gsk_test"
    body = json.loads(request.content)
    assert body["model"] == settings.model
    assert body["messages"] == MESSAGES
    assert body["max_tokens"] == settings.max_tokens
    assert "stream" not in body


async def test_complete_streaming_calls_on_chunk(
    httpx_mock: HTTPXMock, settings: Settings
) -> None:
    """Every delta reaches on_chunk in order and the joined text is returned."""
    httpx_mock.add_response(
        url=COMPLETIONS_URL, method="POST", content=sse_body("# Str", "engths", "\n- Math")
    )
    seen: list[str] = []
    result = await complete(settings, MESSAGES, stream=True, on_chunk=seen.append)
    assert seen == ["# Str", "engths", "\n- Math"]
    assert result == "# Strengths\n- Math"

    request = httpx_mock.get_request()
    assert request is not None
    assert json.loads(request.content)["stream"] is True


async def test_stream_completion_yields_deltas(httpx_mock: HTTPXMock, settings: Settings) -> None:
    httpx_mock.add_response(url=COMPLETIONS_URL, method="POST", content=sse_body("a", "b"))
    deltas = [delta async for delta in stream_completion(settings, MESSAGES)]
    assert deltas == ["a", "b"]


async def test_complete_missing_content_returns_empty(
    httpx_mock: HTTPXMock, settings: Settings
) -> None:
    httpx_mock.add_response(url=COMPLETIONS_URL, method="POST", json={"choices": []})
    assert await complete(settings, MESSAGES) == ""


async def test_api_error_message_is_surfaced(httpx_mock: HTTPXMock, settings: Settings) -> None:
    """The API's own error message is preferred over the status line."""
    httpx_mock.add_response(
        url=COMPLETIONS_URL,
        method="POST",
        status_code=401,
        json={"error": {"message": "Invalid API Key"}},
    )
    with pytest.raises(CompletionError, match="Invalid API Key"):
        await complete(settings, MESSAGES)


async def test_streaming_http_error_without_json(
    httpx_mock: HTTPXMock, settings: Settings
) -> None:
    httpx_mock.add_response(
        url=COMPLETIONS_URL, method="POST", status_code=503, text="upstream down"
    )
    with pytest.raises(CompletionError, match="HTTP 503"):
        await complete(settings, MESSAGES, stream=True)


async def test_network_failure_is_wrapped(httpx_mock: HTTPXMock, settings: Settings) -> None:
    httpx_mock.add_exception(httpx.ConnectError("connection refused"))
    with pytest.raises(CompletionError, match="Failed to communicate"):
        await complete(settings, MESSAGES)


async def test_missing_credentials() -> None:
    """No request is made without an API key."""
    with pytest.raises(CredentialsError):
        await complete(Settings(), MESSAGES)


async def test_empty_messages_rejected(settings: Settings) -> None:
    with pytest.raises(ValueError, match="cannot be empty"):
        await complete(settings, [])
