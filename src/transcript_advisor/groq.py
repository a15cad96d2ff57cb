"""Chat-completion client for OpenAI-compatible endpoints (Groq by default)."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, TypeAlias

import httpx

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from transcript_advisor.config import Settings

logger = logging.getLogger(__name__)

ChatMessage: TypeAlias = dict[str, str]

_DATA_PREFIX = "data: "
_DONE = "[DONE]"


class CompletionError(Exception):
    """Raised when the completion API fails or cannot be reached."""


class CredentialsError(CompletionError):
    """Raised when the API URL or key is not configured."""


class StreamAccumulator:
    """Collect content deltas from a server-sent-event stream.

    Network chunks may split lines anywhere; incomplete trailing lines are
    buffered until the next chunk (or `finish()`) completes them.
    """

    def __init__(self) -> None:
        self._buffer = ""
        self.text = ""

    def _parse_line(self, line: str) -> str:
        if not line.startswith(_DATA_PREFIX):
            return ""
        data = line[len(_DATA_PREFIX) :].strip()
        if data == _DONE:
            return ""
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            logger.debug("Skipping malformed stream line: %r", line)
            return ""
        try:
            delta = payload["choices"][0].get("delta") or {}
        except (KeyError, IndexError, TypeError, AttributeError):
            return ""
        content = delta.get("content") if isinstance(delta, dict) else None
        return content if isinstance(content, str) else ""

    def feed(self, chunk: str) -> list[str]:
        """Consume a network chunk and return the new content deltas."""
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return self._collect(lines)

    def finish(self) -> list[str]:
        """Flush whatever is left in the buffer at end of stream."""
        remaining, self._buffer = self._buffer, ""
        return self._collect([remaining])

    def _collect(self, lines: list[str]) -> list[str]:
        deltas: list[str] = []
        for line in lines:
            delta = self._parse_line(line.rstrip("\r"))
            if delta:
                self.text += delta
                deltas.append(delta)
        return deltas


def _check_credentials(settings: Settings) -> None:
    if not settings.configured:
        msg = (
            "Completion API credentials are not configured. "
            "Set GROQ_API_KEY or add [api] url/key to the config file."
        )
        raise CredentialsError(msg)


def _request_body(settings: Settings, messages: list[ChatMessage], *, stream: bool) -> dict[str, Any]:
    body: dict[str, Any] = {
        "model": settings.model,
        "messages": messages,
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }
    if stream:
        body["stream"] = True
    return body


def _headers(settings: Settings) -> dict[str, str]:
    return {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }


def _endpoint(settings: Settings) -> str:
    return f"{(settings.api_url or '').rstrip('/')}/chat/completions"


def _error_message(response: httpx.Response) -> str:
    """Prefer the API's own error message over the HTTP status line."""
    try:
        message = response.json()["error"]["message"]
    except (json.JSONDecodeError, KeyError, TypeError):
        message = None
    if isinstance(message, str) and message:
        return message
    return f"HTTP {response.status_code}: {response.reason_phrase}"


def _validate_messages(messages: list[ChatMessage]) -> None:
    if not messages:
        msg = "Messages list is required and cannot be empty"
        raise ValueError(msg)


async def _send(settings: Settings, messages: list[ChatMessage]) -> str:
    async with httpx.AsyncClient(headers=_headers(settings), timeout=settings.timeout) as client:
        response = await client.post(
            _endpoint(settings), json=_request_body(settings, messages, stream=False)
        )
        if not response.is_success:
            raise CompletionError(_error_message(response))
    try:
        content = response.json()["choices"][0]["message"]["content"]
    except json.JSONDecodeError as e:
        msg = f"Completion API returned invalid JSON: {e}"
        raise CompletionError(msg) from e
    except (KeyError, IndexError, TypeError):
        return ""
    return content or ""


async def stream_completion(
    settings: Settings,
    messages: list[ChatMessage],
) -> AsyncIterator[str]:
    """Yield content deltas from a streaming completion request."""
    _check_credentials(settings)
    _validate_messages(messages)
    accumulator = StreamAccumulator()
    try:
        async with (
            httpx.AsyncClient(headers=_headers(settings), timeout=settings.timeout) as client,
            client.stream(
                "POST", _endpoint(settings), json=_request_body(settings, messages, stream=True)
            ) as response,
        ):
            if not response.is_success:
                await response.aread()
                raise CompletionError(_error_message(response))
            async for chunk in response.aiter_text():
                for delta in accumulator.feed(chunk):
                    yield delta
            for delta in accumulator.finish():
                yield delta
    except httpx.HTTPError as e:
        msg = f"Failed to communicate with the completion API: {e}"
        raise CompletionError(msg) from e


async def complete(
    settings: Settings,
    messages: list[ChatMessage],
    *,
    stream: bool = False,
    on_chunk: Callable[[str], None] | None = None,
) -> str:
    """Send a chat-completion request and return the full response text.

    With `stream=True`, `on_chunk` is called with every content delta as it
    arrives.
    """
    _check_credentials(settings)
    _validate_messages(messages)

    if stream:
        parts: list[str] = []
        async for delta in stream_completion(settings, messages):
            parts.append(delta)
            if on_chunk is not None:
                on_chunk(delta)
        return "".join(parts)

    try:
        return await _send(settings, messages)
    except httpx.HTTPError as e:
        msg = f"Failed to communicate with the completion API: {e}"
        raise CompletionError(msg) from e
