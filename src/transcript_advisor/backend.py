"""Backend worker: processes the request queue, one request in flight at a time."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from transcript_advisor.groq import complete
from transcript_advisor.history import add_message, clear_history, get_messages_for_api
from transcript_advisor.messages import (
    AnalysisResult,
    AnalyzeRequest,
    ClearHistoryRequest,
    ErrorResult,
    LoadTranscriptRequest,
    Request,
    Response,
    StreamChunk,
    SummaryReady,
    TranscriptExtracted,
)
from transcript_advisor.pdf_reader import extract_text
from transcript_advisor.prompts import build_messages
from transcript_advisor.summarizer import summarize_transcript

if TYPE_CHECKING:
    import sqlite3

    from transcript_advisor.config import Settings

logger = logging.getLogger(__name__)


async def _handle_load_transcript(
    req: LoadTranscriptRequest,
    response_queue: asyncio.Queue[Response],
    settings: Settings,
) -> None:
    """Extract the PDF text off the event loop, then summarize it."""
    text = await asyncio.to_thread(extract_text, req.path)
    if not text.strip():
        await response_queue.put(
            ErrorResult(
                request_type=type(req).__name__,
                error="No text could be extracted from the PDF.",
            )
        )
        return
    await response_queue.put(TranscriptExtracted(file_name=req.path.name, text=text))
    summary = await summarize_transcript(settings, text)
    await response_queue.put(SummaryReady(summary=summary or text))


async def _handle_analyze(
    req: AnalyzeRequest,
    response_queue: asyncio.Queue[Response],
    conn: sqlite3.Connection,
    settings: Settings,
) -> None:
    """Stream a completion, posting the accumulated text after every delta."""
    history = get_messages_for_api(conn, settings.history_limit)
    api_messages = build_messages(
        "" if req.is_follow_up else req.transcript,
        req.context,
        req.tone,
        "" if req.is_follow_up else req.method,
        history,
        is_follow_up=req.is_follow_up,
    )
    add_message(conn, "user", req.user_message, limit=settings.history_limit)

    accumulated: list[str] = []

    def _on_chunk(delta: str) -> None:
        accumulated.append(delta)
        response_queue.put_nowait(StreamChunk(text="".join(accumulated)))

    response = await complete(settings, api_messages, stream=True, on_chunk=_on_chunk)
    content = response or "".join(accumulated)
    if content.strip():
        add_message(conn, "assistant", content, limit=settings.history_limit)
    else:
        logger.warning("Completion returned an empty response")
    await response_queue.put(AnalysisResult(content=content))


async def backend_worker(
    request_queue: asyncio.Queue[Request],
    response_queue: asyncio.Queue[Response],
    conn: sqlite3.Connection,
    settings: Settings,
) -> None:
    """Process requests from the TUI and post results back."""
    while True:
        req = await request_queue.get()
        try:
            if isinstance(req, LoadTranscriptRequest):
                await _handle_load_transcript(req, response_queue, settings)
            elif isinstance(req, AnalyzeRequest):
                await _handle_analyze(req, response_queue, conn, settings)
            elif isinstance(req, ClearHistoryRequest):
                clear_history(conn)
            else:
                await response_queue.put(
                    ErrorResult(request_type=type(req).__name__, error="Unknown request type")
                )
        except Exception as e:  # noqa: BLE001
            logger.debug("Request %s failed", type(req).__name__, exc_info=True)
            await response_queue.put(ErrorResult(request_type=type(req).__name__, error=str(e)))
        finally:
            request_queue.task_done()
