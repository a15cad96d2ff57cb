"""Request/response message types for TUI ↔ backend communication."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

# === Requests (TUI → Backend) ===


@dataclass(frozen=True)
class LoadTranscriptRequest:
    """Ask the backend to extract and summarize a transcript PDF."""

    path: Path


@dataclass(frozen=True)
class AnalyzeRequest:
    """Ask the backend to stream an analysis or a follow-up answer."""

    transcript: str
    context: str
    tone: str
    method: str
    user_message: str
    is_follow_up: bool = False


@dataclass(frozen=True)
class ClearHistoryRequest:
    """Ask the backend to forget the conversation history."""


Request: TypeAlias = LoadTranscriptRequest | AnalyzeRequest | ClearHistoryRequest


# === Responses (Backend → TUI) ===


@dataclass(frozen=True)
class TranscriptExtracted:
    """Report extracted transcript text; summarization follows."""

    file_name: str
    text: str


@dataclass(frozen=True)
class SummaryReady:
    """Report the summary to send with the initial analysis."""

    summary: str


@dataclass(frozen=True)
class StreamChunk:
    """Report the response text accumulated so far."""

    text: str


@dataclass(frozen=True)
class AnalysisResult:
    """Report the complete response."""

    content: str


@dataclass(frozen=True)
class ErrorResult:
    """Report an error processing a request."""

    request_type: str
    error: str


Response: TypeAlias = TranscriptExtracted | SummaryReady | StreamChunk | AnalysisResult | ErrorResult
