"""Condense long transcripts before they are sent along with every analysis."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from transcript_advisor.groq import CompletionError, complete

if TYPE_CHECKING:
    from transcript_advisor.config import Settings
    from transcript_advisor.groq import ChatMessage

logger = logging.getLogger(__name__)

MAX_SUMMARY_LENGTH = 4000  # characters
MAX_INPUT_LENGTH = 50000  # characters sent to the summarization request
TRUNCATION_MARKER = "\n\n[Content truncated for processing...]"

_SYSTEM_PROMPT = (
    "You are a concise academic transcript analyzer. "
    "Extract and summarize key information efficiently."
)


def build_summary_messages(transcript_text: str) -> list[ChatMessage]:
    """Build the summarization request, truncating oversized input."""
    if len(transcript_text) > MAX_INPUT_LENGTH:
        transcript_text = transcript_text[:MAX_INPUT_LENGTH] + TRUNCATION_MARKER

    prompt = f"""\
You are an academic transcript analyzer. Summarize the following transcript, extracting key \
information:

- All courses/subjects with their grades or performance indicators
- Overall academic performance (GPA, class rank, honors, etc.)
- Areas of strength (subjects with high performance)
- Areas needing improvement (subjects with lower performance)
- Academic achievements, awards, or distinctions
- Any notable patterns or trends

Be concise but comprehensive. Focus on factual information that would be useful for career \
guidance and educational planning. Keep the summary under {MAX_SUMMARY_LENGTH} characters.

TRANSCRIPT:
{transcript_text}

Provide a structured summary that captures all essential information."""

    return [
        {"role": "system", "content": _SYSTEM_PROMPT},
        {"role": "user", "content": prompt},
    ]


async def summarize_transcript(settings: Settings, transcript_text: str) -> str:
    """Return a summary of the transcript, or the transcript itself when short.

    Falls back to a truncated transcript when the completion request fails.
    """
    if not transcript_text.strip():
        return ""
    if len(transcript_text) <= MAX_SUMMARY_LENGTH:
        return transcript_text

    try:
        summary = await complete(settings, build_summary_messages(transcript_text))
    except CompletionError:
        logger.warning("Summarization failed, using truncated transcript", exc_info=True)
        return transcript_text[:MAX_SUMMARY_LENGTH] + "..."
    return summary.strip() or transcript_text[:MAX_SUMMARY_LENGTH]
