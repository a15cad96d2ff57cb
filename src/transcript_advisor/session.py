"""Analyzer session state shared by the TUI and the one-shot CLI."""

from __future__ import annotations

from dataclasses import dataclass, field

STAGE_EXTRACTING = "extracting"
STAGE_SUMMARIZING = "summarizing"
STAGE_READY = "ready"


class SubmitError(Exception):
    """Raised when a submission is not allowed in the current state."""


@dataclass
class ChatTurn:
    """A message shown in the chat log."""

    role: str  # "user" | "assistant"
    content: str


@dataclass
class AnalyzerSession:
    """Everything the user has loaded, chosen, and said so far."""

    tone: str = "casual"
    analysis_method: str = ""
    transcript_text: str = ""  # raw extraction, never displayed
    summarized_text: str = ""  # sent to the model
    additional_context: str = ""
    uploaded_file_name: str = ""
    processing_stage: str = ""
    busy: bool = False
    turns: list[ChatTurn] = field(default_factory=list)

    @property
    def is_processing(self) -> bool:
        return self.processing_stage in (STAGE_EXTRACTING, STAGE_SUMMARIZING)

    @property
    def has_analysis(self) -> bool:
        return any(turn.role == "assistant" for turn in self.turns)

    def check_submit(self, *, is_follow_up: bool) -> None:
        """Raise SubmitError if a request cannot be sent right now."""
        if self.busy:
            msg = "A response is already in progress."
            raise SubmitError(msg)
        if is_follow_up and not self.additional_context.strip():
            msg = "Please enter a question or additional context."
            raise SubmitError(msg)
        if self.is_processing:
            msg = "Please wait for transcript processing to complete."
            raise SubmitError(msg)
        if (
            not is_follow_up
            and not self.summarized_text.strip()
            and not self.additional_context.strip()
        ):
            msg = "Please load a transcript or provide additional context."
            raise SubmitError(msg)

    def user_message(self, *, is_follow_up: bool) -> str:
        """The chat line shown for the user's turn; the raw transcript is never shown."""
        if is_follow_up:
            return self.additional_context.strip()
        name = f" ({self.uploaded_file_name})" if self.uploaded_file_name else ""
        message = f"I've uploaded my transcript{name}."
        if self.additional_context.strip():
            message += f"\n\nAdditional Context: {self.additional_context.strip()}"
        return message

    def reset(self) -> None:
        """Forget the transcript, context and conversation; keep tone and method."""
        self.transcript_text = ""
        self.summarized_text = ""
        self.additional_context = ""
        self.uploaded_file_name = ""
        self.processing_stage = ""
        self.busy = False
        self.turns.clear()
