"""Textual App — main TUI entry point."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, ClassVar

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Footer, Header, Input, Select, Static

from transcript_advisor.config import Settings
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
from transcript_advisor.prompts import ANALYSIS_METHODS, TONES
from transcript_advisor.session import (
    STAGE_EXTRACTING,
    STAGE_READY,
    STAGE_SUMMARIZING,
    AnalyzerSession,
    ChatTurn,
    SubmitError,
)
from transcript_advisor.tui.help_screen import HelpScreen
from transcript_advisor.tui.widgets.message_view import MessageView

if TYPE_CHECKING:
    from pathlib import Path

    from textual.binding import BindingType

POLL_INTERVAL = 0.05
COMPREHENSIVE_LABEL = "All methods (comprehensive)"

_STAGE_LABELS = {
    STAGE_EXTRACTING: "extracting text…",
    STAGE_SUMMARIZING: "summarizing…",
    STAGE_READY: "ready",
}


class AdvisorApp(App[None]):
    """Career guidance chat over an uploaded transcript."""

    TITLE = "transcript-advisor"

    CSS = """
    #options {
        height: auto;
        padding: 0 1;
    }
    #tone-select {
        width: 1fr;
    }
    #method-select {
        width: 2fr;
    }
    #status {
        height: 1;
        padding: 0 2;
        text-style: dim;
    }
    #chat-log {
        height: 1fr;
        padding: 0 2;
    }
    #empty-message {
        width: 100%;
        content-align: center middle;
        text-style: dim;
        margin: 2 0;
    }
    #context-input {
        dock: bottom;
    }
    """

    BINDINGS: ClassVar[list[BindingType]] = [
        Binding("ctrl+q", "quit", "Quit", show=True),
        Binding("f1", "show_help", "Help", show=True),
        Binding("ctrl+l", "clear_session", "Clear", show=True, priority=True),
    ]

    def __init__(
        self,
        settings: Settings | None = None,
        transcript_path: Path | None = None,
        request_queue: asyncio.Queue[Request] | None = None,
        response_queue: asyncio.Queue[Response] | None = None,
    ) -> None:
        super().__init__()
        self._settings = settings if settings is not None else Settings()
        self._transcript_path = transcript_path
        self._request_queue: asyncio.Queue[Request] = (
            request_queue if request_queue is not None else asyncio.Queue()
        )
        self._response_queue: asyncio.Queue[Response] = (
            response_queue if response_queue is not None else asyncio.Queue()
        )
        self.session = AnalyzerSession(tone=self._settings.default_tone)
        self._streaming_view: MessageView | None = None

    def compose(self) -> ComposeResult:
        """Create the options bar, chat log and input."""
        yield Header()
        with Horizontal(id="options"):
            yield Select(
                [(tone.name, tone.value) for tone in TONES.values()],
                value=self.session.tone,
                allow_blank=False,
                id="tone-select",
            )
            yield Select(
                [(COMPREHENSIVE_LABEL, "")]
                + [(method.name, method.value) for method in ANALYSIS_METHODS.values()],
                value="",
                allow_blank=False,
                id="method-select",
            )
        yield Static(self._status_text(), id="status", markup=False)
        with VerticalScroll(id="chat-log"):
            yield Static(
                "Load a transcript, add any context below, and press Enter to analyze.",
                id="empty-message",
            )
        yield Input(placeholder="Additional context or a follow-up question…", id="context-input")
        yield Footer()

    def on_mount(self) -> None:
        """Start polling the response queue and load the transcript, if any."""
        self.set_interval(POLL_INTERVAL, self._poll_responses)
        self.query_one("#context-input", Input).focus()
        if self._transcript_path is not None:
            self.load_transcript(self._transcript_path)

    # === Helpers ===

    def _status_text(self) -> str:
        session = self.session
        if session.uploaded_file_name:
            stage = _STAGE_LABELS.get(session.processing_stage, "")
            transcript = f"{session.uploaded_file_name} ({stage})" if stage else session.uploaded_file_name
        else:
            transcript = "no transcript loaded"
        return f"Transcript: {transcript}  •  Tone: {TONES[session.tone].name}"

    def _refresh_status(self) -> None:
        self.query_one("#status", Static).update(self._status_text())

    def _append_view(self, view: MessageView) -> None:
        self.query_one("#empty-message").display = False
        chat_log = self.query_one("#chat-log", VerticalScroll)
        chat_log.mount(view)
        chat_log.scroll_end(animate=False)

    def load_transcript(self, path: Path) -> None:
        """Queue a transcript for extraction and summarization."""
        self.session.uploaded_file_name = path.name
        self.session.processing_stage = STAGE_EXTRACTING
        self._refresh_status()
        self._request_queue.put_nowait(LoadTranscriptRequest(path=path))

    # === Events ===

    def on_select_changed(self, event: Select.Changed) -> None:
        """Track tone and analysis method choices."""
        value = event.value if isinstance(event.value, str) else ""
        if event.select.id == "tone-select" and value in TONES:
            self.session.tone = value
            self._refresh_status()
        elif event.select.id == "method-select":
            self.session.analysis_method = value

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Run the initial analysis, or a follow-up once an analysis exists."""
        session = self.session
        is_follow_up = session.has_analysis
        previous_context = session.additional_context
        session.additional_context = event.value
        try:
            session.check_submit(is_follow_up=is_follow_up)
        except SubmitError as e:
            session.additional_context = previous_context
            self.notify(str(e), severity="warning")
            return

        user_message = session.user_message(is_follow_up=is_follow_up)
        session.busy = True
        session.turns.append(ChatTurn(role="user", content=user_message))
        self._append_view(MessageView("user", user_message))
        self._streaming_view = MessageView("assistant")
        self._append_view(self._streaming_view)

        self._request_queue.put_nowait(
            AnalyzeRequest(
                transcript=session.summarized_text,
                context=session.additional_context,
                tone=session.tone,
                method=session.analysis_method,
                user_message=user_message,
                is_follow_up=is_follow_up,
            )
        )
        event.input.value = ""

    async def _poll_responses(self) -> None:
        """Drain the response queue and update the UI."""
        while not self._response_queue.empty():
            try:
                resp = self._response_queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            self._handle_response(resp)

    def _handle_response(self, resp: Response) -> None:
        """Dispatch a response message to the appropriate handler."""
        if isinstance(resp, TranscriptExtracted):
            self._on_transcript_extracted(resp)
        elif isinstance(resp, SummaryReady):
            self._on_summary_ready(resp)
        elif isinstance(resp, StreamChunk):
            self._on_stream_chunk(resp)
        elif isinstance(resp, AnalysisResult):
            self._on_analysis_result(resp)
        elif isinstance(resp, ErrorResult):
            self._on_error_result(resp)

    def _on_transcript_extracted(self, result: TranscriptExtracted) -> None:
        self.session.transcript_text = result.text
        self.session.uploaded_file_name = result.file_name
        self.session.processing_stage = STAGE_SUMMARIZING
        self._refresh_status()

    def _on_summary_ready(self, result: SummaryReady) -> None:
        self.session.summarized_text = result.summary
        self.session.processing_stage = STAGE_READY
        self._refresh_status()
        self.notify("Transcript ready. Press Enter to analyze.")

    def _on_stream_chunk(self, chunk: StreamChunk) -> None:
        if self._streaming_view is None:
            return
        self._streaming_view.set_content(chunk.text)
        self.query_one("#chat-log", VerticalScroll).scroll_end(animate=False)

    def _on_analysis_result(self, result: AnalysisResult) -> None:
        self.session.busy = False
        self.session.turns.append(ChatTurn(role="assistant", content=result.content))
        if self._streaming_view is not None:
            self._streaming_view.set_content(result.content)
            self._streaming_view = None

    def _on_error_result(self, result: ErrorResult) -> None:
        """Show the error and leave the session ready for a retry."""
        if result.request_type == LoadTranscriptRequest.__name__:
            self.session.processing_stage = ""
            self.session.uploaded_file_name = ""
            self._refresh_status()
        elif result.request_type == AnalyzeRequest.__name__:
            self.session.busy = False
            if self._streaming_view is not None and not self._streaming_view.message_text:
                self._streaming_view.remove()
            self._streaming_view = None
        self.notify(f"Error: {result.error}", severity="error")

    # === Actions ===

    def action_clear_session(self) -> None:
        """Forget the transcript and the conversation.

        Refused while a reply streams or a transcript loads.
        """
        if self.session.busy or self.session.is_processing:
            self.notify("Wait for the current request to finish.", severity="warning")
            return
        self.session.reset()
        self._streaming_view = None
        self.query(MessageView).remove()
        self.query_one("#empty-message").display = True
        self.query_one("#context-input", Input).value = ""
        self._request_queue.put_nowait(ClearHistoryRequest())
        self._refresh_status()

    def action_show_help(self) -> None:
        """Show the help overlay."""
        self.push_screen(HelpScreen())
