"""Chat message widget: user turns as plain text, assistant turns as rendered markdown."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.text import Text
from textual.widgets import Static

from transcript_advisor.tui.widgets.markdown_light import render_markdown

if TYPE_CHECKING:
    from rich.console import RenderableType


def _render(role: str, content: str) -> RenderableType:
    if role != "assistant":
        return Text(content)
    if not content:
        return Text("…", style="dim")
    return render_markdown(content)


class MessageView(Static):
    """A single chat turn. Assistant content is re-rendered in full on every update."""

    DEFAULT_CSS = """
    MessageView {
        height: auto;
        margin: 1 0 0 0;
        padding: 0 1;
    }
    MessageView.user {
        border-left: thick $accent;
        color: $text-muted;
    }
    MessageView.assistant {
        border-left: thick $primary;
    }
    """

    def __init__(self, role: str, content: str = "", *, id: str | None = None) -> None:  # noqa: A002
        super().__init__(_render(role, content), id=id, classes=role)
        self.message_role = role
        self.message_text = content

    def set_content(self, content: str) -> None:
        """Replace the displayed text."""
        self.message_text = content
        self.update(_render(self.message_role, content))
