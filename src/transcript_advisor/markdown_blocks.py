"""Block and inline token types produced by the markdown parser.

Every value here is a frozen dataclass built fresh per parse call. Identity
and render keys are the presentation layer's concern, not the parser's.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

# === Inline tokens ===


@dataclass(frozen=True)
class PlainText:
    """Unstyled text between (or instead of) inline spans."""

    text: str


@dataclass(frozen=True)
class Bold:
    """`**text**`."""

    text: str


@dataclass(frozen=True)
class Italic:
    """`*text*`."""

    text: str


@dataclass(frozen=True)
class Code:
    """Inline code span; content is kept verbatim."""

    text: str


@dataclass(frozen=True)
class Link:
    """`[text](url)`."""

    text: str
    url: str


@dataclass(frozen=True)
class AutoLink:
    """A bare http(s) URL."""

    url: str

    @property
    def text(self) -> str:
        return self.url


InlineToken: TypeAlias = PlainText | Bold | Italic | Code | Link | AutoLink
InlineContent: TypeAlias = tuple[InlineToken, ...]


# === Blocks ===


@dataclass(frozen=True)
class Header:
    """`#` to `######` heading."""

    level: int
    content: InlineContent


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code block with an optional single-word language tag."""

    language: str | None
    content: str


@dataclass(frozen=True)
class Rule:
    """Horizontal rule."""


@dataclass(frozen=True)
class Quote:
    """Blockquote with its `>` prefixes stripped."""

    content: InlineContent


@dataclass(frozen=True)
class Table:
    """Pipe table. Rows are normalized to the header width."""

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class ListItem:
    """One list entry; nested entries live in `children`."""

    text: str
    children: tuple[ListItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ListBlock:
    """Bullet or numbered list. `kind` is fixed by the first marker."""

    kind: Literal["ordered", "unordered"]
    items: tuple[ListItem, ...]

    @property
    def ordered(self) -> bool:
        return self.kind == "ordered"


@dataclass(frozen=True)
class Paragraph:
    """Fallback block: one inline line per physical source line."""

    lines: tuple[InlineContent, ...]


Block: TypeAlias = Header | CodeBlock | Rule | Quote | Table | ListBlock | Paragraph


# === Helpers ===


def inline_text(tokens: InlineContent) -> str:
    """Visible text of a token sequence, styling stripped."""
    return "".join(token.text for token in tokens)

