"""Inline span parser: bold, italic, code, links and bare URLs.

All matches of every pattern are collected first, then overlaps are settled
by an explicit priority table: a span survives only if no span of equal or
better rank already claims any of its characters. The one exception is
emphasis wrapped around better-ranked spans, as in ``**Use `pip` now**``:
the emphasis survives and is split around them. Whatever is left between
surviving spans becomes plain text, so the tokens always cover the input.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from transcript_advisor.markdown_blocks import (
    AutoLink,
    Bold,
    Code,
    InlineContent,
    InlineToken,
    Italic,
    Link,
    PlainText,
)

_PATTERNS: dict[str, re.Pattern[str]] = {
    "code": re.compile(r"`([^`\n]+)`"),
    "link": re.compile(r"\[([^\]]+)\]\(([^)]+)\)"),
    "autolink": re.compile(r"\b(https?://[^\s<>()]+)\b"),
    "bold": re.compile(r"\*\*([^*\n]+?)\*\*"),
    # First and last inner characters must not be whitespace or `*`
    "italic": re.compile(r"\*([^*\s][^*\n]*?[^*\s]|[^*\s])\*"),
}

# Lower rank wins an overlap.
PRIORITY: dict[str, int] = {
    "code": 0,
    "link": 1,
    "autolink": 2,
    "bold": 3,
    "italic": 4,
}

_EMPHASIS = frozenset({"bold", "italic"})


@dataclass(frozen=True)
class _Match:
    kind: str
    start: int
    end: int
    content: str
    content_start: int
    content_end: int
    url: str | None = None

    def overlaps(self, other: _Match) -> bool:
        return self.start < other.end and other.start < self.end

    def wraps(self, other: _Match) -> bool:
        return self.content_start <= other.start and other.end <= self.content_end


def _collect(text: str) -> list[_Match]:
    matches: list[_Match] = []
    for kind, pattern in _PATTERNS.items():
        for m in pattern.finditer(text):
            url = m.group(2) if kind == "link" else None
            matches.append(
                _Match(kind, m.start(), m.end(), m.group(1), m.start(1), m.end(1), url)
            )
    return matches


def _resolve(matches: list[_Match]) -> list[_Match]:
    """Keep the best-ranked spans, earliest first within a rank.

    Emphasis whose content fully wraps every span it clashes with replaces
    them; they are found again when its content is tokenized.
    """
    kept: list[_Match] = []
    for match in sorted(matches, key=lambda m: (PRIORITY[m.kind], m.start)):
        clashes = [k for k in kept if match.overlaps(k)]
        if not clashes:
            kept.append(match)
        elif match.kind in _EMPHASIS and all(match.wraps(k) for k in clashes):
            kept = [k for k in kept if k not in clashes]
            kept.append(match)
    return sorted(kept, key=lambda m: m.start)


def _to_tokens(match: _Match) -> list[InlineToken]:
    if match.kind == "code":
        return [Code(match.content)]
    if match.kind == "link":
        return [Link(match.content, match.url or "")]
    if match.kind == "autolink":
        return [AutoLink(match.content)]
    style = Bold if match.kind == "bold" else Italic
    # Emphasis content holds no `*`, so only code and links can nest inside
    return [
        style(token.text) if isinstance(token, PlainText) else token
        for token in parse_inline(match.content)
    ]


def parse_inline(text: str) -> InlineContent:
    """Split `text` into an ordered, gap-free sequence of inline tokens."""
    if not text:
        return ()

    tokens: list[InlineToken] = []
    pos = 0
    for match in _resolve(_collect(text)):
        if match.start > pos:
            tokens.append(PlainText(text[pos : match.start]))
        tokens.extend(_to_tokens(match))
        pos = match.end
    if pos < len(text):
        tokens.append(PlainText(text[pos:]))
    return tuple(tokens)
