"""Tests for inline span parsing and overlap resolution."""

from __future__ import annotations

from transcript_advisor.markdown_blocks import (
    AutoLink,
    Bold,
    Code,
    Italic,
    Link,
    PlainText,
    inline_text,
)
from transcript_advisor.markdown_inline import PRIORITY, parse_inline


def test_plain_text_is_single_token() -> None:
    assert parse_inline("hello world") == (PlainText("hello world"),)


def test_empty_string() -> None:
    assert parse_inline("") == ()


def test_code_span_beats_italic() -> None:
    """Asterisks inside a code span are kept verbatim."""
    assert parse_inline("`*not italic*`") == (Code("*not italic*"),)


def test_bold_beats_italic() -> None:
    assert parse_inline("**bold**") == (Bold("bold"),)


def test_bold_and_italic_side_by_side() -> None:
    assert parse_inline("**GPA** is *high*") == (
        Bold("GPA"),
        PlainText(" is "),
        Italic("high"),
    )


def test_italic_rejects_inner_whitespace_edges() -> None:
    """`* a *` is not italic; single-character italics are."""
    assert parse_inline("2 * 3 * 4") == (PlainText("2 * 3 * 4"),)
    assert parse_inline("*x*") == (Italic("x"),)


def test_link() -> None:
    assert parse_inline("See [Coursera](https://coursera.org) now") == (
        PlainText("See "),
        Link("Coursera", "https://coursera.org"),
        PlainText(" now"),
    )


def test_link_url_not_parsed_as_autolink() -> None:
    tokens = parse_inline("[docs](https://example.com/docs)")
    assert tokens == (Link("docs", "https://example.com/docs"),)


def test_autolink_stops_before_trailing_punctuation() -> None:
    assert parse_inline("Visit https://example.com.") == (
        PlainText("Visit "),
        AutoLink("https://example.com"),
        PlainText("."),
    )


def test_code_beats_link() -> None:
    assert parse_inline("`[a](b)`") == (Code("[a](b)"),)


def test_tokens_cover_input_without_gaps() -> None:
    """Plain text plus markup-free span contents reproduce the visible text."""
    text = "Try `pip`, **Python** and *R* at https://python.org today"
    tokens = parse_inline(text)
    assert inline_text(tokens) == "Try pip, Python and R at https://python.org today"


def test_priority_table_order() -> None:
    assert sorted(PRIORITY, key=PRIORITY.__getitem__) == [
        "code",
        "link",
        "autolink",
        "bold",
        "italic",
    ]


def test_bold_wrapping_code_is_split_around_it() -> None:
    """Bold around a code span keeps its styling and leaks no markers."""
    assert parse_inline("**Use `pip install` now**") == (
        Bold("Use "),
        Code("pip install"),
        Bold(" now"),
    )


def test_bold_wrapping_autolink() -> None:
    assert parse_inline("**Visit https://coursera.org**") == (
        Bold("Visit "),
        AutoLink("https://coursera.org"),
    )


def test_italic_wrapping_link() -> None:
    assert parse_inline("*see [docs](https://example.com) first*") == (
        Italic("see "),
        Link("docs", "https://example.com"),
        Italic(" first"),
    )


def test_emphasis_straddling_code_still_loses() -> None:
    """Emphasis that only partly overlaps a code span is not kept."""
    assert parse_inline("**a `b** c`") == (PlainText("**a "), Code("b** c"))
