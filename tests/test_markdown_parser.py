"""Tests for table extraction, block segmentation and list trees."""

from __future__ import annotations

import re

from transcript_advisor.markdown_blocks import (
    Bold,
    CodeBlock,
    Header,
    ListBlock,
    ListItem,
    Paragraph,
    PlainText,
    Quote,
    Rule,
    Table,
)
from transcript_advisor.markdown_parser import (
    build_list,
    detect_table,
    extract_tables,
    parse_markdown,
    plain_text,
)


def _words(text: str) -> list[str]:
    return re.findall(r"\w+", text)


# === Tables ===


def test_table_round_trip() -> None:
    """A minimal pipe table yields its headers and one data row."""
    blocks = parse_markdown("| A | B |\n| - | - |\n| 1 | 2 |")
    assert blocks == [Table(headers=("A", "B"), rows=(("1", "2"),))]


def test_table_rows_normalized_to_header_width() -> None:
    """Short rows are padded, long rows truncated."""
    table = detect_table("| A | B | C |\n|---|:-:|---|\n| 1 |\n| 1 | 2 | 3 | 4 |")
    assert table is not None
    assert table.rows == (("1", "", ""), ("1", "2", "3"))


def test_single_column_table_stays_text() -> None:
    """A region with fewer than two header columns is a paragraph."""
    text = "| A |\n| - |\n| 1 |"
    processed, tables = extract_tables(text)
    assert tables == {}
    assert processed == text
    blocks = parse_markdown(text)
    assert len(blocks) == 1
    assert isinstance(blocks[0], Paragraph)
    assert len(blocks[0].lines) == 3


def test_missing_separator_is_not_a_table() -> None:
    """Without a separator row, pipe lines stay a paragraph."""
    blocks = parse_markdown("| A | B |\n| 1 | 2 |")
    assert len(blocks) == 1
    assert isinstance(blocks[0], Paragraph)


def test_extract_tables_replaces_regions_in_order() -> None:
    """Each table becomes a numbered placeholder and keeps its source text."""
    first = "| A | B |\n|---|---|\n| 1 | 2 |"
    second = "| C | D |\n|---|---|\n| 3 | 4 |"
    processed, tables = extract_tables(f"Intro\n{first}\n\nMiddle\n\n{second}\nOutro")
    assert tables == {0: first, 1: second}
    assert processed.index("\x00TABLE0\x00") < processed.index("Middle")
    assert processed.index("Middle") < processed.index("\x00TABLE1\x00")
    assert "Intro" in processed
    assert "Outro" in processed


def test_text_around_table_becomes_separate_blocks() -> None:
    """Text hugging a table on both sides becomes separate blocks."""
    blocks = parse_markdown("Grades:\n| Course | Grade |\n|---|---|\n| Math | A |\nThat's all.")
    assert [type(b) for b in blocks] == [Paragraph, Table, Paragraph]
    assert blocks[1] == Table(headers=("Course", "Grade"), rows=(("Math", "A"),))


def test_detect_table_stops_at_non_row() -> None:
    """Direct detection reads data rows until the first line without a pipe."""
    table = detect_table("| A | B |\n|---|---|\n| 1 | 2 |\ntrailing")
    assert table == Table(headers=("A", "B"), rows=(("1", "2"),))


def test_detect_table_requires_data_row() -> None:
    assert detect_table("| A | B |\n|---|---|") is None


# === Segmentation ===


def test_empty_input() -> None:
    assert parse_markdown("") == []


def test_whitespace_only_blocks_dropped() -> None:
    assert parse_markdown("\n\n   \n\n\n") == []


def test_header_with_trailing_list() -> None:
    """A header followed by list lines yields two sibling blocks."""
    blocks = parse_markdown("## Title\n- x\n- y")
    assert blocks == [
        Header(level=2, content=(PlainText("Title"),)),
        ListBlock(kind="unordered", items=(ListItem("x"), ListItem("y"))),
    ]


def test_header_with_trailing_paragraph() -> None:
    blocks = parse_markdown("# Summary\nYou did **well**.")
    assert blocks[0] == Header(level=1, content=(PlainText("Summary"),))
    assert blocks[1] == Paragraph(((PlainText("You did "), Bold("well"), PlainText(".")),))


def test_header_without_space() -> None:
    blocks = parse_markdown("###Strengths")
    assert blocks == [Header(level=3, content=(PlainText("Strengths"),))]


def test_fenced_code_with_language() -> None:
    blocks = parse_markdown("```python\ndef foo():\n    pass\n```")
    assert blocks == [CodeBlock(language="python", content="def foo():\n    pass")]


def test_fenced_code_without_language() -> None:
    blocks = parse_markdown("```\nplain code\n```")
    assert blocks == [CodeBlock(language=None, content="plain code")]


def test_text_after_closing_fence_is_kept() -> None:
    """Text on the lines after the closing fence is parsed, not dropped."""
    blocks = parse_markdown("```sh\nls\n```\nAfter")
    assert blocks == [
        CodeBlock(language="sh", content="ls"),
        Paragraph(((PlainText("After"),),)),
    ]


def test_unterminated_fence_is_not_code() -> None:
    """A fence without a closing fence falls through to a paragraph."""
    blocks = parse_markdown("```js\ncode")
    assert len(blocks) == 1
    assert not isinstance(blocks[0], CodeBlock)
    assert plain_text(blocks) == "```js\ncode"


def test_one_line_fence_is_code_not_language() -> None:
    assert parse_markdown("```python```") == [CodeBlock(language=None, content="python")]


def test_table_inside_fence_is_still_extracted() -> None:
    """Tables are lifted out before segmentation, fences included."""
    blocks = parse_markdown("```\n| A | B |\n|---|---|\n| 1 | 2 |\n```")
    fence = Paragraph(((PlainText("```"),),))
    assert blocks == [fence, Table(headers=("A", "B"), rows=(("1", "2"),)), fence]


def test_horizontal_rules() -> None:
    for rule in ("---", "***", "___", "-----"):
        assert parse_markdown(rule) == [Rule()]


def test_blockquote_prefixes_stripped() -> None:
    blocks = parse_markdown("> Keep going\n>you are close")
    assert blocks == [Quote((PlainText("Keep going\nyou are close"),))]


def test_paragraph_keeps_physical_lines() -> None:
    blocks = parse_markdown("line one\nline two")
    assert blocks == [Paragraph(((PlainText("line one"),), (PlainText("line two"),)))]


def test_crlf_normalized() -> None:
    blocks = parse_markdown("# T\r\n\r\nbody")
    assert blocks == [Header(1, (PlainText("T"),)), Paragraph(((PlainText("body"),),))]


def test_no_text_lost_across_block_types() -> None:
    """Every word of a mixed document survives into the plain-text view."""
    source = (
        "# Overview\n"
        "Strong results overall.\n\n"
        "## Subjects\n"
        "- Mathematics\n"
        "  - Calculus\n"
        "- Physics\n\n"
        "| Subject | Strength |\n"
        "|---|---|\n"
        "| Chemistry | Weak |\n\n"
        "> Remember **consistency**\n\n"
        "---\n\n"
        "```text\nstudy plan\n```\n\n"
        "See [resources](https://example.org) and `office hours`."
    )
    assert _words(plain_text(parse_markdown(source))) == [
        "Overview",
        "Strong",
        "results",
        "overall",
        "Subjects",
        "Mathematics",
        "Calculus",
        "Physics",
        "Subject",
        "Strength",
        "Chemistry",
        "Weak",
        "Remember",
        "consistency",
        "study",
        "plan",
        "See",
        "resources",
        "and",
        "office",
        "hours",
    ]


# === Lists ===


def test_nested_list() -> None:
    """Indented items nest under the preceding shallower item."""
    listing = build_list("- a\n  - b\n  - c\n- d")
    assert listing == ListBlock(
        kind="unordered",
        items=(ListItem("a", (ListItem("b"), ListItem("c"))), ListItem("d")),
    )


def test_ordered_list_markers() -> None:
    listing = build_list("1. one\n2) two\n3- three")
    assert listing is not None
    assert listing.ordered
    assert [item.text for item in listing.items] == ["one", "two", "three"]


def test_list_kind_fixed_by_first_marker() -> None:
    listing = build_list("1. first\n- second")
    assert listing is not None
    assert listing.kind == "ordered"
    assert len(listing.items) == 2


def test_continuation_line_joins_previous_item() -> None:
    listing = build_list("- Take statistics\nnext semester\n- Join a club")
    assert listing is not None
    assert [item.text for item in listing.items] == [
        "Take statistics next semester",
        "Join a club",
    ]


def test_continuation_joins_nested_item() -> None:
    listing = build_list("- a\n  - b\n    more")
    assert listing is not None
    assert listing.items[0].children == (ListItem("b more"),)


def test_deep_indent_opens_one_level() -> None:
    """Jumping several indentation steps still nests exactly one level."""
    listing = build_list("- a\n        - b")
    assert listing == ListBlock(kind="unordered", items=(ListItem("a", (ListItem("b"),)),))


def test_dedent_between_levels_joins_shallower_children() -> None:
    """A dedent that lands between two levels becomes a child of the outer item."""
    listing = build_list("- a\n      - b\n  - c\n- d")
    assert listing == ListBlock(
        kind="unordered",
        items=(ListItem("a", (ListItem("b"), ListItem("c"))), ListItem("d")),
    )


def test_dedent_below_first_item_stays_at_root() -> None:
    """Lines shallower than the first item never pop the root level."""
    listing = build_list("  - a\n- b")
    assert listing == ListBlock(kind="unordered", items=(ListItem("a"), ListItem("b")))


def test_three_levels() -> None:
    listing = build_list("- a\n  - b\n    - c\n- d")
    assert listing is not None
    assert listing.items[0].children[0].children == (ListItem("c"),)
    assert listing.items[1] == ListItem("d")


def test_first_line_not_a_marker_is_not_a_list() -> None:
    assert build_list("intro\n- a") is None
    blocks = parse_markdown("intro\n- a")
    assert len(blocks) == 1
    assert isinstance(blocks[0], Paragraph)
