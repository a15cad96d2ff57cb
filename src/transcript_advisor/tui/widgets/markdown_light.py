"""Light Markdown-to-Rich renderer for model responses.

Turns the block tree from `parse_markdown` into Rich renderables: headings,
paragraphs, nested lists, fenced code, quotes, rules, and pipe tables with
strength badges. Rendering always starts from scratch; nothing is cached
between calls.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Group
from rich.padding import Padding
from rich.rule import Rule as RichRule
from rich.style import Style
from rich.table import Table as RichTable
from rich.text import Text

from transcript_advisor.markdown_blocks import (
    AutoLink,
    Bold,
    Code,
    CodeBlock,
    Header,
    Italic,
    Link,
    ListBlock,
    ListItem,
    Paragraph,
    Quote,
    Rule,
    Table,
)
from transcript_advisor.markdown_inline import parse_inline
from transcript_advisor.markdown_parser import parse_markdown

if TYPE_CHECKING:
    from rich.console import RenderableType

    from transcript_advisor.markdown_blocks import Block, InlineContent

HEADER_STYLES = {
    1: "bold underline",
    2: "bold",
    3: "bold",
    4: "bold italic",
    5: "italic",
    6: "dim italic",
}

CODE_STYLE = "bold cyan"
LINK_STYLE = "underline blue"

BADGE_STYLES = {
    "strong": "bold green",
    "weak": "bold red",
    "average": "bold yellow",
}

ROW_STYLES = ["", "on grey15"]


def strength_badge(header: str, cell: str) -> str | None:
    """Return the badge category for a table cell, or None for plain content.

    Only columns whose header mentions "strength" carry badges, and only for
    the values strong, weak and average.
    """
    if "strength" not in header.lower():
        return None
    value = cell.strip().lower()
    return value if value in BADGE_STYLES else None


def render_inline(tokens: InlineContent) -> Text:
    """Build a Rich Text from inline tokens."""
    text = Text()
    for token in tokens:
        if isinstance(token, Bold):
            text.append(token.text, style="bold")
        elif isinstance(token, Italic):
            text.append(token.text, style="italic")
        elif isinstance(token, Code):
            text.append(token.text, style=CODE_STYLE)
        elif isinstance(token, Link | AutoLink):
            text.append(token.text, style=Style.parse(LINK_STYLE) + Style(link=token.url))
        else:
            text.append(token.text)
    return text


def _render_list_items(items: tuple[ListItem, ...], *, ordered: bool, depth: int) -> list[Text]:
    lines: list[Text] = []
    for number, item in enumerate(items, start=1):
        marker = f"{number}." if ordered else "•"
        line = Text("  " * depth + marker + " ", style="" if ordered else "dim")
        line.append_text(render_inline(parse_inline(item.text)))
        lines.append(line)
        # Nested levels are always bulleted
        lines.extend(_render_list_items(item.children, ordered=False, depth=depth + 1))
    return lines


def _render_table(block: Table) -> RichTable:
    table = RichTable(
        show_header=True,
        header_style="bold",
        row_styles=ROW_STYLES,
        expand=False,
    )
    for header in block.headers:
        table.add_column(render_inline(parse_inline(header)))
    for row in block.rows:
        cells: list[Text] = []
        for header, cell in zip(block.headers, row, strict=True):
            badge = strength_badge(header, cell)
            if badge is not None:
                cells.append(Text(f" {cell.strip()} ", style=BADGE_STYLES[badge]))
            else:
                cells.append(render_inline(parse_inline(cell.strip())))
        table.add_row(*cells)
    return table


def _render_block(block: Block) -> RenderableType:
    if isinstance(block, Header):
        heading = render_inline(block.content)
        heading.stylize(HEADER_STYLES[block.level])
        return Padding(heading, (1, 0, 0, 0))
    if isinstance(block, CodeBlock):
        code = Text("\n".join(f"  {line}" for line in block.content.split("\n")), style="dim")
        if block.language:
            return Group(Text(block.language, style="dim italic"), code)
        return code
    if isinstance(block, Rule):
        return RichRule(style="dim")
    if isinstance(block, Quote):
        quoted = render_inline(block.content)
        quoted.stylize("italic dim")
        lines = quoted.split("\n")
        return Group(*(Text("▌ ", style="dim") + line for line in lines))
    if isinstance(block, Table):
        return _render_table(block)
    if isinstance(block, ListBlock):
        return Group(*_render_list_items(block.items, ordered=block.ordered, depth=0))
    if isinstance(block, Paragraph):
        return Text("\n").join(render_inline(line) for line in block.lines)
    msg = f"Unknown block type: {type(block).__name__}"
    raise TypeError(msg)


def render_blocks(blocks: list[Block]) -> Group:
    """Render parsed blocks, separated by blank lines."""
    renderables: list[RenderableType] = []
    for block in blocks:
        if renderables and not isinstance(block, Header):
            renderables.append(Text())
        renderables.append(_render_block(block))
    return Group(*renderables)


def render_markdown(text: str) -> Group:
    """Convert a Markdown string to a Rich renderable."""
    return render_blocks(parse_markdown(text))
