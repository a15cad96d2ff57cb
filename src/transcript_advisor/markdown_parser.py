"""Markdown block parser: text in, a flat list of typed blocks out.

Pipeline: tables are lifted out into placeholders first (so blank lines or
odd spacing inside them cannot split them), the remaining text is cut on
blank lines, and each chunk is classified as one block type. Malformed
markup never raises; it degrades to the next matching type and finally to a
paragraph.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from transcript_advisor.markdown_blocks import (
    Block,
    CodeBlock,
    Header,
    ListBlock,
    ListItem,
    Paragraph,
    Quote,
    Rule,
    Table,
    inline_text,
)
from transcript_advisor.markdown_inline import parse_inline

_BLOCK_SPLIT_RE = re.compile(r"\n{2,}")
_HEADER_RE = re.compile(r"^(#{1,6})\s*(.+)$")
_FENCE = "```"
_LANGUAGE_RE = re.compile(r"\w+")
_RULE_RE = re.compile(r"[-*_]{3,}")
_QUOTE_PREFIX_RE = re.compile(r"^>\s?")

_UNORDERED_RE = re.compile(r"^[-*+]\s+")
_ORDERED_RE = re.compile(r"^\d+[.)-]\s+")
_MARKER_RE = re.compile(r"^(\s*)(?:[-*+]|\d+[.)-])\s+")

_ROW = r"[^\n]*\|[^\n]*"
_SEPARATOR_ROW = r"(?=[^\n]*-)[ \t:|-]*\|[ \t:|-]*"
_NOT_SEPARATOR = r"(?![ \t:|-]*$)"
_TABLE_RE = re.compile(
    rf"^{_ROW}\n{_SEPARATOR_ROW}\n(?:{_NOT_SEPARATOR}{_ROW}(?:\n|$))+",
    re.MULTILINE,
)
_SEPARATOR_RE = re.compile(r"[\s:|-]*")

_PLACEHOLDER_RE = re.compile(r"\x00TABLE(\d+)\x00")


def _placeholder(index: int) -> str:
    return f"\x00TABLE{index}\x00"


# === Tables ===


def _is_separator(line: str) -> bool:
    return bool(_SEPARATOR_RE.fullmatch(line)) and "|" in line and "-" in line


def _split_row(line: str) -> list[str]:
    """Split a pipe row into trimmed cells, dropping the outer empty cells."""
    if "|" not in line:
        return []
    cells = [cell.strip() for cell in line.strip().split("|")]
    if cells and cells[0] == "":
        cells.pop(0)
    if cells and cells[-1] == "":
        cells.pop()
    return cells


def _parse_table(lines: list[str]) -> tuple[Table, int] | None:
    """Parse a table starting at the first line.

    Returns the table and the number of lines it consumed.
    """
    lines = [line.strip() for line in lines]
    if len(lines) < 3 or "|" not in lines[0] or not _is_separator(lines[1]):
        return None

    headers = _split_row(lines[0])
    if len(headers) < 2:
        return None

    width = len(headers)
    rows: list[tuple[str, ...]] = []
    consumed = 2
    for line in lines[2:]:
        if "|" not in line or _is_separator(line):
            break
        cells = _split_row(line)
        if not cells:
            break
        cells = (cells + [""] * width)[:width]
        rows.append(tuple(cells))
        consumed += 1

    if not rows:
        return None
    return Table(headers=tuple(headers), rows=tuple(rows)), consumed


def detect_table(block: str) -> Table | None:
    """Return the table at the start of `block`, or None."""
    parsed = _parse_table(block.split("\n"))
    return parsed[0] if parsed is not None else None


def extract_tables(text: str) -> tuple[str, dict[int, str]]:
    """Replace every table region with a placeholder.

    Returns the rewritten text and the original region text keyed by
    placeholder index. Regions that do not parse as a table (for example a
    single header column) stay in the text untouched.
    """
    regions: list[tuple[int, int, str]] = []
    for match in _TABLE_RE.finditer(text):
        region = match.group(0).strip()
        if detect_table(region) is not None:
            regions.append((match.start(), match.end(), region))

    stored: dict[int, str] = {}
    processed = text
    # Back to front, so earlier offsets stay valid
    for index in range(len(regions) - 1, -1, -1):
        start, end, region = regions[index]
        stored[index] = region
        processed = f"{processed[:start]}\n\n{_placeholder(index)}\n\n{processed[end:]}"
    return processed, stored


# === Lists ===


@dataclass
class _Node:
    text: str
    children: list[_Node] = field(default_factory=list)

    def freeze(self) -> ListItem:
        return ListItem(self.text, tuple(child.freeze() for child in self.children))


def build_list(block: str) -> ListBlock | None:
    """Build a list tree from a block whose first line is a list marker.

    Indentation policy: a deeper line opens exactly one new level under the
    previous item, no matter how far it is indented. A shallower line pops
    back to the nearest frame at or above its indentation; landing between
    two levels joins the children of the shallower frame's last item. The
    root frame is never popped.
    """
    lines = [line for line in block.split("\n") if line.strip()]
    if not lines:
        return None
    if _UNORDERED_RE.match(lines[0]):
        kind = "unordered"
    elif _ORDERED_RE.match(lines[0]):
        kind = "ordered"
    else:
        return None

    root: list[_Node] = []
    stack: list[tuple[int, list[_Node]]] = []

    for line in lines:
        marker = _MARKER_RE.match(line)
        if marker is None:
            # Continuation of the last item at the current depth
            items = stack[-1][1] if stack else root
            if items:
                items[-1].text = f"{items[-1].text} {line.strip()}".strip()
            continue

        indent = len(marker.group(1))
        node = _Node(line[marker.end() :].strip())

        if not stack:
            stack.append((indent, root))
        else:
            while len(stack) > 1 and indent < stack[-1][0]:
                stack.pop()
            top_indent, items = stack[-1]
            if indent > top_indent:
                stack.append((indent, items[-1].children))
        stack[-1][1].append(node)

    return ListBlock(kind=kind, items=tuple(node.freeze() for node in root))


# === Segmentation ===


def _paragraph(block: str) -> Paragraph:
    return Paragraph(tuple(parse_inline(line) for line in block.split("\n") if line.strip()))


def _header(block: str) -> list[Block] | None:
    first, _, rest = block.partition("\n")
    match = _HEADER_RE.match(first.strip())
    if match is None:
        return None
    blocks: list[Block] = [Header(len(match.group(1)), parse_inline(match.group(2).strip()))]
    rest = rest.strip()
    if rest:
        blocks.append(build_list(rest) or _paragraph(rest))
    return blocks


def _code(block: str, tables: dict[int, str]) -> list[Block] | None:
    if not block.startswith(_FENCE):
        return None
    close = block.find(_FENCE, len(_FENCE))
    if close == -1:
        # Unterminated fence: not code
        return None
    inner = block[len(_FENCE) : close]
    first, newline, body = inner.partition("\n")
    # A language tag needs its own line; "```python```" is code, not a tag
    if newline and _LANGUAGE_RE.fullmatch(first):
        code = CodeBlock(language=first, content=body.strip())
    else:
        code = CodeBlock(language=None, content=inner.strip())
    return [code, *_classify(block[close + len(_FENCE) :], tables)]


def _classify(chunk: str, tables: dict[int, str]) -> list[Block]:
    """Classify one blank-line-delimited chunk into blocks."""
    block = chunk.strip()
    if not block:
        return []

    placeholder = _PLACEHOLDER_RE.fullmatch(block)
    if placeholder is not None and int(placeholder.group(1)) in tables:
        table = detect_table(tables[int(placeholder.group(1))])
        if table is not None:
            return [table]

    header = _header(block)
    if header is not None:
        return header

    code = _code(block, tables)
    if code is not None:
        return code

    if _RULE_RE.fullmatch(block):
        return [Rule()]

    if block.startswith(">"):
        text = "\n".join(_QUOTE_PREFIX_RE.sub("", line) for line in block.split("\n"))
        return [Quote(parse_inline(text))]

    lines = block.split("\n")
    parsed = _parse_table(lines)
    if parsed is not None:
        table, consumed = parsed
        return [table, *_classify("\n".join(lines[consumed:]), tables)]

    listing = build_list(block)
    if listing is not None:
        return [listing]

    return [_paragraph(block)]


def parse_markdown(text: str) -> list[Block]:
    """Parse markdown into a flat list of blocks. Never raises."""
    if not text:
        return []
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    processed, tables = extract_tables(text)
    blocks: list[Block] = []
    for chunk in _BLOCK_SPLIT_RE.split(processed):
        blocks.extend(_classify(chunk, tables))
    return blocks


# === Plain-text view ===


def _list_item_lines(item: ListItem) -> list[str]:
    lines = [inline_text(parse_inline(item.text))]
    for child in item.children:
        lines.extend(_list_item_lines(child))
    return lines


def block_text(block: Block) -> str:
    """Visible text of a single block, styling stripped."""
    if isinstance(block, Header | Quote):
        return inline_text(block.content)
    if isinstance(block, CodeBlock):
        return block.content
    if isinstance(block, Rule):
        return ""
    if isinstance(block, Table):
        rows = [block.headers, *block.rows]
        return "\n".join(
            " ".join(inline_text(parse_inline(cell)) for cell in row if cell) for row in rows
        )
    if isinstance(block, ListBlock):
        lines: list[str] = []
        for item in block.items:
            lines.extend(_list_item_lines(item))
        return "\n".join(lines)
    return "\n".join(inline_text(line) for line in block.lines)


def plain_text(blocks: list[Block]) -> str:
    """Visible text of a parsed document, one block per paragraph."""
    return "\n\n".join(text for text in (block_text(b) for b in blocks) if text)
