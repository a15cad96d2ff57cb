"""Shared fixtures: configured settings, in-memory history, SSE payload helpers."""

from __future__ import annotations

import json
import zlib
from typing import TYPE_CHECKING

import pytest

from transcript_advisor.config import Settings
from transcript_advisor.history import open_history_db

if TYPE_CHECKING:
    import sqlite3
    from collections.abc import Generator

API_URL = "https://api.test/openai/v1"
COMPLETIONS_URL = f"{API_URL}/chat/completions"

SAMPLE_TRANSCRIPT = (
    "Springfield High School Official Transcript\n"
    "Student: Jordan Lee\n"
    "Mathematics A\nPhysics A-\nChemistry B+\nEnglish Literature B\nHistory C+\n"
    "Cumulative GPA: 3.6"
)


def sse_body(*deltas: str, done: bool = True) -> bytes:
    """Build a chat-completion event stream carrying the given content deltas."""
    lines = [
        "data: " + json.dumps({"choices": [{"index": 0, "delta": {"content": delta}}]})
        for delta in deltas
    ]
    if done:
        lines.append("data: [DONE]")
    return ("\n\n".join(lines) + "\n\n").encode()


def completion_json(content: str) -> dict[str, object]:
    """Build a non-streaming chat-completion response body."""
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def _pdf_literal(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(lines: list[str], *, compress: bool = False) -> bytes:
    """Build a one-page PDF whose content stream shows each line as text.

    Object offsets in the xref table are computed, so strict readers accept it.
    """
    ops = ["BT", "/F1 12 Tf", "72 720 Td", "14 TL"]
    for line in lines:
        ops.append(f"({_pdf_literal(line)}) Tj T*")
    ops.append("ET")
    stream = "\n".join(ops).encode("latin-1")
    stream_dict = f"<< /Length {len(stream)} >>"
    if compress:
        stream = zlib.compress(stream)
        stream_dict = f"<< /Length {len(stream)} /Filter /FlateDecode >>"

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        stream_dict.encode() + b"\nstream\n" + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    out = bytearray(b"%PDF-1.4\n")
    offsets: list[int] = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"
    xref = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n".encode()
    out += f"startxref\n{xref}\n%%EOF\n".encode()
    return bytes(out)


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake completion endpoint."""
    return Settings(api_url=API_URL, api_key="gsk_test", timeout=5.0)


@pytest.fixture
def history_db() -> Generator[sqlite3.Connection]:
    """Create an in-memory history database."""
    conn = open_history_db()
    try:
        yield conn
    finally:
        conn.close()
