"""Best-effort transcript text extraction from PDF files.

Fallback chain: pdfplumber's text layer, then a raw scrape of the PDF's
content streams, then a fixed hint asking the user to paste the transcript
as additional context. Image-only PDFs are not OCR'd.
"""

from __future__ import annotations

import logging
import re
import zlib
from typing import TYPE_CHECKING

import pdfplumber

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 50  # below this the text layer is treated as missing
MAX_SCAN_BYTES = 1_000_000
PDF_MAGIC = b"%PDF"

FALLBACK_HINT = (
    "PDF loaded. For image-based PDFs, please provide transcript content "
    "in the additional context field."
)

_STREAM_RE = re.compile(rb"stream\r?\n(.*?)\r?\nendstream", re.DOTALL)
_TEXT_OBJECT_RE = re.compile(r"\bBT\b(.*?)\bET\b", re.DOTALL)
# PDF literal string; escaped parentheses do not close it
_LITERAL_RE = re.compile(r"\(((?:\\.|[^\\()])*)\)")
_ESCAPE_RE = re.compile(r"\\(.)")
_NON_PRINTABLE_RE = re.compile(r"[^\x20-\x7e\n\r]")


class PDFError(Exception):
    """Raised when a file is not a readable PDF."""


def is_valid_pdf(path: Path) -> bool:
    """True if the file has a .pdf suffix and starts with the PDF header."""
    if path.suffix.lower() != ".pdf" or not path.is_file():
        return False
    with path.open("rb") as f:
        return f.read(len(PDF_MAGIC)) == PDF_MAGIC


def _extract_text_layer(path: Path) -> str:
    """Read the text layer of every page with pdfplumber."""
    pages_text: list[str] = []
    with pdfplumber.open(path) as pdf:
        for page in pdf.pages:
            page_text = (page.extract_text() or "").strip()
            if page_text:
                pages_text.append(page_text)
    return "\n\n".join(pages_text).strip()


def _decoded_streams(data: bytes) -> list[bytes]:
    """Return every stream body, inflated when it is Flate-compressed."""
    streams: list[bytes] = []
    for match in _STREAM_RE.finditer(data):
        body = match.group(1)
        # decompressobj tolerates a body clipped by the line-ending match
        try:
            streams.append(zlib.decompressobj().decompress(body))
        except zlib.error:
            streams.append(body)
    return streams


def _literals(fragment: str) -> list[str]:
    return [_ESCAPE_RE.sub(r"\1", m.group(1)) for m in _LITERAL_RE.finditer(fragment)]


def scrape_text(data: bytes) -> str:
    """Pull readable strings out of raw PDF bytes.

    Text objects (`BT` ... `ET`) contribute the literal strings they draw;
    when a document has no text objects at all, any parenthesized literal is
    used instead.
    """
    data = data[:MAX_SCAN_BYTES]
    sources = _decoded_streams(data) or [data]
    text = "\n".join(
        _NON_PRINTABLE_RE.sub("", chunk.decode("latin-1")) for chunk in sources
    )

    pieces: list[str] = []
    objects = _TEXT_OBJECT_RE.findall(text)
    for fragment in objects or [text]:
        joined = " ".join(" ".join(_literals(fragment)).split())
        if len(joined) > 2:
            pieces.append(joined)
    return "\n".join(pieces).strip()


def extract_text(path: Path) -> str:
    """Extract transcript text from a PDF.

    Raises PDFError if the file is missing or is not a PDF.
    """
    if not is_valid_pdf(path):
        msg = f"Invalid file type: {path.name}. Please provide a PDF file."
        raise PDFError(msg)

    try:
        text = _extract_text_layer(path)
    except Exception:  # noqa: BLE001
        logger.warning("pdfplumber could not read %s, scraping raw streams", path, exc_info=True)
        text = ""
    if len(text) > MIN_TEXT_LENGTH:
        return text

    try:
        scraped = scrape_text(path.read_bytes())
    except OSError as e:
        msg = f"Failed to read PDF file {path}: {e}"
        raise PDFError(msg) from e
    best = max(text, scraped, key=len)
    if len(best) > MIN_TEXT_LENGTH:
        logger.info("Using raw stream text for %s (%d chars)", path.name, len(best))
        return best
    return best or FALLBACK_HINT
