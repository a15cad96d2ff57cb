"""CLI entry point and subcommand definitions."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.live import Live

from transcript_advisor.config import ConfigError, Settings, get_config_path, load_settings
from transcript_advisor.groq import CompletionError, complete
from transcript_advisor.markdown_parser import parse_markdown, plain_text
from transcript_advisor.pdf_reader import PDFError, extract_text
from transcript_advisor.prompts import (
    ANALYSIS_METHODS,
    TONES,
    available_analysis_methods,
    available_tones,
    build_messages,
)
from transcript_advisor.summarizer import summarize_transcript
from transcript_advisor.tui.widgets.markdown_light import render_markdown

logger = logging.getLogger(__name__)

LIVE_REFRESH_PER_SECOND = 8


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _cmd_analyze(args: argparse.Namespace, settings: Settings) -> None:
    """Extract, summarize and stream an analysis of one transcript."""
    path = Path(args.pdf)
    text = extract_text(path)
    console = Console()

    async def _run() -> str:
        summary = await summarize_transcript(settings, text)
        messages = build_messages(
            summary or text,
            args.context,
            args.tone or settings.default_tone,
            args.method,
        )
        if args.raw:

            def _print_delta(delta: str) -> None:
                print(delta, end="", flush=True)

            response = await complete(settings, messages, stream=True, on_chunk=_print_delta)
            print()
            return response

        parts: list[str] = []
        with Live(
            render_markdown(""),
            console=console,
            refresh_per_second=LIVE_REFRESH_PER_SECOND,
            vertical_overflow="visible",
        ) as live:

            def _update(delta: str) -> None:
                parts.append(delta)
                live.update(render_markdown("".join(parts)))

            return await complete(settings, messages, stream=True, on_chunk=_update)

    logger.info("Analyzing %s", path.name)
    response = asyncio.run(_run())
    if not response.strip():
        _fail("The completion API returned an empty response.")


def _cmd_render(args: argparse.Namespace, _settings: Settings) -> None:
    """Render a markdown file, or stdin, to the terminal."""
    if args.file is None or args.file == "-":
        text = sys.stdin.read()
    else:
        try:
            text = Path(args.file).read_text()
        except OSError as e:
            _fail(f"Cannot read {args.file}: {e}")
            return
    if args.plain:
        print(plain_text(parse_markdown(text)))
    else:
        Console().print(render_markdown(text))


def _cmd_extract(args: argparse.Namespace, _settings: Settings) -> None:
    """Print the text extracted from a transcript PDF."""
    print(extract_text(Path(args.pdf)))


def _cmd_options(_args: argparse.Namespace, _settings: Settings) -> None:
    """List the available tones and analysis methods."""
    print("Tones:")
    for tone in available_tones():
        print(f"  {tone.value:<12} {tone.name}: {tone.description}")
    print()
    print("Analysis methods:")
    for method in available_analysis_methods():
        print(f"  {method.value:<12} {method.name}: {method.description}")


def _launch_tui(settings: Settings, transcript: str | None) -> None:
    """Launch the Textual TUI with a backend worker.

    Imports are deferred to avoid loading Textual/backend for CLI-only commands.
    """
    from transcript_advisor.backend import backend_worker  # noqa: PLC0415
    from transcript_advisor.history import open_history_db  # noqa: PLC0415
    from transcript_advisor.messages import Request, Response  # noqa: PLC0415, TC001
    from transcript_advisor.tui.app import AdvisorApp  # noqa: PLC0415

    conn = open_history_db()
    request_queue: asyncio.Queue[Request] = asyncio.Queue()
    response_queue: asyncio.Queue[Response] = asyncio.Queue()

    app = AdvisorApp(
        settings=settings,
        transcript_path=Path(transcript) if transcript else None,
        request_queue=request_queue,
        response_queue=response_queue,
    )

    async def _run() -> None:
        worker = asyncio.create_task(
            backend_worker(request_queue, response_queue, conn, settings)
        )
        try:
            await app.run_async()
        finally:
            worker.cancel()

    try:
        asyncio.run(_run())
    finally:
        conn.close()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transcript-advisor",
        description="Career guidance chat over an academic transcript PDF",
    )
    parser.add_argument("--config", type=Path, help="Path to config.toml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    subparsers = parser.add_subparsers(dest="command")

    # chat
    chat_parser = subparsers.add_parser("chat", help="Open the chat TUI (the default)")
    chat_parser.add_argument("pdf", nargs="?", help="Transcript PDF to load on startup")

    # analyze
    analyze_parser = subparsers.add_parser("analyze", help="Analyze a transcript and exit")
    analyze_parser.add_argument("pdf", help="Transcript PDF")
    analyze_parser.add_argument("--tone", choices=sorted(TONES), help="Response tone")
    analyze_parser.add_argument(
        "--method",
        choices=sorted(ANALYSIS_METHODS),
        help="Analysis focus (default: all methods)",
    )
    analyze_parser.add_argument("--context", default="", help="Additional context")
    analyze_parser.add_argument(
        "--raw", action="store_true", help="Print raw markdown instead of rendering it"
    )

    # render
    render_parser = subparsers.add_parser("render", help="Render markdown to the terminal")
    render_parser.add_argument("file", nargs="?", help="Markdown file (default: stdin)")
    render_parser.add_argument("--plain", action="store_true", help="Print plain text")

    # extract
    extract_parser = subparsers.add_parser("extract", help="Print extracted transcript text")
    extract_parser.add_argument("pdf", help="Transcript PDF")

    # options
    subparsers.add_parser("options", help="List tones and analysis methods")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and dispatch to the appropriate subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings(args.config or get_config_path())
    except ConfigError as e:
        _fail(str(e))
        return

    if args.command in (None, "chat"):
        _launch_tui(settings, getattr(args, "pdf", None))
        return

    dispatch = {
        "analyze": _cmd_analyze,
        "render": _cmd_render,
        "extract": _cmd_extract,
        "options": _cmd_options,
    }
    try:
        dispatch[args.command](args, settings)
    except (PDFError, CompletionError) as e:
        _fail(str(e))
