# src/main.py — v3
"""CLI entry point: complete, prompt, models commands.

Usage:
    ollamacopilot complete <file> --line N --column C [--model M]
    ollamacopilot prompt <file> --line N --column C
    ollamacopilot models

Lines and columns are 1-based on the command line.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from ollamacopilot.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _setup_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="ollamacopilot",
        description=f"ollamacopilot v{__version__} - Inline code completion with local models",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- complete ---
    p_complete = subparsers.add_parser(
        "complete", help="Print the completion suggested at a cursor position",
    )
    _add_cursor_arguments(p_complete)
    p_complete.add_argument(
        "--model", default=None,
        help="Model to use (default: OLLAMA_DEFAULT_MODEL)",
    )
    p_complete.add_argument(
        "--no-stream", action="store_true",
        help="Request the whole response at once instead of streaming",
    )
    p_complete.set_defaults(func=_cmd_complete)

    # --- prompt ---
    p_prompt = subparsers.add_parser(
        "prompt", help="Print the prompt a completion would send, without calling the model",
    )
    _add_cursor_arguments(p_prompt)
    p_prompt.set_defaults(func=_cmd_prompt)

    # --- models ---
    p_models = subparsers.add_parser(
        "models", help="List locally available models",
    )
    p_models.set_defaults(func=_cmd_models)

    return parser


def _add_cursor_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", type=Path, help="Path to the source file")
    parser.add_argument(
        "-l", "--line", type=int, required=True, help="Cursor line (1-based)",
    )
    parser.add_argument(
        "-c", "--column", type=int, required=True, help="Cursor column (1-based)",
    )
    parser.add_argument(
        "--language", default=None,
        help="Language id (detected from the extension if omitted)",
    )


def _load_document(args: argparse.Namespace):
    """Read the file named on the command line; None (after logging) on user error."""
    from ollamacopilot.core.document import InMemoryDocument
    from ollamacopilot.core.models import Position

    file_path: Path = args.file
    if not file_path.is_file():
        logger.error("File not found: %s", file_path)
        return None

    document = InMemoryDocument(
        file_path.read_text(encoding="utf-8"),
        file_name=file_path.name,
        language_id=args.language,
    )
    if not 1 <= args.line <= document.line_count:
        logger.error("Line %d out of range (1-%d)", args.line, document.line_count)
        return None
    if args.column < 1:
        logger.error("Column must be >= 1")
        return None

    line = args.line - 1
    character = min(args.column - 1, len(document.line_at(line)))
    return document, Position(line, character)


def _load_settings(args: argparse.Namespace, **overrides: object):
    """Load settings, then reconfigure logging from them."""
    from ollamacopilot.config.settings import load_settings

    settings = load_settings(**overrides)
    _setup_logging(args.verbose, settings)
    return settings


async def _cmd_complete(args: argparse.Namespace) -> int:
    """Print the suggestion for the cursor position."""
    from ollamacopilot.api.facade import complete_document

    loaded = _load_document(args)
    if loaded is None:
        return 1
    document, position = loaded

    overrides: dict[str, object] = {}
    if args.model:
        overrides["ollama_default_model"] = args.model
    if args.no_stream:
        overrides["completion_stream"] = False
    settings = _load_settings(args, **overrides)
    if not settings.has_model:
        logger.error("No model selected: pass --model or set OLLAMA_DEFAULT_MODEL")
        return 1

    item = await complete_document(document, position, settings=settings)
    if item is None:
        logger.info("No completion available")
        return 0
    print(item.insert_text)
    return 0


async def _cmd_prompt(args: argparse.Namespace) -> int:
    """Print the synthesized prompt."""
    from ollamacopilot.api.facade import preview_prompt
    from ollamacopilot.prompts.templates import SYSTEM_PROMPT

    loaded = _load_document(args)
    if loaded is None:
        return 1
    document, position = loaded

    prompt = preview_prompt(document, position, settings=_load_settings(args))
    print(f"# template: {prompt.kind}")
    print(f"# system: {SYSTEM_PROMPT}")
    print(prompt.render())
    return 0


async def _cmd_models(args: argparse.Namespace) -> int:
    """List local models with their family and size."""
    from ollamacopilot.llm.client_factory import create_llm_client

    settings = _load_settings(args)
    client = create_llm_client(settings)
    models = await client.list_models()
    if not models:
        logger.warning("No %s models found", client.provider_name)
        return 1

    for info in models:
        marker = "*" if info.name == settings.ollama_default_model else " "
        print(f"{marker} {info.name:40s} {info.details}")
    return 0


def _setup_logging(verbose: bool, settings=None) -> None:
    """Configure logging for CLI usage.

    Before settings are loaded only warnings are shown. Afterwards LOG_LEVEL,
    LOG_FORMAT and LOG_FILE apply; -v always forces DEBUG.
    """
    from ollamacopilot.logging.logger import setup_logging

    if settings is None:
        setup_logging(level="DEBUG" if verbose else "WARNING", log_format="text")
    else:
        setup_logging(
            level="DEBUG" if verbose else settings.log_level,
            log_format=settings.log_format,
            log_file=settings.log_file,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
        )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
