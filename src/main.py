# src/main.py — v2
"""CLI entry point — classify and enhance commands.

Usage:
    clipenhancer classify [file]
    clipenhancer enhance [file] [--mode agent|general|answer] [options]

Input is read from stdin when no file is given. Results go to stdout,
logs to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from clipenhancer.core.models import MODES
from clipenhancer.version import __version__

if TYPE_CHECKING:
    from clipenhancer.config.settings import Settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    from clipenhancer.config.settings import load_settings

    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except Exception as exc:
        _setup_logging(args.verbose)
        logger.error("Invalid configuration: %s", exc)
        return 1
    args.settings = settings
    _setup_logging(args.verbose, settings)

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
        prog="clipenhancer",
        description=f"clipenhancer v{__version__} — context-aware prompt enhancer",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- classify ---
    p_classify = subparsers.add_parser(
        "classify", help="Detect platform, tone and format of a text",
    )
    p_classify.add_argument("file", type=Path, nargs="?", help="Input file (default: stdin)")
    p_classify.set_defaults(func=_cmd_classify)

    # --- enhance ---
    p_enhance = subparsers.add_parser(
        "enhance", help="Enhance a text with the configured provider",
    )
    p_enhance.add_argument("file", type=Path, nargs="?", help="Input file (default: stdin)")
    p_enhance.add_argument(
        "-m", "--mode", choices=MODES, default="general",
        help="Enhancement mode (default: general)",
    )
    p_enhance.add_argument(
        "-i", "--instructions", default=None,
        help="Extra instructions added to the prompt",
    )
    p_enhance.add_argument(
        "--no-cache", action="store_true",
        help="Bypass the cache and request a different variant",
    )
    p_enhance.add_argument(
        "--provider", choices=("openai", "google", "gemini"), default=None,
        help="Override LLM_PROVIDER",
    )
    p_enhance.add_argument(
        "--model", default=None,
        help="Override LLM_MODEL",
    )
    p_enhance.set_defaults(func=_cmd_enhance)

    return parser


async def _cmd_classify(args: argparse.Namespace) -> int:
    """Print the classification of the input as JSON."""
    from clipenhancer.api.facade import classify_text

    text = _read_input(args.file)
    if text is None:
        return 1
    result = classify_text(text)
    print(json.dumps(result.model_dump(), indent=2))
    return 0


async def _cmd_enhance(args: argparse.Namespace) -> int:
    """Enhance the input and print the result."""
    from clipenhancer.api.facade import enhance_text
    from clipenhancer.llm.errors import EnhancementError, MissingCredentialsError

    text = _read_input(args.file)
    if text is None:
        return 1

    try:
        result = await enhance_text(
            text,
            args.mode,
            settings=args.settings,
            provider=args.provider,
            model=args.model,
            no_cache=args.no_cache,
            instructions=args.instructions,
        )
    except MissingCredentialsError as exc:
        logger.error("%s", exc)
        return 2
    except EnhancementError as exc:
        logger.error("%s", exc.message)
        return 1

    print(result)
    return 0


def _read_input(path: Path | None) -> str | None:
    """Text from ``path`` or stdin; None (logged) when the file is missing."""
    if path is None:
        return sys.stdin.read()
    if not path.is_file():
        logger.error("File not found: %s", path)
        return None
    return path.read_text(encoding="utf-8")


def _setup_logging(verbose: bool, settings: Settings | None = None) -> None:
    """Configure logging for CLI usage; --verbose overrides LOG_LEVEL."""
    from clipenhancer.logging.logger import setup_logging

    if settings is None:
        setup_logging(level="DEBUG" if verbose else "INFO")
    else:
        setup_logging(
            level="DEBUG" if verbose else settings.log_level,
            log_format=settings.log_format,
            log_file=str(settings.log_file) if settings.log_file else None,
            rotation=settings.log_rotation,
            retention=settings.log_retention,
        )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
