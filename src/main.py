# src/main.py — v1
"""CLI entry point — diagnose, history, providers commands.

Usage:
    avidiag diagnose --symptom toux --symptom diarrhée --requester U1 [options]
    avidiag history --requester U1
    avidiag providers
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from avidiag.config.settings import ConfigurationError
from avidiag.diagnosis.errors import CascadeExhausted, InvalidInput, ProviderConfigMissing
from avidiag.version import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INVALID_INPUT = 2
EXIT_PROVIDER_MISSING = 3
EXIT_CASCADE_EXHAUSTED = 4
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        _setup_logging(args.verbose)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_FATAL

    if not hasattr(args, "func"):
        parser.print_help()
        return EXIT_FATAL

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return EXIT_INTERRUPTED
    except InvalidInput as exc:
        logger.error("Invalid input: %s", exc)
        return EXIT_INVALID_INPUT
    except ProviderConfigMissing as exc:
        logger.error("%s", exc)
        return EXIT_PROVIDER_MISSING
    except CascadeExhausted as exc:
        logger.error("%s", exc)
        return EXIT_CASCADE_EXHAUSTED
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return EXIT_FATAL


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="avidiag",
        description=f"avidiag v{__version__} — Poultry health diagnosis gateway",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- diagnose ---
    p_diagnose = subparsers.add_parser(
        "diagnose", help="Diagnose a flock from symptoms, photos and a description",
    )
    p_diagnose.add_argument(
        "-s", "--symptom", dest="symptoms", action="append", default=[],
        help="Observed symptom (repeatable)",
    )
    p_diagnose.add_argument(
        "-i", "--image", dest="images", action="append", default=[],
        help="Uploaded image reference (repeatable)",
    )
    p_diagnose.add_argument(
        "-d", "--description", default="",
        help="Free-text description of the situation",
    )
    p_diagnose.add_argument(
        "--requester", required=True,
        help="Authenticated requester id (cache scope)",
    )
    p_diagnose.add_argument(
        "--subject", default=None,
        help="Subject reference, e.g. a lot id",
    )
    p_diagnose.set_defaults(func=_cmd_diagnose)

    # --- history ---
    p_history = subparsers.add_parser(
        "history", help="List past analyses of a requester",
    )
    p_history.add_argument("--requester", required=True, help="Requester id")
    p_history.set_defaults(func=_cmd_history)

    # --- providers ---
    p_providers = subparsers.add_parser(
        "providers", help="Show which provider and model cascade would be used",
    )
    p_providers.set_defaults(func=_cmd_providers)

    return parser


async def _cmd_diagnose(args: argparse.Namespace) -> int:
    """Run one diagnosis and print the JSON response."""
    from avidiag.api.facade import diagnose
    from avidiag.api.models import InferenceRequest

    request = InferenceRequest(
        images=args.images,
        symptoms=args.symptoms,
        description=args.description,
        subject_id=args.subject,
        requester_id=args.requester,
    )
    response = await diagnose(request)
    print(json.dumps(response.to_payload(), ensure_ascii=False, indent=2))
    return EXIT_OK


async def _cmd_history(args: argparse.Namespace) -> int:
    """Print past analyses, newest first."""
    from avidiag.api.facade import history

    entries = await history(args.requester)
    if not entries:
        print(f"No analyses for {args.requester}")
        return EXIT_OK

    print(f"\n{len(entries)} analyse(s) for {args.requester}:")
    for entry in entries:
        stamp = entry.created_at.strftime("%Y-%m-%d %H:%M")
        subject = f" [{entry.subject_id}]" if entry.subject_id else ""
        print(f"  {stamp}{subject}  {entry.diagnosis} ({entry.confidence}%)")
    return EXIT_OK


async def _cmd_providers(args: argparse.Namespace) -> int:
    """Print the provider the gateway would select right now."""
    from avidiag.config.settings import Settings
    from avidiag.diagnosis.provider_selector import ProviderSelector

    settings = Settings()
    config = ProviderSelector.from_settings(settings).select(settings.credentials)
    print(f"Provider: {config.provider_name}")
    for position, model_id in enumerate(config.model_cascade_order, start=1):
        print(f"  {position}. {model_id}")
    return EXIT_OK


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage (text to stderr, rotating file if LOG_FILE is set)."""
    from avidiag.config.settings import Settings
    from avidiag.logging.logger import setup_logging

    settings = Settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format="text",
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
