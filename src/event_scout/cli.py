"""Command-line interface for Event Scout.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import date, timedelta

import structlog

from event_scout import __version__
from event_scout.config import Settings, get_settings
from event_scout.exceptions import EventScoutError
from event_scout.gemini import GeminiClient
from event_scout.interests import INTEREST_CATEGORIES, validate_interests
from event_scout.models import ProgressEvent
from event_scout.pipeline import build_orchestrator
from event_scout.planner import format_itinerary
from event_scout.utils import configure_logging

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="event-scout", description="Event Scout")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default=None, help="Bind host (default: settings api_host)")
    serve_parser.add_argument(
        "--port", type=int, default=None, help="Bind port (default: settings api_port)"
    )

    plan_parser = subparsers.add_parser("plan", help="Generate one itinerary and print it")
    plan_parser.add_argument("city", help="Target city")
    plan_parser.add_argument(
        "--interests",
        required=True,
        help="Comma-separated interests, e.g. 'jazz,startups'",
    )
    plan_parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=None,
        help="First day, YYYY-MM-DD (default: today)",
    )
    plan_parser.add_argument(
        "--end",
        type=date.fromisoformat,
        default=None,
        help="Last day, YYYY-MM-DD (default: start + settings default_days)",
    )
    plan_parser.add_argument(
        "--mode",
        choices=["scout_explorer", "raw_tools"],
        default=None,
        help="Pipeline mode (default: settings pipeline_mode)",
    )
    plan_parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format",
    )

    interests_parser = subparsers.add_parser("interests", help="List the interest taxonomy")
    interests_parser.add_argument(
        "--validate",
        default=None,
        help="Comma-separated interests to check against known tags",
    )

    subparsers.add_parser("check", help="Verify model credentials with a one-line prompt")

    return parser


def _cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from event_scout.api import create_app

    uvicorn.run(
        create_app(settings),
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def _print_progress(event: ProgressEvent) -> None:
    print(f"[{event.percent:3d}%] {event.message}", file=sys.stderr)


async def _cmd_plan(args: argparse.Namespace, settings: Settings) -> int:
    if args.mode:
        settings = settings.model_copy(update={"pipeline_mode": args.mode})

    interests = [i.strip() for i in args.interests.split(",") if i.strip()]
    if not interests:
        print("At least one interest is required", file=sys.stderr)
        return 2

    start = args.start or date.today()
    end = args.end or start + timedelta(days=settings.default_days)
    if end < start:
        print("--end must not be before --start", file=sys.stderr)
        return 2

    orchestrator = build_orchestrator(settings)
    try:
        result = await orchestrator.generate(
            args.city, interests, start, end, on_progress=_print_progress
        )
    finally:
        await orchestrator.aclose()

    if args.format == "json":
        print(json.dumps(result.to_response(), indent=2, ensure_ascii=False))
        return 0

    if not result.itinerary:
        print(result.pipeline_stats.message or "No events found")
    else:
        print(format_itinerary(result.itinerary))

    gaps = result.pipeline_stats.coverage_gaps
    if gaps:
        print("Open time slots:")
        for day, bands in gaps.items():
            print(f"- {day}: {', '.join(bands)}")
    return 0


def _cmd_interests(args: argparse.Namespace) -> int:
    if args.validate:
        checked = validate_interests([i.strip() for i in args.validate.split(",") if i.strip()])
        print(f"Known: {', '.join(checked['valid']) or '-'}")
        print(f"Free-text: {', '.join(checked['invalid']) or '-'}")
        return 0

    for category in INTEREST_CATEGORIES:
        print(f"{category['name']}:")
        for tag in category["tags"]:  # type: ignore[attr-defined]
            print(f"  - {tag}")
    return 0


async def _cmd_check(settings: Settings) -> int:
    client = GeminiClient(settings)
    reply = await client.ping()
    print(f"{client.model}: {reply}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Event Scout CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    parser = _build_parser()
    parsed = parser.parse_args(args)

    settings = get_settings()
    configure_logging(settings)
    logger.info("event_scout_started", version=__version__, debug=settings.debug)

    try:
        if parsed.command == "serve":
            return _cmd_serve(parsed, settings)
        if parsed.command == "plan":
            return asyncio.run(_cmd_plan(parsed, settings))
        if parsed.command == "interests":
            return _cmd_interests(parsed)
        if parsed.command == "check":
            return asyncio.run(_cmd_check(settings))
    except EventScoutError as e:
        logger.error("command_failed", command=parsed.command, error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
