"""Command-line interface for Inbox Triage.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog

from inbox_triage.agent.session import TriageSession
from inbox_triage.config import Settings, get_settings
from inbox_triage.exceptions import TriageError
from inbox_triage.gmail.client import GmailClient
from inbox_triage.models import Layout, Priority, Visibility
from inbox_triage.preferences import PreferenceRepository
from inbox_triage.view.formatting import render_detail, render_records, render_stats

logger = structlog.get_logger()

PRIORITY_CHOICES = ["all", *(p.value for p in Priority)]
VISIBILITY_CHOICES = [v.value for v in Visibility]


def _non_negative_int(value: str) -> int:
    try:
        days = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'") from None
    if days < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {days}")
    return days


def _add_filter_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--days",
        type=_non_negative_int,
        default=None,
        help="Only show emails from the last N days (default: settings default_max_age_days)",
    )
    parser.add_argument("--priority", choices=PRIORITY_CHOICES, default="all")
    parser.add_argument("--visibility", choices=VISIBILITY_CHOICES, default="all")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="inbox-triage", description="Inbox Triage")
    parser.add_argument(
        "--prefs-db",
        type=Path,
        default=None,
        help="Path to the preferences database (default: settings preferences_db_path)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Fetch the inbox and show the triaged list")
    _add_filter_arguments(list_parser)
    list_parser.add_argument(
        "--layout",
        choices=[layout.value for layout in Layout],
        default=None,
        help="List or card layout (remembered for next time)",
    )

    show_parser = subparsers.add_parser("show", help="Show the details of one email")
    show_parser.add_argument("email_id", help="Gmail message ID as printed by 'list'")
    _add_filter_arguments(show_parser)

    subparsers.add_parser("stats", help="Show inbox counts")
    subparsers.add_parser("theme", help="Toggle between the light and dark theme")
    subparsers.add_parser("signout", help="Forget the cached Gmail token")

    return parser


def _open_session(settings: Settings, prefs_db: Path | None) -> TriageSession:
    preferences = PreferenceRepository(prefs_db or settings.preferences_db_path)
    preferences.initialize()
    return TriageSession(GmailClient(settings), preferences=preferences, settings=settings)


def _apply_filters(session: TriageSession, args: argparse.Namespace) -> None:
    session.set_filter(
        max_age_days=args.days if args.days is not None else session.settings.default_max_age_days,
        priority=args.priority,
        visibility=args.visibility,
    )


async def _load(session: TriageSession) -> bool:
    await session.dispatch("sign_in")
    if session.last_error:
        print(session.last_error, file=sys.stderr)
        return False
    return True


async def _cmd_list(session: TriageSession, args: argparse.Namespace) -> int:
    if args.layout:
        await session.dispatch("set_layout", layout=args.layout)
    if not await _load(session):
        return 1
    _apply_filters(session, args)

    if session.profile and session.profile.name:
        print(f"Signed in as {session.profile.name}")
    print(render_stats(session.stats()))
    print()
    print(render_records(session.view(), layout=session.layout))
    return 0


async def _cmd_show(session: TriageSession, args: argparse.Namespace) -> int:
    if not await _load(session):
        return 1
    _apply_filters(session, args)

    record = await session.dispatch("select", record_id=args.email_id)
    if record is None:
        print(f"No email with id {args.email_id} in the current view.", file=sys.stderr)
        return 1
    print(render_detail(record))
    return 0


async def _cmd_stats(session: TriageSession) -> int:
    if not await _load(session):
        return 1
    print(render_stats(session.stats()))
    return 0


async def _cmd_theme(session: TriageSession) -> int:
    theme = await session.dispatch("toggle_theme")
    print(f"Theme: {theme.value}")
    return 0


async def _cmd_signout(session: TriageSession) -> int:
    await session.dispatch("sign_out")
    print("Signed out.")
    return 0


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    session = _open_session(settings, args.prefs_db)

    if args.command == "list":
        return await _cmd_list(session, args)
    if args.command == "show":
        return await _cmd_show(session, args)
    if args.command == "stats":
        return await _cmd_stats(session)
    if args.command == "theme":
        return await _cmd_theme(session)
    if args.command == "signout":
        return await _cmd_signout(session)

    logger.error("unknown_command", command=args.command)
    return 2


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Inbox Triage CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging; stdout is reserved for command output.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

    logger.info("inbox_triage_started", version="0.1.0", debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        return asyncio.run(_run(parsed, settings))
    except TriageError as exc:
        logger.error("command_failed", command=parsed.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
