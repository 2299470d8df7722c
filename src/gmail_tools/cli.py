"""Command-line interface for Gmail Tools.

This module provides the main entry point for the CLI application.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import structlog

from gmail_tools import __version__
from gmail_tools.config import get_settings
from gmail_tools.exceptions import GmailToolsError, ToolError
from gmail_tools.search import build_search_query
from gmail_tools.tools.toolbox import GmailToolbox

logger = structlog.get_logger()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gmail-tools", description="Gmail Tools")
    subparsers = parser.add_subparsers(dest="command", required=True)

    query_parser = subparsers.add_parser(
        "query",
        help="Compile a JSON filter description to a Gmail search string",
    )
    query_parser.add_argument("params", help="Filter description as JSON")

    search_parser = subparsers.add_parser("search", help="List messages matching a filter")
    search_parser.add_argument(
        "params",
        nargs="?",
        default="{}",
        help="Filter description as JSON (default: no constraints)",
    )
    search_parser.add_argument(
        "--label",
        action="append",
        dest="label_ids",
        default=None,
        help="Only messages with this label ID (repeatable)",
    )
    search_parser.add_argument("--page-token", default=None, help="Page token from a previous search")
    search_parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help="Page size (default: settings gmail_max_results)",
    )

    get_parser = subparsers.add_parser("get", help="Fetch and parse one message")
    get_parser.add_argument("message_id", help="Gmail message ID")
    get_parser.add_argument(
        "--body-type",
        choices=["plain", "html"],
        default=None,
        help="Body part to decode (default: settings default_body_type)",
    )

    label_parser = subparsers.add_parser("label", help="Add or remove a label on a message")
    label_sub = label_parser.add_subparsers(dest="label_command", required=True)
    for action in ("add", "remove"):
        action_parser = label_sub.add_parser(action, help=f"{action.capitalize()} a label")
        action_parser.add_argument("message_id", help="Gmail message ID")
        action_parser.add_argument("label_id", help="Gmail label ID")

    send_parser = subparsers.add_parser("send", help="Send an HTML message")
    send_parser.add_argument("--to", required=True, help="Recipient address")
    send_parser.add_argument("--subject", required=True, help="Subject line")
    send_parser.add_argument("--body", required=True, help="HTML body")

    return parser


def _load_params(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ToolError(f"Filter description is not valid JSON: {exc}") from exc


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _cmd_query(args: argparse.Namespace) -> int:
    print(build_search_query(_load_params(args.params)))
    return 0


async def _cmd_toolbox(args: argparse.Namespace) -> int:
    toolbox = GmailToolbox(settings=get_settings())

    if args.command == "search":
        result = await toolbox.search_messages(
            _load_params(args.params),
            label_ids=args.label_ids,
            page_token=args.page_token,
            max_results=args.max_results,
        )
    elif args.command == "get":
        result = await toolbox.get_message(args.message_id, body_type=args.body_type)
    elif args.command == "label":
        if args.label_command == "add":
            result = await toolbox.add_label(args.message_id, args.label_id)
        else:
            result = await toolbox.remove_label(args.message_id, args.label_id)
    else:
        result = await toolbox.send_message(args.to, args.subject, args.body)

    _print_json(result)
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Gmail Tools CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging; stdout carries command output only
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
    )

    logger.info("gmail_tools_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        if parsed.command == "query":
            return _cmd_query(parsed)
        if parsed.command in {"search", "get", "label", "send"}:
            return asyncio.run(_cmd_toolbox(parsed))
    except GmailToolsError as exc:
        logger.error("command_failed", command=parsed.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.error("unknown_command", command=parsed.command)
    return 2


if __name__ == "__main__":
    sys.exit(main())
