#!/usr/bin/env python3
"""
ioc-lookup - CLI entry point
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import webbrowser
from pathlib import Path
from typing import Optional, Sequence

from .analyzers.registry import default_registry
from .command import ALL, Command, dispatch
from .config import ConfigError, Settings, load_settings
from .extractors import extract_all
from .menu import build_menu
from .models import INDICATOR_TYPES, DispatchResult
from .normalize import defang, normalize, refang
from .output import (
    EXIT_OK,
    EXIT_USAGE,
    Notification,
    exit_code_from_result,
    render,
)
from .selector import Selector

logger = logging.getLogger(__name__)


def _read_text(value: str) -> str:
    """'-' reads the selection from stdin."""
    if value == "-":
        return sys.stdin.read()
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ioc-lookup",
        description="Classify indicators (IP, domain, URL, hash, CVE ...) and build lookup URLs",
    )
    parser.add_argument(
        "--format",
        choices=["pretty", "json", "markdown"],
        default="pretty",
        help="Output format (default: pretty)",
    )
    parser.add_argument("--config", help="Path to a JSON config file", default=None)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("menu", help="Show the menu entries for a selection")
    p.add_argument("text", help="Selected text ('-' reads stdin)")

    p = sub.add_parser("extract", help="Extract every indicator from a block of text")
    p.add_argument("text", help="Text to scan ('-' reads stdin)")

    for name, help_ in (
        ("search", "Build lookup URL(s) for a query"),
        ("scan", "Submit a query to a scanner"),
    ):
        p = sub.add_parser(name, help=help_)
        p.add_argument("query", help="Indicator to look up ('-' reads stdin)")
        p.add_argument(
            "--type",
            choices=INDICATOR_TYPES,
            default=None,
            help="Indicator type (default: detected)",
        )
        p.add_argument(
            "--on",
            dest="target",
            default=ALL if name == "search" else None,
            required=name == "scan",
            help="Analyzer name" + (" or 'all' (default: all)" if name == "search" else ""),
        )
        p.add_argument("--open", action="store_true", help="Open resulting URL(s) in a browser")

    p = sub.add_parser("run", help="Dispatch an encoded menu id")
    p.add_argument("menu_id")
    p.add_argument("--open", action="store_true", help="Open resulting URL(s) in a browser")

    p = sub.add_parser("analyzers", help="List available analyzers")
    p.add_argument("--type", choices=INDICATOR_TYPES, default=None, help="Only analyzers for this type")

    p = sub.add_parser("defang", help="Defang indicators for safe sharing")
    p.add_argument("text", help="Text ('-' reads stdin)")

    p = sub.add_parser("refang", help="Reverse defanging")
    p.add_argument("text", help="Text ('-' reads stdin)")

    return parser


def _command_for(args: argparse.Namespace, settings: Settings) -> Optional[Command]:
    query = normalize(_read_text(args.query), enable_idn=settings.enable_idn)
    if not query:
        return None
    indicator_type = args.type
    if indicator_type is None:
        primary = Selector(query, enable_idn=settings.enable_idn).primary()
        if primary is None:
            return None
        indicator_type, query = primary.type, primary.value
    return Command(action=args.command, type=indicator_type, query=query, target=args.target)


def _finish(result: DispatchResult, args: argparse.Namespace) -> int:
    print(render("result", result, args.format))
    note = Notification.from_result(result)
    if note is not None:
        print(f"{note.title}: {note.message}", file=sys.stderr)
    elif getattr(args, "open", False):
        for url in result.urls:
            webbrowser.open_new_tab(url)
    return exit_code_from_result(result)


def _list_analyzers(args: argparse.Namespace) -> int:
    registry = default_registry()
    rows = []
    for a in registry.analyzers:
        if args.type and args.type not in a.supported_types:
            continue
        caps = [c for c, ok in (("search", bool(a.search_types)), ("scan", bool(a.scan_types))) if ok]
        rows.append(
            {
                "name": a.name,
                "endpoint": a.endpoint,
                "search": list(a.search_types),
                "scan": list(a.scan_types),
                "capabilities": caps,
            }
        )

    if args.format == "json":
        print(json.dumps(rows, indent=2))
    elif args.format == "markdown":
        print("| Name | Search | Scan |")
        print("|---|---|---|")
        for r in rows:
            print(f"| {r['name']} | {', '.join(r['search']) or '-'} | {', '.join(r['scan']) or '-'} |")
    else:
        for r in rows:
            scan = f"  scan: {', '.join(r['scan'])}" if r["scan"] else ""
            print(f"{r['name']:<20} {', '.join(r['search'])}{scan}")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "defang":
        print(defang(_read_text(args.text)))
        return EXIT_OK
    if args.command == "refang":
        print(refang(_read_text(args.text)))
        return EXIT_OK
    if args.command == "analyzers":
        return _list_analyzers(args)

    try:
        settings = load_settings(Path(args.config) if args.config else None)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.command == "menu":
        items = build_menu(_read_text(args.text), settings=settings)
        print(render("menu", items, args.format))
        return EXIT_OK

    if args.command == "extract":
        found = extract_all(normalize(_read_text(args.text), enable_idn=settings.enable_idn))
        print(render("extract", found, args.format))
        return EXIT_OK

    if args.command == "run":
        try:
            command = Command.parse(args.menu_id)
        except ValueError as e:
            print(f"Invalid menu id: {e}", file=sys.stderr)
            return EXIT_USAGE
        return _finish(dispatch(command, settings=settings), args)

    # search / scan
    command = _command_for(args, settings)
    if command is None:
        print("No indicator found in input", file=sys.stderr)
        return EXIT_USAGE
    logger.debug("Dispatching %s", command.to_menu_id())
    return _finish(dispatch(command, settings=settings), args)


if __name__ == "__main__":
    raise SystemExit(main())
