"""labelcycle CLI.

Subcommands:
  handle -> apply lifecycle commands from a webhook payload (JSON summary)
  parse  -> print the lifecycle commands found in a comment body
  help   -> print the user-facing command help

Exit codes: 0 success, 1 the label store rejected a requested removal, 2 bad config or
payload.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

from labelcycle.commands import build_pattern, extract_commands, render_help
from labelcycle.config import ConfigError, LabelcycleConfig
from labelcycle.errors import classify_error
from labelcycle.github_rest import LABEL_STORE_ERRORS
from labelcycle.logging import configure_logging, get_logger
from labelcycle.reconcile import handle_comment
from labelcycle.runtime import build_client, execute_command, prepare_config
from labelcycle.webhook import WebhookPayloadError, load_event_file, supported_events

EXIT_OK = 0
EXIT_REMOVE_FAILED = 1
EXIT_USAGE = 2

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    p = _FormatterArgumentParser(
        prog="labelcycle", description="Comment-driven lifecycle label management"
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Only log warnings and errors (env: LABELCYCLE_QUIET=1)",
    )
    p.add_argument("--config", help="Path to labelcycle.config.yaml")
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    ph = sub.add_parser("handle", help="Apply lifecycle commands from a webhook payload")
    ph.add_argument(
        "--event",
        default=os.environ.get("GITHUB_EVENT_PATH"),
        help="Webhook payload JSON file (default: $GITHUB_EVENT_PATH)",
    )
    ph.add_argument(
        "--event-name",
        choices=supported_events(),
        help="Webhook event name (default: $GITHUB_EVENT_NAME)",
    )
    ph.add_argument("--dry-run", action="store_true", help="Read labels but do not mutate")
    ph.add_argument(
        "--mock",
        action="store_true",
        help="Use an in-memory label store (env: LABELCYCLE_MOCK=1)",
    )
    ph.add_argument(
        "--mock-labels",
        help="Comma separated labels to seed the in-memory store with",
    )

    pp = sub.add_parser("parse", help="Print lifecycle commands found in a comment body")
    src = pp.add_mutually_exclusive_group()
    src.add_argument("--body", help="Comment text")
    src.add_argument("--file", help="Read comment text from file")

    sub.add_parser("help", help="Show lifecycle command usage")
    return p


def _read_body(args: argparse.Namespace) -> str:
    if args.body is not None:
        return str(args.body)
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    return sys.stdin.read()


def _cmd_parse(cfg: LabelcycleConfig, args: argparse.Namespace) -> int:
    pattern = build_pattern(cfg.settings.alias)
    out = [
        {"label": c.label_token(cfg.settings.prefix), "intent": c.intent.value}
        for c in extract_commands(_read_body(args), pattern)
    ]
    print(json.dumps(out, indent=2))
    return EXIT_OK


def _cmd_help(cfg: LabelcycleConfig) -> int:
    print(render_help(cfg.settings.alias))
    return EXIT_OK


def _cmd_handle(cfg: LabelcycleConfig, args: argparse.Namespace) -> int:
    logger = get_logger()
    if not args.event:
        logger.error("no webhook payload given (use --event or set GITHUB_EVENT_PATH)")
        return EXIT_USAGE
    try:
        event = load_event_file(args.event, args.event_name)
    except (OSError, WebhookPayloadError) as exc:
        logger.log_error("could not read webhook payload", error=str(exc))
        return EXIT_USAGE
    if event is None:
        logger.log_operation("event_skipped", reason="not a comment event")
        print(json.dumps({"item": None, "results": []}, indent=2))
        return EXIT_OK
    client = build_client(cfg, args, event.item)
    summary: dict[str, Any] = {"item": str(event.item), "actor": event.actor}
    try:
        results = handle_comment(client, event, settings=cfg.settings, logger=logger)
    except LABEL_STORE_ERRORS as exc:
        info = classify_error(exc)
        logger.log_error(
            "lifecycle label removal failed", error=info.message, item=str(event.item), **info.as_log_fields()
        )
        summary["error"] = {"category": info.category, "message": info.message}
        print(json.dumps(summary, indent=2))
        return EXIT_REMOVE_FAILED
    summary["results"] = [r.to_dict(cfg.settings.prefix) for r in results]
    print(json.dumps(summary, indent=2))
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.quiet and os.environ.get("LABELCYCLE_QUIET") == "1":
        args.quiet = True
    try:
        cfg = prepare_config(args)
    except ConfigError as exc:
        print(f"[config] {exc}", file=sys.stderr)
        return EXIT_USAGE
    configure_logging(
        json_logging=cfg.logging_json_enabled,
        level="WARNING" if args.quiet else cfg.logging_level,
    )
    handlers = {
        "handle": lambda: _cmd_handle(cfg, args),
        "parse": lambda: _cmd_parse(cfg, args),
        "help": lambda: _cmd_help(cfg),
    }
    try:
        return execute_command(handlers[args.cmd], args.cmd)
    except ConfigError as exc:
        print(f"[config] {exc}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
