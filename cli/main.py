#!/usr/bin/env python3
"""
Event log CLI

Small command-line front end over a file-backed EventLogger.

Commands:

1) submit
   - Commit one event with optional properties and user/device context:
       python cli/main.py submit checkout_completed --level info -p amount=12.5

2) query
   - Print matching records as pages, either from a JSON filter
     configuration file or from flags:
       python cli/main.py query --config filters.json
       python cli/main.py query --after "2025-08-14 00:00:00" -f log_level=error,fault

3) fields
   - List the field registry (canonical name, storage key, filterable).

4) serve
   - Start the HTTP runtime:
       uvicorn runtime.api.server:app --reload
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.settings import settings
from core.fields.field_registry import REGISTRY_VERSION, all_fields
from core.models.event_models import LogLevel
from core.query.filter_config import FilterConfiguration
from core.serialization.record_serializer import record_to_payload
from exceptions.exceptions import UnknownField, WriteError
from runtime.event_logger import EventLogger
from runtime.store.log_store import LogStore


def _parse_pairs(pairs: List[str], option: str) -> Dict[str, str]:
    """Parse ["k=v", ...] into a dict."""
    result: Dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid {option} value {pair!r}: expected key=value")
        result[key] = value
    return result


def _parse_property_value(raw: str) -> Any:
    """Interpret CLI property values as JSON scalars when possible."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _open_logger(log_file: str) -> EventLogger:
    return EventLogger(store=LogStore(log_file=log_file))


# ---------------------------------------------------------------------------
# submit
# ---------------------------------------------------------------------------


def cmd_submit(args: argparse.Namespace) -> int:
    properties = {
        key: _parse_property_value(value)
        for key, value in _parse_pairs(args.prop, "--prop").items()
    }

    event_logger = _open_logger(args.log_file)
    try:
        if args.user_id:
            event_logger.set_user(args.user_id, args.user_name or "nil", args.user_email)
        if args.device_id:
            event_logger.set_device_id(args.device_id)
        if args.latitude is not None or args.longitude is not None:
            event_logger.set_location(args.latitude, args.longitude)

        rendered = event_logger.log(args.event, properties=properties, level=args.level)
    except WriteError as e:
        print(f"[EventLog] ✗ {e}", file=sys.stderr)
        return 1
    finally:
        event_logger.close()

    print(rendered.message)
    return 0


# ---------------------------------------------------------------------------
# query
# ---------------------------------------------------------------------------


def _build_config(args: argparse.Namespace) -> FilterConfiguration:
    if args.config:
        return FilterConfiguration.from_file(args.config)

    filters = []
    for key, values in _parse_pairs(args.filter, "--filter").items():
        filters.append({key: [v for v in values.split(",") if v]})

    data: Dict[str, Any] = {"filters": filters, "page_size": args.page_size}
    if args.after:
        data["logs_after"] = args.after
    if args.before:
        data["logs_before"] = args.before
    if args.count is not None:
        data["events_count"] = args.count
    return FilterConfiguration.model_validate(data)


def cmd_query(args: argparse.Namespace) -> int:
    config = _build_config(args)
    event_logger = _open_logger(args.log_file)
    try:
        pages = event_logger.query(config)
    except UnknownField as e:
        print(f"[EventLog] ✗ {e}", file=sys.stderr)
        return 2
    finally:
        event_logger.close()

    output = [[record_to_payload(record) for record in page] for page in pages]
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


# ---------------------------------------------------------------------------
# fields / serve
# ---------------------------------------------------------------------------


def cmd_fields(args: argparse.Namespace) -> int:
    print(f"# field registry v{REGISTRY_VERSION}")
    for field in all_fields():
        marker = "" if field.is_filterable else "  (container)"
        print(f"{field.canonical_name:<16} {field.storage_key}{marker}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    # Lazy import so the other commands work without uvicorn installed.
    import uvicorn

    uvicorn.run("runtime.api.server:app", host=args.host, port=args.port)
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Event log CLI")
    parser.add_argument(
        "--log-file",
        default=str(settings.log_file),
        help="JSON-lines store (default: <EVENTLOG_DATA_DIR>/logs/events.jsonl)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # submit
    p_submit = subparsers.add_parser("submit", help="Commit one event")
    p_submit.add_argument("event", help="Event name")
    p_submit.add_argument(
        "--level",
        choices=[level.value for level in LogLevel],
        default=LogLevel.DEFAULT.value,
    )
    p_submit.add_argument(
        "-p",
        "--prop",
        action="append",
        default=[],
        help="Property as key=value (repeatable; JSON scalars are typed)",
    )
    p_submit.add_argument("--user-id")
    p_submit.add_argument("--user-name")
    p_submit.add_argument("--user-email")
    p_submit.add_argument("--device-id")
    p_submit.add_argument("--latitude", type=float)
    p_submit.add_argument("--longitude", type=float)

    # query
    p_query = subparsers.add_parser("query", help="Print matching records as pages")
    p_query.add_argument("--config", help="Path to a JSON filter configuration")
    p_query.add_argument("--after", help="Lower created_at bound (inclusive)")
    p_query.add_argument("--before", help="Upper created_at bound (inclusive)")
    p_query.add_argument("--count", type=int, help="Maximum number of records")
    p_query.add_argument("--page-size", type=int, default=0)
    p_query.add_argument(
        "-f",
        "--filter",
        action="append",
        default=[],
        help="Constraint as field=v1,v2 (repeatable)",
    )

    # fields
    subparsers.add_parser("fields", help="List the field registry")

    # serve
    p_serve = subparsers.add_parser("serve", help="Start the HTTP runtime")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "submit": cmd_submit,
        "query": cmd_query,
        "fields": cmd_fields,
        "serve": cmd_serve,
    }
    handler = commands.get(args.command)
    if handler is None:
        parser.error(f"Unknown command: {args.command}")
    try:
        return handler(args)
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    sys.exit(main())
