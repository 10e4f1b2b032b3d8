"""Command-line entry for recurcal.

Examples:
  python -m recurcal expand 2025-01-31 2025-12-31 monthly
  python -m recurcal groups --store events.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Optional

from recurcal.calendar.calendar_math import format_date
from recurcal.calendar.models import RepeatType
from recurcal.config_loader import load_config
from recurcal.core.logging_setup import configure_logging
from recurcal.domain.event_store import JsonEventStore
from recurcal.domain.recurrence import expand_to_strings
from recurcal.domain.validation import validate_repeat_window
from recurcal.exceptions import EventStoreError

logger = logging.getLogger(__name__)

NO_DATES_MESSAGE = "No dates match the selected options."


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the recurcal CLI."""
    parser = argparse.ArgumentParser(
        prog="recurcal",
        description="Expand recurring events and inspect event series",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m recurcal expand 2025-10-01 2025-10-31 weekly
  python -m recurcal expand 2024-02-29 2030-12-31 yearly --no-ceiling
  python -m recurcal groups --store events.json
        """,
    )
    parser.add_argument("--config", metavar="PATH", help="YAML config file (default: ./recurcal.yaml)")
    parser.add_argument("--log-level", metavar="LEVEL", help="Logging level (default: from config)")

    sub = parser.add_subparsers(dest="command", required=True)

    expand_cmd = sub.add_parser("expand", help="Print the dates of a recurrence rule")
    expand_cmd.add_argument("start", help="First date (YYYY-MM-DD)")
    expand_cmd.add_argument("end", help="Last allowed date (YYYY-MM-DD)")
    expand_cmd.add_argument(
        "frequency",
        choices=[t.value for t in RepeatType if t is not RepeatType.NONE],
        help="Recurrence frequency",
    )
    expand_cmd.add_argument(
        "--no-ceiling",
        action="store_true",
        help="Skip the configured maximum end date check",
    )

    groups_cmd = sub.add_parser("groups", help="Summarize recurring series in a JSON store")
    groups_cmd.add_argument("--store", metavar="PATH", help="Event store file (default: from config)")

    return parser


def _cmd_expand(args: argparse.Namespace, ceiling) -> int:
    if not args.no_ceiling:
        message = validate_repeat_window(args.start, args.end, ceiling)
        if message:
            print(message, file=sys.stderr)
            return 2

    dates = expand_to_strings(args.start, args.end, args.frequency)
    if not dates:
        print(NO_DATES_MESSAGE, file=sys.stderr)
        return 1
    for value in dates:
        print(value)
    return 0


def _cmd_groups(args: argparse.Namespace, store_path: Optional[str]) -> int:
    path = args.store or store_path
    if not path:
        print("No event store given; use --store or set store_path in config", file=sys.stderr)
        return 2

    try:
        events = JsonEventStore(path).read()
    except EventStoreError as exc:
        logger.error("Could not read event store: %s", exc)
        print(str(exc), file=sys.stderr)
        return 1

    groups: dict[str, list] = {}
    for event in events:
        if event.group_id:
            groups.setdefault(event.group_id, []).append(event)

    if not groups:
        print("No recurring series found.")
        return 0

    for group_id, members in groups.items():
        dates = sorted(m.date for m in members)
        first = members[0]
        print(
            f"{group_id}\t{first.repeat.type.value}\t{len(members)}\t"
            f"{format_date(dates[0])}..{format_date(dates[-1])}\t{first.title}"
        )
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the recurcal CLI and return a process exit code."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    configure_logging(args.log_level or config.log_level)
    logger.debug("Running command %s", args.command)

    if args.command == "expand":
        return _cmd_expand(args, config.max_repeat_end_date)
    return _cmd_groups(args, config.store_path)


if __name__ == "__main__":
    sys.exit(main())
