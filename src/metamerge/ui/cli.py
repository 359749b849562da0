from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from metamerge.app import inspect_declaration
from metamerge.common import configure_logging
from metamerge.config import SettingsError, get_logging_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from pydantic import JsonValue

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect merged declaration metadata")
    subparsers = parser.add_subparsers(dest="command", required=True)

    inspect = subparsers.add_parser("inspect", help="Render the merged view of a declaration")
    inspect.add_argument("catalog", type=str, help="Path to a JSON declaration catalog")
    inspect.add_argument("declaration", type=str, help="Type id of the declared metadata")
    inspect.add_argument(
        "--set",
        dest="attributes",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Attribute written on the declaration; VALUE is parsed as JSON when possible",
    )
    inspect.add_argument(
        "--find",
        type=str,
        help="Type id to look up in the merged metadata (defaults to the declaration)",
    )
    inspect.add_argument(
        "--all",
        dest="all_views",
        action="store_true",
        help="Render every view of the type instead of the nearest one",
    )

    return parser.parse_args(list(argv))


def _parse_assignment(value: str) -> tuple[str, JsonValue]:
    name, separator, raw = value.partition("=")
    name = name.strip()
    if not separator or not name:
        raise ValueError(f"Invalid attribute assignment: {value}")
    try:
        parsed: JsonValue = json.loads(raw)
    except json.JSONDecodeError:
        parsed = raw
    return name, parsed


def _parse_attributes(assignments: Sequence[str]) -> dict[str, JsonValue]:
    attributes: dict[str, JsonValue] = {}
    for assignment in assignments:
        name, value = _parse_assignment(assignment)
        if name in attributes:
            raise ValueError(f"Attribute '{name}' assigned more than once")
        attributes[name] = value
    return attributes


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        configure_logging(level=get_logging_config().level)
        parsed_args = _parse_args(args_list)
        attributes = _parse_attributes(parsed_args.attributes)
    except (ValueError, SettingsError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "inspect":
            result = inspect_declaration(
                parsed_args.catalog,
                parsed_args.declaration,
                attributes,
                find=parsed_args.find,
                all_views=parsed_args.all_views,
            )
            if not result.found:
                log.warning("No merged metadata of type [%s] found", result.type_id)
            for rendered in result.rendered:
                log.info("%s", rendered)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during inspection")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
