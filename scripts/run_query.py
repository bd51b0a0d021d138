#!/usr/bin/env python3
"""Run one Cypher statement against the configured graph backend."""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.log import configure_logging
from config.settings import get_settings
from graphquery.adapters import create_adapter
from graphquery.graph.client import GraphClient
from graphquery.graph.entity import to_plain
from graphquery.graph.errors import QueryError

logger = logging.getLogger(__name__)


def parse_param(raw: str) -> tuple[str, object]:
    """Parse ``key=value``; the value is read as JSON when possible."""
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"Expected key=value, got '{raw}'")
    key, value = raw.split("=", 1)
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run a Cypher statement")
    parser.add_argument("statement", help="Cypher text, or a pattern with --count/--exists")
    parser.add_argument(
        "--param",
        action="append",
        type=parse_param,
        default=[],
        help="Statement parameter as key=value (repeatable)",
    )
    parser.add_argument(
        "--adapter",
        choices=["bolt", "http", "memory"],
        help="Override GRAPH_ADAPTER",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--count", action="store_true", help="Count matches of a pattern")
    mode.add_argument("--exists", action="store_true", help="Test a pattern for any match")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    with GraphClient(create_adapter(settings, args.adapter), settings) as client:
        try:
            if args.count:
                output = client.count(args.statement).unwrap()
            elif args.exists:
                output = client.exists(args.statement)
            else:
                output = client.query_or_raise(args.statement, parameters=dict(args.param))
        except QueryError as e:
            logger.error(f"Query failed: {e}")
            return 1

    print(json.dumps(to_plain(output), indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
