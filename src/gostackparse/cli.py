"""``gostack2json``: convert a goroutine dump to JSON.

Usage:
  gostack2json < dump.txt
  gostack2json dump.txt --indent 4
  go run ./cmd/crasher 2>&1 | gostack2json -v
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import TypeAdapter
from rich.console import Console
from rich.markup import escape

from gostackparse.parser import parse
from gostackparse.types.config import load_config
from gostackparse.types.goroutine import Goroutine, ParseResult

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_PARSE_ERRORS = 1
EXIT_BAD_INPUT = 2

_GOROUTINES = TypeAdapter(List[Goroutine])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gostack2json",
        description="Parse a Go goroutine dump and print it as JSON.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="Dump file to read, or '-' for standard input (default).",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=None,
        help="JSON indentation (overrides the config file).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a gostackparse.toml file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log parser decisions to stderr.",
    )
    return parser


def render_goroutines(result: ParseResult, indent: int) -> str:
    """Return the goroutines of *result* as a JSON array."""
    return _GOROUTINES.dump_json(result.goroutines, indent=indent or None).decode()


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    err_console = Console(stderr=True, highlight=False)

    config = load_config(args.config)
    level = "DEBUG" if args.verbose else config.logging.level
    logging.basicConfig(level=level, format="%(name)s | %(message)s")

    indent = args.indent if args.indent is not None else config.output.indent

    try:
        data = _read_input(args.input)
    except OSError as exc:
        err_console.print(f"[bold red]error:[/] cannot read {escape(args.input)}: {escape(str(exc))}")
        return EXIT_BAD_INPUT

    result = parse(data)
    logger.debug(
        "parsed %d goroutines, %d errors", len(result.goroutines), len(result.errors)
    )
    print(render_goroutines(result, indent))

    if result.errors:
        for i, err in enumerate(result.errors, 1):
            print(f"error {i}: {err}")
        err_console.print(f"{len(result.errors)} errors occurred", markup=False)
        return EXIT_PARSE_ERRORS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
