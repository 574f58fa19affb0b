"""Parse Go goroutine stack dumps into structured records."""

from __future__ import annotations

from gostackparse.parser import parse, parse_file, parse_func
from gostackparse.types.config import StackParseConfig, load_config
from gostackparse.types.errors import ErrorKind, ParseError
from gostackparse.types.goroutine import DumpReport, Frame, Goroutine, ParseResult

__all__ = [
    "parse",
    "parse_file",
    "parse_func",
    "Frame",
    "Goroutine",
    "ParseResult",
    "DumpReport",
    "ErrorKind",
    "ParseError",
    "StackParseConfig",
    "load_config",
]
