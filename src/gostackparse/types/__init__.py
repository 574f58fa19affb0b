from __future__ import annotations

from gostackparse.types.config import (
    LoggingConfig,
    OutputConfig,
    StackParseConfig,
    load_config,
)
from gostackparse.types.errors import ErrorKind, ParseError
from gostackparse.types.goroutine import DumpReport, Frame, Goroutine, ParseResult

__all__ = [
    # config
    "LoggingConfig",
    "OutputConfig",
    "StackParseConfig",
    "load_config",
    # errors
    "ErrorKind",
    "ParseError",
    # goroutine
    "DumpReport",
    "Frame",
    "Goroutine",
    "ParseResult",
]
