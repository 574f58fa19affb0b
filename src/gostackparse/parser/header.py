"""Goroutine header line decoding.

A header looks like::

    goroutine 42 [select, 5 minutes, locked to thread]:

Go 1.23+ crash tracebacks may add scheduler details between the id and the
state list (``goroutine 18 gp=0xc000104380 m=4 mp=0xc000080008 [running]:``);
those are recognized and dropped.

The wait clause is a positive count without leading zeros; the runtime omits
it below one minute, so ``[select, 0 minutes]`` is rejected.
"""

from __future__ import annotations

import re
from datetime import timedelta

from gostackparse.types.errors import ErrorKind, ParseError
from gostackparse.types.goroutine import Goroutine

GOROUTINE_PREFIX = "goroutine "

# Largest id that fits in a Go uint64.
MAX_GOROUTINE_ID = (1 << 64) - 1

_HEADER_RE = re.compile(
    r"^goroutine (?P<id>\d+)"
    r"(?: gp=0x[0-9a-fA-F]+ m=(?:\d+|nil)(?: mp=0x[0-9a-fA-F]+)?)?"
    r" \[(?P<state>[^,\]]+)"
    r"(?:, (?P<wait>[1-9]\d*) (?P<unit>[a-z]+))?"
    r"(?P<locked>, locked to thread)?"
    r"\]:$",
    re.ASCII,
)


def is_header(line: str) -> bool:
    """Return ``True`` if *line* starts a goroutine block, valid or not."""
    return line.startswith(GOROUTINE_PREFIX)


def decode_header(line: str, lineno: int = 0) -> Goroutine:
    """Parse a goroutine header line into an empty :class:`Goroutine`.

    Parameters
    ----------
    line:
        The full header line, including the ``goroutine`` prefix.
    lineno:
        Line number used when reporting an error.

    Raises
    ------
    ParseError
        With :attr:`ErrorKind.INVALID_HEADER` if *line* does not match the
        header grammar.
    """
    m = _HEADER_RE.match(line)
    if m is None:
        raise ParseError(lineno, ErrorKind.INVALID_HEADER, line)

    digits = m.group("id")
    if len(digits) > 20 or int(digits) > MAX_GOROUTINE_ID:
        raise ParseError(lineno, ErrorKind.INVALID_HEADER, line)

    # Only minutes are ever printed by the runtime; other units are ignored.
    wait = timedelta(0)
    if m.group("wait") is not None and m.group("unit") == "minutes":
        try:
            wait = timedelta(minutes=int(m.group("wait")))
        except (OverflowError, ValueError):
            raise ParseError(lineno, ErrorKind.INVALID_HEADER, line) from None

    return Goroutine(
        id=int(digits),
        state=m.group("state"),
        wait=wait,
        locked_to_thread=m.group("locked") is not None,
    )
