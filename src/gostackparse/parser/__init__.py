"""Goroutine dump parsing.

The parser is forgiving: a goroutine that cannot be decoded is reported as a
:class:`~gostackparse.types.errors.ParseError` and parsing resumes at the
next goroutine header.

Example::

    from gostackparse.parser import parse

    with open("dump.txt", "rb") as f:
        goroutines, errors = parse(f)
"""

from __future__ import annotations

import logging
from typing import List

from gostackparse.parser.frames import (
    LineKind,
    classify,
    decode_stack,
    frames_of,
    parse_created_by,
    parse_file,
    parse_func,
)
from gostackparse.parser.header import decode_header, is_header
from gostackparse.parser.lines import Source, iter_lines, number_lines
from gostackparse.parser.segment import Block, decode_block, segment
from gostackparse.types.errors import ParseError
from gostackparse.types.goroutine import Goroutine, ParseResult

logger = logging.getLogger(__name__)


def parse(source: Source) -> ParseResult:
    """Parse a goroutine dump as printed by ``runtime.Stack(buf, true)``.

    Parameters
    ----------
    source:
        Bytes, a string, or a binary or text stream.  Streams are read to
        the end but not closed.

    Returns
    -------
    ParseResult
        The decoded goroutines and the errors of the blocks that could not
        be decoded, each in input order.  Never raises for malformed input.
    """
    goroutines: List[Goroutine] = []
    errors: List[ParseError] = []
    for block in segment(number_lines(iter_lines(source))):
        try:
            goroutines.append(decode_block(block))
        except ParseError as err:
            logger.debug("dropping goroutine at line %d: %s", block.lineno, err)
            errors.append(err)
    return ParseResult(goroutines, errors)


__all__ = [
    "Block",
    "LineKind",
    "classify",
    "decode_block",
    "decode_header",
    "decode_stack",
    "frames_of",
    "is_header",
    "iter_lines",
    "number_lines",
    "parse",
    "parse_created_by",
    "parse_file",
    "parse_func",
    "segment",
]
