"""Stack frame decoding.

Each frame in a goroutine dump takes two lines, a call expression followed by
a tab-indented source location::

    net/http.(*persistConn).writeLoop(0xc0001a5c20)
    	/usr/local/go/src/net/http/transport.go:2421 +0x12e

The stack may be followed by a ``created by`` frame and, when the dump was
taken with ``GODEBUG=tracebackancestors=N``, by one or more ancestor traces
introduced by ``[originating from goroutine N]:``.
"""

from __future__ import annotations

import logging
import re
from enum import Enum, auto
from typing import List, Sequence, Tuple

from gostackparse.types.errors import ErrorKind, ParseError
from gostackparse.types.goroutine import Frame, Goroutine

logger = logging.getLogger(__name__)

CREATED_BY_PREFIX = "created by "
ANCESTOR_PREFIX = "[originating from goroutine"
STACK_UNAVAILABLE = "goroutine running on other thread; stack unavailable"

# The path is greedy so the *last* ":<line>" wins, which keeps drive letters
# (C:\...) and spaces inside the path intact.
_FILE_RE = re.compile(
    r"^\t(?P<file>[^\t].*):(?P<line>\d{1,19})"
    r"(?: \+0x[0-9a-fA-F]+)?"
    r"(?: [a-z]+=\S*)*$",
    re.ASCII,
)
_CREATED_IN_RE = re.compile(r" in goroutine \d+$", re.ASCII)
_ANCESTOR_RE = re.compile(r"^\[originating from goroutine (?P<id>\d{1,20})\]:$", re.ASCII)
_ELIDED_RE = re.compile(r"^\.\.\.(?:additional|\d+) frames elided\.\.\.$", re.ASCII)


class LineKind(Enum):
    """What a line inside a goroutine block introduces."""

    BLANK = auto()
    CALL = auto()
    CREATED_BY = auto()
    ANCESTOR = auto()
    ELIDED = auto()
    UNAVAILABLE = auto()


def classify(line: str) -> LineKind:
    """Classify the first line of the next record in a goroutine block."""
    if not line:
        return LineKind.BLANK
    if line.startswith(CREATED_BY_PREFIX):
        return LineKind.CREATED_BY
    if line.startswith(ANCESTOR_PREFIX):
        return LineKind.ANCESTOR
    if _ELIDED_RE.match(line):
        return LineKind.ELIDED
    if line.strip() == STACK_UNAVAILABLE:
        return LineKind.UNAVAILABLE
    return LineKind.CALL


# -- single line decoders -------------------------------------------------


def parse_func(line: str, lineno: int = 0) -> str:
    """Return the qualified function name of a call expression line.

    A valid call has at least one matched pair of parentheses.  Several
    pairs are allowed (``pkg.(*T).Method(args)``) but nesting is not, and
    the last pair holds the arguments.

    Raises
    ------
    ParseError
        With :attr:`ErrorKind.INVALID_CALL` for unbalanced, nested or
        truncated parentheses, or an empty function name.
    """
    open_index = -1
    close_index = -1
    for i, c in enumerate(line):
        if c == "(":
            if open_index != -1 and close_index == -1:
                raise ParseError(lineno, ErrorKind.INVALID_CALL, line)
            open_index = i
            close_index = -1
        elif c == ")":
            if open_index == -1 or close_index != -1:
                raise ParseError(lineno, ErrorKind.INVALID_CALL, line)
            close_index = i

    if open_index <= 0 or close_index == -1:
        raise ParseError(lineno, ErrorKind.INVALID_CALL, line)
    return line[:open_index]


def parse_file(line: str, lineno: int = 0) -> Tuple[str, int]:
    """Return the ``(file, line)`` pair of a tab-indented location line.

    The optional ``+0x...`` pc offset and ``fp=``/``sp=``/``pc=``
    annotations are accepted and discarded.

    Raises
    ------
    ParseError
        With :attr:`ErrorKind.INVALID_FILE` if the tab prefix, the path or
        the line number is missing.
    """
    m = _FILE_RE.match(line)
    if m is None:
        raise ParseError(lineno, ErrorKind.INVALID_FILE, line)
    return m.group("file"), int(m.group("line"))


def parse_created_by(line: str, lineno: int = 0) -> str:
    """Return the function name of a ``created by`` line.

    The ``in goroutine N`` suffix printed since Go 1.21 is dropped.
    """
    name = _CREATED_IN_RE.sub("", line[len(CREATED_BY_PREFIX):].strip(), count=1)
    if not name:
        raise ParseError(lineno, ErrorKind.INVALID_CALL, line)
    return name


def parse_ancestor(line: str) -> Goroutine | None:
    """Return an empty ancestor record for a well-formed marker, else ``None``."""
    m = _ANCESTOR_RE.match(line)
    if m is None or int(m.group("id")) >= 1 << 64:
        return None
    return Goroutine(id=int(m.group("id")))


# -- block decoder ----------------------------------------------------------


def _location(
    lines: Sequence[Tuple[int, str]], i: int, call_lineno: int, call_line: str
) -> Tuple[str, int]:
    if i >= len(lines):
        raise ParseError(call_lineno, ErrorKind.UNEXPECTED_EOF, call_line)
    lineno, line = lines[i]
    return parse_file(line, lineno)


def decode_stack(goroutine: Goroutine, lines: Sequence[Tuple[int, str]]) -> Goroutine:
    """Fill in the stack, created-by frame and ancestors of *goroutine*.

    Parameters
    ----------
    goroutine:
        The record produced by the header decoder.  It is populated in place.
    lines:
        ``(lineno, text)`` pairs following the header, up to the next header.

    Returns
    -------
    Goroutine
        *goroutine* itself.

    Raises
    ------
    ParseError
        On the first malformed record; the rest of the block is not looked
        at.
    """
    target = goroutine
    fresh = True  # no record decoded yet for ``target``
    i = 0
    while i < len(lines):
        lineno, line = lines[i]
        kind = classify(line)

        if kind is LineKind.BLANK:
            if fresh and target is goroutine:
                raise ParseError(lineno, ErrorKind.INVALID_CALL, line)
            break

        # Running goroutines of a crashing process may only have a created-by.
        if kind is LineKind.UNAVAILABLE and fresh and target is goroutine:
            fresh = False
            i += 1
            continue

        if kind is LineKind.ELIDED:
            target.frames_elided = True
            fresh = False
            i += 1
            continue

        if kind is LineKind.ANCESTOR:
            ancestor = parse_ancestor(line)
            if ancestor is None or i + 1 >= len(lines) or not lines[i + 1][1]:
                logger.debug("line %d: skipping ancestor marker %r", lineno, line)
                break
            goroutine.ancestors.append(ancestor)
            target = ancestor
            fresh = True
            i += 1
            continue

        if kind is LineKind.CREATED_BY:
            function = parse_created_by(line, lineno)
            file, line_number = _location(lines, i + 1, lineno, line)
            target.created_by = Frame(function=function, file=file, line=line_number)
            i += 2
            # Only an ancestor trace may follow a created-by frame.
            if i < len(lines) and classify(lines[i][1]) is LineKind.ANCESTOR:
                fresh = False
                continue
            break

        function = parse_func(line, lineno)
        file, line_number = _location(lines, i + 1, lineno, line)
        target.stack.append(Frame(function=function, file=file, line=line_number))
        fresh = False
        i += 2

    return goroutine


def frames_of(goroutine: Goroutine) -> List[Frame]:
    """Return every frame of *goroutine* and its ancestors, outermost record first."""
    frames: List[Frame] = []
    for record in [goroutine, *goroutine.ancestors]:
        frames.extend(record.stack)
        if record.created_by is not None:
            frames.append(record.created_by)
    return frames
