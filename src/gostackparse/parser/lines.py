"""Line splitting for goroutine dumps.

Frame location lines are indented by a single tab, so leading whitespace is
significant and is never stripped here.
"""

from __future__ import annotations

import io
from typing import IO, Iterable, Iterator, Tuple, Union

Source = Union[bytes, bytearray, memoryview, str, IO[bytes], IO[str], Iterable]


def _strip_eol(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def iter_lines(source: Source) -> Iterator[str]:
    """Yield the lines of *source* with terminators removed.

    *source* may be raw bytes, a string, or a binary/text stream.  Bytes are
    decoded as UTF-8 with replacement characters, so arbitrary input never
    raises.  Only ``\\n`` ends a line; a trailing ``\\r`` is dropped like
    Go's ``bufio.ScanLines`` does.  A final line without a terminator is
    still yielded.
    """
    if isinstance(source, (bytes, bytearray, memoryview)):
        source = io.BytesIO(bytes(source))
    elif isinstance(source, str):
        source = io.StringIO(source, newline="\n")

    for raw in source:
        if isinstance(raw, (bytes, bytearray)):
            raw = bytes(raw).decode("utf-8", errors="replace")
        yield _strip_eol(raw)


def number_lines(lines: Iterable[str], start: int = 1) -> Iterator[Tuple[int, str]]:
    """Pair each line with its 1-based line number."""
    return enumerate(lines, start)
