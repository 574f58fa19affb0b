"""Split a numbered line stream into per-goroutine blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Tuple

from gostackparse.parser.frames import decode_stack
from gostackparse.parser.header import decode_header, is_header
from gostackparse.types.goroutine import Goroutine

logger = logging.getLogger(__name__)


@dataclass
class Block:
    """The header line of one goroutine and every line up to the next header."""

    lines: List[Tuple[int, str]] = field(default_factory=list)

    @property
    def lineno(self) -> int:
        return self.lines[0][0]

    @property
    def header(self) -> str:
        return self.lines[0][1]

    @property
    def body(self) -> List[Tuple[int, str]]:
        return self.lines[1:]


def segment(lines: Iterable[Tuple[int, str]]) -> Iterator[Block]:
    """Group ``(lineno, text)`` pairs into goroutine blocks.

    Anything before the first header (panic messages, ``runtime stack:``
    sections, signal details) is ignored.
    """
    block: Block | None = None
    skipped = 0
    for lineno, line in lines:
        if is_header(line):
            if block is not None:
                yield block
            block = Block([(lineno, line)])
        elif block is None:
            skipped += 1
        else:
            block.lines.append((lineno, line))

    if skipped:
        logger.debug("ignored %d lines before the first goroutine header", skipped)
    if block is not None:
        yield block


def decode_block(block: Block) -> Goroutine:
    """Decode one block into a :class:`Goroutine`.

    Raises
    ------
    ParseError
        For the first malformed line of the block.  A bad header means the
        frames are not looked at.
    """
    goroutine = decode_header(block.header, block.lineno)
    return decode_stack(goroutine, block.body)
