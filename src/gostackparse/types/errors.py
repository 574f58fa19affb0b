"""Error types reported by the goroutine dump parser."""

from __future__ import annotations

import json
from enum import Enum


class ErrorKind(Enum):
    """Classification of a per-goroutine decoding failure."""

    INVALID_HEADER = "invalid goroutine header"
    INVALID_CALL = "invalid function call"
    INVALID_FILE = "invalid file:line ref"
    UNEXPECTED_EOF = "unexpected end of input"


class ParseError(Exception):
    """A single goroutine block that could not be decoded.

    Parameters
    ----------
    lineno:
        1-based number of the line the failure was detected on.
    kind:
        The :class:`ErrorKind` describing the failure.
    text:
        The offending line, without its terminator.
    """

    def __init__(self, lineno: int, kind: ErrorKind, text: str = "") -> None:
        self.lineno = lineno
        self.kind = kind
        self.text = text
        super().__init__(f"{lineno}: {kind.value}: {json.dumps(text)}")

    def __repr__(self) -> str:
        return f"ParseError(lineno={self.lineno!r}, kind={self.kind!r}, text={self.text!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.lineno, self.kind, self.text) == (other.lineno, other.kind, other.text)

    def __hash__(self) -> int:
        return hash((self.lineno, self.kind, self.text))
