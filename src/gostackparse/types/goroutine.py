from __future__ import annotations

from datetime import timedelta
from typing import List, NamedTuple, Optional

from pydantic import BaseModel, Field, field_serializer

from gostackparse.types.errors import ParseError


class Frame(BaseModel):
    """A single stack location."""

    function: str
    file: str = ""
    line: int = 0


class Goroutine(BaseModel):
    """One goroutine parsed from a stack dump.

    ``stack`` is ordered innermost call first, i.e. the function that was
    executing when the dump was taken comes first.  ``ancestors`` is only
    populated for dumps taken with ``GODEBUG=tracebackancestors=N``; it lists
    the creating goroutine first, then its creator, and so on.  The list is
    flat: ancestor records never carry ancestors of their own.
    """

    id: int
    state: str = ""
    wait: timedelta = timedelta(0)
    locked_to_thread: bool = False
    stack: List[Frame] = Field(default_factory=list)
    frames_elided: bool = False
    created_by: Optional[Frame] = None
    ancestors: List[Goroutine] = Field(default_factory=list)

    @field_serializer("wait", when_used="json")
    def serialize_wait(self, wait: timedelta) -> int:
        """Emit the wait duration as whole seconds in JSON output."""
        return int(wait.total_seconds())


class ParseResult(NamedTuple):
    """Goroutines and errors produced by a single parse call.

    Unpacks as ``goroutines, errors = parse(...)``.
    """

    goroutines: List[Goroutine]
    errors: List[ParseError]


class DumpReport(BaseModel):
    """Serialized form shared by the CLI and the golden test files."""

    errors: List[str] = []
    goroutines: List[Goroutine] = []

    @classmethod
    def from_result(cls, result: ParseResult) -> DumpReport:
        return cls(
            errors=[str(err) for err in result.errors],
            goroutines=result.goroutines,
        )
