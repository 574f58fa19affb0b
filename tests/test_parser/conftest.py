"""Parser test fixtures: a combinatorial generator of synthetic dumps.

Every dump is a header line, one or two frames and a created-by frame, each
picked from the fragment tables below.  Fragments that are expected to fail
carry the error kind the parser must report for them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Optional

import pytest

from gostackparse.types.errors import ErrorKind
from gostackparse.types.goroutine import Frame, Goroutine


@dataclass(frozen=True)
class HeaderLine:
    line: str
    want: Optional[Goroutine] = None
    want_err: Optional[ErrorKind] = None


@dataclass(frozen=True)
class FrameLine:
    line: str
    want: Optional[Frame] = None
    want_err: Optional[ErrorKind] = None


@dataclass(frozen=True)
class FrameLines:
    fn: FrameLine
    file: FrameLine

    def __str__(self) -> str:
        return self.fn.line + "\n" + self.file.line + "\n"


@dataclass
class Dump:
    header: HeaderLine
    stack: List[FrameLines] = field(default_factory=list)
    created_by: Optional[FrameLines] = None

    def __str__(self) -> str:
        s = self.header.line + "\n"
        for f in self.stack:
            s += str(f)
        if self.created_by is not None:
            s += str(self.created_by)
        return s

    @property
    def want_err(self) -> Optional[ErrorKind]:
        """The first error the parser should report for this dump."""
        if self.header.want_err is not None:
            return self.header.want_err
        for f in self.stack:
            if f.fn.want_err is not None:
                return f.fn.want_err
            if f.file.want_err is not None:
                return f.file.want_err
        if self.created_by is not None:
            if self.created_by.fn.want_err is not None:
                return self.created_by.fn.want_err
            return self.created_by.file.want_err
        return None


class Generator:
    """Enumerates every dump that can be built from the fragment tables."""

    def __init__(
        self,
        min_stack: int,
        max_stack: int,
        headers: List[HeaderLine],
        funcs: List[FrameLine],
        files: List[FrameLine],
        created_by: List[FrameLine],
    ):
        self.min_stack = min_stack
        self.max_stack = max_stack
        self.headers = headers
        self.funcs = funcs
        self.files = files
        self.created_by = created_by

    def permutations(self) -> int:
        total = 0
        for depth in range(self.min_stack, self.max_stack + 1):
            frames = (len(self.funcs) * len(self.files)) ** depth
            total += len(self.headers) * frames * len(self.created_by) * len(self.files)
        return total

    def generate(self, n: int) -> Dump:
        n = n % self.permutations()

        header = self.headers[n % len(self.headers)]
        n //= len(self.headers)

        c_fn = self.created_by[n % len(self.created_by)]
        n //= len(self.created_by)
        c_file = self.files[n % len(self.files)]
        n //= len(self.files)

        stack: List[FrameLines] = []
        depth = 0
        while depth < self.max_stack and (n > 0 or depth < self.min_stack):
            fn = self.funcs[n % len(self.funcs)]
            n //= len(self.funcs)
            file = self.files[n % len(self.files)]
            n //= len(self.files)
            stack.append(FrameLines(fn=fn, file=file))
            depth += 1

        return Dump(header=header, stack=stack, created_by=FrameLines(fn=c_fn, file=c_file))


FIXTURES = Generator(
    # Deeper stacks multiply the permutations without finding new bugs.
    min_stack=1,
    max_stack=2,
    headers=[
        HeaderLine(
            "goroutine 1 [chan receive]:",
            want=Goroutine(id=1, state="chan receive"),
        ),
        HeaderLine(
            "goroutine 2 [IO Wait, locked to thread]:",
            want=Goroutine(id=2, state="IO Wait", locked_to_thread=True),
        ),
        HeaderLine(
            "goroutine 23 [select, 5 minutes]:",
            want=Goroutine(id=23, state="select", wait=timedelta(minutes=5)),
        ),
        HeaderLine(
            "goroutine 42 [select, 5 minutes, locked to thread]:",
            want=Goroutine(id=42, state="select", wait=timedelta(minutes=5), locked_to_thread=True),
        ),
        HeaderLine("goroutine 23 []:", want_err=ErrorKind.INVALID_HEADER),
        HeaderLine("goroutine ", want_err=ErrorKind.INVALID_HEADER),
        HeaderLine("goroutine 1 [chan receive]:\n", want_err=ErrorKind.INVALID_CALL),
    ],
    funcs=[
        FrameLine("main.main()", want=Frame(function="main.main")),
        FrameLine("runtime.goparkunlock(...)", want=Frame(function="runtime.goparkunlock")),
        FrameLine(
            "net/http.(*persistConn).writeLoop(0xc0001a5c20)",
            want=Frame(function="net/http.(*persistConn).writeLoop"),
        ),
        FrameLine("foo.bar", want_err=ErrorKind.INVALID_CALL),
        FrameLine("foo.bar(", want_err=ErrorKind.INVALID_CALL),
        FrameLine("net/http.(*persistConn).writeLoop(0xc0", want_err=ErrorKind.INVALID_CALL),
        FrameLine("net/http.(*persist", want_err=ErrorKind.INVALID_CALL),
        FrameLine("net/http.*persist)(", want_err=ErrorKind.INVALID_CALL),
        FrameLine("net/http.(*persist))", want_err=ErrorKind.INVALID_CALL),
        FrameLine("net/http.((*persist)", want_err=ErrorKind.INVALID_CALL),
        FrameLine("()", want_err=ErrorKind.INVALID_CALL),
    ],
    files=[
        FrameLine(
            "\t/go/src/example.org/example/main.go:231 +0x1187",
            want=Frame(function="", file="/go/src/example.org/example/main.go", line=231),
        ),
        FrameLine(
            "\t/root/go1.15.6.linux.amd64/src/runtime/proc.go:312",
            want=Frame(function="", file="/root/go1.15.6.linux.amd64/src/runtime/proc.go", line=312),
        ),
        FrameLine(
            "/root/go1.15.6.linux.amd64/src/runtime/proc.go:312",
            want_err=ErrorKind.INVALID_FILE,
        ),
        FrameLine("", want_err=ErrorKind.INVALID_FILE),
    ],
    created_by=[
        FrameLine(
            "created by net/http.(*Server).Serve",
            want=Frame(function="net/http.(*Server).Serve"),
        ),
        FrameLine(
            "created by github.com/example.org/example/k8s.io/klog.init.0",
            want=Frame(function="github.com/example.org/example/k8s.io/klog.init.0"),
        ),
        FrameLine(
            "created by main.main in goroutine 7",
            want=Frame(function="main.main"),
        ),
    ],
)


@pytest.fixture(scope="session")
def permutations() -> Generator:
    return FIXTURES
