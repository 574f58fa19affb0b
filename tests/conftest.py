"""Root conftest with shared fixtures for the entire test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_addoption(parser):
    parser.addoption(
        "--update-golden",
        action="store_true",
        default=False,
        help="Rewrite tests/fixtures/*.golden.json from the current parser output.",
    )


@pytest.fixture()
def update_golden(request) -> bool:
    return request.config.getoption("--update-golden")


@pytest.fixture()
def fixtures_dir() -> Path:
    return FIXTURES_DIR


# ---------------------------------------------------------------------------
# Sample dumps
# ---------------------------------------------------------------------------

@pytest.fixture()
def simple_dump() -> str:
    """A two-goroutine dump as printed by ``panic``."""
    return (
        "panic: oh no\n"
        "\n"
        "goroutine 1 [running]:\n"
        "main.main()\n"
        "\t/go/src/example.org/example/main.go:231 +0x1187\n"
        "\n"
        "goroutine 6 [chan receive, 3 minutes]:\n"
        "main.worker(0xc000022120)\n"
        "\t/go/src/example.org/example/worker.go:14 +0x3b\n"
        "created by main.main in goroutine 1\n"
        "\t/go/src/example.org/example/main.go:21 +0x45\n"
    )


@pytest.fixture()
def waitsince_dump(fixtures_dir) -> bytes:
    return (fixtures_dir / "waitsince.txt").read_bytes()


@pytest.fixture()
def deep_ancestry_dump() -> str:
    """A goroutine with 400 ancestor traces, as printed with a large
    ``GODEBUG=tracebackancestors``."""
    lines = [
        "goroutine 401 [chan send]:",
        "main.leaf(0x1)",
        "\t/tmp/chain.go:10 +0x1d",
        "created by main.spawn in goroutine 400",
        "\t/tmp/chain.go:20 +0x4b",
    ]
    for gid in range(400, 0, -1):
        lines += [
            f"[originating from goroutine {gid}]:",
            "main.spawn(...)",
            f"\t/tmp/chain.go:{gid} +0x4b",
        ]
    return "\n".join(lines) + "\n"
