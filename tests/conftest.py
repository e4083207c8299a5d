"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from qdebug.logger import Logger, Options


# 14:00:36 UTC
WALLCLOCK = 14 * 3600 + 36.0


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def clock():
    """A frozen monotonic clock."""
    return FakeClock()


@pytest.fixture
def log_path(tmp_path):
    """Log file location inside the test's temp dir."""
    return tmp_path / "q"


@pytest.fixture
def make_logger(log_path, clock):
    """Factory for uncolored loggers writing to log_path."""
    def _make(**overrides):
        options = Options(path=overrides.pop("path", log_path), color=False, **overrides)
        return Logger(options, clock=clock, wallclock=lambda: WALLCLOCK)
    return _make


@pytest.fixture
def write_source(tmp_path):
    """Write a Python source file and return its path as a string."""
    def _write(text: str, name: str = "snippet.py") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write
