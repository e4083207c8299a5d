"""
qdebug error taxonomy.

None of these ever reach the caller of Q(); the logger catches them and
degrades to less informative output (or no output at all).
"""

from __future__ import annotations

from typing import Optional


class QError(Exception):
    """Base class for qdebug errors."""


class SourceUnavailable(QError):
    """Raised when a call site's source file cannot be read or parsed."""
    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Source unavailable: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class AmbiguousCallSite(QError):
    """Raised when zero or several calls match a call site."""
    def __init__(self, path: str, line: int, candidates: int):
        self.path = path
        self.line = line
        self.candidates = candidates
        super().__init__(f"{candidates} matching calls at {path}:{line}, expected 1")


class FileWriteFailure(QError):
    """Raised when the log file cannot be opened or written."""
    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write log file {path}: {reason}")
