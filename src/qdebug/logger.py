"""
qdebug logger - the buffered sink behind Q().

Q() pretty-prints its arguments to the $TMPDIR/q log file, away from the
program's own output:

    from qdebug import Q
    Q(user, user.id, len(items))

Each call is rendered, named, laid out and appended to an in-memory buffer
while holding the logger's lock, then the buffer is flushed to the file.
Failures degrade quietly: no names, or no output at all, but never an
exception in the host program.

Usage:
    from qdebug.logger import Logger, Options

    log = Logger(Options(path=Path("/tmp/mylog"), color=False))
    log(x, y)
"""

from __future__ import annotations

import inspect
import io
import logging
import os
import tempfile
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from types import FrameType
from typing import Any, Callable, List, Optional, Sequence

from qdebug.compose import MAX_LINE_WIDTH, compose
from qdebug.errors import AmbiguousCallSite, FileWriteFailure, SourceUnavailable
from qdebug.locator import SourceLocator, caller_info
from qdebug.render import Renderer, format_args, prepend_names
from qdebug.session import DEFAULT_WINDOW, SessionTracker

logger = logging.getLogger(__name__)

LOG_FILE_MODE = 0o600


def default_log_path() -> Path:
    """The q log file in the system temp directory."""
    return Path(tempfile.gettempdir()) / "q"


@dataclass
class Options:
    """Tunables for a Logger. Only ever passed in by the caller."""
    path: Path = field(default_factory=default_log_path)
    max_line_width: int = MAX_LINE_WIDTH
    session_window: float = DEFAULT_WINDOW  # seconds of idle before a new header
    color: bool = True


def _private_opener(path: str, flags: int) -> int:
    return os.open(path, flags, LOG_FILE_MODE)


class Logger:
    """
    Writes pretty logs to the q file. Safe for concurrent use.

    One lock guards the session state, the source cache and the buffer for
    the whole of a call, so concurrent calls land in the file whole and in
    lock order. The lock is re-entrant: a __repr__ that calls Q() itself
    still gets through instead of deadlocking the program.
    """

    def __init__(
        self,
        options: Optional[Options] = None,
        clock: Callable[[], float] = time.monotonic,
        wallclock: Callable[[], float] = time.time,
    ):
        self.options = options or Options()
        self.session = SessionTracker(self.options.session_window, clock, wallclock)
        self.locator = SourceLocator()

        self._lock = threading.RLock()
        self._buf = io.StringIO()

    @property
    def path(self) -> Path:
        return Path(self.options.path)

    def log(self, *values: Any) -> None:
        """Pretty-print values to the log file."""
        frame = inspect.currentframe()
        try:
            self.emit(values, frame.f_back if frame is not None else None)
        finally:
            del frame

    __call__ = log

    def emit(self, values: Sequence[Any], frame: Optional[FrameType]) -> None:
        """Log values as if Q() had been called from ``frame``."""
        with self._lock:
            try:
                self._write(values, frame)
            except Exception as e:
                logger.debug(f"Dropped q output: {type(e).__name__}: {e}")
            finally:
                self.flush()

    def _write(self, values: Sequence[Any], frame: Optional[FrameType]) -> None:
        color = self.options.color

        site = caller_info(frame)
        header = ""
        names: List[str] = []
        if site is not None:
            # New header if this call is in a different file or function
            # than the last one, or the session window ran out.
            header = self.session.header(site.function, site.file, site.line)
            try:
                names = self.locator.arg_names(site.file, site.line, site.column, count=len(values))
            except (SourceUnavailable, AmbiguousCallSite) as e:
                logger.debug(f"No argument names: {e}")

        timestamp = self.session.timestamp()
        args = format_args(values, self._renderer(timestamp), color=color, names=names)

        if header:
            self._buf.write(f"\n{header}\n")
        self._buf.write(compose(
            prepend_names(names, args, color=color),
            timestamp,
            max_width=self.options.max_line_width,
            color=color,
        ))

    def _renderer(self, timestamp: str) -> Renderer:
        # Blobs start after "<timestamp> " at the earliest
        return Renderer(width=self.options.max_line_width - len(timestamp) - 1)

    def flush(self) -> bool:
        """Append the buffer to the log file and clear it.

        The buffer is cleared even when the write fails. Returns False if
        the write failed.
        """
        with self._lock:
            data = self._buf.getvalue()
            self._buf.seek(0)
            self._buf.truncate()
            if not data:
                return True

            try:
                self._append(data)
            except FileWriteFailure as e:
                logger.debug(str(e))
                return False
            return True

    def _append(self, data: str) -> None:
        try:
            with open(self.path, "a", encoding="utf-8", opener=_private_opener) as f:
                f.write(data)
        except (OSError, ValueError) as e:
            raise FileWriteFailure(str(self.path), str(e)) from e


# The standard q logger
std = Logger()


def Q(*values: Any) -> None:
    """Pretty-print values to the $TMPDIR/q log file."""
    frame = inspect.currentframe()
    try:
        std.emit(values, frame.f_back if frame is not None else None)
    finally:
        del frame
