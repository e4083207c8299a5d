"""
Session Tracker - groups bursts of Q() calls under one header.

A session is a run of calls from the same function and file with less than
the inactivity window (2s by default) between consecutive calls. Each
session gets a header line and its own relative clock:

    [14:00:36 main.py:122 main]
    0.000s x=1
    0.153s x=2
"""

from __future__ import annotations

import os
import time
from typing import Callable, Optional

# Idle time after which the next call opens a new session
DEFAULT_WINDOW = 2.0


class SessionTracker:
    """
    Decides when to print a header and measures time since session start.

    The inactivity window is a deadline pushed forward on every call and
    checked on the next one; nothing runs between calls.
    """

    def __init__(
        self,
        window: float = DEFAULT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
        wallclock: Callable[[], float] = time.time,
    ):
        self.window = window
        self._clock = clock
        self._wallclock = wallclock

        self.start: Optional[float] = None
        self.deadline: Optional[float] = None  # None until the first call
        self.last_file: Optional[str] = None
        self.last_function: Optional[str] = None

    def _reset_deadline(self, now: float) -> bool:
        """Push the deadline forward. Returns True if the old one had passed."""
        expired = self.deadline is None or now >= self.deadline
        self.deadline = now + self.window
        return expired

    def header(self, function: str, file: str, line: int) -> str:
        """Header line for this call, or "" when it continues the session."""
        now = self._clock()
        expired = self._reset_deadline(now)

        same_site = function == self.last_function and file == self.last_file
        self.last_function = function
        self.last_file = file

        if not expired and same_site:
            return ""

        self.start = now
        stamp = time.strftime("%H:%M:%S", time.gmtime(self._wallclock()))
        return f"[{stamp} {os.path.basename(file)}:{line} {function}]"

    def elapsed(self) -> float:
        """Seconds since the session started."""
        now = self._clock()
        if self.start is None:
            self.start = now
        return now - self.start

    def timestamp(self) -> str:
        return f"{self.elapsed():.3f}s"
