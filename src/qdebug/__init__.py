"""
qdebug - quick and dirty debugging output for tired programmers.

    from qdebug import Q
    Q(foo, bar.baz, len(items))

Q() pretty-prints its arguments, with their source expressions as names,
to the $TMPDIR/q log file so they stay out of your program's output. Watch
it with ``qdebug tail -f``.
"""

__version__ = "0.1.0"
__author__ = "qdebug contributors"

from qdebug.errors import AmbiguousCallSite, FileWriteFailure, QError, SourceUnavailable
from qdebug.logger import Logger, Options, Q, default_log_path, std

__all__ = [
    "Q",
    "Logger",
    "Options",
    "default_log_path",
    "std",
    # Errors
    "QError",
    "SourceUnavailable",
    "AmbiguousCallSite",
    "FileWriteFailure",
]
