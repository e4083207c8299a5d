"""
Line Composer - lays rendered blobs out under a timestamp.

    0.153s a=1 b=[1, 2, 3] c=Point{
               x: 1,
               y: 2,
           }

Blobs are placed greedily, one space apart, until the next one would push
the line past the maximum width. Wrapped lines and embedded newlines are
indented to the column right after the timestamp.
"""

from __future__ import annotations

from typing import Sequence

from qdebug.render import YELLOW, arg_width, colorize

MAX_LINE_WIDTH = 80


def compose(
    args: Sequence[str],
    timestamp: str,
    max_width: int = MAX_LINE_WIDTH,
    color: bool = True,
) -> str:
    """Build the text block for one Q() call, newline-terminated."""
    timestamp_width = len(timestamp) + 1  # +1 for the space after it
    indent = " " * timestamp_width

    parts = [colorize(timestamp, YELLOW) if color else timestamp, " "]

    padding = ""    # space between blobs
    line_args = 0   # blobs already on the current physical line
    line_width = timestamp_width
    for arg in args:
        width = arg_width(arg)
        line_width += width + len(padding)

        arg = arg.replace("\n", "\n" + indent)

        # The first blob on a line is never deferred, however wide it is
        if line_width > max_width and line_args != 0:
            parts.append("\n" + indent)
            line_args = 0
            line_width = timestamp_width + width
            padding = ""

        parts.append(padding + arg)
        line_args += 1
        padding = " "

    parts.append("\n")
    return "".join(parts)
