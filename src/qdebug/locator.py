"""
Source Locator - recovers argument names from a Q() call site.

Given a file and a line, parses the source once (cached per absolute path),
finds the single call expression written there, and returns the literal
text of each positional argument:

    Q(x, y.Z, "lit")   ->   ["x", "y.Z", '"lit"']

Usage:
    from qdebug.locator import SourceLocator, caller_info

    site = caller_info(frame)
    names = SourceLocator().arg_names(site.file, site.line, site.column, count=3)
"""

from __future__ import annotations

import ast
import inspect
import logging
import os
import tokenize
from dataclasses import dataclass
from types import FrameType
from typing import Dict, List, Optional

from qdebug.errors import AmbiguousCallSite, SourceUnavailable

logger = logging.getLogger(__name__)


@dataclass
class CallSite:
    """Where a Q() call happened."""
    file: str
    line: int
    function: str
    column: Optional[int] = None  # 0-based, only on interpreters with positions

    @property
    def basename(self) -> str:
        return os.path.basename(self.file)


def caller_info(frame: Optional[FrameType]) -> Optional[CallSite]:
    """Describe the call currently executing in ``frame``.

    Returns None when no frame is available (interpreters without frame
    introspection).
    """
    if frame is None:
        return None

    code = frame.f_code
    function = getattr(code, "co_qualname", code.co_name)

    column = None
    info = inspect.getframeinfo(frame, context=0)
    positions = getattr(info, "positions", None)
    if positions is not None and positions.col_offset is not None:
        column = positions.col_offset

    return CallSite(
        file=code.co_filename,
        line=frame.f_lineno,
        function=function,
        column=column,
    )


@dataclass
class _ParsedSource:
    text: str
    tree: ast.Module


class SourceLocator:
    """
    Finds call expressions in Python source and extracts argument text.

    Parsed files are cached by absolute path for the lifetime of the
    locator. Files that fail to load are not cached, so a file that shows
    up later is picked up on the next call.
    """

    def __init__(self):
        self._cache: Dict[str, _ParsedSource] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        """Forget every parsed file."""
        self._cache.clear()

    def _load(self, path: str) -> _ParsedSource:
        key = os.path.abspath(path)
        parsed = self._cache.get(key)
        if parsed is not None:
            return parsed

        try:
            # tokenize.open honours PEP 263 coding cookies
            with tokenize.open(key) as f:
                text = f.read()
        except (OSError, SyntaxError, UnicodeDecodeError) as e:
            raise SourceUnavailable(path, str(e)) from e

        try:
            tree = ast.parse(text, filename=key)
        except (SyntaxError, ValueError) as e:
            raise SourceUnavailable(path, f"parse failed: {e}") from e

        parsed = _ParsedSource(text=text, tree=tree)
        self._cache[key] = parsed
        logger.debug(f"Parsed {key}")
        return parsed

    def find_call(
        self,
        path: str,
        line: int,
        column: Optional[int] = None,
        count: Optional[int] = None,
    ) -> ast.Call:
        """Return the one call expression that starts at ``path:line``.

        ``column`` pins the call exactly when it is known. ``count`` drops
        calls whose positional argument count can't match the values that
        were passed.

        Raises:
            SourceUnavailable: the file can't be read or parsed
            AmbiguousCallSite: zero or several calls remain
        """
        parsed = self._load(path)

        candidates = [
            node for node in ast.walk(parsed.tree)
            if isinstance(node, ast.Call) and node.lineno == line
        ]

        if column is not None and len(candidates) > 1:
            exact = [c for c in candidates if c.col_offset == column]
            if len(exact) == 1:
                return exact[0]

        if count is not None:
            candidates = [
                c for c in candidates
                if len(c.args) == count
                and not any(isinstance(a, ast.Starred) for a in c.args)
            ]

        if len(candidates) != 1:
            raise AmbiguousCallSite(path, line, len(candidates))
        return candidates[0]

    def arg_names(
        self,
        path: str,
        line: int,
        column: Optional[int] = None,
        count: Optional[int] = None,
    ) -> List[str]:
        """Literal source text of each positional argument at a call site."""
        call = self.find_call(path, line, column, count)
        text = self._cache[os.path.abspath(path)].text
        return [ast.get_source_segment(text, arg) or "" for arg in call.args]
