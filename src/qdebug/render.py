"""
Argument Renderer - pretty, bounded-width text for arbitrary values.

Values are rendered by shape:
- primitive: repr(), strings quoted
- sequence:  [1, 2, 3] on one line when it fits, else one item per line
- mapping:   {'a': 1} on one line when it fits, else one item per line
- record:    TypeName{ field: value, ... } always expanded
- reference: &<referent>

Rendering is pure and never raises. A broken __repr__, a reference cycle
or nesting past MAX_DEPTH turns into a marker string instead.
"""

from __future__ import annotations

import ast
import collections
import dataclasses
import re
import weakref
from collections.abc import Mapping
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Set


# ANSI color escape codes
BOLD = "\033[1m"
YELLOW = "\033[33m"
CYAN = "\033[36m"
END_COLOR = "\033[0m"  # reset everything

_ANSI_RE = re.compile(r"\033\[[0-9;]*m")


def colorize(text: str, color: str) -> str:
    """Wrap text in a color code and a reset."""
    return f"{color}{text}{END_COLOR}"


def strip_ansi(text: str) -> str:
    """Remove color escape codes."""
    return _ANSI_RE.sub("", text)


def arg_width(text: str) -> int:
    """Display width of a blob: its longest line, ignoring color codes."""
    return max(len(line) for line in strip_ansi(text).split("\n"))


# Containers nested deeper than this render as an elided marker
MAX_DEPTH = 24

_UNSET = object()


class Renderer:
    """
    Pretty printer dispatched over a closed set of value shapes.

    Multi-line output keeps its first line unindented; every following line
    is indented absolutely for its nesting level, so callers can place the
    first line wherever they like. ``width`` is measured from the column
    where the rendering starts.
    """

    def __init__(self, width: int = 80, indent: str = "    ", max_depth: int = MAX_DEPTH):
        self.width = width
        self.indent = indent
        self.max_depth = max_depth

    def render(self, value: Any, lead: int = 0) -> str:
        """Render value; ``lead`` columns of text precede its first line."""
        return self._render(value, 0, set(), lead)

    def _render(self, value: Any, level: int, seen: Set[int], lead: int = 0) -> str:
        try:
            return self._dispatch(value, level, seen, lead)
        except Exception as e:
            return f"<{type(value).__name__} render failed: {type(e).__name__}>"

    def _dispatch(self, value: Any, level: int, seen: Set[int], lead: int) -> str:
        if isinstance(value, weakref.ref):
            return self._render_reference(value, level, seen, lead)

        if _is_record(value):
            shape = self._render_record
        elif isinstance(value, Mapping):
            shape = self._render_mapping
        elif isinstance(value, (list, tuple, set, frozenset, collections.deque)):
            shape = self._render_sequence
        else:
            return _render_primitive(value)

        if level >= self.max_depth:
            return f"<{type(value).__name__} ...>"
        return self._guarded(value, seen, lambda: shape(value, level, seen, lead))

    def _guarded(self, value: Any, seen: Set[int], render) -> str:
        """Render a container unless it is already being rendered."""
        key = id(value)
        if key in seen:
            return f"<recursion on {type(value).__name__}>"
        seen.add(key)
        try:
            return render()
        finally:
            seen.discard(key)

    # =========================================================================
    # Shapes
    # =========================================================================

    def _render_reference(self, ref: weakref.ref, level: int, seen: Set[int], lead: int) -> str:
        target = ref()
        if target is None:
            return "&<dead>"
        return "&" + self._render(target, level, seen, lead + 1)

    def _render_sequence(self, value: Any, level: int, seen: Set[int], lead: int) -> str:
        items = [self._render(item, level + 1, seen) for item in value]
        name = type(value).__name__

        if isinstance(value, (set, frozenset)):
            if not items:
                return f"{name}()"
            items.sort()
            if type(value) is set:
                return self._join("{", items, "}", level, lead)
            return self._join(name + "({", items, "})", level, lead)

        if isinstance(value, collections.deque):
            return self._join(name + "([", items, "])", level, lead)

        prefix = "" if type(value) in (list, tuple) else name
        if isinstance(value, list):
            return self._join(prefix + "[", items, "]", level, lead)
        if len(items) == 1:
            # (x,) stays a tuple
            return self._join(prefix + "(", [items[0] + ","], ")", level, lead, trailing=False)
        return self._join(prefix + "(", items, ")", level, lead)

    def _render_mapping(self, value: Mapping, level: int, seen: Set[int], lead: int) -> str:
        items = []
        for k, v in value.items():
            key = self._render(k, level + 1, seen)
            key_width = len(key.rsplit("\n", 1)[-1]) + 2  # "key: "
            items.append(f"{key}: {self._render(v, level + 1, seen, key_width)}")
        open_ = "{" if type(value) is dict else type(value).__name__ + "{"
        return self._join(open_, items, "}", level, lead)

    def _render_record(self, value: Any, level: int, seen: Set[int], lead: int) -> str:
        name = type(value).__qualname__
        fields = []
        for field, v in _record_fields(value):
            text = "<unset>" if v is _UNSET else self._render(v, level + 1, seen, len(field) + 2)
            fields.append(f"{field}: {text}")
        if not fields:
            return name + "{}"
        return self._expanded(name + "{", fields, "}", level)

    # =========================================================================
    # Layout
    # =========================================================================

    def _join(
        self,
        open_: str,
        items: List[str],
        close: str,
        level: int,
        lead: int = 0,
        trailing: bool = True,
    ) -> str:
        """One line when everything fits, otherwise one item per line."""
        one_line = open_ + ", ".join(items) + close
        # nested values sit after a prefix and before the parent's comma
        used = len(self.indent) * level + lead + len(one_line) + (1 if level else 0)
        if used <= self.width and "\n" not in one_line:
            return one_line
        if not trailing:
            # single-item tuple: the comma is already part of the item
            pad = self.indent * (level + 1)
            return f"{open_}\n{pad}{items[0]}\n{self.indent * level}{close}"
        return self._expanded(open_, items, close, level)

    def _expanded(self, open_: str, items: Iterable[str], close: str, level: int) -> str:
        pad = self.indent * (level + 1)
        body = "".join(f"{pad}{item},\n" for item in items)
        return f"{open_}\n{body}{self.indent * level}{close}"


def _render_primitive(value: Any) -> str:
    if isinstance(value, Enum):
        return f"{type(value).__name__}.{value.name}"
    try:
        return repr(value)
    except Exception as e:
        return f"<{type(value).__name__} repr failed: {type(e).__name__}>"


def _is_namedtuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def _is_record(value: Any) -> bool:
    if isinstance(value, type):
        return False
    if dataclasses.is_dataclass(value) or _is_namedtuple(value):
        return True
    # plain objects that never customised their repr
    if type(value).__repr__ is not object.__repr__:
        return False
    return bool(getattr(value, "__dict__", None))


def _record_fields(value: Any) -> List[tuple]:
    if dataclasses.is_dataclass(value):
        # init=False fields may never have been assigned
        return [(f.name, getattr(value, f.name, _UNSET)) for f in dataclasses.fields(value) if f.repr]
    if _is_namedtuple(value):
        return list(zip(type(value)._fields, value))
    return list(vars(value).items())


# =============================================================================
# Per-call helpers
# =============================================================================

def format_args(
    values: Sequence[Any],
    renderer: Optional[Renderer] = None,
    color: bool = True,
    names: Sequence[str] = (),
) -> List[str]:
    """Render each value, colored for terminal viewing.

    Values that will get a ``name=`` prefix are rendered with that prefix's
    width taken off their first line.
    """
    renderer = renderer or Renderer()
    args = []
    for i, value in enumerate(values):
        name = names[i] if i < len(names) else ""
        lead = len(name) + 1 if shows_name(name) else 0
        text = renderer.render(value, lead)
        args.append(colorize(text, CYAN) if color else text)
    return args


def _is_literal(name: str) -> bool:
    try:
        ast.literal_eval(name)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError):
        return False
    return True


def shows_name(name: str) -> bool:
    """Whether an argument's source text is printed as a ``name=`` prefix."""
    return bool(name) and not _is_literal(name)


def prepend_names(names: Sequence[str], args: Sequence[str], color: bool = True) -> List[str]:
    """Turn rendered values into name=value blobs.

    Args without a name, and args whose name is just a literal such as
    ``1`` or ``"lit"``, are left bare.
    """
    prepended = []
    for i, arg in enumerate(args):
        name = names[i] if i < len(names) else ""
        if not shows_name(name):
            prepended.append(arg)
            continue
        if color:
            name = colorize(name, BOLD)
        prepended.append(f"{name}={arg}")
    return prepended
