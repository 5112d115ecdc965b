#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
llrb_util.py
------------

Helpers that sit next to ``llrb_tree`` without being part of it:

* natural-order comparators for the common primitive item kinds
* ``key_less`` to order arbitrary items by a key function
* a debug printer for node graphs

>>> from llrb_tree import LLRB
>>> tree = LLRB(key_less(lambda pair: pair[0]))
>>> tree.replace_or_insert((2, "two"))
>>> tree.get((2, None))
(2, 'two')
"""

from __future__ import annotations

import sys
from typing import Any, Callable, List, Optional, TextIO, Tuple


def _require(kind: type, a: Any, b: Any) -> None:
    for value in (a, b):
        # bool is an int subclass but has no place in a numeric ordering.
        if not isinstance(value, kind) or isinstance(value, bool):
            raise TypeError(f"expected {kind.__name__}, got {type(value).__name__}")


# ----------------------------------------------------------------------
#  Natural-order comparators
# ----------------------------------------------------------------------
def natural_less_int(a: int, b: int) -> bool:
    """Ascending order over ``int`` items."""
    _require(int, a, b)
    return a < b


def natural_less_float(a: float, b: float) -> bool:
    """Ascending order over ``float`` items."""
    _require(float, a, b)
    return a < b


def natural_less_str(a: str, b: str) -> bool:
    """Alphabetical order over ``str`` items ("a" < "b" < "c")."""
    _require(str, a, b)
    return a < b


def key_less(key: Callable[[Any], Any]) -> Callable[[Any, Any], bool]:
    """Return a comparator ordering items by ``key(item)``, in the spirit
    of ``sorted(..., key=...)``."""

    def less(a: Any, b: Any) -> bool:
        return key(a) < key(b)

    return less


# ----------------------------------------------------------------------
#  Debug printing (non-authoritative)
# ----------------------------------------------------------------------
def format_tree(node: Optional[Any]) -> str:
    """
    Render the node graph below *node* pre-order, one link per line,
    indented two spaces per level.  Each line shows the link colour
    (``B``/``R``) and the item; empty links print as ``None``.
    """
    lines: List[str] = []
    stack: List[Tuple[Optional[Any], int]] = [(node, 0)]
    while stack:
        cur, depth = stack.pop()
        pad = "  " * depth
        if cur is None:
            lines.append(f"{pad}None")
            continue
        col = "B" if cur.black else "R"
        lines.append(f"{pad}{col} {cur.item!r}")
        stack.append((cur.right, depth + 1))
        stack.append((cur.left, depth + 1))
    return "\n".join(lines)


def print_tree(node: Optional[Any], file: Optional[TextIO] = None) -> None:
    print(format_tree(node), file=file if file is not None else sys.stdout)
