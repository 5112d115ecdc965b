#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
llrb_tree.py
------------

A **Left-Leaning Red-Black** (LLRB) tree: Sedgewick's binary encoding of
2-3 search trees.  Items are opaque payloads; the only thing the tree knows
about them is the ``less(a, b)`` function handed to the constructor, so any
item type and any total order can be stored.

Features
~~~~~~~~
* ``tree.replace_or_insert(item)``  - insert, or swap out an equivalent item
* ``tree.insert_no_replace(item)``  - insert, keeping equivalent items
* ``tree.delete(key)``, ``tree.delete_min()``, ``tree.delete_max()``
* ``tree.get(key)``, ``tree.has(key)`` / ``key in tree``
* ``tree.min()``, ``tree.max()``, ``len(tree)``
* ``tree.root()`` / ``tree.set_root(node)`` - raw access for serializers
* ``tree.validate()`` - check every LLRB invariant (useful for debugging)

Every mutation walks down the tree driven by the comparator, adds or removes
at most one node, and repairs the 2-3 shape on the way back up using only
rotations and colour flips.  The link into the root is always black.

The tree is **not** thread-safe; callers must serialise access themselves.

Typical usage
~~~~~~~~~~~~~
>>> from llrb_tree import LLRB
>>> from llrb_util import natural_less_int
>>> tree = LLRB(natural_less_int, [1, 2, 3, 4])
>>> tree.min(), tree.max()
(1, 4)
>>> tree.delete_min()
1
>>> tree.delete(4)
4
>>> len(tree)
2
"""

from __future__ import annotations

import logging
import os
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    List,
    NoReturn,
    Optional,
    Tuple,
    TypeVar,
)

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  Type variables / aliases
# ----------------------------------------------------------------------
T = TypeVar("T")
Less = Callable[[Any, Any], bool]

# ----------------------------------------------------------------------
#  Configuration
# ----------------------------------------------------------------------
# When true, every public mutation finishes with a full ``validate()``.
CHECK_INVARIANTS = os.getenv("LLRB_CHECK_INVARIANTS", "").strip().lower() in (
    "1",
    "true",
    "yes",
    "on",
)


class TreeInvariantError(AssertionError):
    """Raised when the tree structure contradicts an LLRB invariant.

    This never signals a caller mistake: it means the tree is corrupt (a bug
    in the balancing code, or a malformed graph installed with
    ``LLRB.set_root``).
    """


# ----------------------------------------------------------------------
#  Sentinel bounds
# ----------------------------------------------------------------------
class Bound:
    """Positive or negative infinity, valid only as a comparison operand."""

    __slots__ = ("sign",)

    def __init__(self, sign: int) -> None:
        if sign not in (1, -1):
            raise ValueError(f"bound sign must be 1 or -1, got {sign!r}")
        self.sign = sign

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Bound) and other.sign == self.sign

    def __hash__(self) -> int:
        return hash((Bound, self.sign))

    def __repr__(self) -> str:
        return "+inf" if self.sign > 0 else "-inf"


_POS_INF = Bound(1)
_NEG_INF = Bound(-1)


def inf(sign: int) -> Bound:
    """Return the bound above every item (``sign > 0``) or below every item
    (``sign < 0``).  A zero sign is rejected with ``ValueError``."""
    if sign == 0:
        raise ValueError("inf() needs a non-zero sign")
    return _POS_INF if sign > 0 else _NEG_INF


def _less(less: Less, x: Any, y: Any) -> bool:
    if (isinstance(x, Bound) and x.sign > 0) or (isinstance(y, Bound) and y.sign < 0):
        return False
    if isinstance(x, Bound) or isinstance(y, Bound):
        return True
    return less(x, y)


# ----------------------------------------------------------------------
#  Nodes
# ----------------------------------------------------------------------
class Node(Generic[T]):
    """A tree node.  ``black`` is the colour of the link from the parent;
    fresh nodes start red."""

    __slots__ = ("item", "left", "right", "black")

    def __init__(
        self,
        item: T,
        left: Optional["Node[T]"] = None,
        right: Optional["Node[T]"] = None,
        black: bool = False,
    ) -> None:
        self.item = item
        self.left = left
        self.right = right
        self.black = black

    def __repr__(self) -> str:
        col = "B" if self.black else "R"
        return f"<{col} {self.item!r}>"


def _is_red(node: Optional[Node[Any]]) -> bool:
    return node is not None and not node.black


def _dump(node: Optional[Node[Any]], depth: int = 0) -> str:
    pad = "  " * depth
    if node is None:
        return f"{pad}None"
    col = "B" if node.black else "R"
    lines = [f"{pad}{col} {node.item!r}"]
    lines.append(_dump(node.left, depth + 1))
    lines.append(_dump(node.right, depth + 1))
    return "\n".join(lines)


def _count_nodes(node: Optional[Node[Any]]) -> int:
    count = 0
    stack: List[Node[Any]] = [node] if node is not None else []
    while stack:
        cur = stack.pop()
        count += 1
        if cur.left is not None:
            stack.append(cur.left)
        if cur.right is not None:
            stack.append(cur.right)
    return count


class LLRB(Generic[T]):
    """
    An ordered container of items kept in a left-leaning red-black tree.

    Parameters
    ----------
    less : callable ``(a, b) -> bool``
        Strict weak order over the items.  Two items are *equivalent* when
        neither ``less(a, b)`` nor ``less(b, a)`` holds.  Fixed for the life
        of the tree.
    items : iterable, optional
        Loaded with ``replace_or_insert_bulk``.
    """

    __slots__ = ("_root", "_count", "_less")

    # ------------------------------------------------------------------
    #   Construction / basic container protocol
    # ------------------------------------------------------------------
    def __init__(self, less: Less, items: Optional[Iterable[T]] = None) -> None:
        if not callable(less):
            raise TypeError(f"less must be callable, got {less!r}")
        self._less: Less = less
        self._root: Optional[Node[T]] = None
        self._count: int = 0

        if items is not None:
            self.replace_or_insert_bulk(*items)

    @property
    def less(self) -> Less:
        return self._less

    def len(self) -> int:
        """Number of items stored in the tree."""
        return self._count

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: object) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return f"LLRB(len={self._count})"

    # ------------------------------------------------------------------
    #   Raw root access (for external serializers)
    # ------------------------------------------------------------------
    def root(self) -> Optional[Node[T]]:
        """Return the root node, or ``None`` for an empty tree."""
        return self._root

    def set_root(self, node: Optional[Node[T]]) -> None:
        """
        Install *node* as the root of the tree.

        The graph is trusted to satisfy every LLRB invariant under this
        tree's comparator; nothing is checked here.  The item count is
        recomputed from the installed graph.
        """
        self._root = node
        self._count = _count_nodes(node)
        logger.debug("installed external root %r (%d nodes)", node, self._count)

    # ------------------------------------------------------------------
    #   Queries
    # ------------------------------------------------------------------
    def _lt(self, x: Any, y: Any) -> bool:
        return _less(self._less, x, y)

    def get(self, key: Any) -> Optional[T]:
        """Return the stored item equivalent to *key*, or ``None``."""
        h = self._root
        while h is not None:
            if self._lt(key, h.item):
                h = h.left
            elif self._lt(h.item, key):
                h = h.right
            else:
                return h.item
        return None

    def has(self, key: Any) -> bool:
        return self.get(key) is not None

    def min(self) -> Optional[T]:
        """Return the smallest item, or ``None`` if the tree is empty."""
        h = self._root
        if h is None:
            return None
        while h.left is not None:
            h = h.left
        return h.item

    def max(self) -> Optional[T]:
        """Return the largest item, or ``None`` if the tree is empty."""
        h = self._root
        if h is None:
            return None
        while h.right is not None:
            h = h.right
        return h.item

    # ------------------------------------------------------------------
    #   Rotations / colour flips - the only code that touches colours
    #   or local topology
    # ------------------------------------------------------------------
    def _fault(self, message: str, node: Optional[Node[T]]) -> NoReturn:
        logger.critical(
            "%s (node %r); tree state:\n%s", message, node, _dump(self._root)
        )
        raise TreeInvariantError(f"{message} (node {node!r})")

    def _rotate_left(self, h: Node[T]) -> Node[T]:
        x = h.right
        if not _is_red(x):
            self._fault("rotate_left needs a red right link", h)
        h.right = x.left
        x.left = h
        x.black = h.black
        h.black = False
        return x

    def _rotate_right(self, h: Node[T]) -> Node[T]:
        x = h.left
        if not _is_red(x):
            self._fault("rotate_right needs a red left link", h)
        h.left = x.right
        x.right = h
        x.black = h.black
        h.black = False
        return x

    def _flip_colors(self, h: Node[T]) -> None:
        if h.left is None or h.right is None:
            self._fault("flip_colors needs both children", h)
        h.black = not h.black
        h.left.black = not h.left.black
        h.right.black = not h.right.black

    def _move_red_left(self, h: Node[T]) -> Node[T]:
        # Borrow from the right sibling so h.left is not a 2-node.
        self._flip_colors(h)
        if _is_red(h.right.left):
            h.right = self._rotate_right(h.right)
            h = self._rotate_left(h)
            self._flip_colors(h)
        return h

    def _move_red_right(self, h: Node[T]) -> Node[T]:
        self._flip_colors(h)
        if _is_red(h.left.left):
            h = self._rotate_right(h)
            self._flip_colors(h)
        return h

    def _balance(self, h: Node[T]) -> Node[T]:
        """Insertion fix-up, applied to every frame on the way back up."""
        if _is_red(h.right) and not _is_red(h.left):
            h = self._rotate_left(h)
        if _is_red(h.left) and _is_red(h.left.left):
            h = self._rotate_right(h)
        if _is_red(h.left) and _is_red(h.right):
            self._flip_colors(h)
        return h

    def _fix_up(self, h: Node[T]) -> Node[T]:
        """Deletion fix-up.  Any red right link is rotated away, even when
        the left link is red too: with the left, left-left and right links
        all red, a guarded rotation would leave a red right link behind."""
        if _is_red(h.right):
            h = self._rotate_left(h)
        if _is_red(h.left) and _is_red(h.left.left):
            h = self._rotate_right(h)
        if _is_red(h.left) and _is_red(h.right):
            self._flip_colors(h)
        return h

    # ------------------------------------------------------------------
    #   Insertion
    # ------------------------------------------------------------------
    @staticmethod
    def _check_item(item: Any) -> None:
        if item is None:
            raise ValueError("cannot insert None")
        if isinstance(item, Bound):
            raise ValueError(f"{item!r} is a comparison bound, not an item")

    def replace_or_insert(self, item: T) -> Optional[T]:
        """
        Insert *item*.  If an equivalent item is already stored it is
        replaced in place and returned; otherwise ``None`` is returned and
        the count grows by one.
        """
        self._check_item(item)
        self._root, replaced = self._replace_or_insert(self._root, item)
        self._root.black = True
        if replaced is None:
            self._count += 1
        self._after_mutation()
        return replaced

    def _replace_or_insert(
        self, h: Optional[Node[T]], item: T
    ) -> Tuple[Node[T], Optional[T]]:
        if h is None:
            return Node(item), None

        replaced = None
        if self._lt(item, h.item):
            h.left, replaced = self._replace_or_insert(h.left, item)
        elif self._lt(h.item, item):
            h.right, replaced = self._replace_or_insert(h.right, item)
        else:
            replaced, h.item = h.item, item

        return self._balance(h), replaced

    def insert_no_replace(self, item: T) -> None:
        """
        Insert *item*, keeping any equivalent items already stored.  The new
        item goes to the right of its equivalents.
        """
        self._check_item(item)
        self._root = self._insert_no_replace(self._root, item)
        self._root.black = True
        self._count += 1
        self._after_mutation()

    def _insert_no_replace(self, h: Optional[Node[T]], item: T) -> Node[T]:
        if h is None:
            return Node(item)

        if self._lt(item, h.item):
            h.left = self._insert_no_replace(h.left, item)
        else:
            h.right = self._insert_no_replace(h.right, item)

        return self._balance(h)

    def replace_or_insert_bulk(self, *items: T) -> None:
        """``replace_or_insert`` each item in order.  Not atomic: items
        before a rejected one stay inserted."""
        for item in items:
            self.replace_or_insert(item)

    def insert_no_replace_bulk(self, *items: T) -> None:
        """``insert_no_replace`` each item in order.  Not atomic."""
        for item in items:
            self.insert_no_replace(item)

    # ------------------------------------------------------------------
    #   Deletion
    # ------------------------------------------------------------------
    def delete_min(self) -> Optional[T]:
        """Remove and return the smallest item (``None`` if empty)."""
        self._root, deleted = self._delete_min(self._root)
        self._finish_delete(deleted)
        return deleted

    def _delete_min(self, h: Optional[Node[T]]) -> Tuple[Optional[Node[T]], Optional[T]]:
        if h is None:
            return None, None
        if h.left is None:
            return None, h.item

        if not _is_red(h.left) and not _is_red(h.left.left):
            h = self._move_red_left(h)

        h.left, deleted = self._delete_min(h.left)
        return self._fix_up(h), deleted

    def delete_max(self) -> Optional[T]:
        """Remove and return the largest item (``None`` if empty)."""
        self._root, deleted = self._delete_max(self._root)
        self._finish_delete(deleted)
        return deleted

    def _delete_max(self, h: Optional[Node[T]]) -> Tuple[Optional[Node[T]], Optional[T]]:
        if h is None:
            return None, None
        if _is_red(h.left):
            h = self._rotate_right(h)
        if h.right is None:
            return None, h.item

        if not _is_red(h.right) and not _is_red(h.right.left):
            h = self._move_red_right(h)

        h.right, deleted = self._delete_max(h.right)
        return self._fix_up(h), deleted

    def delete(self, key: Any) -> Optional[T]:
        """
        Remove one item equivalent to *key* and return it.

        When nothing matches, ``None`` is returned and the tree is left
        exactly as it was (no rotations or recolouring happen).
        """
        if not self.has(key):
            return None
        self._root, deleted = self._delete(self._root, key)
        if deleted is None:
            self._fault(f"item equivalent to {key!r} vanished during delete", None)
        self._finish_delete(deleted)
        return deleted

    def _delete(self, h: Optional[Node[T]], key: Any) -> Tuple[Optional[Node[T]], Optional[T]]:
        if h is None:
            return None, None

        deleted = None
        if self._lt(key, h.item):
            if h.left is None:
                return h, None
            if not _is_red(h.left) and not _is_red(h.left.left):
                h = self._move_red_left(h)
            h.left, deleted = self._delete(h.left, key)
        else:
            if _is_red(h.left):
                h = self._rotate_right(h)
            # Equivalent leaf: unlink it.
            if not self._lt(h.item, key) and h.right is None:
                return None, h.item
            matched = h
            if h.right is not None and not _is_red(h.right) and not _is_red(h.right.left):
                h = self._move_red_right(h)
            # A rotation inside move_red_right may promote an equivalent
            # duplicate; the matched node then sits in h.right, leaning right.
            if h is matched and not self._lt(h.item, key):
                # Equivalent internal node: take over the in-order successor.
                h.right, successor = self._delete_min(h.right)
                if successor is None:
                    self._fault("right subtree had no minimum", h)
                deleted, h.item = h.item, successor
            else:
                h.right, deleted = self._delete(h.right, key)

        return self._fix_up(h), deleted

    def _finish_delete(self, deleted: Optional[T]) -> None:
        if self._root is not None:
            self._root.black = True
        if deleted is not None:
            self._count -= 1
        self._after_mutation()

    # ------------------------------------------------------------------
    #   Validation utilities
    # ------------------------------------------------------------------
    def _after_mutation(self) -> None:
        if CHECK_INVARIANTS:
            self.validate()

    def validate(self) -> None:
        """
        Verify every LLRB invariant: black root link, no red right links, no
        two red links in a row, equal black height on all paths, in-order
        items non-decreasing, and a stored count matching the node count.

        Raises ``TreeInvariantError`` on the first violation found.
        """
        if _is_red(self._root):
            self._fault("root link is red", self._root)
        size = 0
        if self._root is not None:
            _, size, _, _ = self._check(self._root)
        if size != self._count:
            self._fault(f"count is {self._count} but tree holds {size} nodes", None)

    def _check(self, node: Node[T]) -> Tuple[int, int, T, T]:
        """Return ``(black_height, size, lowest_item, highest_item)`` for the
        subtree rooted at *node*."""
        if _is_red(node.right):
            self._fault("red right link", node)
        if _is_red(node) and _is_red(node.left):
            self._fault("two red links in a row", node)

        left_height, left_size, low = 0, 0, node.item
        if node.left is not None:
            left_height, left_size, low, left_high = self._check(node.left)
            if self._lt(node.item, left_high):
                self._fault("left subtree holds a larger item", node)

        right_height, right_size, high = 0, 0, node.item
        if node.right is not None:
            right_height, right_size, right_low, high = self._check(node.right)
            if self._lt(right_low, node.item):
                self._fault("right subtree holds a smaller item", node)

        if left_height != right_height:
            self._fault(
                f"black height mismatch ({left_height} left, {right_height} right)",
                node,
            )
        height = left_height + (1 if node.black else 0)
        return height, left_size + right_size + 1, low, high
