#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
test_llrb_properties.py
-----------------------

Property-based checks (hypothesis) of the LLRB invariants:

* in-order items non-decreasing, no red right links, equal black height
* size accounting for replace and no-replace insertion
* deleting every member in any order empties the tree
* mixed operations over a small key range, so duplicate chains get
  rotated through by delete
"""

import bisect
import unittest
from typing import Any, List, Optional, Tuple

from hypothesis import given, settings
import hypothesis.strategies as st

import llrb_tree
from llrb_tree import LLRB, Node
from llrb_util import natural_less_int


def inorder(node: Optional[Node[Any]]) -> List[Any]:
    if node is None:
        return []
    return inorder(node.left) + [node.item] + inorder(node.right)


def black_heights(node: Optional[Node[Any]], depth: int = 0) -> List[int]:
    if node is None:
        return [depth]
    depth += 1 if node.black else 0
    return black_heights(node.left, depth) + black_heights(node.right, depth)


def red_right_links(node: Optional[Node[Any]]) -> int:
    if node is None:
        return 0
    here = 1 if node.right is not None and not node.right.black else 0
    return here + red_right_links(node.left) + red_right_links(node.right)


operations = st.lists(
    st.tuples(
        st.sampled_from(
            ["replace", "dup", "dup", "dup", "delete", "delete", "delete_min", "delete_max"]
        ),
        st.integers(min_value=0, max_value=5),
    ),
    max_size=80,
)


class TestLLRBProperties(unittest.TestCase):
    def setUp(self):
        self._saved = llrb_tree.CHECK_INVARIANTS
        llrb_tree.CHECK_INVARIANTS = False

    def tearDown(self):
        llrb_tree.CHECK_INVARIANTS = self._saved

    def assertShape(self, tree: LLRB[int]) -> None:
        root = tree.root()
        self.assertTrue(root is None or root.black)
        self.assertEqual(red_right_links(root), 0)
        self.assertEqual(len(set(black_heights(root))), 1)
        items = inorder(root)
        self.assertEqual(items, sorted(items))
        self.assertEqual(len(items), len(tree))
        tree.validate()

    @given(st.lists(st.integers()))
    def test_replace_or_insert_counts_distinct_keys(self, keys: List[int]) -> None:
        tree = LLRB(natural_less_int, keys)
        self.assertShape(tree)
        self.assertEqual(len(tree), len(set(keys)))
        self.assertEqual(inorder(tree.root()), sorted(set(keys)))

    @given(st.lists(st.integers()))
    def test_insert_no_replace_counts_every_item(self, keys: List[int]) -> None:
        tree = LLRB(natural_less_int)
        tree.insert_no_replace_bulk(*keys)
        self.assertShape(tree)
        self.assertEqual(inorder(tree.root()), sorted(keys))

    @given(st.data())
    def test_delete_everything_in_any_order(self, data: st.DataObject) -> None:
        keys = data.draw(st.lists(st.integers(), unique=True))
        tree = LLRB(natural_less_int, keys)
        for k in data.draw(st.permutations(keys)):
            self.assertEqual(tree.delete(k), k)
            self.assertShape(tree)
        self.assertEqual(len(tree), 0)
        self.assertIsNone(tree.root())

    @settings(deadline=None)
    @given(operations)
    def test_invariants_hold_after_every_mutation(
        self, ops: List[Tuple[str, int]]
    ) -> None:
        tree = LLRB(natural_less_int)
        model: List[int] = []
        for op, k in ops:
            if op == "replace":
                if tree.replace_or_insert(k) is None:
                    bisect.insort(model, k)
            elif op == "dup":
                tree.insert_no_replace(k)
                bisect.insort(model, k)
            elif op == "delete":
                if tree.delete(k) is not None:
                    model.remove(k)
            elif op == "delete_min":
                if tree.delete_min() is not None:
                    model.pop(0)
            elif tree.delete_max() is not None:
                model.pop()
            self.assertShape(tree)
            self.assertEqual(inorder(tree.root()), model)


if __name__ == "__main__":
    unittest.main()
