"""Shared helpers for single-tree tests."""

from typing import List, Optional, Tuple

from quin_trees.hashing import get_hasher
from quin_trees.incremental_tree import IncrementalQuinTree
from tests.test_base import BaseTreeTestCase
from tests.utils import get_test_logger

logger = get_test_logger("QuinTree")

ZERO_VALUE = 0


class QuinTreeTestCase(BaseTreeTestCase):
    """Builds trees filled with random leaves; invariants are checked on tearDown."""

    def make_tree(
        self,
        depth: int,
        arity: int = 5,
        count: Optional[int] = None,
        sequential: bool = False,
    ) -> Tuple[IncrementalQuinTree, List[int]]:
        """
        Create a tree and insert ``count`` leaves (default: fill it).

        Args:
            sequential: insert 1, 2, 3, ... instead of random field elements
        """
        tree = IncrementalQuinTree(depth, ZERO_VALUE, arity, get_hasher(arity))
        if count is None:
            count = tree.capacity
        leaves = []
        for i in range(count):
            leaf = i + 1 if sequential else self.gen_random_salt()
            tree.insert(leaf)
            leaves.append(leaf)
        logger.debug(f"Built {tree} with {count} leaves")
        return tree, leaves
