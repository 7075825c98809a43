"""Unified test base classes for all tree types."""

import random
import unittest
from typing import Optional

from quin_trees.display import print_structure
from quin_trees.hashing import FIELD_MODULUS
from quin_trees.proofs import MerklePath, verify_merkle_path
from tests.utils import assert_tree_invariants_tc, get_test_logger

logger = get_test_logger("TestBase")

TEST_SEED = 0xC0FFEE


class BaseTestCase(unittest.TestCase):
    """Base class for all tests with common functionality."""

    def setUp(self):
        self.rng = random.Random(TEST_SEED)

    def gen_random_salt(self) -> int:
        """Random field element."""
        return self.rng.randrange(FIELD_MODULUS)

    def assertPathValid(self, path: MerklePath, hash_func, err_msg: Optional[str] = ""):
        self.assertTrue(
            verify_merkle_path(path, hash_func),
            f"Expected path to verify (leaf={path.leaf}, indices={path.indices})\n{err_msg}",
        )

    def assertPathInvalid(self, path: MerklePath, hash_func, err_msg: Optional[str] = ""):
        self.assertFalse(
            verify_merkle_path(path, hash_func),
            f"Expected path to be rejected (leaf={path.leaf}, indices={path.indices})\n{err_msg}",
        )


class BaseTreeTestCase(BaseTestCase):
    """Base class for tree tests; checks invariants of ``self.tree`` on tearDown."""

    tree = None

    def tearDown(self):
        tree = getattr(self, 'tree', None)
        if tree is None:
            return

        assert_tree_invariants_tc(self, tree, f"Tree structure:\n{print_structure(tree)}")

        expected_leaf_count = getattr(self, 'expected_leaf_count', None)
        if expected_leaf_count is not None:
            self.assertEqual(
                len(tree.leaves), expected_leaf_count,
                f"Leaf count {len(tree.leaves)} does not match expected {expected_leaf_count}"
            )

        expected_root = getattr(self, 'expected_root', None)
        if expected_root is not None:
            self.assertEqual(tree.root, expected_root, "Root does not match expected root")
