"""Tests for verify_merkle_path() format checks and path serialisation."""

import json
import unittest

from quin_trees.errors import PathFormatError
from quin_trees.hashing import hash2, hash5
from quin_trees.incremental_tree import IncrementalQuinTree
from quin_trees.proofs import MerklePath, compute_root_from_leaves, verify_merkle_path
from tests.test_base import BaseTestCase

DEPTH = 3


class VerifyTestCase(BaseTestCase):

    def setUp(self):
        super().setUp()
        self.tree = IncrementalQuinTree(DEPTH, 0, 5, hash5)
        for _ in range(30):
            self.tree.insert(self.gen_random_salt())
        self.path = self.tree.gen_merkle_path(7)


class TestMalformedPaths(VerifyTestCase):

    def test_null_sibling_group_raises(self):
        self.path.path_elements[0] = None
        with self.assertRaises(PathFormatError):
            verify_merkle_path(self.path, hash5)

    def test_null_sibling_raises(self):
        self.path.path_elements[1][2] = None
        with self.assertRaises(PathFormatError):
            verify_merkle_path(self.path, hash5)

    def test_missing_elements_or_indices_raises(self):
        for attr in ("path_elements", "indices"):
            with self.subTest(attr=attr):
                path = self.tree.gen_merkle_path(7)
                setattr(path, attr, None)
                with self.assertRaises(PathFormatError):
                    verify_merkle_path(path, hash5)

    def test_wrong_group_size_raises(self):
        self.path.path_elements[2].append(1)
        with self.assertRaises(PathFormatError):
            verify_merkle_path(self.path, hash5)

    def test_mismatched_level_counts_raise(self):
        self.path.indices.pop()
        self.path.depth = None
        with self.assertRaises(PathFormatError):
            verify_merkle_path(self.path, hash5)

    def test_declared_depth_mismatch_raises(self):
        self.path.depth = DEPTH + 1
        with self.assertRaises(PathFormatError):
            verify_merkle_path(self.path, hash5)

    def test_index_out_of_range_raises(self):
        for bad in (5, -1, None, "1"):
            with self.subTest(index=bad):
                path = self.tree.gen_merkle_path(7)
                path.indices[0] = bad
                with self.assertRaises(PathFormatError):
                    verify_merkle_path(path, hash5)

    def test_non_integer_leaf_or_root_raises(self):
        for attr in ("leaf", "root"):
            for bad in (None, "3", 3.0, True):
                with self.subTest(attr=attr, value=bad):
                    path = self.tree.gen_merkle_path(7)
                    setattr(path, attr, bad)
                    with self.assertRaises(PathFormatError):
                        verify_merkle_path(path, hash5)

    def test_path_for_other_arity_raises(self):
        with self.assertRaises(PathFormatError):
            verify_merkle_path(self.path, hash2)

    def test_format_error_is_value_error(self):
        self.path.path_elements[0] = None
        with self.assertRaises(ValueError):
            verify_merkle_path(self.path, hash5)


class TestWellFormedPaths(VerifyTestCase):

    def test_valid_path(self):
        self.assertTrue(verify_merkle_path(self.path, hash5))

    def test_wrong_root_returns_false(self):
        self.path.root = self.gen_random_salt()
        self.assertFalse(verify_merkle_path(self.path, hash5))

    def test_wrong_sibling_returns_false(self):
        self.path.path_elements[0][0] = self.gen_random_salt()
        self.assertFalse(verify_merkle_path(self.path, hash5))

    def test_hash_func_without_declared_arity(self):
        # Width is taken from the sibling groups
        self.assertTrue(verify_merkle_path(self.path, lambda inputs: hash5(inputs)))

    def test_zero_level_path(self):
        path = MerklePath(path_elements=[], indices=[], root=5, leaf=5)
        self.assertEqual(path.depth, 0)
        self.assertTrue(verify_merkle_path(path, hash2))
        path.leaf = 6
        self.assertFalse(verify_merkle_path(path, hash2))

    def test_hand_built_binary_path(self):
        leaves = [11, 12, 13, 14]
        root = compute_root_from_leaves(leaves, 2, hash2)
        path = MerklePath(
            path_elements=[[14], [hash2([11, 12])]],
            indices=[0, 1],
            root=root,
            leaf=13,
        )
        self.assertTrue(verify_merkle_path(path, hash2))


class TestPathSerialisation(VerifyTestCase):

    def test_to_dict_has_every_field(self):
        data = self.path.to_dict()
        self.assertEqual(set(data), {"path_elements", "path_index", "root", "leaf", "depth"})
        self.assertEqual(len(data["path_elements"]), DEPTH)
        self.assertEqual(len(data["path_index"]), DEPTH)
        self.assertEqual(data["root"], str(self.tree.root))
        self.assertEqual(data["leaf"], str(self.tree.leaves[7]))
        for group in data["path_elements"]:
            self.assertEqual(len(group), 4)
            self.assertTrue(all(isinstance(e, str) for e in group))

    def test_json_round_trip_still_verifies(self):
        text = json.dumps(self.path.to_dict())
        restored = MerklePath.from_dict(json.loads(text))
        self.assertEqual(restored, self.path)
        self.assertTrue(verify_merkle_path(restored, hash5))

    def test_verify_accepts_mapping(self):
        self.assertTrue(verify_merkle_path(self.path.to_dict(), hash5))

    def test_from_dict_missing_field_raises(self):
        data = self.path.to_dict()
        del data["root"]
        with self.assertRaises(PathFormatError):
            MerklePath.from_dict(data)

    def test_from_dict_null_group_raises_on_verify(self):
        data = self.path.to_dict()
        data["path_elements"][0] = None
        with self.assertRaises(PathFormatError):
            verify_merkle_path(data, hash5)

    def test_from_dict_garbage_raises(self):
        data = self.path.to_dict()
        data["leaf"] = "not-a-number"
        with self.assertRaises(PathFormatError):
            MerklePath.from_dict(data)


class TestComputeRootFromLeaves(unittest.TestCase):

    def test_single_leaf_is_root(self):
        self.assertEqual(compute_root_from_leaves([9], 5, hash5), 9)

    def test_fold(self):
        leaves = list(range(25))
        expected = hash5([hash5(leaves[i:i + 5]) for i in range(0, 25, 5)])
        self.assertEqual(compute_root_from_leaves(leaves, 5, hash5), expected)

    def test_rejects_bad_layer(self):
        with self.assertRaises(ValueError):
            compute_root_from_leaves([], 2, hash2)
        with self.assertRaises(ValueError):
            compute_root_from_leaves([1, 2, 3], 2, hash2)


if __name__ == "__main__":
    unittest.main()
