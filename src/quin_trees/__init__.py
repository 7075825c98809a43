"""
quin_trees: incremental arity-generalised Merkle trees over a prime field.

Quick-start imports::

    from quin_trees import create_quin_tree, verify_merkle_path

    tree = create_quin_tree(depth=3, arity=5)
    tree.insert(42)
    assert verify_merkle_path(tree.gen_merkle_path(0), tree.hash_func)
"""

from quin_trees.display import print_structure
from quin_trees.errors import (
    CapacityError,
    ConfigurationError,
    LeafIndexError,
    PathFormatError,
    QuinTreeError,
    SubrootRangeError,
)
from quin_trees.factory import create_multi_quin_tree, create_quin_tree, make_quin_tree_classes
from quin_trees.hashing import (
    FIELD_MODULUS,
    ArityHasher,
    fixed_arity,
    get_hasher,
    hash2,
    hash5,
    register_hasher,
)
from quin_trees.incremental_tree import DEFAULT_ARITY, DEFAULT_ZERO_VALUE, IncrementalQuinTree
from quin_trees.invariants import InvariantError, assert_tree_invariants_raise
from quin_trees.multi_tree import MultiIncrementalQuinTree
from quin_trees.proofs import MerklePath, compute_root_from_leaves, verify_merkle_path
from quin_trees.tree_stats import Stats, tree_stats_
from quin_trees.zero_cache import ZeroCache

__all__ = [
    "DEFAULT_ARITY",
    "DEFAULT_ZERO_VALUE",
    "FIELD_MODULUS",
    "ArityHasher",
    "CapacityError",
    "ConfigurationError",
    "IncrementalQuinTree",
    "InvariantError",
    "LeafIndexError",
    "MerklePath",
    "MultiIncrementalQuinTree",
    "PathFormatError",
    "QuinTreeError",
    "Stats",
    "SubrootRangeError",
    "ZeroCache",
    "assert_tree_invariants_raise",
    "compute_root_from_leaves",
    "create_multi_quin_tree",
    "create_quin_tree",
    "fixed_arity",
    "get_hasher",
    "hash2",
    "hash5",
    "make_quin_tree_classes",
    "print_structure",
    "register_hasher",
    "tree_stats_",
    "verify_merkle_path",
]
