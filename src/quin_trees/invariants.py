"""Shared invariant-checking utilities.

Used by the test suite after every mutation and by the benchmark verify
phase. Each check raises :class:`InvariantError` on the first failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

from quin_trees.logging_config import get_logger
from quin_trees.proofs import compute_root_from_leaves, verify_merkle_path

logger = get_logger(__name__)

if TYPE_CHECKING:
    from quin_trees.incremental_tree import IncrementalQuinTree
    from quin_trees.multi_tree import MultiIncrementalQuinTree

# Full re-folds above this capacity are skipped
MAX_FOLD_CAPACITY = 5 ** 5


class InvariantError(Exception):
    """Raised when a quin tree invariant is violated."""


def check_zero_cache(tree: IncrementalQuinTree) -> None:
    zeros = tree.zeros
    if len(zeros) != tree.depth:
        raise InvariantError(f"Invariant failed: zero cache has {len(zeros)} levels, expected {tree.depth}")
    if zeros[0] != tree.zero_value:
        raise InvariantError("Invariant failed: zeros[0] differs from the zero value")
    for level in range(1, tree.depth):
        if zeros[level] != tree.hash_func([zeros[level - 1]] * tree.arity):
            raise InvariantError(f"Invariant failed: zeros[{level}] is not the hash of zeros[{level - 1}]")
    if zeros.empty_root != tree.hash_func([zeros[tree.depth - 1]] * tree.arity):
        raise InvariantError("Invariant failed: empty root is not the hash of the top zero entry")


def check_materialised_nodes(tree: IncrementalQuinTree) -> None:
    """Only ancestors of inserted leaves may be stored, and all of them must be."""
    n = len(tree.leaves)
    if n > tree.capacity:
        raise InvariantError(f"Invariant failed: {n} leaves exceed capacity {tree.capacity}")
    expected = set()
    for level in range(1, tree.depth + 1):
        width = tree.arity ** level
        expected.update((level, i) for i in range(-(-n // width)))
    actual = set(tree.nodes)
    if actual != expected:
        extra = sorted(actual - expected)[:5]
        missing = sorted(expected - actual)[:5]
        raise InvariantError(
            f"Invariant failed: materialised nodes differ (extra={extra}, missing={missing})"
        )


def check_leaf_paths(tree: IncrementalQuinTree) -> None:
    """Every inserted leaf must recombine to the current root."""
    for index in range(len(tree.leaves)):
        path = tree.gen_merkle_path(index)
        if path.root != tree.root or not verify_merkle_path(path, tree.hash_func):
            raise InvariantError(f"Invariant failed: leaf {index} does not recombine to the root")


def check_root_against_fold(tree: IncrementalQuinTree) -> None:
    """Compare the incremental root with a full fold of the padded leaves."""
    if tree.capacity > MAX_FOLD_CAPACITY:
        logger.debug("Skipping full fold for capacity %d", tree.capacity)
        return
    padded = list(tree.leaves) + [tree.zero_value] * (tree.capacity - len(tree.leaves))
    expected = compute_root_from_leaves(padded, tree.arity, tree.hash_func)
    if expected != tree.root:
        raise InvariantError("Invariant failed: root differs from the full fold of the leaves")


def check_tree_invariants(tree: IncrementalQuinTree) -> None:
    check_zero_cache(tree)
    check_materialised_nodes(tree)
    check_leaf_paths(tree)
    check_root_against_fold(tree)


def check_multi_tree_invariants(tree: MultiIncrementalQuinTree) -> None:
    if len(tree.roots) != len(tree.shards):
        raise InvariantError(
            f"Invariant failed: {len(tree.roots)} roots for {len(tree.shards)} shards"
        )
    capacity = tree.capacity
    for k, shard in enumerate(tree.shards):
        if (shard.depth, shard.arity, shard.zero_value) != (tree.depth, tree.arity, tree.zero_value):
            raise InvariantError(f"Invariant failed: shard {k} configuration differs")
        if shard.root != tree.roots[k]:
            raise InvariantError(f"Invariant failed: roots[{k}] differs from shard {k} root")
        if k < len(tree.shards) - 1 and not shard.is_full():
            raise InvariantError(f"Invariant failed: shard {k} is not full but is not the last shard")
        if shard.leaves != tree.leaves[k * capacity:(k + 1) * capacity]:
            raise InvariantError(f"Invariant failed: shard {k} leaves differ from the global slice")
        check_tree_invariants(shard)
    if len(tree.shards) > 1 and tree.shards[-1].is_empty():
        raise InvariantError("Invariant failed: trailing shard was opened without a leaf")


def assert_tree_invariants_raise(
    tree: Union[IncrementalQuinTree, MultiIncrementalQuinTree],
) -> None:
    """Check all invariants, raising :class:`InvariantError` on the first failure."""
    if hasattr(tree, "shards"):
        check_multi_tree_invariants(tree)
    else:
        check_tree_invariants(tree)
