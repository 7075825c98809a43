"""Chain of same-shaped incremental trees behind one leaf index space."""

from __future__ import annotations

from typing import List, Optional, Tuple, Type

from quin_trees.errors import LeafIndexError
from quin_trees.hashing import HashFunc
from quin_trees.incremental_tree import DEFAULT_ZERO_VALUE, IncrementalQuinTree
from quin_trees.logging_config import get_logger
from quin_trees.proofs import MerklePath, verify_merkle_path

logger = get_logger(__name__)


class MultiIncrementalQuinTree:
    """
    An unbounded leaf sequence stored as consecutive fixed-capacity shards.

    Shard ``k`` holds the leaves with global index in
    ``[k * capacity, (k + 1) * capacity)``. A new shard is appended only
    when an insert would overflow the last one; earlier shards are never
    re-keyed. Each shard keeps its own root in :attr:`roots`; no tree of
    shard roots is built.
    """
    __slots__ = ("depth", "arity", "zero_value", "hash_func", "shards", "roots", "leaves")

    # set by factory
    TreeClass: Type[IncrementalQuinTree] = IncrementalQuinTree

    def __init__(
        self,
        depth: int,
        zero_value: int = DEFAULT_ZERO_VALUE,
        arity: Optional[int] = None,
        hash_func: Optional[HashFunc] = None,
    ) -> None:
        # The first shard validates the configuration for all of them
        first = self.TreeClass(depth, zero_value, arity, hash_func)
        self.depth = first.depth
        self.arity = first.arity
        self.zero_value = first.zero_value
        self.hash_func = first.hash_func
        self.shards: List[IncrementalQuinTree] = [first]
        self.roots: List[int] = [first.root]
        self.leaves: List[int] = []

    def __str__(self):
        return (f"{type(self).__name__}(depth={self.depth}, arity={self.arity}, "
                f"shards={len(self.shards)}, leaves={len(self.leaves)})")

    __repr__ = __str__

    def __len__(self) -> int:
        return len(self.leaves)

    @property
    def capacity(self) -> int:
        """Leaves per shard."""
        return self.shards[0].capacity

    @property
    def root(self) -> int:
        """Root of the shard currently being filled."""
        return self.roots[-1]

    def shard_for(self, global_index: int) -> Tuple[int, int]:
        """
        Map a global leaf index to ``(shard, local index)``.

        Raises:
            LeafIndexError: If ``global_index`` does not reference an inserted leaf.
        """
        if isinstance(global_index, bool) or not isinstance(global_index, int):
            raise LeafIndexError(f"leaf index must be an int, got {global_index!r}")
        if not 0 <= global_index < len(self.leaves):
            raise LeafIndexError(
                f"leaf index {global_index} outside [0, {len(self.leaves)})"
            )
        return divmod(global_index, self.capacity)

    def insert(self, value: int) -> int:
        """Append a leaf, opening a new shard if the last one is full.

        Returns:
            int: The global index of the inserted leaf.
        """
        shard = self.shards[-1]
        if shard.is_full():
            # Attach the new shard only once the leaf is in it
            shard = self.TreeClass(self.depth, self.zero_value, self.arity, self.hash_func)
            shard.insert(value)
            self._append_shard(shard)
        else:
            shard.insert(value)
        self.leaves.append(value)
        self.roots[-1] = shard.root
        return len(self.leaves) - 1

    def update(self, global_index: int, value: int) -> None:
        shard_idx, local = self.shard_for(global_index)
        shard = self.shards[shard_idx]
        shard.update(local, value)
        self.leaves[global_index] = value
        self.roots[shard_idx] = shard.root

    def gen_merkle_path(self, global_index: int) -> MerklePath:
        """Path from a leaf to the root of the shard that holds it."""
        shard_idx, local = self.shard_for(global_index)
        return self.shards[shard_idx].gen_merkle_path(local)

    @staticmethod
    def verify_merkle_path(path: MerklePath, hash_func: HashFunc) -> bool:
        return verify_merkle_path(path, hash_func)

    def copy(self) -> MultiIncrementalQuinTree:
        """Return a clone sharing no mutable state with this multi-tree."""
        TreeClass = type(self)
        clone = TreeClass.__new__(TreeClass)
        clone.depth = self.depth
        clone.arity = self.arity
        clone.zero_value = self.zero_value
        clone.hash_func = self.hash_func
        clone.shards = [shard.copy() for shard in self.shards]
        clone.roots = list(self.roots)
        clone.leaves = list(self.leaves)
        return clone

    def __copy__(self) -> MultiIncrementalQuinTree:
        return self.copy()

    def __deepcopy__(self, memo) -> MultiIncrementalQuinTree:
        clone = self.copy()
        memo[id(self)] = clone
        return clone

    def _append_shard(self, shard: IncrementalQuinTree) -> None:
        self.shards.append(shard)
        self.roots.append(shard.root)
        logger.info(
            "Opened shard %d (capacity %d) after %d leaves",
            len(self.shards) - 1, shard.capacity, len(self.leaves),
        )
