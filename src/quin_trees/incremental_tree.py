"""Incremental arity-generalised Merkle tree over a prime field."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from quin_trees.errors import (
    CapacityError,
    ConfigurationError,
    LeafIndexError,
    SubrootRangeError,
)
from quin_trees.hashing import HashFunc, get_hasher
from quin_trees.logging_config import get_logger
from quin_trees.proofs import MerklePath, verify_merkle_path
from quin_trees.zero_cache import ZeroCache

logger = get_logger(__name__)

# Constants
DEFAULT_ZERO_VALUE = 0
DEFAULT_ARITY = 5


def exact_log(width: int, arity: int) -> Optional[int]:
    """Return ``k`` with ``arity ** k == width``, or None if there is none."""
    if width < 1:
        return None
    k = 0
    while width % arity == 0:
        width //= arity
        k += 1
    return k if width == 1 else None


class IncrementalQuinTree:
    """
    A fixed-depth Merkle tree in which every internal node has ``arity``
    children and leaves are appended left to right.

    Only nodes that are ancestors of an inserted leaf are stored, keyed by
    ``(level, index)`` with level 0 the leaves and level ``depth`` the
    root. Every other node is the zero-cache entry of its level, so
    inserting or updating a leaf rehashes exactly ``depth`` nodes.

    Attributes:
        depth (int): Number of hashing levels; capacity is ``arity ** depth``.
        arity (int): Children per internal node, equal to the hash input width.
        zero_value (int): Value of every leaf slot that was never set.
        hash_func (HashFunc): Hash of exactly ``arity`` field elements.
        zeros (ZeroCache): Empty-subtree hash for each level.
        leaves (List[int]): Inserted leaves in index order.
        nodes (Dict[Tuple[int, int], int]): Materialised internal nodes.
    """
    __slots__ = ("depth", "arity", "zero_value", "hash_func", "zeros",
                 "leaves", "nodes", "capacity")

    # set by factory
    ARITY: int = DEFAULT_ARITY

    def __init__(
        self,
        depth: int,
        zero_value: int = DEFAULT_ZERO_VALUE,
        arity: Optional[int] = None,
        hash_func: Optional[HashFunc] = None,
    ) -> None:
        if arity is None:
            arity = self.ARITY
        if isinstance(depth, bool) or not isinstance(depth, int) or depth <= 0:
            raise ConfigurationError(f"depth must be a positive int, got {depth!r}")
        if isinstance(arity, bool) or not isinstance(arity, int) or arity < 2:
            raise ConfigurationError(f"arity must be an int >= 2, got {arity!r}")
        if hash_func is None:
            hash_func = get_hasher(arity)
        hash_arity = getattr(hash_func, "arity", None)
        if hash_arity is None:
            raise ConfigurationError(
                f"{hash_func!r} does not declare its input width; "
                "set an `arity` attribute (see quin_trees.hashing.fixed_arity)"
            )
        if hash_arity != arity:
            raise ConfigurationError(
                f"tree arity {arity} does not match hash function input width {hash_arity}"
            )

        self.depth = depth
        self.arity = arity
        self.zero_value = zero_value
        self.hash_func = hash_func
        self.capacity = arity ** depth
        self.zeros = ZeroCache(zero_value, arity, depth, hash_func)
        self.leaves: List[int] = []
        self.nodes: Dict[Tuple[int, int], int] = {}

    def __str__(self):
        return (f"{type(self).__name__}(depth={self.depth}, arity={self.arity}, "
                f"leaves={len(self.leaves)}/{self.capacity})")

    __repr__ = __str__

    def __len__(self) -> int:
        return len(self.leaves)

    def __iter__(self) -> Iterator[int]:
        return iter(self.leaves)

    @property
    def root(self) -> int:
        return self.nodes.get((self.depth, 0), self.zeros.empty_root)

    @property
    def next_index(self) -> int:
        """Index the next inserted leaf will receive."""
        return len(self.leaves)

    def is_full(self) -> bool:
        return len(self.leaves) >= self.capacity

    def is_empty(self) -> bool:
        return not self.leaves

    def get_leaf(self, index: int) -> int:
        self._check_leaf_index(index)
        return self.leaves[index]

    def get_node(self, level: int, index: int) -> int:
        """
        Value of the node at ``(level, index)``, materialised or implied.

        Raises:
            IndexError: if the position lies outside the tree.
        """
        if not 0 <= level <= self.depth:
            raise IndexError(f"level {level} outside [0, {self.depth}]")
        width = self.arity ** (self.depth - level)
        if not 0 <= index < width:
            raise IndexError(f"index {index} outside [0, {width}) at level {level}")
        if level == self.depth:
            return self.root
        return self._node(level, index)

    # Public API
    def insert(self, value: int) -> int:
        """
        Append a leaf and rehash its path to the root (O(depth) hashes).

        Args:
            value (int): The field element to append.

        Returns:
            int: The index the leaf was stored at.

        Raises:
            CapacityError: If the tree already holds ``arity ** depth`` leaves.
        """
        index = len(self.leaves)
        if index >= self.capacity:
            raise CapacityError(
                f"tree of depth {self.depth} and arity {self.arity} is full "
                f"({self.capacity} leaves)"
            )
        ancestors = self._compute_ancestors(index, value)
        self.leaves.append(value)
        self.nodes.update(ancestors)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Inserted leaf %d, root=%s", index, self.root)
        return index

    def update(self, index: int, value: int) -> None:
        """
        Overwrite an inserted leaf and rehash its path to the root.

        Raises:
            LeafIndexError: If ``index`` does not reference an inserted leaf.
        """
        self._check_leaf_index(index)
        ancestors = self._compute_ancestors(index, value)
        self.leaves[index] = value
        self.nodes.update(ancestors)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Updated leaf %d, root=%s", index, self.root)

    def gen_merkle_path(self, index: int) -> MerklePath:
        """
        Build the path from leaf ``index`` to the current root.

        Raises:
            LeafIndexError: If ``index`` does not reference an inserted leaf.
        """
        self._check_leaf_index(index)
        path_elements, indices = self._collect_siblings(0, index)
        return MerklePath(
            path_elements=path_elements,
            indices=indices,
            root=self.root,
            leaf=self.leaves[index],
            depth=self.depth,
        )

    def gen_merkle_subroot_path(self, start: int, end: int) -> MerklePath:
        """
        Build the path from the subtree covering leaves ``[start, end)`` to
        the root.

        The range must span ``arity ** k`` leaves and start on a multiple of
        its own width, i.e. it must be exactly the leaf range of one node at
        level ``k``. The returned path starts from that node's value and
        covers the ``depth - k`` levels above it.

        Raises:
            SubrootRangeError: If the range is empty, not a power of the
                arity wide, misaligned, or outside the tree.
        """
        if isinstance(start, bool) or isinstance(end, bool) \
                or not isinstance(start, int) or not isinstance(end, int):
            raise SubrootRangeError(f"range bounds must be ints, got [{start!r}, {end!r})")
        if end <= start:
            raise SubrootRangeError(f"end ({end}) must be greater than start ({start})")
        width = end - start
        level = exact_log(width, self.arity)
        if level is None:
            raise SubrootRangeError(
                f"range width {width} is not a power of arity {self.arity}"
            )
        if start % width != 0:
            raise SubrootRangeError(
                f"range [{start}, {end}) is not aligned to its width {width}"
            )
        if start < 0 or end > self.capacity:
            raise SubrootRangeError(
                f"range [{start}, {end}) lies outside the tree capacity {self.capacity}"
            )

        subroot_index = start // width
        if level == self.depth:
            subroot = self.root
        else:
            subroot = self._node(level, subroot_index)
        path_elements, indices = self._collect_siblings(level, subroot_index)
        return MerklePath(
            path_elements=path_elements,
            indices=indices,
            root=self.root,
            leaf=subroot,
            depth=self.depth - level,
        )

    @staticmethod
    def verify_merkle_path(path: MerklePath, hash_func: HashFunc) -> bool:
        """See :func:`quin_trees.proofs.verify_merkle_path`."""
        return verify_merkle_path(path, hash_func)

    def copy(self) -> IncrementalQuinTree:
        """Return a fully independent clone of this tree."""
        TreeClass = type(self)
        clone = TreeClass.__new__(TreeClass)
        clone.depth = self.depth
        clone.arity = self.arity
        clone.zero_value = self.zero_value
        clone.hash_func = self.hash_func
        clone.capacity = self.capacity
        clone.zeros = self.zeros.copy()
        clone.leaves = list(self.leaves)
        clone.nodes = dict(self.nodes)
        return clone

    def __copy__(self) -> IncrementalQuinTree:
        return self.copy()

    def __deepcopy__(self, memo) -> IncrementalQuinTree:
        clone = self.copy()
        memo[id(self)] = clone
        return clone

    # Private Methods
    def _check_leaf_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise LeafIndexError(f"leaf index must be an int, got {index!r}")
        if not 0 <= index < len(self.leaves):
            raise LeafIndexError(
                f"leaf index {index} outside [0, {len(self.leaves)})"
            )

    def _node(self, level: int, index: int) -> int:
        """Materialised value at ``(level, index)`` or the level's zero entry."""
        if level == 0:
            if index < len(self.leaves):
                return self.leaves[index]
            return self.zeros[0]
        return self.nodes.get((level, index), self.zeros[level])

    def _compute_ancestors(self, index: int, value: int) -> Dict[Tuple[int, int], int]:
        """
        New values of every ancestor of leaf ``index`` if it held ``value``.

        Nothing is written; callers apply the result once every hash has
        succeeded.
        """
        ancestors: Dict[Tuple[int, int], int] = {}
        arity = self.arity
        current = value
        for level in range(self.depth):
            position = index % arity
            first = index - position
            children = [self._node(level, first + j) for j in range(arity)]
            children[position] = current
            current = self.hash_func(children)
            index //= arity
            ancestors[(level + 1, index)] = current
        return ancestors

    def _collect_siblings(self, level: int, index: int) -> Tuple[List[List[int]], List[int]]:
        """Sibling groups and positions from ``(level, index)`` up to the root."""
        arity = self.arity
        path_elements: List[List[int]] = []
        indices: List[int] = []
        for lvl in range(level, self.depth):
            position = index % arity
            first = index - position
            path_elements.append(
                [self._node(lvl, first + j) for j in range(arity) if j != position]
            )
            indices.append(position)
            index //= arity
        return path_elements, indices
