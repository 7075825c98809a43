"""Per-level hashes of all-empty subtrees."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Iterator

from quin_trees.hashing import HashFunc


class ZeroCache(Sequence):
    """
    Immutable table of empty-subtree hashes.

    Entry ``i`` is the value of any node at level ``i`` whose subtree holds
    nothing but the zero value: ``zeros[0] = zero_value`` and
    ``zeros[i] = H([zeros[i - 1]] * arity)``. The table has ``depth``
    entries (levels ``0 .. depth - 1``); the root of an empty tree is kept
    separately as :attr:`empty_root`.
    """
    __slots__ = ("_zeros", "_empty_root")

    def __init__(self, zero_value: int, arity: int, depth: int, hash_func: HashFunc):
        zeros = [zero_value]
        for level in range(1, depth):
            zeros.append(hash_func([zeros[level - 1]] * arity))
        self._zeros = tuple(zeros)
        self._empty_root = hash_func([zeros[depth - 1]] * arity)

    @classmethod
    def _from_values(cls, zeros: tuple[int, ...], empty_root: int) -> ZeroCache:
        cache = cls.__new__(cls)
        cache._zeros = tuple(zeros)
        cache._empty_root = empty_root
        return cache

    @property
    def empty_root(self) -> int:
        """Root of a tree in which no leaf has been set."""
        return self._empty_root

    def __getitem__(self, level):
        return self._zeros[level]

    def __len__(self) -> int:
        return len(self._zeros)

    def __iter__(self) -> Iterator[int]:
        return iter(self._zeros)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ZeroCache):
            return NotImplemented
        return self._zeros == other._zeros and self._empty_root == other._empty_root

    __hash__ = None

    def copy(self) -> ZeroCache:
        return ZeroCache._from_values(self._zeros, self._empty_root)

    def __repr__(self) -> str:
        return f"ZeroCache(levels={len(self._zeros)}, empty_root={self._empty_root})"
