"""Merkle paths and stateless path verification.

A :class:`MerklePath` is a value object: it copies the sibling values it
needs at generation time and keeps no reference to the tree. Verification
only needs the path and the hash function.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from quin_trees.errors import PathFormatError
from quin_trees.hashing import HashFunc
from quin_trees.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class MerklePath:
    """
    Sibling values and positions linking a leaf (or subroot) to a root.

    Attributes:
        path_elements: one group of ``arity - 1`` siblings per level, bottom-up
        indices: position (``0 .. arity - 1``) of the running node per level
        root: root of the tree when the path was generated
        leaf: the value the path starts from (a leaf or a subroot)
        depth: number of levels covered by the path
    """
    path_elements: list[list[int]]
    indices: list[int]
    root: int
    leaf: int
    depth: int = field(default=None)

    def __post_init__(self) -> None:
        if self.depth is None and self.indices is not None:
            self.depth = len(self.indices)

    @property
    def path_index(self) -> list[int]:
        """Circuit-facing name of :attr:`indices`."""
        return self.indices

    def to_dict(self) -> dict[str, Any]:
        """Serialise every field, field elements as decimal strings."""
        return {
            "path_elements": [[str(e) for e in group] for group in self.path_elements],
            "path_index": [int(i) for i in self.indices],
            "root": str(self.root),
            "leaf": str(self.leaf),
            "depth": int(self.depth),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MerklePath:
        """Rebuild a path from :meth:`to_dict` output (ints or decimal strings)."""
        try:
            elements = data["path_elements"]
            indices = data["path_index"] if "path_index" in data else data["indices"]
            root = data["root"]
            leaf = data["leaf"]
        except KeyError as e:
            raise PathFormatError(f"Merkle path is missing field {e.args[0]!r}") from None
        if elements is None or indices is None:
            raise PathFormatError("path_elements and path_index must not be null")
        try:
            return cls(
                path_elements=[
                    None if group is None else [_as_int(e) for e in group]
                    for group in elements
                ],
                indices=[_as_int(i) for i in indices],
                root=_as_int(root),
                leaf=_as_int(leaf),
                depth=_as_int(data.get("depth")),
            )
        except (TypeError, ValueError) as e:
            raise PathFormatError(f"Merkle path holds a non-integer value: {e}") from None


def _as_int(value) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    return int(value)


def _check_path_format(path: MerklePath, arity: int) -> None:
    """Raise :class:`PathFormatError` unless ``path`` is well formed for ``arity``."""
    elements = path.path_elements
    indices = path.indices

    if elements is None or indices is None:
        raise PathFormatError("path_elements and indices must not be None")
    if not isinstance(elements, (list, tuple)) or not isinstance(indices, (list, tuple)):
        raise PathFormatError("path_elements and indices must be sequences")
    if len(elements) != len(indices):
        raise PathFormatError(
            f"path has {len(elements)} element groups but {len(indices)} indices"
        )
    if path.depth is not None and path.depth != len(indices):
        raise PathFormatError(
            f"path declares depth {path.depth} but covers {len(indices)} levels"
        )
    for name, value in (("leaf", path.leaf), ("root", path.root)):
        if value is None or isinstance(value, bool) or not isinstance(value, int):
            raise PathFormatError(f"path {name} must be an integer, got {value!r}")

    for level, (group, index) in enumerate(zip(elements, indices)):
        if not isinstance(group, (list, tuple)):
            raise PathFormatError(f"level {level}: sibling group is {group!r}")
        if len(group) != arity - 1:
            raise PathFormatError(
                f"level {level}: expected {arity - 1} siblings, got {len(group)}"
            )
        if any(e is None or isinstance(e, bool) or not isinstance(e, int) for e in group):
            raise PathFormatError(f"level {level}: siblings must be integers, got {group!r}")
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < arity:
            raise PathFormatError(f"level {level}: index {index!r} outside [0, {arity})")


def verify_merkle_path(path: MerklePath | Mapping[str, Any], hash_func: HashFunc) -> bool:
    """
    Recompute the root from ``path.leaf`` and compare it with ``path.root``.

    Raises:
        PathFormatError: if the path is malformed for ``hash_func``'s arity.

    Returns:
        True if the recombined value equals the recorded root, else False.
    """
    if isinstance(path, Mapping):
        path = MerklePath.from_dict(path)

    arity = getattr(hash_func, "arity", None)
    if arity is None:
        groups = path.path_elements or []
        first = groups[0] if groups else None
        if groups and not isinstance(first, (list, tuple)):
            raise PathFormatError(f"level 0: sibling group is {first!r}")
        arity = len(first) + 1 if groups else 2
    _check_path_format(path, arity)

    current = path.leaf
    for siblings, index in zip(path.path_elements, path.indices):
        children = list(siblings)
        children.insert(index, current)
        current = hash_func(children)

    valid = current == path.root
    if not valid:
        logger.debug("Merkle path recombined to %s, expected root %s", current, path.root)
    return valid


def compute_root_from_leaves(leaves: Sequence[int], arity: int, hash_func: HashFunc) -> int:
    """
    Fold a complete leaf layer into its root, one level at a time.

    ``len(leaves)`` must be a power of ``arity``; pad with zero values first.
    """
    if not leaves:
        raise ValueError("cannot fold an empty leaf layer")
    layer = list(leaves)
    while len(layer) > 1:
        if len(layer) % arity != 0:
            raise ValueError(
                f"layer of {len(layer)} nodes is not a multiple of arity {arity}"
            )
        layer = [hash_func(layer[i:i + arity]) for i in range(0, len(layer), arity)]
    return layer[0]
