"""Factory for arity-specialised quin tree classes."""

from typing import Optional

from quin_trees.hashing import HashFunc, get_hasher
from quin_trees.incremental_tree import DEFAULT_ARITY, DEFAULT_ZERO_VALUE, IncrementalQuinTree
from quin_trees.multi_tree import MultiIncrementalQuinTree

# Cache for previously created classes to avoid recreating them
_class_cache: dict[int, tuple[type, type]] = {}


def make_quin_tree_classes(
    arity: int,
) -> tuple[type[IncrementalQuinTree], type[MultiIncrementalQuinTree]]:
    """
    Factory function to generate tree classes specialised for a given arity.

    Parameters:
        arity (int): Children per internal node. A hash primitive for this
            arity must be registered in :mod:`quin_trees.hashing`.

    Returns:
        Tuple[Type[IncrementalQuinTree], Type[MultiIncrementalQuinTree]]:
            The single-tree and multi-tree classes with ``ARITY`` bound.

    Raises:
        ConfigurationError: If no hash primitive is registered for ``arity``.
    """
    if arity in _class_cache:
        return _class_cache[arity]

    # Fail early for arities without a primitive
    get_hasher(arity)

    QuinTreeA = type(
        f"IncrementalQuinTree_A{arity}",
        (IncrementalQuinTree,),
        {"ARITY": arity, "__slots__": ()},
    )

    MultiQuinTreeA = type(
        f"MultiIncrementalQuinTree_A{arity}",
        (MultiIncrementalQuinTree,),
        {"TreeClass": QuinTreeA, "__slots__": ()},
    )

    _class_cache[arity] = (QuinTreeA, MultiQuinTreeA)
    return QuinTreeA, MultiQuinTreeA


def create_quin_tree(
    depth: int,
    arity: int = DEFAULT_ARITY,
    zero_value: int = DEFAULT_ZERO_VALUE,
    hash_func: Optional[HashFunc] = None,
) -> IncrementalQuinTree:
    """Create an empty tree; the hash primitive defaults to the registered one."""
    QuinTreeA, _ = make_quin_tree_classes(arity)
    return QuinTreeA(depth, zero_value, arity, hash_func)


def create_multi_quin_tree(
    depth: int,
    arity: int = DEFAULT_ARITY,
    zero_value: int = DEFAULT_ZERO_VALUE,
    hash_func: Optional[HashFunc] = None,
) -> MultiIncrementalQuinTree:
    """Create an empty multi-tree whose shards have ``arity ** depth`` leaves each."""
    _, MultiQuinTreeA = make_quin_tree_classes(arity)
    return MultiQuinTreeA(depth, zero_value, arity, hash_func)
