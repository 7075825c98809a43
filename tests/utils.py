"""Utility functions for testing quin tree invariants and reference roots."""

import logging
from typing import List, Optional

from quin_trees.hashing import FIELD_MODULUS, HashFunc, fixed_arity, get_hasher
from quin_trees.invariants import InvariantError, assert_tree_invariants_raise
from quin_trees.proofs import compute_root_from_leaves


def get_test_logger(name: str) -> logging.Logger:
    """Logger for test modules, kept apart from the library's ``quin_trees`` logger."""
    logger = logging.getLogger(f"Tests.{name}")
    if not logger.hasHandlers():
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s] %(message)s'))
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
    return logger


def make_strict_hasher(arity: int) -> HashFunc:
    """Registered primitive for ``arity`` that rejects inputs outside the field."""
    base = get_hasher(arity)

    @fixed_arity(arity)
    def strict_hash(inputs):
        for v in inputs:
            if not 0 <= v < FIELD_MODULUS:
                raise ValueError(f"{v} is not a field element")
        return base(inputs)

    return strict_hash


class FailingHasher:
    """Registered primitive for ``arity`` that raises once ``remaining`` calls are used up."""

    def __init__(self, arity: int):
        self.arity = arity
        self.base = get_hasher(arity)
        self.remaining: Optional[int] = None

    def __call__(self, inputs):
        if self.remaining is not None:
            if self.remaining == 0:
                raise RuntimeError("hash backend unavailable")
            self.remaining -= 1
        return self.base(inputs)


def assert_tree_invariants_tc(tc, t, err_msg: Optional[str] = "") -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    try:
        assert_tree_invariants_raise(t)
    except InvariantError as e:
        tc.fail(f"{e}\n\n{err_msg}")


def compute_empty_root(depth: int, zero_value: int, arity: int, hash_func: HashFunc) -> int:
    """Fold the zero value up through ``depth`` levels, one hash per level."""
    assert depth > 0
    zeros = [zero_value]
    for i in range(1, depth):
        zeros.append(hash_func([zeros[i - 1]] * arity))
    return hash_func([zeros[depth - 1]] * arity)


def padded_root(
    leaves: List[int],
    depth: int,
    arity: int,
    hash_func: HashFunc,
    zero_value: int = 0,
) -> int:
    """Reference root: pad ``leaves`` to capacity and fold the whole layer."""
    capacity = arity ** depth
    assert len(leaves) <= capacity
    padded = list(leaves) + [zero_value] * (capacity - len(leaves))
    return compute_root_from_leaves(padded, arity, hash_func)
