"""
Field hashing primitives for quin trees.

A tree hashes exactly ``arity`` field elements into one. Any callable can
serve as the hash function as long as it declares that fixed input width
through an ``arity`` attribute; the tree refuses to build otherwise.

The reference primitives here are off-circuit: SHA-256 over fixed-width
big-endian encodings, reduced into the BN254 scalar field. They are
deterministic and collision resistant, but they are not the in-circuit
hash a SNARK verifier would use. Swap in a Poseidon binding by wrapping
it with :func:`fixed_arity` and registering it.
"""
import hashlib
from typing import Callable, Dict, Sequence

from quin_trees.errors import ConfigurationError

# BN254 scalar field modulus
FIELD_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617

HashFunc = Callable[[Sequence[int]], int]


def to_field(value: int) -> int:
    """Reduce an integer into ``[0, FIELD_MODULUS)``."""
    return value % FIELD_MODULUS


def sha256_to_field(*values: int, domain: bytes = b"") -> int:
    """
    Hash integers with SHA-256 and map the digest into the field.

    Args:
        *values: integers representing field elements
        domain: optional prefix separating different primitives

    Returns:
        integer in [0, FIELD_MODULUS)
    """
    h = hashlib.sha256()
    h.update(domain)
    for v in values:
        # Fixed-width (32 bytes) encoding keeps the input unambiguous
        h.update(to_field(v).to_bytes(32, byteorder="big", signed=False))
    return int.from_bytes(h.digest(), byteorder="big") % FIELD_MODULUS


class ArityHasher:
    """Hash exactly ``arity`` field elements into one field element."""
    __slots__ = ("arity", "name", "_domain")

    def __init__(self, arity: int, name: str = None):
        if not isinstance(arity, int) or arity < 2:
            raise ConfigurationError(f"hasher arity must be an int >= 2, got {arity!r}")
        self.arity = arity
        self.name = name or f"hash{arity}"
        self._domain = b"quin-trees/" + self.name.encode()

    def __call__(self, inputs: Sequence[int]) -> int:
        if len(inputs) != self.arity:
            raise ValueError(
                f"{self.name} takes exactly {self.arity} inputs, got {len(inputs)}"
            )
        return sha256_to_field(*inputs, domain=self._domain)

    def __repr__(self) -> str:
        return f"ArityHasher(arity={self.arity}, name={self.name!r})"


def fixed_arity(arity: int) -> Callable[[HashFunc], HashFunc]:
    """Decorator declaring the fixed input width of an external hash function."""
    def wrap(func: HashFunc) -> HashFunc:
        func.arity = arity
        return func
    return wrap


hash2 = ArityHasher(2, "hash2")
hash5 = ArityHasher(5, "hash5")

# Arity -> hash primitive used when a tree is built without an explicit one
_HASHERS: Dict[int, HashFunc] = {
    2: hash2,
    5: hash5,
}


def register_hasher(hash_func: HashFunc, replace: bool = False) -> None:
    """Make ``hash_func`` the default primitive for its declared arity."""
    arity = getattr(hash_func, "arity", None)
    if not isinstance(arity, int) or arity < 2:
        raise ConfigurationError(
            f"{hash_func!r} does not declare an integer arity >= 2"
        )
    if arity in _HASHERS and not replace:
        raise ConfigurationError(f"a hasher for arity {arity} is already registered")
    _HASHERS[arity] = hash_func


def unregister_hasher(arity: int) -> None:
    _HASHERS.pop(arity, None)


def get_hasher(arity: int) -> HashFunc:
    """Return the registered hash primitive for ``arity``."""
    try:
        return _HASHERS[arity]
    except KeyError:
        raise ConfigurationError(
            f"no hash primitive available for arity {arity}; "
            f"supported arities: {sorted(_HASHERS)}"
        ) from None


def supported_arities() -> list[int]:
    return sorted(_HASHERS)
