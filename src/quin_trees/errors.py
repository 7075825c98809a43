"""Exception hierarchy for incremental quin trees.

Every error is raised before the offending call writes any state, so a
caught exception always leaves the tree exactly as it was.
"""


class QuinTreeError(Exception):
    """Base class for all errors raised by ``quin_trees``."""


class ConfigurationError(QuinTreeError, ValueError):
    """Invalid depth, or an arity the supplied hash function cannot serve."""


class CapacityError(QuinTreeError, OverflowError):
    """Insert into a tree that already holds ``arity ** depth`` leaves."""


class LeafIndexError(QuinTreeError, IndexError):
    """Leaf index outside ``[0, number of inserted leaves)``."""


class SubrootRangeError(QuinTreeError, ValueError):
    """Subroot range that is empty, not a power of the arity, or misaligned."""


class PathFormatError(QuinTreeError, ValueError):
    """Merkle path whose elements or indices are missing or mis-shaped."""
