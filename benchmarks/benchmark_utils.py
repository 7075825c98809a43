"""
Benchmarking utilities for quin trees.

Reproducibility:
    All random data generation uses deterministic seeds by default.
    The default seed can be overridden via the BENCHMARK_SEED environment variable.

Logging:
    Benchmarks should be run with logging at INFO level or higher to avoid
    performance contamination from verbose debug output.
"""

import logging
import os
from typing import List

import numpy as np

from quin_trees.hashing import FIELD_MODULUS

# Default seed for deterministic benchmarking - can be overridden via environment variable
DEFAULT_BENCHMARK_SEED = int(os.environ.get('BENCHMARK_SEED', '42'))

# Leaves never exceed this many per configuration, whatever the capacity
MAX_LEAVES = 5 ** 6


class BenchmarkUtils:
    """Deterministic data generation and setup checks for benchmarks."""

    @staticmethod
    def check_logging_level():
        """
        Raise if DEBUG logging is enabled on the ``quin_trees`` logger, since
        per-insert debug output dominates the measured time.
        """
        effective_level = logging.getLogger("quin_trees").getEffectiveLevel()
        if effective_level <= logging.DEBUG:
            raise ValueError(
                f"Logging level is set to {logging.getLevelName(effective_level)}. "
                "Benchmarks require logging to be at INFO level or higher to avoid "
                "performance contamination from verbose debug output."
            )

    @staticmethod
    def leaf_budget(arity: int, depth: int) -> int:
        return min(arity ** depth, MAX_LEAVES)

    @staticmethod
    def generate_leaves(size: int, seed: int = None) -> List[int]:
        """
        Generate ``size`` field elements from a seeded generator.

        Each leaf combines four 62-bit draws so values are spread across the field
        rather than clustered in its low bits.
        """
        if seed is None:
            seed = DEFAULT_BENCHMARK_SEED
        rng = np.random.default_rng(seed)
        words = rng.integers(0, 2 ** 62, size=(size, 4), dtype=np.int64)
        leaves = []
        for row in words.tolist():
            value = 0
            for word in row:
                value = (value << 62) | word
            leaves.append(value % FIELD_MODULUS)
        return leaves

    @staticmethod
    def sample_indices(count: int, upper: int, seed: int = None) -> List[int]:
        """Deterministic sample of leaf indices in ``[0, upper)``."""
        if seed is None:
            seed = DEFAULT_BENCHMARK_SEED
        rng = np.random.default_rng(seed)
        return rng.integers(0, upper, size=count).tolist()
