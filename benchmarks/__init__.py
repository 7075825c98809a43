"""
Benchmarks package for incremental quin trees.

Measures, per (arity, depth) configuration:
- insert throughput when filling a tree to capacity (or a leaf budget)
- update cost on already inserted leaves
- Merkle path generation and verification

All leaf data is generated from deterministic seeds so runs are comparable.
"""

from .benchmark_utils import BenchmarkUtils
from .config import BenchmarkConfig

__all__ = ["BenchmarkConfig", "BenchmarkUtils"]
