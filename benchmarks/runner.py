"""Core benchmark runner for quin tree performance measurements."""

import logging
import time
from dataclasses import dataclass
from statistics import mean, median
from typing import List, Tuple

from quin_trees.factory import create_quin_tree
from quin_trees.incremental_tree import IncrementalQuinTree
from quin_trees.invariants import InvariantError, assert_tree_invariants_raise
from quin_trees.proofs import verify_merkle_path
from quin_trees.tree_stats import tree_stats_

from .benchmark_utils import BenchmarkUtils
from .config import BenchmarkConfig, BenchmarkMetadata, get_git_commit_hash


@dataclass
class BenchmarkResult:
    """Timings from a single benchmark repetition (seconds)."""
    insert_time: float
    update_time: float
    path_time: float
    verify_time: float
    leaf_count: int
    path_count: int


class BenchmarkRunner:
    """
    Manages the benchmark lifecycle with proper phase separation.

    Phases:
    1. Setup (not timed): leaf generation
    2. Warmup (not timed): a small tree filled once
    3. Run (timed): insert, update, path generation, verification
    4. Verify (not timed): invariant checks on the built tree
    """

    def __init__(self, config: BenchmarkConfig):
        self.config = config
        BenchmarkUtils.check_logging_level()

    def setup(self, arity: int, depth: int, seed: int) -> Tuple[List[int], List[int], List[int]]:
        """Leaves to insert, replacement values, and indices to prove. NOT TIMED."""
        n = BenchmarkUtils.leaf_budget(arity, depth)
        leaves = BenchmarkUtils.generate_leaves(n, seed)
        replacements = BenchmarkUtils.generate_leaves(n, seed + 1)
        indices = BenchmarkUtils.sample_indices(self.config.paths_per_run, n, seed + 2)
        return leaves, replacements, indices

    def warmup(self, arity: int) -> None:
        if self.config.skip_warmup:
            return
        tree = create_quin_tree(2, arity)
        for leaf in BenchmarkUtils.generate_leaves(tree.capacity, self.config.seed):
            tree.insert(leaf)

    def run_single(self, arity: int, depth: int, seed: int) -> Tuple[BenchmarkResult, IncrementalQuinTree]:
        """One timed repetition on a fresh tree."""
        leaves, replacements, indices = self.setup(arity, depth, seed)
        tree = create_quin_tree(depth, arity)

        start = time.perf_counter()
        for leaf in leaves:
            tree.insert(leaf)
        insert_time = time.perf_counter() - start

        start = time.perf_counter()
        for i in indices:
            tree.update(i, replacements[i])
        update_time = time.perf_counter() - start

        start = time.perf_counter()
        paths = [tree.gen_merkle_path(i) for i in indices]
        path_time = time.perf_counter() - start

        start = time.perf_counter()
        ok = all(verify_merkle_path(p, tree.hash_func) for p in paths)
        verify_time = time.perf_counter() - start
        if not ok:
            raise InvariantError(f"generated path failed to verify (arity={arity}, depth={depth})")

        result = BenchmarkResult(
            insert_time=insert_time,
            update_time=update_time,
            path_time=path_time,
            verify_time=verify_time,
            leaf_count=len(leaves),
            path_count=len(paths),
        )
        return result, tree

    def verify(self, tree: IncrementalQuinTree) -> bool:
        """Verify phase - NOT TIMED."""
        try:
            assert_tree_invariants_raise(tree)
        except InvariantError as e:
            logging.error("%s", e)
            return False
        stats = tree_stats_(tree)
        logging.info("Verified tree: %d leaves, %d materialised nodes", stats.leaf_count, stats.node_count)
        return True

    def run_benchmark(self, arity: int, depth: int) -> Tuple[List[BenchmarkResult], BenchmarkMetadata]:
        self.warmup(arity)
        results = []
        for rep in range(self.config.repetitions):
            result, tree = self.run_single(arity, depth, self.config.seed + rep)
            if rep == 0 and not self.verify(tree):
                raise InvariantError(f"invariants failed for arity={arity}, depth={depth}")
            results.append(result)
            if self.config.verify_only:
                break

        metadata = BenchmarkMetadata(
            commit_hash=get_git_commit_hash(),
            config=self.config,
            depth=depth,
            arity=arity,
            leaf_count=results[0].leaf_count,
            repetitions=len(results),
        )
        return results, metadata

    @staticmethod
    def aggregate_and_report(results: List[BenchmarkResult], metadata: BenchmarkMetadata) -> None:
        logging.info("%s", metadata)
        for name in ("insert_time", "update_time", "path_time", "verify_time"):
            values = [getattr(r, name) for r in results]
            logging.info(
                "%-12s mean=%.6fs median=%.6fs min=%.6fs",
                name, mean(values), median(values), min(values),
            )
        per_insert = mean(r.insert_time / r.leaf_count for r in results)
        logging.info("per insert: %.2f us", per_insert * 1e6)
