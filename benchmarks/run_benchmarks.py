#!/usr/bin/env python3
"""
Main entry point for quin tree benchmarks.

Usage:
    # Run with default settings
    python -m benchmarks.run_benchmarks

    # Run with custom seed for reproducibility
    BENCHMARK_SEED=123 python -m benchmarks.run_benchmarks

    # Run in verify-only mode (one repetition, invariant checks)
    BENCHMARK_VERIFY_ONLY=true python -m benchmarks.run_benchmarks

    # Restrict configurations
    python -m benchmarks.run_benchmarks --arities 5 --depths 3 4 5
"""

import argparse
import logging
import os
import sys
import time
from datetime import datetime

from tqdm import tqdm

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from quin_trees.logging_config import setup_logging as quin_setup_logging

from .config import BenchmarkConfig
from .runner import BenchmarkRunner


def setup_logging(config: BenchmarkConfig, log_dir: str = None) -> None:
    """
    Configure logging for benchmark output.

    Args:
        config: Benchmark configuration
        log_dir: Optional directory for log files
    """
    handlers = [logging.StreamHandler()]
    log_path = None

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = os.path.join(log_dir, f"benchmark_{ts}.log")
        handlers.append(logging.FileHandler(log_path, mode="a"))

    level = getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,  # Override any existing configuration
    )
    # The package logger does not propagate; point it at the same file
    quin_setup_logging(level, log_file=log_path)


def parse_args() -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Run quin tree benchmarks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--seed", type=int, help="Random seed (default: from env or 42)")
    parser.add_argument("--depths", type=int, nargs="+", help="Tree depths (default: 4 8)")
    parser.add_argument("--arities", type=int, nargs="+", help="Tree arities (default: 2 5)")
    parser.add_argument("--repetitions", type=int, help="Repetitions per configuration (default: 5)")
    parser.add_argument("--verify-only", action="store_true", help="Run in verify-only mode")
    parser.add_argument("--skip-warmup", action="store_true", help="Skip warmup phase")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--log-dir", help="Directory for log files (default: benchmarks/logs)")
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    # Start with config from environment, then apply command-line overrides
    config = BenchmarkConfig.from_env()
    if args.seed is not None:
        config.seed = args.seed
    if args.depths is not None:
        config.depths = args.depths
    if args.arities is not None:
        config.arities = args.arities
    if args.repetitions is not None:
        config.repetitions = args.repetitions
    if args.verify_only:
        config.verify_only = True
    if args.skip_warmup:
        config.skip_warmup = True
    if args.log_level is not None:
        config.log_level = args.log_level

    log_dir = args.log_dir or os.path.join(os.path.dirname(__file__), "logs")
    setup_logging(config, log_dir if not config.verify_only else None)

    logging.info("=" * 70)
    logging.info("QUIN TREE BENCHMARKS")
    logging.info("=" * 70)
    if config.verify_only:
        logging.info("Mode: VERIFY-ONLY (correctness checks, no reporting)")
    else:
        logging.info("Mode: PERFORMANCE (timed measurements)")

    runner = BenchmarkRunner(config)
    overall_start = time.perf_counter()

    configurations = [(a, d) for a in config.arities for d in config.depths]
    for arity, depth in tqdm(configurations, desc="Configurations"):
        logging.info("")
        logging.info("BENCHMARK: arity=%d, depth=%d, repetitions=%d", arity, depth, config.repetitions)
        results, metadata = runner.run_benchmark(arity, depth)
        if not config.verify_only:
            runner.aggregate_and_report(results, metadata)

    overall_elapsed = time.perf_counter() - overall_start
    logging.info("")
    logging.info("TOTAL EXECUTION TIME: %.3f seconds", overall_elapsed)
    return 0


if __name__ == "__main__":
    sys.exit(main())
