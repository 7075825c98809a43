"""Benchmark configuration and metadata management."""

import os
import subprocess
from dataclasses import dataclass
from typing import Optional


def _int_list(value: str) -> list[int]:
    return [int(v) for v in value.replace(",", " ").split()]


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs."""

    # Reproducibility
    seed: int = 42

    # Benchmark parameters
    depths: list[int] = None
    arities: list[int] = None
    repetitions: int = 5
    paths_per_run: int = 100

    # Execution control
    verify_only: bool = False
    skip_warmup: bool = False

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        if self.depths is None:
            self.depths = [4, 8]
        if self.arities is None:
            self.arities = [2, 5]

    @classmethod
    def from_env(cls) -> "BenchmarkConfig":
        """Create config from environment variables."""
        depths = os.environ.get("BENCHMARK_DEPTHS")
        arities = os.environ.get("BENCHMARK_ARITIES")
        return cls(
            seed=int(os.environ.get("BENCHMARK_SEED", "42")),
            depths=_int_list(depths) if depths else None,
            arities=_int_list(arities) if arities else None,
            repetitions=int(os.environ.get("BENCHMARK_REPETITIONS", "5")),
            verify_only=os.environ.get("BENCHMARK_VERIFY_ONLY", "").lower() == "true",
            skip_warmup=os.environ.get("BENCHMARK_SKIP_WARMUP", "").lower() == "true",
            log_level=os.environ.get("BENCHMARK_LOG_LEVEL", "INFO"),
        )


def get_git_commit_hash() -> Optional[str]:
    """Get the current git commit hash."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            cwd=os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        )
        return result.stdout.strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return None


@dataclass
class BenchmarkMetadata:
    """Metadata about a benchmark run."""

    commit_hash: Optional[str]
    config: BenchmarkConfig
    depth: int
    arity: int
    leaf_count: int
    repetitions: int

    def __str__(self) -> str:
        lines = [
            f"Commit: {self.commit_hash or 'unknown'}",
            f"Seed: {self.config.seed}",
            f"Depth: {self.depth}",
            f"Arity: {self.arity}",
            f"Leaves (n): {self.leaf_count}",
            f"Repetitions: {self.repetitions}",
        ]
        return "\n".join(lines)
