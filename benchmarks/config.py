"""Benchmark configuration and metadata management."""

import os
import subprocess
from dataclasses import asdict, dataclass, field
from typing import List, Optional

from kvbench.data import ValueMode
from kvbench.engines import ENGINE_KINDS
from kvbench.params import DEFAULT_PAIR_COUNTS, DEFAULT_VALUE_SIZES, ParameterSpace
from kvbench.workloads import BENCHMARK_FAMILIES, BENCHMARK_NAMES


def _int_list(raw: str) -> List[int]:
    return [int(part) for part in raw.replace(",", " ").split()]


def _str_list(raw: str) -> List[str]:
    return [part for part in raw.replace(",", " ").split()]


def expand_benchmarks(names: List[str]) -> List[str]:
    """Accept family names (e.g. ``mutation``) as well as benchmark names."""
    expanded = []
    for name in names:
        for bench in BENCHMARK_FAMILIES.get(name, [name]):
            if bench not in expanded:
                expanded.append(bench)
    return expanded


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs."""

    # Reproducibility
    seed: int = 42
    value_mode: str = ValueMode.RANDOM.value

    # Benchmark parameters
    pair_counts: List[int] = None
    value_sizes: List[int] = None
    engines: List[str] = None
    benchmarks: List[str] = None
    repetitions: int = 20
    warmup: int = 1

    # Execution control
    verify_only: bool = False
    skip_warmup: bool = False
    size_as_time: bool = False
    lmdb_map_size: Optional[int] = None
    tmp_dir: Optional[str] = None

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        if self.pair_counts is None:
            self.pair_counts = list(DEFAULT_PAIR_COUNTS)
        if self.value_sizes is None:
            self.value_sizes = list(DEFAULT_VALUE_SIZES)
        if self.engines is None:
            self.engines = list(ENGINE_KINDS)
        if self.benchmarks is None:
            self.benchmarks = list(BENCHMARK_NAMES)
        else:
            self.benchmarks = expand_benchmarks(self.benchmarks)
        self.validate()

    def validate(self) -> None:
        """Reject unknown names and non-positive counts before any fixture exists."""
        unknown = [e for e in self.engines if e not in ENGINE_KINDS]
        if unknown:
            raise ValueError(f"Unknown engine(s): {', '.join(unknown)}")
        unknown = [b for b in self.benchmarks if b not in BENCHMARK_NAMES]
        if unknown:
            raise ValueError(f"Unknown benchmark(s): {', '.join(unknown)}")
        if self.repetitions <= 0:
            raise ValueError(f"repetitions must be positive, got {self.repetitions}")
        if self.warmup < 0:
            raise ValueError(f"warmup must not be negative, got {self.warmup}")
        if self.seed is not None and self.seed < 0:
            raise ValueError(f"seed must not be negative, got {self.seed}")
        ValueMode(self.value_mode)
        self.parameter_space()

    def parameter_space(self) -> ParameterSpace:
        return ParameterSpace.from_iterables(self.pair_counts, self.value_sizes)

    def engine_options(self) -> dict:
        return {"map_size": self.lmdb_map_size} if self.lmdb_map_size else {}

    @classmethod
    def from_env(cls) -> "BenchmarkConfig":
        """Create config from environment variables."""
        env = os.environ
        kwargs = dict(
            seed=int(env.get("KVBENCH_SEED", "42")),
            value_mode=env.get("KVBENCH_VALUE_MODE", ValueMode.RANDOM.value),
            repetitions=int(env.get("KVBENCH_REPETITIONS", "20")),
            verify_only=env.get("KVBENCH_VERIFY_ONLY", "").lower() == "true",
            skip_warmup=env.get("KVBENCH_SKIP_WARMUP", "").lower() == "true",
            size_as_time=env.get("KVBENCH_SIZE_AS_TIME", "").lower() == "true",
            tmp_dir=env.get("KVBENCH_TMP_DIR") or None,
            log_level=env.get("KVBENCH_LOG_LEVEL", "INFO"),
        )
        if env.get("KVBENCH_PAIR_COUNTS"):
            kwargs["pair_counts"] = _int_list(env["KVBENCH_PAIR_COUNTS"])
        if env.get("KVBENCH_VALUE_SIZES"):
            kwargs["value_sizes"] = _int_list(env["KVBENCH_VALUE_SIZES"])
        if env.get("KVBENCH_ENGINES"):
            kwargs["engines"] = _str_list(env["KVBENCH_ENGINES"])
        if env.get("KVBENCH_BENCHMARKS"):
            kwargs["benchmarks"] = _str_list(env["KVBENCH_BENCHMARKS"])
        if env.get("KVBENCH_LMDB_MAP_SIZE"):
            kwargs["lmdb_map_size"] = int(env["KVBENCH_LMDB_MAP_SIZE"])
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return asdict(self)


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
    shapes: int = field(default=0)

    def __str__(self) -> str:
        """Format metadata as string."""
        lines = [
            f"Commit: {self.commit_hash or 'unknown'}",
            f"Seed: {self.config.seed}",
            f"Value mode: {self.config.value_mode}",
            f"Engines: {', '.join(self.config.engines)}",
            f"Pair counts: {self.config.pair_counts}",
            f"Value sizes: {self.config.value_sizes}",
            f"Shapes: {self.shapes}",
            f"Repetitions: {self.config.repetitions}",
        ]
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "commit_hash": self.commit_hash,
            "shapes": self.shapes,
            "config": self.config.to_dict(),
        }
