"""Core benchmark runner for storage engine measurements."""

import gc
import json
import logging
import statistics
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from tqdm import tqdm

from kvbench.engines import get_adapter
from kvbench.errors import BenchmarkFailure
from kvbench.fixture import FixtureBuilder
from kvbench.params import WorkloadShape
from kvbench.workloads import Workload, prepare

from .config import BenchmarkConfig, BenchmarkMetadata, get_git_commit_hash
from .verify import failed_checks, verify_engine


@dataclass
class BenchmarkResult:
    """Samples from one (engine, benchmark, shape) group."""
    name: str
    engine: str
    shape: WorkloadShape
    unit: str
    samples: List[int] = field(default_factory=list)

    @property
    def mean(self) -> float:
        return statistics.mean(self.samples)

    @property
    def median(self) -> float:
        return statistics.median(self.samples)

    @property
    def min(self) -> int:
        return min(self.samples)

    @property
    def max(self) -> int:
        return max(self.samples)

    @property
    def stdev(self) -> float:
        return statistics.stdev(self.samples) if len(self.samples) > 1 else 0.0

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "engine": self.engine,
            "pair_count": self.shape.pair_count,
            "value_size": self.shape.value_size,
            "unit": self.unit,
            "samples": list(self.samples),
            "mean": self.mean,
            "median": self.median,
            "min": self.min,
            "max": self.max,
            "stdev": self.stdev,
        }


class BenchmarkRunner:
    """
    Manages the benchmark lifecycle with proper phase separation.

    Phases, per (engine, benchmark, shape) group:
    1. Setup (not timed): fresh fixture, pair generation, access plan
    2. Warmup (not timed): optional warmup iterations
    3. Run (timed): only the engine operation
    4. Teardown (not timed): per-call cleanup and fixture release
    """

    def __init__(self, config: BenchmarkConfig, builder: Optional[FixtureBuilder] = None):
        """
        Initialize benchmark runner.

        Args:
            config: Benchmark configuration
            builder: Fixture builder; one is created from the config if None
        """
        self.config = config
        self.space = config.parameter_space()
        self.builder = builder or FixtureBuilder(
            value_mode=config.value_mode,
            seed=config.seed,
            tmp_dir=config.tmp_dir,
            adapter_factory=self._make_adapter,
        )
        self._check_logging_level()

    def _make_adapter(self, engine):
        return get_adapter(engine, **self.config.engine_options())

    def _check_logging_level(self) -> None:
        """Warn if verbose logging is enabled during measurement."""
        current_level = logging.getLogger().getEffectiveLevel()
        if current_level < logging.INFO:
            level_name = logging.getLevelName(current_level)
            logging.warning(
                "Verbose logging (%s) is enabled. This may affect benchmark timing! "
                "Set log level to INFO or higher for accurate measurements.",
                level_name
            )

    def metadata(self) -> BenchmarkMetadata:
        return BenchmarkMetadata(
            commit_hash=get_git_commit_hash(),
            config=self.config,
            shapes=len(self.space),
        )

    def groups(self) -> List[Tuple[str, str, WorkloadShape]]:
        """Every (engine, benchmark, shape) combination, in run order."""
        return [
            (engine, name, shape)
            for engine in self.config.engines
            for name in self.config.benchmarks
            for shape in self.space
        ]

    def setup(self, engine: str, name: str, shape: WorkloadShape) -> Workload:
        """
        Setup phase: build the fixture and the timed closure.

        NOT TIMED.
        """
        logging.debug("Setup: %s/%s %s", engine, name, shape.label)
        return prepare(name, self.builder, engine, shape, size_as_time=self.config.size_as_time)

    def warmup(self, workload: Workload) -> None:
        """
        Warmup phase: run the operation to warm caches.

        NOT TIMED.
        """
        if self.config.skip_warmup or workload.is_metric:
            return
        for _ in range(self.config.warmup):
            out = workload.run()
            if workload.after_each is not None:
                workload.after_each(out)

    def measure(self, workload: Workload) -> List[int]:
        """
        Run phase: time ``repetitions`` calls of the workload.

        TIMED - only ``workload.run`` is inside the clock.

        Returns:
            Elapsed nanoseconds per call
        """
        run = workload.run
        after_each = workload.after_each
        clock = time.perf_counter_ns
        samples = []
        append = samples.append

        gc.collect()
        gc_was_enabled = gc.isenabled()
        gc.disable()
        try:
            for _ in range(self.config.repetitions):
                t0 = clock()
                out = run()
                elapsed = clock() - t0
                if after_each is not None:
                    after_each(out)
                append(elapsed)
        finally:
            if gc_was_enabled:
                gc.enable()
        return samples

    def run_benchmark(self, engine: str, name: str, shape: WorkloadShape) -> BenchmarkResult:
        """
        Run one benchmark group with proper phase separation.

        Any failure aborts the group and is re-raised as
        :class:`BenchmarkFailure` naming the engine, benchmark and shape.
        """
        try:
            # === SETUP PHASE (not timed) ===
            with self.setup(engine, name, shape) as workload:
                if workload.is_metric:
                    return BenchmarkResult(name, engine, shape, workload.unit, [workload.metric])

                # === WARMUP PHASE (not timed) ===
                self.warmup(workload)

                # === MEASUREMENT PHASE (timed) ===
                samples = self.measure(workload)

                return BenchmarkResult(name, engine, shape, workload.unit, samples)
        except BenchmarkFailure:
            raise
        except Exception as exc:
            raise BenchmarkFailure(engine, name, shape) from exc

    def run_all(self, progress: bool = False) -> List[BenchmarkResult]:
        """Run every configured group; stops at the first failure."""
        results = []
        groups = self.groups()
        for engine, name, shape in tqdm(groups, desc="Benchmarks", unit="group", disable=not progress):
            results.append(self.run_benchmark(engine, name, shape))
        return results

    def run_verify(self, progress: bool = False) -> bool:
        """
        Verify-only mode: check the read/write contract for every engine and shape.

        NOT TIMED.
        """
        all_verified = True
        groups = [(engine, shape) for engine in self.config.engines for shape in self.space]
        for engine, shape in tqdm(groups, desc="Verify", unit="fixture", disable=not progress):
            try:
                failed = failed_checks(verify_engine(self.builder, engine, shape))
            except Exception as exc:
                raise BenchmarkFailure(engine, "verify", shape) from exc
            if failed:
                all_verified = False
                logging.error("✗ %s %s failed: %s", engine, shape.label, ", ".join(failed))
            else:
                logging.info("✓ %s %s", engine, shape.label)
        return all_verified

    def report(self, results: Iterable[BenchmarkResult]) -> None:
        """
        Log a summary table of the results.

        NOT TIMED.
        """
        header = f"{'Benchmark':<16}{'Engine':<9}{'Shape':<24}{'Mean':>14}{'Median':>14}{'Min':>14}{'Stdev':>14}  Unit"
        sep = "-" * len(header)

        logging.info("")
        logging.info("=== RESULTS ===")
        logging.info(header)
        logging.info(sep)
        for r in results:
            logging.info(
                f"{r.name:<16}{r.engine:<9}{r.shape.label:<24}"
                f"{r.mean:14.1f}{r.median:14.1f}{r.min:14d}{r.stdev:14.1f}  {r.unit}"
            )
        logging.info(sep)

    def compare(self, results: Iterable[BenchmarkResult]) -> Dict[Tuple[str, WorkloadShape], Dict[str, float]]:
        """
        Log engines side by side for each benchmark and shape.

        NOT TIMED.

        Returns:
            Mapping of (benchmark, shape) to {engine: mean}
        """
        table: Dict[Tuple[str, WorkloadShape], Dict[str, float]] = {}
        units: Dict[str, str] = {}
        for r in results:
            table.setdefault((r.name, r.shape), {})[r.engine] = r.mean
            units[r.name] = r.unit

        engines = list(self.config.engines)
        header = f"{'Benchmark':<16}{'Shape':<24}" + "".join(f"{e:>14}" for e in engines)
        if len(engines) == 2:
            header += f"{engines[0] + '/' + engines[1]:>16}"
        sep = "-" * len(header)

        logging.info("")
        logging.info("=== COMPARISON (mean) ===")
        logging.info(header)
        logging.info(sep)
        for (name, shape), means in table.items():
            line = f"{name:<16}{shape.label:<24}"
            line += "".join(f"{means[e]:14.1f}" if e in means else f"{'-':>14}" for e in engines)
            if len(engines) == 2 and all(e in means for e in engines) and means[engines[1]]:
                line += f"{means[engines[0]] / means[engines[1]]:16.3f}"
            logging.info(f"{line}  {units[name]}")
        logging.info(sep)
        return table

    def write_json(self, results: Iterable[BenchmarkResult], path: str) -> None:
        """Dump results and run metadata to ``path``."""
        payload = {
            "metadata": self.metadata().to_dict(),
            "results": [r.to_dict() for r in results],
        }
        with open(path, "w") as f:
            json.dump(payload, f, indent=2)
        logging.info("Wrote %s", path)
