"""
Benchmarks package for embedded key-value stores.

This package contains:
- BenchmarkRunner, a phase-separated driver used by ``run_benchmarks``
- ASV benchmark classes over the same named workloads (``benchmark_engines``)
- Verify-only checks of the harness's read/write contract

The benchmarks keep all setup (fixture creation, value generation, key
shuffling) outside the timed region, so run-to-run variance reflects the
storage engine rather than the harness.
"""

from .benchmark_utils import BaseBenchmark
from .config import BenchmarkConfig
from .runner import BenchmarkResult, BenchmarkRunner

__all__ = ["BaseBenchmark", "BenchmarkConfig", "BenchmarkResult", "BenchmarkRunner"]
