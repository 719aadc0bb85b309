"""
kvbench: comparative benchmarks for embedded key-value stores.

Compares a log-structured merge engine (LevelDB) with a memory-mapped
B-tree engine (LMDB) on open, write, read and scan latency and on-disk
footprint, across a grid of pair counts and value sizes.

Quick-start imports::

    from kvbench import FixtureBuilder, ParameterSpace, get_adapter
"""

from kvbench.data import AccessOrder, ValueMode, encode_key, make_pairs, plan_keys
from kvbench.engines import (
    ENGINE_KINDS,
    DurabilityMode,
    EngineKind,
    StorageEngineAdapter,
    get_adapter,
)
from kvbench.errors import (
    BenchmarkFailure,
    EngineOpenError,
    EnvironmentFailure,
    FixtureAllocationError,
    IterationCountError,
    KVBenchError,
    MissingKeyError,
    SetupInvariantError,
)
from kvbench.fixture import Fixture, FixtureBuilder
from kvbench.footprint import disk_usage, idle_wait, measure_footprint
from kvbench.params import ParameterSpace, WorkloadShape
from kvbench.workloads import BENCHMARK_FAMILIES, BENCHMARK_NAMES, Workload, prepare

__version__ = "0.1.0"

__all__ = [
    "AccessOrder",
    "BENCHMARK_FAMILIES",
    "BENCHMARK_NAMES",
    "BenchmarkFailure",
    "DurabilityMode",
    "ENGINE_KINDS",
    "EngineKind",
    "EngineOpenError",
    "EnvironmentFailure",
    "Fixture",
    "FixtureAllocationError",
    "FixtureBuilder",
    "IterationCountError",
    "KVBenchError",
    "MissingKeyError",
    "ParameterSpace",
    "SetupInvariantError",
    "StorageEngineAdapter",
    "ValueMode",
    "Workload",
    "WorkloadShape",
    "disk_usage",
    "encode_key",
    "get_adapter",
    "idle_wait",
    "make_pairs",
    "measure_footprint",
    "plan_keys",
    "prepare",
]
