"""Exception hierarchy for the benchmark harness.

Every failure is fatal to the run: nothing here is retried. The hierarchy
only exists so that the driver can tell an environment problem from a
broken fixture when it reports which benchmark aborted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from kvbench.params import WorkloadShape


class KVBenchError(Exception):
    """Base class for all harness errors."""


class EnvironmentFailure(KVBenchError):
    """The test environment cannot provide what a benchmark needs."""


class FixtureAllocationError(EnvironmentFailure):
    """An ephemeral directory could not be allocated."""


class EngineOpenError(EnvironmentFailure):
    """A storage engine instance could not be opened or created."""

    def __init__(self, engine: str, path: str, reason: str = ""):
        self.engine = engine
        self.path = path
        message = f"failed to open {engine} database at {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class SetupInvariantError(KVBenchError):
    """A fixture does not hold the data the benchmark was promised."""


class MissingKeyError(SetupInvariantError):
    """A point lookup found no value for a key that was written."""

    def __init__(self, engine: str, key: bytes):
        self.engine = engine
        self.key = key
        super().__init__(f"{engine}: key {key.hex()} not found in populated fixture")


class IterationCountError(SetupInvariantError):
    """A full scan visited a different number of entries than were written."""

    def __init__(self, engine: str, expected: int, actual: int):
        self.engine = engine
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{engine}: iteration visited {actual} entries, expected {expected}"
        )


class BenchmarkFailure(KVBenchError):
    """A benchmark group aborted; wraps the original cause."""

    def __init__(self, engine: str, benchmark: str, shape: Optional["WorkloadShape"]):
        self.engine = engine
        self.benchmark = benchmark
        self.shape = shape
        where = f"{engine}/{benchmark}"
        if shape is not None:
            where = f"{where} [{shape.label}]"
        super().__init__(f"benchmark {where} aborted")
