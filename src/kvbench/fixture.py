"""Isolated on-disk engine instances for one benchmark group.

This is the setup phase - not timed in benchmarks.

A fixture owns an ephemeral directory and the engine handle opened on it.
It is created fresh for every (benchmark, shape) combination and released
when the group ends, so no data or file lock leaks into the next group.
"""

import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, List, Optional

import numpy as np

from kvbench.data import KeyValuePair, ValueMode, make_group_rng, make_pairs
from kvbench.engines import DurabilityMode, StorageEngineAdapter, get_adapter
from kvbench.errors import FixtureAllocationError
from kvbench.logging_config import get_logger
from kvbench.params import WorkloadShape

logger = get_logger(__name__)


@dataclass
class Fixture:
    """A disposable engine instance plus the pairs generated for it."""

    adapter: StorageEngineAdapter
    shape: WorkloadShape
    durability: DurabilityMode
    pairs: List[KeyValuePair]
    populated: bool
    _tempdir: tempfile.TemporaryDirectory = field(repr=False)
    handle: Any = field(default=None, repr=False)
    rng: Optional[np.random.Generator] = field(default=None, repr=False)

    @property
    def path(self) -> Path:
        return Path(self._tempdir.name)

    @property
    def engine(self) -> str:
        return self.adapter.name

    @property
    def keys(self) -> List[bytes]:
        return [key for key, _ in self.pairs]

    @property
    def released(self) -> bool:
        return self._tempdir is None

    def close_handle(self) -> None:
        """Close the engine handle but keep the files on disk."""
        if self.handle is not None:
            handle, self.handle = self.handle, None
            self.adapter.close(handle)

    def reopen(self) -> Any:
        """Re-open the existing database with the fixture's durability mode."""
        self.close_handle()
        self.handle = self.adapter.open(str(self.path), self.durability)
        return self.handle

    def release(self) -> None:
        """Close the handle and remove the backing directory. Idempotent."""
        if self._tempdir is None:
            return
        try:
            self.close_handle()
        finally:
            tempdir, self._tempdir = self._tempdir, None
            tempdir.cleanup()
            logger.debug("Released %s fixture (%s)", self.engine, self.shape.label)

    def __enter__(self) -> "Fixture":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class FixtureBuilder:
    """
    Build fixtures for any engine from a shared contract.

    Args:
        value_mode: How values are generated
        seed: Base seed for value bytes and shuffles; None draws fresh entropy
        tmp_dir: Base directory for ephemeral directories (system default if None)
        adapter_factory: Callable mapping an engine kind to an adapter
    """

    def __init__(
        self,
        value_mode: ValueMode = ValueMode.RANDOM,
        seed: Optional[int] = None,
        tmp_dir: Optional[str] = None,
        adapter_factory: Callable[[str], StorageEngineAdapter] = get_adapter,
    ):
        self.value_mode = ValueMode(value_mode)
        self.tmp_dir = tmp_dir
        self.adapter_factory = adapter_factory
        self.seed = seed

    def rng_for(self, engine: str, label: str, shape: WorkloadShape) -> np.random.Generator:
        """Generator for one (engine, benchmark, shape) group."""
        return make_group_rng(self.seed, engine, label, shape.label)

    def allocate(self, engine: str) -> tempfile.TemporaryDirectory:
        try:
            return tempfile.TemporaryDirectory(prefix=f"kvbench_{engine}_", dir=self.tmp_dir)
        except OSError as exc:
            raise FixtureAllocationError(f"cannot allocate a directory for {engine}: {exc}") from exc

    def build(
        self,
        engine,
        shape: WorkloadShape,
        prepopulate: bool = False,
        durability: DurabilityMode = DurabilityMode.SYNC,
        pairs: Optional[List[KeyValuePair]] = None,
        label: str = "fixture",
    ) -> Fixture:
        """
        Create an isolated engine instance for one benchmark group.

        Args:
            engine: Engine kind or an adapter instance
            shape: Number of pairs and value size
            prepopulate: Bulk-write the pairs and flush them durably
            durability: Durability mode the handle is opened with
            pairs: Explicit pairs instead of generated ones
            label: Benchmark name the fixture is built for; with the engine
                and shape it selects the fixture's random stream

        Returns:
            Fixture holding an open handle; release it with ``with`` or ``release()``
        """
        adapter = engine if isinstance(engine, StorageEngineAdapter) else self.adapter_factory(engine)
        durability = DurabilityMode(durability)

        rng = self.rng_for(adapter.name, label, shape)
        if pairs is None:
            pairs = make_pairs(shape.pair_count, shape.value_size, self.value_mode, rng)

        tempdir = self.allocate(adapter.name)
        fixture = Fixture(
            adapter=adapter,
            shape=shape,
            durability=durability,
            pairs=pairs,
            populated=False,
            _tempdir=tempdir,
            rng=rng,
        )
        try:
            fixture.handle = adapter.create(str(fixture.path), durability)
            if prepopulate:
                adapter.populate(fixture.handle, pairs)
                fixture.populated = True
        except BaseException:
            fixture.release()
            raise

        logger.debug(
            "Built %s fixture at %s (%s, populated=%s, %s)",
            adapter.name, fixture.path, shape.label, fixture.populated, durability.value,
        )
        return fixture
