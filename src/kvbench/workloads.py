"""
Named benchmarks and their setup.

Each benchmark name maps to a setup function that builds a fresh fixture,
generates its pairs and computes its access plan - all outside the timed
region - and returns a :class:`Workload`. The timed region is only
``Workload.run``; anything it hands back (e.g. a re-opened handle) is
disposed of by ``Workload.after_each`` after the clock has stopped.

Families:
    lifecycle:  open
    mutation:   put_seq_sync, put_seq_async, put_rand_sync, put_rand_async
    retrieval:  get_seq, get_rand, get_seq_iter
    footprint:  db_size
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from kvbench.data import AccessOrder, plan_keys, plan_pairs
from kvbench.engines import DurabilityMode
from kvbench.errors import EngineOpenError, IterationCountError
from kvbench.fixture import Fixture, FixtureBuilder
from kvbench.footprint import idle_wait, measure_footprint
from kvbench.params import WorkloadShape

UNIT_NS = "ns"
UNIT_BYTES = "bytes"


@dataclass
class Workload:
    """A prepared benchmark: the fixture plus the closure to time."""

    name: str
    fixture: Fixture
    run: Optional[Callable[[], Any]] = None
    after_each: Optional[Callable[[Any], None]] = None
    unit: str = UNIT_NS
    metric: Optional[int] = None

    @property
    def is_metric(self) -> bool:
        """True when the workload reports a value instead of being timed."""
        return self.metric is not None

    def release(self) -> None:
        self.fixture.release()

    def __enter__(self) -> "Workload":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


@dataclass(frozen=True)
class BenchmarkDef:
    name: str
    family: str
    setup: Callable[..., Workload] = field(repr=False)


def _setup_open(builder: FixtureBuilder, engine, shape: WorkloadShape, **options) -> Workload:
    fixture = builder.build(engine, shape, prepopulate=True, label="open")
    # Only one handle per location: close the builder's handle so that the
    # timed region measures re-opening a historical database.
    fixture.close_handle()
    adapter = fixture.adapter
    path = str(fixture.path)
    durability = fixture.durability
    # Checked once here; the timed call opens without probing the directory
    if not adapter.exists(path):
        fixture.release()
        raise EngineOpenError(adapter.name, path, "populated database not found")

    def run():
        return adapter.attach(path, durability)

    return Workload("open", fixture, run=run, after_each=adapter.close)


def _make_put_setup(order: AccessOrder, durability: DurabilityMode):
    name = f"put_{order.value}_{durability.value}"

    def setup(builder: FixtureBuilder, engine, shape: WorkloadShape, **options) -> Workload:
        fixture = builder.build(engine, shape, prepopulate=False, durability=durability, label=name)
        pairs = plan_pairs(fixture.pairs, order, fixture.rng)
        adapter = fixture.adapter
        handle = fixture.handle

        def run():
            adapter.write(handle, pairs, durability)

        return Workload(name, fixture, run=run)

    setup.__name__ = f"_setup_{name}"
    return setup


def _make_get_setup(order: AccessOrder):
    name = f"get_{order.value}"

    def setup(builder: FixtureBuilder, engine, shape: WorkloadShape, **options) -> Workload:
        fixture = builder.build(engine, shape, prepopulate=True, label=name)
        keys = plan_keys(fixture.keys, order, fixture.rng)
        adapter = fixture.adapter
        handle = fixture.handle

        def run():
            return adapter.read(handle, keys)

        return Workload(name, fixture, run=run)

    setup.__name__ = f"_setup_{name}"
    return setup


def _setup_get_seq_iter(builder: FixtureBuilder, engine, shape: WorkloadShape, **options) -> Workload:
    fixture = builder.build(engine, shape, prepopulate=True, label="get_seq_iter")
    adapter = fixture.adapter
    handle = fixture.handle
    expected = shape.pair_count

    def run():
        count, nbytes = adapter.iterate(handle)
        if count != expected:
            raise IterationCountError(adapter.name, expected, count)
        return nbytes

    return Workload("get_seq_iter", fixture, run=run)


def _setup_db_size(builder: FixtureBuilder, engine, shape: WorkloadShape, size_as_time: bool = False, **options) -> Workload:
    fixture = builder.build(engine, shape, prepopulate=True, label="db_size")
    fixture.close_handle()
    total_size = measure_footprint(fixture)

    if size_as_time:
        # Report size on disk as benchmark time: one nanosecond per byte
        def run():
            idle_wait(total_size)

        return Workload("db_size", fixture, run=run, unit=UNIT_NS)

    return Workload("db_size", fixture, unit=UNIT_BYTES, metric=total_size)


BENCHMARKS: Dict[str, BenchmarkDef] = {
    bench.name: bench
    for bench in [
        BenchmarkDef("open", "lifecycle", _setup_open),
        BenchmarkDef("put_seq_sync", "mutation", _make_put_setup(AccessOrder.SEQUENTIAL, DurabilityMode.SYNC)),
        BenchmarkDef("put_seq_async", "mutation", _make_put_setup(AccessOrder.SEQUENTIAL, DurabilityMode.ASYNC)),
        BenchmarkDef("put_rand_sync", "mutation", _make_put_setup(AccessOrder.RANDOM, DurabilityMode.SYNC)),
        BenchmarkDef("put_rand_async", "mutation", _make_put_setup(AccessOrder.RANDOM, DurabilityMode.ASYNC)),
        BenchmarkDef("get_seq", "retrieval", _make_get_setup(AccessOrder.SEQUENTIAL)),
        BenchmarkDef("get_rand", "retrieval", _make_get_setup(AccessOrder.RANDOM)),
        BenchmarkDef("get_seq_iter", "retrieval", _setup_get_seq_iter),
        BenchmarkDef("db_size", "footprint", _setup_db_size),
    ]
}

BENCHMARK_NAMES: List[str] = list(BENCHMARKS)

BENCHMARK_FAMILIES: Dict[str, List[str]] = {}
for _bench in BENCHMARKS.values():
    BENCHMARK_FAMILIES.setdefault(_bench.family, []).append(_bench.name)
del _bench


def prepare(name: str, builder: FixtureBuilder, engine, shape: WorkloadShape, **options) -> Workload:
    """
    Build the workload for one (benchmark, engine, shape) combination.

    Args:
        name: Benchmark name (see ``BENCHMARK_NAMES``)
        builder: Fixture builder to allocate from
        engine: Engine kind or adapter
        shape: Workload shape
        **options: Benchmark options, e.g. ``size_as_time``

    Returns:
        Workload owning a fresh fixture
    """
    try:
        bench = BENCHMARKS[name]
    except KeyError:
        raise ValueError(f"Unknown benchmark: {name!r}") from None
    return bench.setup(builder, engine, shape, **options)
