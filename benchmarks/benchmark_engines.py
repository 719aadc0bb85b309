"""
ASV benchmarks comparing LevelDB and LMDB.

Every class is parameterized over engine, pair count and value size, so a
single benchmark body serves both engines. Fixtures are built in
``setup`` and released in ``teardown``; only the engine operation runs in
the timed method.
"""

from kvbench.footprint import idle_wait

from .benchmark_utils import BaseBenchmark


class OpenBenchmarks(BaseBenchmark):
    """Re-open an existing, populated database."""

    benchmark_name = "open"

    # One timed call per setup: the re-opened handle must be closed before
    # the location can be opened again, and closing is not part of the
    # measurement.
    number = 1
    warmup_time = 0

    def time_open(self, engine, pair_count, value_size):
        self.opened = self.workload.run()

    def teardown(self, *params):
        opened = getattr(self, "opened", None)
        if opened is not None:
            self.workload.fixture.adapter.close(opened)
            self.opened = None
        super().teardown(*params)


class PutSeqSyncBenchmarks(BaseBenchmark):
    benchmark_name = "put_seq_sync"

    def time_put_seq_sync(self, engine, pair_count, value_size):
        self.run_once()


class PutSeqAsyncBenchmarks(BaseBenchmark):
    benchmark_name = "put_seq_async"

    def time_put_seq_async(self, engine, pair_count, value_size):
        self.run_once()


class PutRandSyncBenchmarks(BaseBenchmark):
    benchmark_name = "put_rand_sync"

    def time_put_rand_sync(self, engine, pair_count, value_size):
        self.run_once()


class PutRandAsyncBenchmarks(BaseBenchmark):
    benchmark_name = "put_rand_async"

    def time_put_rand_async(self, engine, pair_count, value_size):
        self.run_once()


class GetSeqBenchmarks(BaseBenchmark):
    benchmark_name = "get_seq"

    def time_get_seq(self, engine, pair_count, value_size):
        self.run_once()


class GetRandBenchmarks(BaseBenchmark):
    benchmark_name = "get_rand"

    def time_get_rand(self, engine, pair_count, value_size):
        self.run_once()


class GetSeqIterBenchmarks(BaseBenchmark):
    """Full scan in storage order; fails if the entry count is wrong."""

    benchmark_name = "get_seq_iter"

    def time_get_seq_iter(self, engine, pair_count, value_size):
        self.run_once()


class DbSizeBenchmarks(BaseBenchmark):
    """
    Space on disk after population.

    ``track_db_size`` reports bytes directly. ``time_db_size`` reflects the
    same number into benchmark time by sleeping one nanosecond per byte,
    for consumers that only compare durations.
    """

    benchmark_name = "db_size"
    unit = "bytes"

    def track_db_size(self, engine, pair_count, value_size):
        return self.workload.metric

    def time_db_size(self, engine, pair_count, value_size):
        idle_wait(self.workload.metric)
