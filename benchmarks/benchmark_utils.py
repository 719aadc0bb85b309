"""
Benchmarking utilities for the ASV suites.

This module provides the base class shared by the ASV benchmark classes.
ASV handles timing, repeats and statistics; the base class only makes sure
the fixture for each parameter combination is built in ``setup`` and torn
down in ``teardown``, so the timed method runs nothing but the engine
operation.

Reproducibility:
    Values and shuffles come from a numpy generator seeded from the
    KVBENCH_SEED environment variable (default 42).

Logging:
    Benchmarks should be run with logging at INFO level or higher to avoid
    performance contamination from verbose debug output.
"""

import gc
from functools import partial

from kvbench.engines import get_adapter
from kvbench.fixture import FixtureBuilder
from kvbench.logging_config import check_timing_safe
from kvbench.params import WorkloadShape
from kvbench.workloads import prepare

from .config import BenchmarkConfig

# Parameter grid is read once, at import, so ASV sees static params
CONFIG = BenchmarkConfig.from_env()


def make_builder(config: BenchmarkConfig = CONFIG) -> FixtureBuilder:
    return FixtureBuilder(
        value_mode=config.value_mode,
        seed=config.seed,
        tmp_dir=config.tmp_dir,
        adapter_factory=partial(get_adapter, **config.engine_options()),
    )


class BaseBenchmark:
    """Base class for ASV benchmarks over one named workload.

    This class provides a standard setup/teardown pattern that ensures:
    - A fresh fixture per parameter combination, built outside the timer
    - Garbage collection is disabled during timed sections
    - Logging level is appropriate for benchmarking

    Subclasses set ``benchmark_name`` and define a ``time_*`` or
    ``track_*`` method that calls :meth:`run_once`.
    """

    benchmark_name = None

    params = [CONFIG.engines, CONFIG.pair_counts, CONFIG.value_sizes]
    param_names = ["engine", "pair_count", "value_size"]

    warmup_time = 0.1
    sample_time = 0.4

    def setup(self, engine, pair_count, value_size):
        """Build the fixture and the timed closure. Not timed."""
        check_timing_safe()
        self.workload = prepare(
            self.benchmark_name,
            make_builder(),
            engine,
            WorkloadShape(pair_count, value_size),
        )
        gc.collect()
        gc.disable()  # Enabled in teardown

    def run_once(self):
        out = self.workload.run()
        if self.workload.after_each is not None:
            self.workload.after_each(out)
        return out

    def teardown(self, *params):
        """Release the fixture and re-enable garbage collection."""
        workload = getattr(self, "workload", None)
        if workload is not None:
            workload.release()
            self.workload = None
        if not gc.isenabled():
            gc.enable()
