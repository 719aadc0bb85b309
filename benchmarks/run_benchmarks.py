#!/usr/bin/env python3
"""
Main entry point for storage engine benchmarks.

This script runs performance benchmarks with proper phase separation:
- Setup (not timed): Fixture creation, data generation, access plans
- Warmup (not timed): Cache warming
- Run (timed): Only the engine operation under measurement
- Teardown (not timed): Handle and directory cleanup

Usage:
    # Run with default settings (both engines, all benchmarks, 9 shapes)
    python -m benchmarks.run_benchmarks

    # Compare the engines side by side on reads only
    python -m benchmarks.run_benchmarks --benchmarks get_seq get_rand --compare

    # Run with custom seed for reproducibility
    KVBENCH_SEED=123 python -m benchmarks.run_benchmarks

    # Run in verify-only mode (no timing, only correctness)
    KVBENCH_VERIFY_ONLY=true python -m benchmarks.run_benchmarks

    # Report disk size as time, one nanosecond per byte
    python -m benchmarks.run_benchmarks --benchmarks db_size --size-as-time
"""

import argparse
import logging
import os
import sys
import time
from datetime import datetime
from typing import List, Optional

from kvbench.data import ValueMode
from kvbench.engines import ENGINE_KINDS
from kvbench.errors import BenchmarkFailure
from kvbench.logging_config import set_level
from kvbench.workloads import BENCHMARK_FAMILIES, BENCHMARK_NAMES

from .config import BenchmarkConfig, expand_benchmarks
from .runner import BenchmarkRunner


def setup_logging(config: BenchmarkConfig, log_dir: str = None) -> None:
    """
    Configure logging for benchmark output.

    Args:
        config: Benchmark configuration
        log_dir: Optional directory for log files
    """
    handlers = [logging.StreamHandler()]

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = os.path.join(log_dir, f"benchmark_{ts}.log")
        handlers.append(logging.FileHandler(log_path, mode="w"))

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,  # Override any existing configuration
    )
    set_level(config.log_level)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Compare LevelDB and LMDB on open, write, read, scan and disk footprint",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--engines",
        nargs="+",
        choices=ENGINE_KINDS,
        help="Engines to benchmark (default: all)",
    )
    parser.add_argument(
        "--benchmarks",
        nargs="+",
        choices=BENCHMARK_NAMES + list(BENCHMARK_FAMILIES),
        help="Benchmarks or families to run (default: all)",
    )
    parser.add_argument(
        "--pair-counts",
        type=int,
        nargs="+",
        help="Numbers of key-value pairs (default: 1 100 1000)",
    )
    parser.add_argument(
        "--value-sizes",
        type=int,
        nargs="+",
        help="Value sizes in bytes (default: 1 100 1000)",
    )
    parser.add_argument(
        "--repetitions",
        type=int,
        help="Timed calls per benchmark group (default: 20)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for reproducibility (default: from env or 42)",
    )
    parser.add_argument(
        "--value-mode",
        choices=[m.value for m in ValueMode],
        help="How values are generated (default: random)",
    )
    parser.add_argument(
        "--lmdb-map-size",
        type=int,
        help="LMDB map size in bytes (default: 5 MiB)",
    )
    parser.add_argument(
        "--tmp-dir",
        help="Base directory for ephemeral databases (default: system temp dir)",
    )
    parser.add_argument(
        "--size-as-time",
        action="store_true",
        help="Report db_size as an idle wait of one nanosecond per byte",
    )
    parser.add_argument(
        "--verify-only",
        action="store_true",
        help="Run in verify-only mode (no timing)",
    )
    parser.add_argument(
        "--skip-warmup",
        action="store_true",
        help="Skip warmup phase",
    )
    parser.add_argument(
        "--compare",
        action="store_true",
        help="Print an engine-vs-engine comparison table",
    )
    parser.add_argument(
        "--json",
        dest="json_path",
        help="Write results and metadata to this JSON file",
    )
    parser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable the progress bar",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for log files (default: no log file)",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> BenchmarkConfig:
    """Start from the environment and override with command-line arguments."""
    config = BenchmarkConfig.from_env()

    if args.engines is not None:
        config.engines = list(args.engines)
    if args.benchmarks is not None:
        config.benchmarks = expand_benchmarks(args.benchmarks)
    if args.pair_counts is not None:
        config.pair_counts = args.pair_counts
    if args.value_sizes is not None:
        config.value_sizes = args.value_sizes
    if args.repetitions is not None:
        config.repetitions = args.repetitions
    if args.seed is not None:
        config.seed = args.seed
    if args.value_mode is not None:
        config.value_mode = args.value_mode
    if args.lmdb_map_size is not None:
        config.lmdb_map_size = args.lmdb_map_size
    if args.tmp_dir is not None:
        config.tmp_dir = args.tmp_dir
    if args.size_as_time:
        config.size_as_time = True
    if args.verify_only:
        config.verify_only = True
    if args.skip_warmup:
        config.skip_warmup = True
    if args.log_level is not None:
        config.log_level = args.log_level

    config.validate()
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main benchmark execution.

    Returns:
        Exit code (0 for success)
    """
    args = parse_args(argv)
    try:
        config = build_config(args)
    except ValueError as exc:
        logging.basicConfig(level=logging.ERROR, format="%(message)s")
        logging.error("Invalid configuration: %s", exc)
        return 2

    setup_logging(config, args.log_dir)

    logging.info("=" * 70)
    logging.info("KEY-VALUE STORE BENCHMARKS")
    logging.info("=" * 70)

    if config.verify_only:
        logging.info("Mode: VERIFY-ONLY (correctness checks, no timing)")
    else:
        logging.info("Mode: PERFORMANCE (timed measurements)")

    runner = BenchmarkRunner(config)
    for line in str(runner.metadata()).split("\n"):
        logging.info(line)
    logging.info("")

    overall_start = time.perf_counter()
    try:
        if config.verify_only:
            ok = runner.run_verify(progress=not args.no_progress)
            logging.info("All verifications passed" if ok else "Some verifications failed")
            return 0 if ok else 1

        results = runner.run_all(progress=not args.no_progress)
    except BenchmarkFailure as exc:
        logging.error("%s: %s", exc, exc.__cause__)
        return 1
    finally:
        overall_elapsed = time.perf_counter() - overall_start
        logging.info("")
        logging.info("=" * 70)
        logging.info(f"TOTAL EXECUTION TIME: {overall_elapsed:.3f} seconds")
        logging.info("=" * 70)

    runner.report(results)
    if args.compare:
        runner.compare(results)
    if args.json_path:
        runner.write_json(results, args.json_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
