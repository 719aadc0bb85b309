"""Tests for benchmark configuration."""

import os
import unittest
from unittest import mock

from benchmarks.config import BenchmarkConfig, BenchmarkMetadata
from kvbench.params import WorkloadShape
from kvbench.workloads import BENCHMARK_NAMES


class TestBenchmarkConfig(unittest.TestCase):

    def test_defaults(self):
        config = BenchmarkConfig()
        self.assertEqual(config.seed, 42)
        self.assertEqual(config.value_mode, "random")
        self.assertEqual(config.pair_counts, [1, 100, 1000])
        self.assertEqual(config.value_sizes, [1, 100, 1000])
        self.assertEqual(config.engines, ["leveldb", "lmdb"])
        self.assertEqual(config.benchmarks, BENCHMARK_NAMES)
        self.assertEqual(len(config.parameter_space()), 9)
        self.assertEqual(config.engine_options(), {})

    def test_parameter_space_order(self):
        config = BenchmarkConfig(pair_counts=[2, 1], value_sizes=[5, 6])
        self.assertEqual(
            list(config.parameter_space()),
            [WorkloadShape(2, 5), WorkloadShape(2, 6), WorkloadShape(1, 5), WorkloadShape(1, 6)],
        )

    def test_invalid_values_are_rejected(self):
        cases = [
            dict(engines=["rocksdb"]),
            dict(benchmarks=["compact"]),
            dict(pair_counts=[0]),
            dict(value_sizes=[-1]),
            dict(pair_counts=[]),
            dict(repetitions=0),
            dict(warmup=-1),
            dict(value_mode="zeros"),
            dict(seed=-1),
        ]
        for kwargs in cases:
            with self.subTest(**{k: str(v) for k, v in kwargs.items()}):
                with self.assertRaises(ValueError):
                    BenchmarkConfig(**kwargs)

    def test_engine_options(self):
        config = BenchmarkConfig(lmdb_map_size=16 * 1024 * 1024)
        self.assertEqual(config.engine_options(), {"map_size": 16 * 1024 * 1024})

    @mock.patch.dict(os.environ, {}, clear=True)
    def test_from_env_defaults(self):
        self.assertEqual(BenchmarkConfig.from_env(), BenchmarkConfig())

    @mock.patch.dict(os.environ, {
        "KVBENCH_SEED": "123",
        "KVBENCH_VALUE_MODE": "deterministic",
        "KVBENCH_REPETITIONS": "5",
        "KVBENCH_PAIR_COUNTS": "10,20",
        "KVBENCH_VALUE_SIZES": "4 8",
        "KVBENCH_ENGINES": "lmdb",
        "KVBENCH_BENCHMARKS": "get_seq,db_size",
        "KVBENCH_SIZE_AS_TIME": "true",
        "KVBENCH_VERIFY_ONLY": "TRUE",
        "KVBENCH_LMDB_MAP_SIZE": "10485760",
    }, clear=True)
    def test_from_env_overrides(self):
        config = BenchmarkConfig.from_env()
        self.assertEqual(config.seed, 123)
        self.assertEqual(config.value_mode, "deterministic")
        self.assertEqual(config.repetitions, 5)
        self.assertEqual(config.pair_counts, [10, 20])
        self.assertEqual(config.value_sizes, [4, 8])
        self.assertEqual(config.engines, ["lmdb"])
        self.assertEqual(config.benchmarks, ["get_seq", "db_size"])
        self.assertTrue(config.size_as_time)
        self.assertTrue(config.verify_only)
        self.assertFalse(config.skip_warmup)
        self.assertEqual(config.lmdb_map_size, 10485760)

    @mock.patch.dict(os.environ, {"KVBENCH_BENCHMARKS": "mutation,db_size"}, clear=True)
    def test_from_env_accepts_family_names(self):
        config = BenchmarkConfig.from_env()
        self.assertEqual(
            config.benchmarks,
            ["put_seq_sync", "put_seq_async", "put_rand_sync", "put_rand_async", "db_size"],
        )

    def test_family_names_in_constructor(self):
        config = BenchmarkConfig(benchmarks=["retrieval", "get_rand"])
        self.assertEqual(config.benchmarks, ["get_seq", "get_rand", "get_seq_iter"])

    @mock.patch.dict(os.environ, {"KVBENCH_ENGINES": "leveldb,bogus"}, clear=True)
    def test_from_env_validates(self):
        with self.assertRaises(ValueError):
            BenchmarkConfig.from_env()

    def test_metadata(self):
        config = BenchmarkConfig(seed=5)
        metadata = BenchmarkMetadata(commit_hash=None, config=config, shapes=9)
        text = str(metadata)
        self.assertIn("Commit: unknown", text)
        self.assertIn("Seed: 5", text)
        self.assertIn("Shapes: 9", text)
        data = metadata.to_dict()
        self.assertEqual(data["config"]["seed"], 5)
        self.assertIsNone(data["commit_hash"])


if __name__ == "__main__":
    unittest.main()
