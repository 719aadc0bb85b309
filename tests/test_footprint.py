"""Tests for the on-disk footprint probe."""

import os
import time
import unittest

from kvbench.footprint import disk_usage, idle_wait, measure_footprint
from kvbench.params import WorkloadShape
from tests.logconfig import logger
from tests.utils import ENGINES, TempDirTestCase


class TestDiskUsage(TempDirTestCase):

    def test_sums_regular_files_recursively(self):
        root = os.path.join(self.base_dir, "tree")
        os.makedirs(os.path.join(root, "a", "b"))
        with open(os.path.join(root, "top"), "wb") as f:
            f.write(b"x" * 10)
        with open(os.path.join(root, "a", "mid"), "wb") as f:
            f.write(b"x" * 200)
        with open(os.path.join(root, "a", "b", "leaf"), "wb") as f:
            f.write(b"x" * 3000)
        self.assertEqual(disk_usage(root), 3210)

    def test_empty_directory(self):
        self.assertEqual(disk_usage(self.base_dir), 0)

    def test_symlinks_are_not_counted(self):
        target = os.path.join(self.base_dir, "target")
        with open(target, "wb") as f:
            f.write(b"x" * 100)
        os.symlink(target, os.path.join(self.base_dir, "link"))
        self.assertEqual(disk_usage(self.base_dir), 100)


class TestFootprint(TempDirTestCase):

    def test_populated_fixture_has_positive_footprint(self):
        for engine in ENGINES:
            with self.subTest(engine=engine):
                with self.builder.build(engine, WorkloadShape(1000, 1000), prepopulate=True) as fixture:
                    fixture.close_handle()
                    self.assertGreater(measure_footprint(fixture), 0)

    def test_footprint_grows_with_value_size(self):
        for engine in ENGINES:
            with self.subTest(engine=engine):
                sizes = []
                for value_size in (1, 100, 1000):
                    with self.builder.build(engine, WorkloadShape(1000, value_size), prepopulate=True) as fixture:
                        fixture.close_handle()
                        sizes.append(measure_footprint(fixture))
                logger.info("%s footprint by value size 1/100/1000: %s", engine, sizes)
                self.assertEqual(sizes, sorted(sizes), f"{engine} footprints: {sizes}")


class TestIdleWait(unittest.TestCase):

    def test_waits_at_least_one_nanosecond_per_byte(self):
        total_bytes = 2_000_000  # 2 ms
        t0 = time.perf_counter_ns()
        idle_wait(total_bytes)
        self.assertGreaterEqual(time.perf_counter_ns() - t0, total_bytes)

    def test_zero_bytes_returns_immediately(self):
        idle_wait(0)


if __name__ == "__main__":
    unittest.main()
