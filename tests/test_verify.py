"""Tests for the verify-only correctness checks."""

import unittest

from benchmarks.verify import (
    check_delete,
    check_iteration,
    check_round_trip,
    failed_checks,
    verify_engine,
)
from kvbench.params import WorkloadShape
from tests.utils import ENGINES, TempDirTestCase


class TestVerify(TempDirTestCase):

    def test_all_checks_pass_on_healthy_engines(self):
        for engine in ENGINES:
            for shape in (WorkloadShape(1, 1), WorkloadShape(100, 100)):
                with self.subTest(engine=engine, shape=shape.label):
                    results = verify_engine(self.builder, engine, shape)
                    self.assertEqual(set(results), {"round_trip", "iteration", "delete"})
                    self.assertEqual(failed_checks(results), [])
        self.assertNoLeftovers()

    def test_corrupted_value_fails_round_trip(self):
        with self.builder.build("lmdb", WorkloadShape(10, 4), prepopulate=True) as fixture:
            key, _ = fixture.pairs[3]
            fixture.adapter.write(fixture.handle, [(key, b"????")], fixture.durability)
            with self.assertLogs("benchmarks.verify", level="ERROR"):
                self.assertFalse(check_round_trip(fixture))

    def test_missing_entry_fails_iteration(self):
        with self.builder.build("leveldb", WorkloadShape(10, 4), prepopulate=True) as fixture:
            fixture.adapter.delete(fixture.handle, fixture.keys[0])
            with self.assertLogs("benchmarks.verify", level="ERROR"):
                self.assertFalse(check_iteration(fixture))

    def test_extra_entry_fails_iteration(self):
        with self.builder.build("lmdb", WorkloadShape(10, 4), prepopulate=True) as fixture:
            fixture.adapter.write(fixture.handle, [(b"\xff\xff\xff\xff\x00", b"x")], fixture.durability)
            with self.assertLogs("benchmarks.verify", level="ERROR"):
                self.assertFalse(check_iteration(fixture))

    def test_delete_check(self):
        for engine in ENGINES:
            with self.subTest(engine=engine):
                with self.builder.build(engine, WorkloadShape(10, 4), prepopulate=True) as fixture:
                    self.assertTrue(check_delete(fixture, fixture.keys[5]))
                    self.assertIsNone(fixture.adapter.get(fixture.handle, fixture.keys[5]))

    def test_failed_checks(self):
        self.assertEqual(failed_checks({"a": True, "b": False, "c": False}), ["b", "c"])


if __name__ == "__main__":
    unittest.main()
