"""Shared helpers for the kvbench test suite."""

import os
import tempfile
import unittest

from kvbench.data import ValueMode
from kvbench.engines import ENGINE_KINDS
from kvbench.fixture import FixtureBuilder

ENGINES = ENGINE_KINDS


class TempDirTestCase(unittest.TestCase):
    """Gives every test its own base directory for fixtures.

    Fixtures are created under ``self.base_dir``, so a test can check that
    nothing was left behind once its fixtures are released.
    """

    value_mode = ValueMode.DETERMINISTIC
    seed = 7

    def setUp(self):
        self._base = tempfile.TemporaryDirectory(prefix="kvbench_test_")
        self.base_dir = self._base.name
        self.builder = FixtureBuilder(
            value_mode=self.value_mode,
            seed=self.seed,
            tmp_dir=self.base_dir,
        )

    def tearDown(self):
        self._base.cleanup()

    def leftover_entries(self):
        return os.listdir(self.base_dir)

    def assertNoLeftovers(self):
        self.assertEqual(self.leftover_entries(), [], "fixture directories were not removed")

