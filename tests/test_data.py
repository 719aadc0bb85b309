"""Tests for key, value and access-plan generation."""

import unittest

from kvbench.data import (
    KEY_WIDTH,
    AccessOrder,
    ValueMode,
    decode_key,
    deterministic_value,
    encode_key,
    make_keys,
    make_pairs,
    make_rng,
    plan_keys,
    plan_pairs,
    tagged_value,
)


class TestKeys(unittest.TestCase):

    def test_big_endian_encoding(self):
        self.assertEqual(encode_key(0), b"\x00\x00\x00\x00")
        self.assertEqual(encode_key(1), b"\x00\x00\x00\x01")
        self.assertEqual(encode_key(0x01020304), b"\x01\x02\x03\x04")
        self.assertEqual(decode_key(encode_key(123456)), 123456)

    def test_out_of_range_indices(self):
        with self.assertRaises(ValueError):
            encode_key(-1)
        with self.assertRaises(ValueError):
            encode_key(1 << 32)
        with self.assertRaises(ValueError):
            decode_key(b"\x01\x02")

    def test_keys_are_unique_and_sorted_like_indices(self):
        keys = make_keys(1000)
        self.assertEqual(len(set(keys)), 1000)
        self.assertEqual(keys, sorted(keys))
        self.assertTrue(all(len(k) == KEY_WIDTH for k in keys))


class TestValues(unittest.TestCase):

    def test_tagged_value(self):
        self.assertEqual(tagged_value(7), b"data7")

    def test_deterministic_value_has_exact_size(self):
        for size in (1, 5, 6, 100, 1000):
            with self.subTest(size=size):
                value = deterministic_value(42, size)
                self.assertEqual(len(value), size)
                self.assertTrue(value.startswith(b"data42"[:size]))

    def test_deterministic_pairs_are_reproducible(self):
        first = make_pairs(50, 100, ValueMode.DETERMINISTIC)
        second = make_pairs(50, 100, "deterministic")
        self.assertEqual(first, second)
        self.assertEqual([k for k, _ in first], make_keys(50))

    def test_random_pairs_depend_on_seed(self):
        a = make_pairs(20, 100, ValueMode.RANDOM, make_rng(1))
        b = make_pairs(20, 100, ValueMode.RANDOM, make_rng(1))
        c = make_pairs(20, 100, ValueMode.RANDOM, make_rng(2))
        self.assertEqual(a, b)
        self.assertNotEqual(a, c)
        self.assertTrue(all(len(v) == 100 for _, v in a))

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            make_pairs(1, 1, "sometimes")


class TestAccessPlan(unittest.TestCase):

    def test_sequential_plan_is_identity(self):
        keys = make_keys(100)
        self.assertEqual(plan_keys(keys, AccessOrder.SEQUENTIAL), keys)
        self.assertIsNot(plan_keys(keys, "seq"), keys)

    def test_random_plan_is_a_permutation(self):
        keys = make_keys(1000)
        planned = plan_keys(keys, AccessOrder.RANDOM, make_rng(3))
        self.assertNotEqual(planned, keys)
        self.assertEqual(sorted(planned), keys)

    def test_random_plan_is_seeded(self):
        keys = make_keys(100)
        self.assertEqual(
            plan_keys(keys, "rand", make_rng(9)),
            plan_keys(keys, "rand", make_rng(9)),
        )

    def test_plan_pairs_keeps_values_with_keys(self):
        pairs = make_pairs(100, 8, ValueMode.DETERMINISTIC)
        planned = plan_pairs(pairs, AccessOrder.RANDOM, make_rng(5))
        self.assertEqual(sorted(planned), pairs)
        lookup = dict(pairs)
        for key, value in planned:
            self.assertEqual(lookup[key], value)

    def test_single_key_plan(self):
        keys = make_keys(1)
        self.assertEqual(plan_keys(keys, AccessOrder.RANDOM, make_rng(0)), keys)


if __name__ == "__main__":
    unittest.main()
