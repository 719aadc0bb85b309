"""Key, value and access-plan generation for benchmark fixtures.

This is the setup phase - nothing in this module is ever timed.

Keys are the 4-byte big-endian encoding of an index, so the byte order of
the keys equals their index order and both engines store them in the same
order. Values are either derived from the index (reproducible) or drawn
from a seeded numpy generator (realistic entropy, still reproducible for a
given seed).
"""

import zlib
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

KEY_WIDTH = 4
MAX_KEY_INDEX = (1 << (8 * KEY_WIDTH)) - 1

KeyValuePair = Tuple[bytes, bytes]


class ValueMode(str, Enum):
    """How value bytes are produced for a fixture."""

    RANDOM = "random"
    DETERMINISTIC = "deterministic"


class AccessOrder(str, Enum):
    """Order in which a benchmark visits a fixture's keys."""

    SEQUENTIAL = "seq"
    RANDOM = "rand"


def make_rng(seed: Optional[int]) -> np.random.Generator:
    """Create the generator used for value bytes and shuffles."""
    return np.random.default_rng(seed)


def make_group_rng(seed: Optional[int], *labels: str) -> np.random.Generator:
    """
    Generator for one benchmark group, derived from ``seed`` and the labels.

    The same (seed, labels) always yields the same stream, whatever other
    groups were built before it. A ``None`` seed draws fresh entropy.
    """
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng([seed, zlib.crc32("/".join(labels).encode())])


def encode_key(n: int) -> bytes:
    """Encode index ``n`` as a fixed-width big-endian key."""
    if n < 0 or n > MAX_KEY_INDEX:
        raise ValueError(f"key index {n} does not fit in {KEY_WIDTH} bytes")
    return n.to_bytes(KEY_WIDTH, "big")


def decode_key(key: bytes) -> int:
    if len(key) != KEY_WIDTH:
        raise ValueError(f"expected a {KEY_WIDTH}-byte key, got {len(key)} bytes")
    return int.from_bytes(key, "big")


def make_keys(pair_count: int) -> List[bytes]:
    return [encode_key(i) for i in range(pair_count)]


def tagged_value(n: int) -> bytes:
    """The bare ``data{n}`` tag used by the smoke scenarios."""
    return f"data{n}".encode()


def deterministic_value(n: int, size: int) -> bytes:
    """``data{n}`` repeated and cut to exactly ``size`` bytes."""
    tag = tagged_value(n)
    repeats = -(-size // len(tag))
    return (tag * repeats)[:size]


def random_value(size: int, rng: np.random.Generator) -> bytes:
    return rng.bytes(size)


def make_pairs(
    pair_count: int,
    value_size: int,
    mode: ValueMode = ValueMode.RANDOM,
    rng: Optional[np.random.Generator] = None,
) -> List[KeyValuePair]:
    """
    Generate ``pair_count`` pairs with keys ``0..pair_count-1``.

    Args:
        pair_count: Number of pairs
        value_size: Length of every value in bytes
        mode: Value generation policy
        rng: Generator for random values; a fresh unseeded one if None

    Returns:
        List of (key, value) pairs in key order
    """
    mode = ValueMode(mode)
    if mode is ValueMode.DETERMINISTIC:
        return [(encode_key(i), deterministic_value(i, value_size)) for i in range(pair_count)]

    if rng is None:
        rng = make_rng(None)
    return [(encode_key(i), random_value(value_size, rng)) for i in range(pair_count)]


def plan_keys(
    keys: Sequence[bytes],
    order: AccessOrder,
    rng: Optional[np.random.Generator] = None,
) -> List[bytes]:
    """
    Apply an access plan to a fixture's key set.

    The plan is computed once per fixture and reused across every timed
    iteration, so run-to-run variance reflects the engine, not the shuffle.
    """
    order = AccessOrder(order)
    if order is AccessOrder.SEQUENTIAL:
        return list(keys)

    if rng is None:
        rng = make_rng(None)
    permutation = rng.permutation(len(keys))
    return [keys[i] for i in permutation]


def plan_pairs(
    pairs: Sequence[KeyValuePair],
    order: AccessOrder,
    rng: Optional[np.random.Generator] = None,
) -> List[KeyValuePair]:
    """Same as :func:`plan_keys` but keeps each value with its key."""
    order = AccessOrder(order)
    if order is AccessOrder.SEQUENTIAL:
        return list(pairs)

    if rng is None:
        rng = make_rng(None)
    permutation = rng.permutation(len(pairs))
    return [pairs[i] for i in permutation]
