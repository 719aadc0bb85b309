"""Workload parameter space.

Benchmarks are parameterized across both the number of key-value pairs
written to (or read from) a datastore and the size of each value. The
parameter space is the cross product of the two sets.
"""

from dataclasses import dataclass
from itertools import product
from typing import Iterable, Iterator, List, Tuple

DEFAULT_PAIR_COUNTS: Tuple[int, ...] = (1, 100, 1000)
DEFAULT_VALUE_SIZES: Tuple[int, ...] = (1, 100, 1000)


@dataclass(frozen=True)
class WorkloadShape:
    """Number of pairs and size of each value for one benchmark group."""

    pair_count: int
    value_size: int

    def __post_init__(self):
        if self.pair_count <= 0:
            raise ValueError(f"pair_count must be positive, got {self.pair_count}")
        if self.value_size <= 0:
            raise ValueError(f"value_size must be positive, got {self.value_size}")

    @property
    def label(self) -> str:
        return f"pairs={self.pair_count},size={self.value_size}"


@dataclass(frozen=True)
class ParameterSpace:
    """Cross product of pair counts and value sizes.

    Built once from configuration and handed to the driver; it is never
    mutated afterwards.
    """

    pair_counts: Tuple[int, ...] = DEFAULT_PAIR_COUNTS
    value_sizes: Tuple[int, ...] = DEFAULT_VALUE_SIZES

    def __post_init__(self):
        # Normalize lists to tuples so the space stays hashable
        object.__setattr__(self, "pair_counts", tuple(self.pair_counts))
        object.__setattr__(self, "value_sizes", tuple(self.value_sizes))
        if not self.pair_counts or not self.value_sizes:
            raise ValueError("parameter space needs at least one pair count and one value size")
        # Validate eagerly so a bad config fails before any fixture is built
        self.shapes()

    @classmethod
    def from_iterables(cls, pair_counts: Iterable[int], value_sizes: Iterable[int]) -> "ParameterSpace":
        return cls(tuple(int(n) for n in pair_counts), tuple(int(n) for n in value_sizes))

    def shapes(self) -> List[WorkloadShape]:
        """Every (pair_count, value_size) combination, pair-count major."""
        return [WorkloadShape(m, n) for m, n in product(self.pair_counts, self.value_sizes)]

    def __iter__(self) -> Iterator[WorkloadShape]:
        return iter(self.shapes())

    def __len__(self) -> int:
        return len(self.pair_counts) * len(self.value_sizes)
