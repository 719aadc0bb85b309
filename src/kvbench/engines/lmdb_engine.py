"""LMDB adapter backed by py-lmdb.

LMDB writes are sync by default. Durability is an environment-open flag
rather than a per-write option: the async mode opens the environment with
a writeable memory map and asynchronous flushes (``writemap`` +
``map_async``). The ``durability`` argument of the write methods is
therefore ignored here; it is fixed when the handle is created.
"""

import mmap
import os
from typing import List, Optional, Sequence, Tuple

import lmdb

from kvbench.data import KeyValuePair
from kvbench.engines.base import DurabilityMode, EngineKind, StorageEngineAdapter
from kvbench.errors import EngineOpenError, MissingKeyError
from kvbench.logging_config import get_logger

logger = get_logger(__name__)

MB = 1024 * 1024

# The default LMDB map is too small for the largest data sets we bench, so
# the map is grown to fit 1000 pairs of 1000-byte values with headroom.
DEFAULT_MAP_SIZE = 5 * MB

DATA_FILE = "data.mdb"


class LMDBAdapter(StorageEngineAdapter):
    kind = EngineKind.LMDB

    def __init__(self, map_size: int = DEFAULT_MAP_SIZE):
        # The map size should be a multiple of the system page size
        if map_size <= 0 or map_size % mmap.PAGESIZE != 0:
            raise ValueError(
                f"LMDB map size {map_size} must be a positive multiple of the page size ({mmap.PAGESIZE})"
            )
        self.map_size = map_size

    def _open(self, path, durability: DurabilityMode, create: bool) -> lmdb.Environment:
        is_async = DurabilityMode(durability) is DurabilityMode.ASYNC
        try:
            return lmdb.open(
                str(path),
                map_size=self.map_size,
                create=create,
                writemap=is_async,
                map_async=is_async,
            )
        except lmdb.Error as exc:
            raise EngineOpenError(self.name, str(path), str(exc)) from exc

    def create(self, path, durability=DurabilityMode.SYNC) -> lmdb.Environment:
        logger.debug("Creating LMDB environment at %s (%s)", path, DurabilityMode(durability).value)
        return self._open(path, durability, create=True)

    def exists(self, path) -> bool:
        # lmdb.open() creates data.mdb in any existing directory
        return os.path.isfile(os.path.join(str(path), DATA_FILE))

    def attach(self, path, durability=DurabilityMode.SYNC) -> lmdb.Environment:
        return self._open(path, durability, create=False)

    def close(self, handle: lmdb.Environment) -> None:
        handle.close()

    def put_one(self, handle: lmdb.Environment, key: bytes, value: bytes, durability: DurabilityMode) -> None:
        with handle.begin(write=True) as txn:
            txn.put(key, value)

    def put_batch(self, handle: lmdb.Environment, pairs: Sequence[KeyValuePair], durability: DurabilityMode) -> None:
        with handle.begin(write=True) as txn:
            with txn.cursor() as cursor:
                cursor.putmulti(pairs)

    def populate(self, handle: lmdb.Environment, pairs: Sequence[KeyValuePair]) -> None:
        self.put_batch(handle, pairs, DurabilityMode.SYNC)
        handle.sync(True)

    def get(self, handle: lmdb.Environment, key: bytes) -> Optional[bytes]:
        with handle.begin() as txn:
            return txn.get(key)

    def delete(self, handle: lmdb.Environment, key: bytes, durability=DurabilityMode.SYNC) -> None:
        with handle.begin(write=True) as txn:
            txn.delete(key)

    def read(self, handle: lmdb.Environment, keys: Sequence[bytes]) -> int:
        total = 0
        with handle.begin() as txn:
            get = txn.get
            for key in keys:
                value = get(key)
                if value is None:
                    raise MissingKeyError(self.name, key)
                total += len(value)
        return total

    def iterate(self, handle: lmdb.Environment) -> Tuple[int, int]:
        total = 0
        count = 0
        with handle.begin() as txn:
            with txn.cursor() as cursor:
                for key, value in cursor:
                    total += len(key) + len(value)
                    count += 1
        return count, total

    def scan(self, handle: lmdb.Environment) -> List[KeyValuePair]:
        with handle.begin() as txn:
            with txn.cursor() as cursor:
                return list(cursor.iternext())
