"""LevelDB adapter backed by plyvel.

LevelDB writes are buffered by default; durability is chosen per write via
the ``sync`` flag, so the same handle serves both durability modes.
"""

import os
from typing import List, Optional, Sequence, Tuple

import plyvel

from kvbench.data import KeyValuePair
from kvbench.engines.base import DurabilityMode, EngineKind, StorageEngineAdapter
from kvbench.errors import EngineOpenError, MissingKeyError
from kvbench.logging_config import get_logger

logger = get_logger(__name__)

CURRENT_FILE = "CURRENT"


def _sync(durability: DurabilityMode) -> bool:
    return DurabilityMode(durability) is DurabilityMode.SYNC


class LevelDBAdapter(StorageEngineAdapter):
    kind = EngineKind.LEVELDB

    def _open(self, path: str, create_if_missing: bool) -> plyvel.DB:
        try:
            return plyvel.DB(str(path), create_if_missing=create_if_missing)
        except plyvel.Error as exc:
            raise EngineOpenError(self.name, str(path), str(exc)) from exc

    def create(self, path, durability=DurabilityMode.SYNC) -> plyvel.DB:
        logger.debug("Creating LevelDB database at %s", path)
        return self._open(path, create_if_missing=True)

    def exists(self, path) -> bool:
        return os.path.isfile(os.path.join(str(path), CURRENT_FILE))

    def attach(self, path, durability=DurabilityMode.SYNC) -> plyvel.DB:
        return self._open(path, create_if_missing=False)

    def close(self, handle: plyvel.DB) -> None:
        if not handle.closed:
            handle.close()

    def put_one(self, handle: plyvel.DB, key: bytes, value: bytes, durability: DurabilityMode) -> None:
        handle.put(key, value, sync=_sync(durability))

    def put_batch(self, handle: plyvel.DB, pairs: Sequence[KeyValuePair], durability: DurabilityMode) -> None:
        with handle.write_batch(sync=_sync(durability)) as batch:
            for key, value in pairs:
                batch.put(key, value)

    def populate(self, handle: plyvel.DB, pairs: Sequence[KeyValuePair]) -> None:
        self.put_batch(handle, pairs, DurabilityMode.SYNC)

    def get(self, handle: plyvel.DB, key: bytes) -> Optional[bytes]:
        return handle.get(key)

    def delete(self, handle: plyvel.DB, key: bytes, durability=DurabilityMode.SYNC) -> None:
        handle.delete(key, sync=_sync(durability))

    def read(self, handle: plyvel.DB, keys: Sequence[bytes]) -> int:
        total = 0
        get = handle.get
        for key in keys:
            value = get(key)
            if value is None:
                raise MissingKeyError(self.name, key)
            total += len(value)
        return total

    def iterate(self, handle: plyvel.DB) -> Tuple[int, int]:
        total = 0
        count = 0
        with handle.iterator() as it:
            for key, value in it:
                total += len(key) + len(value)
                count += 1
        return count, total

    def scan(self, handle: plyvel.DB) -> List[KeyValuePair]:
        with handle.iterator() as it:
            return list(it)
