"""Uniform operation surface over structurally different storage engines."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from kvbench.data import KeyValuePair
from kvbench.errors import EngineOpenError


class EngineKind(str, Enum):
    LEVELDB = "leveldb"
    LMDB = "lmdb"


class DurabilityMode(str, Enum):
    """Whether a write is acknowledged only once it is on stable storage."""

    SYNC = "sync"
    ASYNC = "async"


class StorageEngineAdapter(ABC):
    """
    Translate the generic benchmark operations into one engine's calls.

    Handles are opaque to callers. Failures to open or create a database
    raise EngineOpenError; any other engine error propagates unchanged and
    is never retried.
    """

    kind: EngineKind

    @property
    def name(self) -> str:
        return self.kind.value

    @abstractmethod
    def create(self, path: str, durability: DurabilityMode = DurabilityMode.SYNC) -> Any:
        """Open ``path``, creating the database if it is missing."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """True when ``path`` holds a database this engine can open."""

    @abstractmethod
    def attach(self, path: str, durability: DurabilityMode = DurabilityMode.SYNC) -> Any:
        """Open an existing database without checking for it first."""

    def open(self, path: str, durability: DurabilityMode = DurabilityMode.SYNC) -> Any:
        """Re-open an existing database; a missing one is an error."""
        if not self.exists(path):
            raise EngineOpenError(self.name, str(path), "no database at this location")
        return self.attach(path, durability)

    @abstractmethod
    def close(self, handle: Any) -> None:
        """Release the handle and any file locks it holds."""

    @abstractmethod
    def put_one(self, handle: Any, key: bytes, value: bytes, durability: DurabilityMode) -> None:
        """Single-operation write path."""

    @abstractmethod
    def put_batch(self, handle: Any, pairs: Sequence[KeyValuePair], durability: DurabilityMode) -> None:
        """Write all pairs in one batch or transaction."""

    @abstractmethod
    def populate(self, handle: Any, pairs: Sequence[KeyValuePair]) -> None:
        """Bulk-load pairs and flush them durably."""

    @abstractmethod
    def get(self, handle: Any, key: bytes) -> Optional[bytes]:
        """Point lookup; ``None`` when the key is absent."""

    @abstractmethod
    def delete(self, handle: Any, key: bytes, durability: DurabilityMode = DurabilityMode.SYNC) -> None:
        """Remove ``key``."""

    @abstractmethod
    def read(self, handle: Any, keys: Sequence[bytes]) -> int:
        """Look up every key in order and return the total value length."""

    @abstractmethod
    def iterate(self, handle: Any) -> Tuple[int, int]:
        """Walk every entry once; return (count, key + value bytes)."""

    @abstractmethod
    def scan(self, handle: Any) -> List[KeyValuePair]:
        """Every (key, value) pair in storage order."""

    def write(self, handle: Any, pairs: Sequence[KeyValuePair], durability: DurabilityMode) -> None:
        """
        Write pairs with the path a real client would use.

        A single pair goes through put_one, anything else through one batch.
        """
        if len(pairs) == 1:
            key, value = pairs[0]
            self.put_one(handle, key, value, durability)
        else:
            self.put_batch(handle, pairs, durability)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
