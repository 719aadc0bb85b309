"""Storage engine adapters and their registry."""

from kvbench.engines.base import DurabilityMode, EngineKind, StorageEngineAdapter

ENGINE_KINDS = tuple(kind.value for kind in EngineKind)


def get_adapter(kind, **options) -> StorageEngineAdapter:
    """
    Instantiate the adapter for an engine kind.

    Args:
        kind: ``"leveldb"`` or ``"lmdb"`` (or an :class:`EngineKind`)
        **options: Engine-specific options, e.g. ``map_size`` for LMDB

    Returns:
        A fresh adapter instance
    """
    try:
        kind = EngineKind(kind)
    except ValueError:
        raise ValueError(f"Unknown engine: {kind!r} (expected one of {', '.join(ENGINE_KINDS)})") from None

    # Imported lazily so one missing binding does not break the other engine
    if kind is EngineKind.LEVELDB:
        from kvbench.engines.leveldb_engine import LevelDBAdapter
        return LevelDBAdapter()

    from kvbench.engines.lmdb_engine import DEFAULT_MAP_SIZE, LMDBAdapter
    return LMDBAdapter(map_size=options.get("map_size") or DEFAULT_MAP_SIZE)


__all__ = [
    "DurabilityMode",
    "ENGINE_KINDS",
    "EngineKind",
    "StorageEngineAdapter",
    "get_adapter",
]
