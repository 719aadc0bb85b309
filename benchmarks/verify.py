"""Correctness checks of the harness's read/write contract against each engine.

This is the verify phase - never timed. It checks that what the fixture
builder and adapters write can be read back, scanned and deleted, which is
what every timed benchmark silently relies on.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional

from kvbench.data import decode_key
from kvbench.engines import DurabilityMode
from kvbench.fixture import Fixture, FixtureBuilder
from kvbench.params import WorkloadShape

logger = logging.getLogger(__name__)


def check_round_trip(fixture: Fixture) -> bool:
    """Every written pair reads back byte-for-byte."""
    adapter, handle = fixture.adapter, fixture.handle
    all_passed = True
    for key, value in fixture.pairs:
        stored = adapter.get(handle, key)
        if stored != value:
            logger.error(
                "%s round-trip failed for key %d (%s)",
                fixture.engine, decode_key(key), fixture.shape.label,
            )
            all_passed = False
    return all_passed


def check_iteration(fixture: Fixture) -> bool:
    """A full scan sees exactly the written keys, each once, in key order."""
    adapter, handle = fixture.adapter, fixture.handle
    count, nbytes = adapter.iterate(handle)
    expected_bytes = sum(len(k) + len(v) for k, v in fixture.pairs)
    all_passed = True
    if count != fixture.shape.pair_count:
        logger.error(
            "%s iteration visited %d entries, expected %d",
            fixture.engine, count, fixture.shape.pair_count,
        )
        all_passed = False
    if nbytes != expected_bytes:
        logger.error(
            "%s iteration read %d bytes, expected %d",
            fixture.engine, nbytes, expected_bytes,
        )
        all_passed = False

    scanned = [key for key, _ in adapter.scan(handle)]
    if Counter(scanned) != Counter(key for key, _ in fixture.pairs):
        logger.error("%s scan keys differ from the written keys", fixture.engine)
        all_passed = False
    elif scanned != sorted(scanned):
        logger.error("%s scan is not in key order", fixture.engine)
        all_passed = False
    return all_passed


def check_delete(fixture: Fixture, key: Optional[bytes] = None) -> bool:
    """A deleted key is reported absent while its neighbours survive."""
    adapter, handle = fixture.adapter, fixture.handle
    if key is None:
        key = fixture.pairs[0][0]
    adapter.delete(handle, key, DurabilityMode.SYNC)
    all_passed = True
    if adapter.get(handle, key) is not None:
        logger.error("%s still returns deleted key %s", fixture.engine, key.hex())
        all_passed = False
    for other, value in fixture.pairs:
        if other != key and adapter.get(handle, other) != value:
            logger.error("%s lost key %s after deleting %s", fixture.engine, other.hex(), key.hex())
            all_passed = False
    return all_passed


def verify_engine(builder: FixtureBuilder, engine, shape: WorkloadShape) -> Dict[str, bool]:
    """
    Run every contract check on a fresh, populated fixture.

    Args:
        builder: Fixture builder
        engine: Engine kind or adapter
        shape: Shape of the fixture to check

    Returns:
        Mapping of check name to pass/fail
    """
    with builder.build(engine, shape, prepopulate=True, label="verify") as fixture:
        results = {
            "round_trip": check_round_trip(fixture),
            "iteration": check_iteration(fixture),
        }
        # Delete last: it mutates the fixture
        results["delete"] = check_delete(fixture)
    return results


def failed_checks(results: Dict[str, bool]) -> List[str]:
    return [name for name, passed in results.items() if not passed]
