"""On-disk footprint of a populated fixture.

Disk size is not a duration. The driver reports it through a dedicated
``bytes`` metric by default. For reporting pipelines that only accept
elapsed time, :func:`idle_wait` converts the size into time by sleeping
one nanosecond per byte, so the "duration" of the benchmark is its
footprint. That encoding is a unit hack, not a measurement of anything.
"""

import os
import time
from pathlib import Path
from typing import Union

from kvbench.logging_config import get_logger

logger = get_logger(__name__)


def disk_usage(path: Union[str, Path]) -> int:
    """Sum the sizes of every regular file under ``path``, recursively."""
    total = 0
    for root, _dirs, files in os.walk(path):
        for name in files:
            file_path = os.path.join(root, name)
            if os.path.isfile(file_path) and not os.path.islink(file_path):
                total += os.stat(file_path).st_size
    return total


def measure_footprint(fixture) -> int:
    """Probe a populated fixture's backing directory."""
    total = disk_usage(fixture.path)
    logger.debug("%s footprint for %s: %d bytes", fixture.engine, fixture.shape.label, total)
    return total


def idle_wait(total_bytes: int) -> None:
    """Sleep for ``total_bytes`` nanoseconds."""
    time.sleep(total_bytes / 1e9)
