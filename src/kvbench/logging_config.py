"""Logging setup for kvbench.

All library modules log under the ``kvbench`` logger. It does not propagate
to the root logger, so benchmark drivers that configure the root logger for
their own report output are not flooded with per-fixture messages.

Debug output costs I/O on every call. Anything that measures time should
call :func:`check_timing_safe` first.
"""

import logging
import sys
from typing import Optional

PROJECT_LOGGER = "kvbench"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(
    level: int = logging.INFO,
    format_string: Optional[str] = None,
) -> logging.Logger:
    """
    Configure the ``kvbench`` logger once.

    Args:
        level: Logging level (default: INFO)
        format_string: Custom format string (optional)

    Returns:
        The ``kvbench`` logger
    """
    logger = logging.getLogger(PROJECT_LOGGER)
    # Own handlers only; the root logger may already be configured
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def set_level(level) -> None:
    """Change the ``kvbench`` level, e.g. from a ``--log-level`` flag."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    setup_logging().setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a kvbench module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger under the ``kvbench`` hierarchy
    """
    setup_logging()
    if name == PROJECT_LOGGER or name.startswith(PROJECT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{PROJECT_LOGGER}.{name}")


def check_timing_safe(name: str = PROJECT_LOGGER) -> None:
    """
    Refuse to time anything while ``name`` logs at DEBUG or lower.

    Raises:
        ValueError: if the effective level is DEBUG or more verbose
    """
    effective_level = logging.getLogger(name).getEffectiveLevel()
    if effective_level <= logging.DEBUG:
        raise ValueError(
            f"Logging level of {name!r} is {logging.getLevelName(effective_level)}. "
            "Benchmarks require INFO or higher so debug output does not "
            "contaminate the timings."
        )


def get_test_logger(name: str) -> logging.Logger:
    """Logger for test modules, INFO level, not propagated."""
    logger = logging.getLogger(f"Tests.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False
    return logger
