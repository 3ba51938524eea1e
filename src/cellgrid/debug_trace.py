"""Logging and timing utilities for the grid.

Enable console tracing by running with cellgrid-debug. Timings from
perf_timer() are logged to the "cellgrid.perf" logger at DEBUG level, so
they appear whenever that logger is enabled for DEBUG.

Usage:
    from .debug_trace import get_logger, perf_timer

    logger = get_logger(__name__)
    logger.debug("Starting operation")

    with perf_timer("render", row_count=50):
        controller.render()
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager

# Package root logger; module loggers are children of it
logger = logging.getLogger("cellgrid")
perf_logger = logger.getChild("perf")

LOG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Get a child of the package logger for a module.

    Args:
        name: Module __name__ (e.g. "cellgrid.data.row_store")
    """
    if name == logger.name or name.startswith(logger.name + "."):
        return logging.getLogger(name)
    return logger.getChild(name)


def setup_debug_logging(debug: bool = False) -> None:
    """Configure the package logger.

    Call this once at startup. Debug mode logs everything to the console,
    timings included, otherwise only warnings and above.

    Args:
        debug: True for DEBUG level console output (cellgrid-debug).
    """
    # Only configure if not already configured
    if logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


@contextmanager
def perf_timer(operation: str, row_count: int | None = None):
    """Log how long the wrapped block took.

    Does nothing unless the perf logger is enabled for DEBUG.

    Args:
        operation: Name of the operation being timed
        row_count: Optional row count for context
    """
    if not perf_logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        rows = "" if row_count is None else f" ({row_count} rows)"
        perf_logger.debug("%s%s took %.2fms", operation, rows, elapsed_ms)
