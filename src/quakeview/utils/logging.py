"""
Logging utilities for the quakeview library.

Library Logging Conventions
---------------------------
1. **Library code never calls configure_logging()** - it only uses get_logger(__name__).
2. **Applications/scripts may call configure_logging()** to route log output.
3. When imported by an application that has configured logging, all quakeview
   logs use that application's handlers.

quakeview does NOT write any log files.

Example Usage
-------------
In library code (view_state.py, normalizer.py, etc.):
    ```python
    from quakeview.utils.logging import get_logger
    logger = get_logger(__name__)
    logger.debug("recompute: 120 of 9000 events pass")
    ```

Timing a recompute or a feed load at DEBUG level:
    ```python
    from quakeview.utils.logging import log_elapsed
    with log_elapsed(logger, "recompute") as timing:
        views = recompute(records, criteria, axis)
    # logs "recompute took 1.8 ms"; timing["ms"] holds the value
    ```

In standalone scripts:
    ```python
    from quakeview.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Union

LOGGER_NAME = "quakeview"

# Default format for quakeview logs
DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d:%(funcName)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """
    Configure logging for the quakeview logger only (never root).

    Parameters
    ----------
    level:
        Logging level (e.g. "DEBUG", "INFO"). Defaults to QUAKEVIEW_LOG_LEVEL
        env var, or "INFO" if unset.
    fmt:
        Log message format. Defaults to DEFAULT_FMT.
    datefmt:
        Date format. Defaults to "%Y-%m-%d %H:%M:%S".
    force:
        If True, remove existing handlers before adding a new one. If False,
        do nothing when a stderr StreamHandler is already attached.
    """
    if level is None:
        level = os.environ.get("QUAKEVIEW_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    formatter = logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    else:
        for h in logger.handlers:
            if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr:
                return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger by name.

    If name is None, returns the 'quakeview' package logger.
    """
    if name is None:
        name = LOGGER_NAME
    return logging.getLogger(name)


@contextmanager
def log_elapsed(
    logger: logging.Logger,
    what: str,
    level: int = logging.DEBUG,
) -> Iterator[dict[str, float]]:
    """
    Log the wall-clock time of the enclosed block as "<what> took N ms".

    Yields a dict whose "ms" entry is filled in when the block exits, so
    callers can fold the duration into their own log line. Nothing is
    logged if the block raises.
    """
    timing: dict[str, float] = {"ms": 0.0}
    start = time.perf_counter()
    yield timing
    timing["ms"] = (time.perf_counter() - start) * 1000.0
    if logger.isEnabledFor(level):
        logger.log(level, f"{what} took {timing['ms']:.1f} ms")
