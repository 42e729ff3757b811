"""Console logging for the server and the headless CLI run."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)-5s] %(name)-25s | %(message)s"
DATE_FORMAT = "%H:%M:%S"

# Chatty at INFO: one line per interpreter request or per HTTP hit
NOISY_LOGGERS: tuple[str, ...] = ("httpx", "uvicorn.access")


def setup_logging(level: str = "INFO") -> int:
    """Route everything to stdout at *level* and return the numeric level.

    Unknown level names fall back to INFO. Loggers in ``NOISY_LOGGERS``
    never go below WARNING.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logging.getLogger(__name__).debug("Logging configured at %s", logging.getLevelName(numeric_level))
    return numeric_level
