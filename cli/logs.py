"""
Logging setup for the command-line entry point.

Library modules only create loggers (logging.getLogger(__name__)); the
handler is attached here, once, by the program entry point. Output goes to
stderr so it never interleaves with query results on stdout.
"""

import logging
import os
import sys
from typing import Optional

LOG_LEVEL_ENV = "PAGEDB_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOGGER_NAMES = ("storage", "cli")


def resolve_level(level: Optional[str] = None) -> int:
    """Map a level name (or the environment default) to a logging constant."""
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {name}")
    return value


def configure_logging(level: Optional[str] = None, stream=None) -> None:
    """Attach one stderr handler to the package loggers. Repeated calls only change the level."""
    numeric = resolve_level(level)
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(numeric)
        if logger.handlers:
            continue
        handler = logging.StreamHandler(stream=stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
