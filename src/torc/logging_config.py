"""Logging configuration, called once by the CLI entrypoint.

Every module that does ``logger = logging.getLogger(__name__)`` inherits
this config. User-facing progress goes through the TUI; logging carries
diagnostics and goes to stderr.

Levels are resolved in precedence order:
    --verbose flag (DEBUG)  >  TORC_LOG_LEVEL env var  >  WARNING
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV_VAR = "TORC_LOG_LEVEL"

_FMT_MINIMAL = "%(levelname)s: %(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT = "%H:%M:%S"

# Third-party loggers that are noisy below WARNING
_NOISY_LOGGERS = ("git", "urllib3")


def resolve_level(verbose: bool = False) -> int:
    """Pick the effective log level.

    Args:
        verbose: True if --verbose was passed.

    Returns:
        Numeric logging level.
    """
    if verbose:
        return logging.DEBUG
    return _parse_level(os.environ.get(LOG_LEVEL_ENV_VAR))


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure the root logger for the whole process.

    Args:
        level: Numeric logging level.
    """
    if level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT
    elif level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    if level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
