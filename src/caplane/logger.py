"""Logging configuration for caplane with semantic verbosity levels."""

from __future__ import annotations

import logging
import sys
from typing import Any, TextIO

# Custom levels between the standard ones
CHANGES_LEVEL = 25  # Between INFO (20) and WARNING (30) - date moves, placements
CHECKS_LEVEL = 15  # Between DEBUG (10) and INFO (20) - solver and contention decisions

logging.addLevelName(CHANGES_LEVEL, "CHANGES")
logging.addLevelName(CHECKS_LEVEL, "CHECKS")

VERBOSITY_SILENT = 0
VERBOSITY_CHANGES = 1
VERBOSITY_CHECKS = 2
VERBOSITY_DEBUG = 3

_LEVELS = {
    VERBOSITY_SILENT: logging.ERROR,
    VERBOSITY_CHANGES: CHANGES_LEVEL,
    VERBOSITY_CHECKS: CHECKS_LEVEL,
    VERBOSITY_DEBUG: logging.DEBUG,
}


class CaplaneLogger(logging.Logger):
    """Logger with methods matching the CLI verbosity levels.

    - changes(): level 1 - due dates moved, tasks placed or resized
    - checks(): level 2 - per-task solver results and contention decisions
    - debug(): level 3 - day-by-day walk details
    """

    def changes(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a change (verbosity level 1)."""
        if self.isEnabledFor(CHANGES_LEVEL):
            self._log(CHANGES_LEVEL, msg, args, **kwargs)

    def checks(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a check (verbosity level 2)."""
        if self.isEnabledFor(CHECKS_LEVEL):
            self._log(CHECKS_LEVEL, msg, args, **kwargs)


def get_logger() -> CaplaneLogger:
    """Get the caplane logger singleton.

    Use setup_logger() to configure it before first use.
    """
    logging.setLoggerClass(CaplaneLogger)
    logger = logging.getLogger("caplane")
    assert isinstance(logger, CaplaneLogger)
    return logger


def setup_logger(verbosity: int, stream: TextIO | None = None) -> None:
    """Configure the caplane logger.

    Can be called repeatedly; previous handlers are dropped.

    Args:
        verbosity: 0=silent (errors only), 1=changes, 2=checks, 3=debug
        stream: Output stream, defaults to sys.stderr
    """
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(_LEVELS.get(verbosity, logging.ERROR))

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False


def reset_logger() -> None:
    """Reset the logger to a clean state (used between tests)."""
    logger = get_logger()
    logger.handlers.clear()
    logger.setLevel(logging.ERROR)
    logger.propagate = True


def checks_enabled() -> bool:
    """True if checks-level messages will be emitted (verbosity >= 2)."""
    return get_logger().isEnabledFor(CHECKS_LEVEL)


def debug_enabled() -> bool:
    """True if debug messages will be emitted (verbosity >= 3)."""
    return get_logger().isEnabledFor(logging.DEBUG)
