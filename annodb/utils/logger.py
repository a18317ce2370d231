"""
Logging utility for annotation extraction runs.

All modules log through the shared loguru logger exported here. Output goes
to STDERR so that callers writing artifacts to STDOUT are never polluted.

Verbosity:
- DEBUG=true in the environment enables debug output
- configure_logging(verbose=True) does the same programmatically
"""

import os
import sys

from loguru import logger as loguru_logger

# ============================================================================
# Logger Configuration
# ============================================================================

LOG_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - {message}"

_handler_id: int | None = None

# loguru installs a STDERR handler with this id at import time
_DEFAULT_HANDLER_ID = 0


def is_debug_enabled() -> bool:
    """Check if debug mode is enabled."""
    return os.environ.get("DEBUG", "").lower() == "true"


def configure_logging(verbose: bool | None = None) -> int:
    """
    Install a single STDERR sink for annodb output.

    The first call also drops loguru's default handler so that records are
    not printed twice.

    Args:
        verbose: Emit DEBUG records when True, INFO and above otherwise.
            Defaults to the DEBUG environment toggle.

    Returns:
        The loguru handler id of the installed sink
    """
    global _handler_id

    if verbose is None:
        verbose = is_debug_enabled()

    stale = _DEFAULT_HANDLER_ID if _handler_id is None else _handler_id
    try:
        loguru_logger.remove(stale)
    except ValueError:
        pass

    _handler_id = loguru_logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=LOG_FORMAT,
    )
    return _handler_id


# Export loguru logger for direct use
logger = loguru_logger
