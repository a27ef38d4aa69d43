"""
Logging setup.

Modules either import the shared ``logger`` or create their own with
``setup_logger(__name__)``.
"""

import logging
import sys

from workspace_kpi.core.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str, level: str | None = None) -> logging.Logger:
    """
    Get a logger with a single stream handler attached.

    Args:
        name: Logger name (usually ``__name__``)
        level: Optional level override; defaults to ``Settings.LOG_LEVEL``

    Returns:
        Configured logger
    """
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
        log.propagate = False
    log.setLevel(level or get_settings().LOG_LEVEL)
    return log


logger = setup_logger("workspace_kpi")
