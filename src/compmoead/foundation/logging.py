"""
Opt-in logging setup for compmoead.

Library modules only ever call ``logging.getLogger(__name__)``; handlers are
attached solely through :func:`configure_logging`.
"""

from __future__ import annotations

import logging

LOGGER_NAME = "compmoead"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, fmt: str | None = None) -> logging.Logger:
    """
    Attach a console handler to the ``compmoead`` logger.

    Notes:
        - Never called by library code; run loops only emit records.
        - Nothing is attached when the root logger or the package logger already
          has handlers, so application-level configuration wins.
        - Per-generation progress is logged at DEBUG; pass ``level=logging.DEBUG``
          to follow a run generation by generation.
    """
    pkg_logger = logging.getLogger(LOGGER_NAME)
    if logging.getLogger().handlers or pkg_logger.handlers:
        return pkg_logger

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(level)
    pkg_logger.propagate = False
    return pkg_logger


__all__ = ["LOGGER_NAME", "configure_logging"]
