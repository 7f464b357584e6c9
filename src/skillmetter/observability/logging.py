"""Shared logging utilities for comparison observability.

Every logger handed out here lives under the ``skillmetter`` namespace, writes to
stderr with UTC timestamps and does not propagate to the root logger.

Usage example:
    from skillmetter.observability.logging import get_logger

    logger = get_logger("skillmetter.compare")
    logger.info("Comparing %s vs %s", user1, user2)
"""

from __future__ import annotations

import logging
import time

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_ROOT_NAME = "skillmetter"

_configured: dict[str, logging.Logger] = {}
_level = logging.INFO


def _build_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(fmt=_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)
    formatter.converter = time.gmtime
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return a logger with a single UTC stream handler.

    Args:
        name: Logger name. Names outside the ``skillmetter`` namespace are nested under it.

    Returns:
        The configured logger; repeated calls with the same name return the same object.
    """
    qualified = name if name.split(".", 1)[0] == _ROOT_NAME else f"{_ROOT_NAME}.{name}"
    logger = logging.getLogger(qualified)
    if not logger.handlers:
        logger.addHandler(_build_handler())
        logger.setLevel(_level)
        logger.propagate = False
    _configured[qualified] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Apply a level to every logger handed out so far and to future ones."""
    global _level
    resolved = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    _level = resolved
    for logger in _configured.values():
        logger.setLevel(resolved)
