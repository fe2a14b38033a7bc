"""Diagnostic logging setup.

The terminal belongs to curses while the browser runs, so log records never go
to stderr.  They are either written to the file named in the ``[logging]``
config section or dropped.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

ROOT_LOGGER_NAME = "millpane"


def configure_logging(settings: Dict[str, Any]) -> logging.Logger:
    """Attach the file handler (or a null handler) to the package logger.

    Args:
        settings: Mapping as returned by :func:`millpane.config.get_logging_settings`.

    Returns:
        The configured ``millpane`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if not settings.get("enabled"):
        logger.addHandler(logging.NullHandler())
        return logger

    log_file = Path(settings["file"])
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    except OSError:
        logger.addHandler(logging.NullHandler())
        return logger

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, str(settings.get("level", "DEBUG")), logging.DEBUG))
    logger.debug("Logging to %s", log_file)
    return logger


__all__ = ["configure_logging", "LOG_FORMAT", "ROOT_LOGGER_NAME"]
