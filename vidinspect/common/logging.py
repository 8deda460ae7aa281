# vidinspect/common/logging.py
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _coerce_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def get_logger(name: str = "vidinspect", level: int | str | None = None) -> logging.Logger:
    """
    Return a package logger. If the host application (uvicorn, a desktop shell)
    has not configured logging yet, install a basicConfig handler once.
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    if level is not None:
        logger.setLevel(_coerce_level(level))
    return logger


def configure_logging(level: int | str = "INFO") -> None:
    """Set the package log level; used once at startup by the Inspector and the API."""
    get_logger("vidinspect", level)
