"""Logging helpers for the ``ziq`` package."""
from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

__all__ = ["configure_logging", "render_timing", "LOGGER_NAME"]


LOGGER_NAME = "ziq"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_LOG_LOCK = threading.Lock()
_HANDLER_ATTR = "_ziq_handler"


def configure_logging(level: int | str = logging.WARNING, log_file: str | Path | None = None) -> logging.Logger:
    """Attach handlers to the package logger and set its level.

    Calling this repeatedly replaces the handlers installed by earlier calls
    instead of stacking duplicates.
    """

    logger = logging.getLogger(LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"unknown log level: {level}")
    with _LOG_LOCK:
        for handler in list(logger.handlers):
            if getattr(handler, _HANDLER_ATTR, False):
                logger.removeHandler(handler)
                handler.close()
        formatter = logging.Formatter(_LOG_FORMAT)
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if log_file is not None:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(path, encoding="utf-8"))
        for handler in handlers:
            setattr(handler, _HANDLER_ATTR, True)
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(level)
    return logger


@contextmanager
def render_timing(label: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """Log the wall time spent inside the block at DEBUG level."""

    target = logger or logging.getLogger(LOGGER_NAME)
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        target.debug("%s took %.3f ms", label, elapsed * 1000.0)
