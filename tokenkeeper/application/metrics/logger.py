from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from ...infrastructure.metrics import METRICS_LOGGER_NAME


def configure_metrics_logger(path: str, *, when: str = "midnight", backups: int = 30) -> logging.Logger:
    """
    Route token store timings to a JSON lines file rotated daily by default.
    Calling it again with the same path keeps the existing handler.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(METRICS_LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    if logger.handlers:
        if all(getattr(handler, "baseFilename", None) == os.path.abspath(target) for handler in logger.handlers):
            return logger
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()

    handler = TimedRotatingFileHandler(
        filename=target,
        when=when,
        backupCount=backups,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
