"""Process-wide logging setup for the Lambda entry points and the FastAPI app."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "[%(asctime)s: %(levelname)s] [%(name)s] %(message)s"


def setup_logging(log_level: str = "INFO", logger_name: str = "asyncproxy") -> logging.Logger:
    """Attach a stdout handler to the package logger.

    Safe to call more than once (warm Lambda containers re-enter the entry
    point); the handler is only added the first time.

    Args:
        log_level: Logger level name.
        logger_name: Logger to configure, the package root by default.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(logger_name)
    if not any(getattr(h, "_asyncproxy", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._asyncproxy = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(log_level.upper())
    logger.propagate = False
    return logger
