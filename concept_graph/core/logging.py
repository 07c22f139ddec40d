"""
Logging configuration.

Sets up the root handler once for the API process and keeps noisy
third-party loggers at WARNING.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Loggers that are too chatty at INFO for a local service
QUIET_LOGGERS = ("httpx", "uvicorn.access")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure application-wide logging.

    Args:
        level: Log level name for the root logger (e.g. "INFO", "DEBUG")
    """
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
