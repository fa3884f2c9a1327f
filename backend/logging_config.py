"""Centralized logging configuration."""

import logging
from typing import Optional

from config import settings

# Third-party loggers that are chatty at INFO and log every failed
# symbol at ERROR on their own.
NOISY_LOGGERS = (
    "httpx",
    "httpcore",
    "urllib3",
    "yfinance",
    "peewee",
)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure logging for the application.

    Sets the root logger level (``level`` if given, otherwise
    settings.LOG_LEVEL) and caps noisy third-party loggers at WARNING
    so per-ticker failures are reported once, by the quote resolvers.
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s  %(message)s",
        datefmt="%H:%M:%S",
        level=getattr(logging, level_name),
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
