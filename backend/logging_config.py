"""Centralized logging configuration for the API and the scripts."""

import logging
from typing import Optional

from config import settings

# Third-party loggers that are chatty at INFO/DEBUG.
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "httpx",
    "httpcore",
    "urllib3",
    "keyring",
)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger.

    Args:
        level: Level name overriding settings.LOG_LEVEL, e.g. "DEBUG"
            when a script runs with --verbose.
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
