"""Logging setup."""

import logging
from typing import Optional

from identitygate.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging and return the package logger."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format=LOG_FORMAT,
    )
    logger = logging.getLogger("identitygate")
    logger.debug(f"Logging configured (env: {settings.env.value})")
    return logger
