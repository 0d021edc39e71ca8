"""Logging setup for the service."""

import logging
import sys

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure stdout logging with timestamps, levels and logger names."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger("route_optimizer")
