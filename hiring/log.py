"""Logging setup shared by the app factory and the services."""
from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"
_DATE_FMT = "%Y-%m-%d %H:%M:%S"
_configured = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_logging(level_name: str = "INFO") -> None:
    """Attach a stdout handler to the ``hiring`` logger once per process."""
    global _configured
    level = getattr(logging, (level_name or "INFO").upper(), logging.INFO)

    logger = logging.getLogger("hiring")
    logger.setLevel(level)
    if _configured:
        return

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FMT))
    logger.addHandler(console)
    _configured = True
