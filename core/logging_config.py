"""Process-wide logging setup, called once from main.py."""
from __future__ import annotations
import logging
import sys
from typing import Optional

from core.config_loader import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    # SQL echo is too chatty for the availability scans
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    _configured = True
