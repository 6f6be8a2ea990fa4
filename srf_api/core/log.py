"""Logging setup. Everything goes to stdout; the host captures it."""

from __future__ import annotations

import logging
import sys

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install the stdout handler once. Later calls only adjust the level."""
    level_name = (level or get_settings().log_level or "INFO").upper()
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level_name)
        return
    logging.basicConfig(
        level=level_name,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
