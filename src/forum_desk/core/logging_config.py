"""Logging setup shared by the API entry point and scripts."""

from __future__ import annotations

import logging

from forum_desk.core.settings import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(config: Settings) -> None:
    """Configure the root logger once using the configured level."""
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)
    if config.sql_debug:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
