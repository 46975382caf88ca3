"""
Logging setup for the API process and scripts. App modules log via logging.getLogger(__name__).
"""
from __future__ import annotations

import logging.config
import os


def default_log_level() -> str:
    return os.environ.get("GAMEDAY_LOG_LEVEL", "INFO").strip() or "INFO"


def setup_logging(level: str | None = None) -> None:
    level = (level or default_log_level()).upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                        "datefmt": "%H:%M:%S"},
        },
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "default"},
        },
        "loggers": {
            "gameday": {"level": level},
        },
        "root": {"level": "WARNING", "handlers": ["console"]},
    })
