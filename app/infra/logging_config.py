"""Process-wide logging setup shared by the API and Celery workers."""

from __future__ import annotations

import logging
import logging.config
from typing import Optional

from app.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingConfig:
    """Apply a console logging configuration at the level from LOG_LEVEL."""

    def __init__(self, level: Optional[str] = None) -> None:
        self.level = (level or get_settings().log_level).upper()
        logging.config.dictConfig(self.as_dict())

    def as_dict(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"format": LOG_FORMAT}},
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                }
            },
            "root": {"handlers": ["console"], "level": self.level},
            "loggers": {
                "uvicorn.access": {"level": "WARNING"},
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }


def get_logger(name: str = "omnichannel") -> logging.Logger:
    return logging.getLogger(name)
