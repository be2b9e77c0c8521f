"""
Logging configuration for applications embedding the queue client
"""

import logging
import logging.config
from typing import Any, Dict

from .modules.logger import TRACE

MAX_MESSAGE_LENGTH = 2048


class TruncateFilter(logging.Filter):
    """Filter that shortens oversized messages (large batch_pop responses)."""

    def __init__(self, max_length: int = MAX_MESSAGE_LENGTH):
        super().__init__()
        self.max_length = max_length

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        if len(message) > self.max_length:
            dropped = len(message) - self.max_length
            record.msg = f"{message[: self.max_length]}... [{dropped} chars truncated]"
            record.args = None
        return True  # Never suppress, only shorten


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Get logging configuration with message truncation for queue loggers."""
    level = level.upper()
    if level == "TRACE":
        level = TRACE

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "truncate_filter": {
                "()": TruncateFilter
            }
        },
        "formatters": {
            "default": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
                "filters": ["truncate_filter"]
            }
        },
        "loggers": {
            "redis_priority_queue": {
                "handlers": ["default"],
                "level": level,
                "propagate": False
            }
        },
        "root": {
            "level": "WARNING",
            "handlers": ["default"]
        }
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply get_logging_config() with dictConfig."""
    logging.config.dictConfig(get_logging_config(level))
