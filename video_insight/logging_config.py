"""Logging configuration for the API process.

- LOG_LEVEL: global log level (default: INFO)
- LOG_FORMAT: ``structured`` or ``simple`` (default: structured)
"""

from __future__ import annotations

import logging
import sys

from video_insight.config import Settings

PACKAGE_PREFIX = "video_insight."


class StructuredFormatter(logging.Formatter):
    """Format: timestamp | level | logger | message"""

    def format(self, record: logging.LogRecord) -> str:
        logger_name = record.name.removeprefix(PACKAGE_PREFIX)
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")

        message = f"{timestamp} | {record.levelname:8} | {logger_name:24} | {record.getMessage()}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


def setup_logging(settings: Settings) -> None:
    """Install a single stdout handler on the root logger."""
    root_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "structured":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Remove existing handlers to avoid duplicates on reload
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(root_level)
    root_logger.addHandler(handler)

    # Quiet noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
