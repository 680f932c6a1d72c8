"""
Logging setup for the anti-search MCP server.

stdout belongs to the stdio MCP transport, so every handler writes to stderr.
Set LOG_FORMAT=json for one JSON object per line.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any


class JsonFormatter(logging.Formatter):
    """Render each record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, ensure_ascii=False)


class LoggerConfig:
    PACKAGE = "anti_search"

    _initialized = False

    @classmethod
    def setup_logging(cls) -> None:
        """
        Attach a stderr handler to the package logger once per process.

        LOG_LEVEL and LOG_FORMAT are read here, not at import, so values
        loaded from .env by the config module are honoured.
        """
        if cls._initialized:
            return

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        log_format = os.getenv("LOG_FORMAT", "text").lower()

        package_logger = logging.getLogger(cls.PACKAGE)
        package_logger.setLevel(getattr(logging, log_level, logging.INFO))
        package_logger.propagate = False

        handler = logging.StreamHandler(sys.stderr)
        if log_format == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(
                logging.Formatter(
                    fmt="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
        package_logger.addHandler(handler)

        cls._initialized = True


def setup_logging() -> None:
    """Call once at startup, after configuration has been loaded."""
    LoggerConfig.setup_logging()


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger under the package hierarchy.

    Example:
        >>> from anti_search.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("server started")
    """
    return logging.getLogger(name)
