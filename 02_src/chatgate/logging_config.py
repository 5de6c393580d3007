"""JSON logging for the gateway process."""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Libraries that log every polling round-trip at INFO
NOISY_LOGGERS = ("httpx", "telegram.ext", "apscheduler")


class JSONFormatter(logging.Formatter):
    """One JSON object per line; Cyrillic text is kept readable."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # extra={"context": {...}} on a log call
        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        return json.dumps(entry, ensure_ascii=False, default=str)


def build_logging_config(log_level: str, log_file: str) -> dict:
    """dictConfig payload writing JSON to stdout and a rotating file."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "chatgate.logging_config.JSONFormatter"},
        },
        "handlers": {
            "file": {
                "class": "logging.handlers.RotatingFileHandler",
                "filename": log_file,
                "maxBytes": LOG_FILE_MAX_BYTES,
                "backupCount": LOG_FILE_BACKUPS,
                "formatter": "json",
                "encoding": "utf-8",
            },
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {name: {"level": "WARNING"} for name in NOISY_LOGGERS},
        "root": {
            "level": log_level.upper(),
            "handlers": ["file", "console"],
        },
    }


def setup_logging(log_level: str | None = None, log_file: str | None = None) -> None:
    """
    Configure root logging.

    Args:
        log_level: Defaults to the LOG_LEVEL env var, then INFO.
        log_file: Defaults to the LOG_FILE env var, then 04_logs/app.log.
    """
    log_level = log_level or os.getenv("LOG_LEVEL", "INFO")
    log_file = log_file or os.getenv("LOG_FILE") or str(DEFAULT_LOG_PATH)
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(build_logging_config(log_level, log_file))


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
