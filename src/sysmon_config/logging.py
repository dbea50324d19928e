"""Structured logging helpers."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Ordered from least to most verbose.
LOG_LEVELS = ("DISABLED", "ERROR", "WARNING", "INFO", "DEBUG")

# Above CRITICAL so nothing is emitted.
_DISABLED_LEVEL = logging.CRITICAL + 10


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        base: Dict[str, Any] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            base["stack"] = self.formatStack(record.stack_info)
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in {
                "name",
                "levelno",
                "levelname",
                "pathname",
                "filename",
                "module",
                "exc_info",
                "exc_text",
                "stack_info",
                "lineno",
                "funcName",
                "msg",
                "args",
                "created",
                "msecs",
                "relativeCreated",
                "thread",
                "threadName",
                "processName",
                "process",
                "taskName",
                "message",
                "asctime",
            }:
                continue
            base[key] = value
        return json.dumps(base, ensure_ascii=False, default=str)


def is_log_level(name: str) -> bool:
    """Return True when `name` is one of the recognised level names."""

    return name in LOG_LEVELS


def resolve_level(name: str) -> int:
    """Map a sysmon level name onto a stdlib logging level."""

    upper = name.upper()
    if upper == "DISABLED":
        return _DISABLED_LEVEL
    if upper not in LOG_LEVELS:
        raise ValueError(f"log level must be one of {list(LOG_LEVELS)}; got {name}.")
    return logging.getLevelName(upper)


def configure_logging(
    level_name: str,
    log_file: Optional[Path] = None,
    log_format: str = "plain",
) -> None:
    """Configure global logging for the console and the optional log file."""

    level = resolve_level(level_name)
    if log_format == "json":
        formatter: Dict[str, Any] = {"()": f"{__name__}.JsonFormatter"}
    else:
        formatter = {
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            "datefmt": "%Y-%m-%dT%H:%M:%S%z",
        }

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "level": level,
        }
    }
    if log_file is not None:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "default",
            "level": level,
            "filename": str(log_file),
            "encoding": "utf-8",
            "delay": True,
        }
    handler_names = list(handlers)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": formatter,
            },
            "handlers": handlers,
            "loggers": {
                "sysmon": {
                    "level": level,
                    "handlers": handler_names,
                    "propagate": False,
                },
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger for the requested subsystem."""

    return logging.getLogger(name)
