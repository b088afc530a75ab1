"""Logging utilities for s3viewer."""

from __future__ import annotations

import json
import logging
import sys
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class LogFormat(Enum):
    HUMAN = "human"
    JSON = "json"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "human"
    show_timestamps: bool = True


class HumanFormatter(logging.Formatter):
    """Human-readable log formatter."""

    def __init__(self, config: LoggingConfig) -> None:
        super().__init__()
        self.config = config

    def format(self, record: logging.LogRecord) -> str:
        timestamp = ""
        if self.config.show_timestamps:
            timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            timestamp = f"{timestamp} - "

        return f"[{record.levelname}] {timestamp}{record.getMessage()}"


class JsonFormatter(logging.Formatter):
    """JSON structured log formatter."""

    def __init__(self, config: LoggingConfig) -> None:
        super().__init__()
        self.config = config

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "level": record.levelname,
            "ts": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "event": getattr(record, "event", "log"),
            "message": record.getMessage(),
        }

        for key in ("locator", "path", "bytes", "duration", "status", "exit_status"):
            val = getattr(record, key, None)
            if val is not None:
                data[key] = val

        return json.dumps(data)


def get_logger(name: str, config: LoggingConfig) -> logging.Logger:
    """Create a configured logger.

    Records go to stderr so listings printed on stdout stay pipeable.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.level.upper(), logging.WARNING))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        JsonFormatter(config)
        if config.format == LogFormat.JSON.value
        else HumanFormatter(config)
    )
    logger.addHandler(handler)
    logger.propagate = False

    return logger


class TransferLogger:
    """Logger for object transfer lifecycle events."""

    def __init__(self, locator: str, logger: logging.Logger) -> None:
        self.locator = locator
        self.logger = logger
        self.start_time: float | None = None

    def _elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        return time.monotonic() - self.start_time

    def start(self, path: str) -> None:
        """Log transfer start."""
        self.start_time = time.monotonic()
        extra = {"event": "transfer_start", "locator": self.locator, "path": path}
        self.logger.info(f"Downloading {self.locator} to {path}", extra=extra)

    def complete(self, nbytes: int) -> None:
        """Log transfer completion."""
        duration = self._elapsed()
        extra = {
            "event": "transfer_complete",
            "locator": self.locator,
            "bytes": nbytes,
            "duration": duration,
            "status": "success",
        }
        self.logger.info(
            f"Downloaded {self.locator} ({nbytes} bytes) in {duration:.3f}s",
            extra=extra,
        )

    def fail(self, error: Exception) -> None:
        """Log transfer failure at debug level; the caller reports the error."""
        duration = self._elapsed()
        extra = {
            "event": "transfer_fail",
            "locator": self.locator,
            "duration": duration,
            "status": "failed",
            "exit_status": getattr(error, "exit_status", None),
        }
        self.logger.debug(
            f"Download of {self.locator} failed after {duration:.3f}s: {error}",
            extra=extra,
        )


def get_logging_config(
    level: str | None = None,
    format: str | None = None,
    show_timestamps: bool | None = None,
) -> LoggingConfig:
    """Create LoggingConfig with optional overrides."""
    return LoggingConfig(
        level=level or "WARNING",
        format=format or "human",
        show_timestamps=show_timestamps if show_timestamps is not None else True,
    )
