"""
Structured JSON logging for LogSentinel.

Each log line is a single JSON object so SIEM tools (Splunk, ELK, etc.)
can ingest and correlate the analyzer's own activity. Output goes to
stderr; stdout is reserved for analysis reports.
"""

import json
import sys
from datetime import datetime, timezone

from . import config

# None means sys.stderr, resolved per write.
LOG_STREAM = None

LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


def _timestamp_iso() -> str:
    """Current UTC time in ISO format for log entries."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def _enabled(level: str) -> bool:
    return LEVELS.get(level, 0) >= LEVELS.get(config.LOG_LEVEL, LEVELS["INFO"])


def log_event(level: str, message: str, **kwargs) -> None:
    """
    Write a single log event as one line of JSON.

    Args:
        level: DEBUG, INFO, WARN or ERROR.
        message: Human-readable description.
        **kwargs: Additional key-value pairs (e.g. ip, path, error).
    """
    if not _enabled(level):
        return
    event = {
        "timestamp": _timestamp_iso(),
        "level": level,
        "message": message,
        **kwargs,
    }
    line = json.dumps(event, default=str) + "\n"
    stream = LOG_STREAM or sys.stderr
    stream.write(line)
    stream.flush()


def log_debug(message: str, **kwargs) -> None:
    log_event("DEBUG", message, **kwargs)


def log_info(message: str, **kwargs) -> None:
    """Convenience: log at INFO level."""
    log_event("INFO", message, **kwargs)


def log_warn(message: str, **kwargs) -> None:
    """Convenience: log at WARN level."""
    log_event("WARN", message, **kwargs)


def log_error(message: str, **kwargs) -> None:
    """Convenience: log at ERROR level."""
    log_event("ERROR", message, **kwargs)
