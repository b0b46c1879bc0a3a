# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Structured logging for Blockflow.

Engine components log state transitions as events with extra fields; the
JSON format keeps those fields machine readable, the text format appends them
as key=value pairs.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TYPE_CHECKING
from pathlib import Path

if TYPE_CHECKING:
    from blockflow.core.config import Config


# Attributes every LogRecord carries; anything else came in through `extra`
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


def event_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields attached to a record through `extra`."""
    return {
        key: value for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record, event fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **event_fields(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable line with event fields as key=value."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = event_fields(record)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


FORMATTERS = {
    "json": JSONFormatter,
    "text": TextFormatter,
}


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Get a logger writing to stdout and, optionally, a file.

    Calling again for the same name replaces its handlers.

    Args:
        name: Logger name
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" or "text"
        log_file: Optional log file path

    Returns:
        Configured logger instance
    """
    formatter = FORMATTERS.get(log_format, TextFormatter)()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logger = logging.getLogger(name)
    logger.setLevel(log_level.upper())
    logger.handlers = []
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    level: str = "INFO",
    **fields: Any
) -> None:
    """Log `event` at `level` with `fields` attached as structured data."""
    logger.log(logging.getLevelName(level.upper()), event, extra=fields)


def get_engine_logger(component: str, config: Optional["Config"] = None) -> logging.Logger:
    """
    Logger for an engine component (orchestrator, executor, state).

    Uses the given config, or the global one when none is passed.
    """
    if config is None:
        from blockflow.core.config import get_config
        config = get_config()
    return get_logger(
        f"blockflow.{component}",
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_path
    )
