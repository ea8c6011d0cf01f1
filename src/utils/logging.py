"""Structured JSON logging configuration."""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    # Standard LogRecord attributes that should not be included as extra fields
    _STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname',
        'process', 'processName', 'relativeCreated', 'thread', 'threadName',
        'exc_info', 'exc_text', 'stack_info', 'taskName'
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # logger.info("message", extra={"userId": "123"}) puts userId on the record itself
        for key, value in record.__dict__.items():
            if key not in self._STANDARD_ATTRS and not callable(value):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_structured_logging(level: str | None = None) -> None:
    """Route root and uvicorn loggers through a single JSON handler.

    Level comes from the argument, then LOG_LEVEL, then INFO.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel((level or os.getenv("LOG_LEVEL") or "INFO").upper())
    root_logger.handlers = [handler]

    # Only warnings/errors from uvicorn's access log
    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = [handler]
    uvicorn_access.setLevel(logging.WARNING)
