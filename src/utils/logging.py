"""Structured JSON logging configuration."""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Any

DEFAULT_LOG_LEVEL = "INFO"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Fields passed through ``extra={...}`` (camelCase by convention, e.g.
    ``userId``, ``appointmentId``) are emitted at the top level.
    """

    # LogRecord attributes that are not caller-supplied extras
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

        for key, value in record.__dict__.items():
            if key not in self._STANDARD_ATTRS and not callable(value):
                log_data[key] = value

        # default=str keeps datetimes and enums in extras from breaking the line
        return json.dumps(log_data, default=str)


def _resolve_level(value: str | None) -> int:
    level = logging.getLevelName((value or DEFAULT_LOG_LEVEL).upper())
    return level if isinstance(level, int) else logging.INFO


def setup_structured_logging(level: str | None = None) -> None:
    """Route the root logger and uvicorn's loggers through JSONFormatter.

    Args:
        level: Log level name; defaults to the LOG_LEVEL env var, then INFO.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root_logger = logging.getLogger()
    root_logger.setLevel(_resolve_level(level or os.getenv("LOG_LEVEL")))
    root_logger.handlers = [handler]

    # Access logs only for warnings and errors
    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = [handler]
    uvicorn_access.setLevel(logging.WARNING)

    uvicorn_error = logging.getLogger("uvicorn.error")
    uvicorn_error.handlers = [handler]
    uvicorn_error.propagate = False
