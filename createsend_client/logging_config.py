"""
Logging for API calls made through the createsend client.

BaseClient attaches the call it is making (method, url, status_code,
duration_ms, ...) to each record as ``extra={"extra_fields": {...}}``.
ApiCallFormatter renders those fields either as one readable line per call
or as a JSON object. The request ID set in context is both forwarded to the
API as X-Request-ID and stamped on every record.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Optional, TextIO
from uuid import uuid4

from .config import settings

PACKAGE_LOGGER_NAME = "createsend_client"

# Fields rendered as the "GET url -> 200 (12.3 ms)" summary of a call
CALL_FIELDS = ("method", "url", "status_code", "duration_ms")

request_id_context: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class ApiCallFormatter(logging.Formatter):
    """
    Formatter for records describing API calls.

    Attributes:
        use_json: Emit one JSON object per record instead of a text line
    """

    def __init__(self, use_json: bool = False) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self.use_json = use_json

    def format(self, record: logging.LogRecord) -> str:
        fields: Dict[str, Any] = dict(getattr(record, "extra_fields", {}))
        request_id = request_id_context.get()

        if self.use_json:
            log_data: Dict[str, Any] = {
                "timestamp": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if request_id:
                log_data["request_id"] = request_id
            log_data.update(fields)
            if record.exc_info:
                log_data["exception"] = self.formatException(record.exc_info)
            return json.dumps(log_data, default=str)

        parts = [self.formatTime(record, self.datefmt), f"{record.levelname:8}", record.name]
        if request_id:
            parts.append(f"[req:{request_id[:8]}]")
        parts.append(record.getMessage())

        call_summary = self._format_call(fields)
        if call_summary:
            parts.append(call_summary)
        parts.extend(f"{key}={value}" for key, value in fields.items())

        line = " ".join(parts)
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line

    @staticmethod
    def _format_call(fields: Dict[str, Any]) -> str:
        """Pop the call fields out of fields and render them as one summary."""
        method = fields.pop("method", None)
        url = fields.pop("url", None)
        status_code = fields.pop("status_code", None)
        duration_ms = fields.pop("duration_ms", None)

        summary = " ".join(str(part) for part in (method, url) if part)
        if status_code is not None:
            summary += f" -> {status_code}"
        if duration_ms is not None:
            summary += f" ({duration_ms:.1f} ms)"
        return summary.strip()


def setup_logging(
    log_level: Optional[str] = None,
    use_json: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Send the client's log records to a stream.

    Only the package logger is configured; the root logger and the
    application's own handlers are left alone.

    Args:
        log_level: Logging level (defaults to settings.LOG_LEVEL)
        use_json: Emit JSON records instead of text lines
        stream: Destination stream (defaults to stdout)

    Returns:
        The package logger
    """
    numeric_level = getattr(logging, (log_level or settings.LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(ApiCallFormatter(use_json=use_json))

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(numeric_level)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger below the package logger."""
    return logging.getLogger(name or PACKAGE_LOGGER_NAME)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Set the request ID sent with subsequent API calls in this context.

    Args:
        request_id: Request ID to set, generates new UUID if None

    Returns:
        The request ID that was set
    """
    if request_id is None:
        request_id = str(uuid4())
    request_id_context.set(request_id)
    return request_id


def get_request_id() -> Optional[str]:
    return request_id_context.get()


def clear_request_id() -> None:
    request_id_context.set(None)
