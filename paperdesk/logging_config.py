"""
Central logging configuration for paperdesk.

Provides:
- Structured logging (JSON in production, human-readable in development)
- Request and viewer correlation via contextvars (bound by the transport)
- Environment-aware log levels

Usage:
    from paperdesk.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Paper created", extra={"paper_id": paper.id})
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

# Bound by the transport layer for the lifetime of one request
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
viewer_id_var: ContextVar[Optional[str]] = ContextVar("viewer_id", default=None)

_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName", "request_id", "viewer_id",
))


@contextmanager
def bind_request_context(
    request_id: Optional[str] = None,
    viewer_id: Optional[str] = None,
) -> Iterator[None]:
    """Attach correlation ids to every record logged inside the block."""
    request_token = request_id_var.set(request_id)
    viewer_token = viewer_id_var.set(viewer_id)
    try:
        yield
    finally:
        viewer_id_var.reset(viewer_token)
        request_id_var.reset(request_token)


class ContextFilter(logging.Filter):
    """Filter that adds request_id and viewer_id to log records from context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"  # type: ignore[attr-defined]
        record.viewer_id = viewer_id_var.get() or "-"  # type: ignore[attr-defined]
        return True


class JsonFormatter(logging.Formatter):
    """Format log records as JSON for production log aggregators."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for attr in ("request_id", "viewer_id"):
            value = getattr(record, attr, None)
            if value and value != "-":
                log_obj[attr] = value

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Anything passed via extra= in the log call
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or value is None:
                continue
            try:
                json.dumps(value)
                log_obj[key] = value
            except (TypeError, ValueError):
                log_obj[key] = str(value)

        return json.dumps(log_obj)


_JSON_ENVIRONMENTS = frozenset(("production", "staging"))
_QUIET_LOGGERS = ("httpx", "httpcore", "jose")


def _create_dev_formatter() -> logging.Formatter:
    return logging.Formatter(
        "%(asctime)s %(levelname)-5s [%(name)s] req=%(request_id)s viewer=%(viewer_id)s %(message)s",
        datefmt="%H:%M:%S",
    )


def configure_logging(
    *,
    log_level: str = "INFO",
    environment: str = "development",
    debug: bool = False,
) -> None:
    """
    Install the paperdesk handler on the root logger.

    Safe to call more than once: a handler installed by an earlier call is
    replaced, handlers installed by others are left alone.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
        environment: JSON output in production and staging, text otherwise
        debug: Forces DEBUG
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    for existing in [h for h in root.handlers if getattr(h, "_paperdesk", False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler._paperdesk = True  # type: ignore[attr-defined]
    handler.setLevel(level)
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter() if environment in _JSON_ENVIRONMENTS else _create_dev_formatter())
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Use extra={} for additional structured fields:
        logger.info("Token issued", extra={"user_id": user_id, "kind": "access"})
    """
    return logging.getLogger(name)
