"""
Structured request logging

One log line per request on the ``minerva.access`` logger, carrying a request
id and timing. Requests served by a core controller also record how they were
bridged: the controller, action, owning library and the bridge model class
the dispatch interceptor chose. That is the only place a library takeover of
a core action is visible from the outside.
"""

import json
import logging
import time
import uuid
from collections.abc import Callable
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# Attributes copied from log records into the JSON document when present
EXTRA_FIELDS = ("method", "path", "status_code", "duration_ms", "controller", "action", "library", "model")

QUIET_PATHS = frozenset({"/health"})


class RequestIdFilter(logging.Filter):
    """Stamp every record with the id of the request being served."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get("")
        return True


class StructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        document: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", ""),
        }
        document.update({key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)})
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)
        return json.dumps(document, default=str)


def bridge_fields(request: Request) -> dict[str, Any]:
    """Bridging outcome left on request.state by the controller dependency."""
    context = getattr(request.state, "bridge", None)
    if context is None:
        return {}
    return {
        "controller": context.controller,
        "action": context.action,
        "library": context.library,
        "model": type(context.model).__name__ if context.model is not None else None,
    }


def level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Assign a request id, time the request, then log the outcome."""

    def __init__(self, app: ASGIApp, logger_name: str = "minerva.access"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_id_var.set(request_id)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            self._log(request, 500, started, error=str(exc))
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        self._log(request, response.status_code, started)
        return response

    def _log(self, request: Request, status_code: int, started: float, error: str | None = None) -> None:
        if request.url.path in QUIET_PATHS:
            return

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        extra = {
            "method": request.method,
            "path": request.url.path,
            "status_code": status_code,
            "duration_ms": duration_ms,
            **bridge_fields(request),
        }
        message = f"{request.method} {request.url.path} - {status_code} ({duration_ms:.2f}ms)"
        if error:
            message += f" - Error: {error}"
        self.logger.log(level_for(status_code), message, extra=extra)


def setup_structured_logging(
    log_level: str = "INFO",
    json_format: bool = True,
    log_file: str | None = None,
) -> None:
    """
    Configure the root handler and the application's loggers.

    Args:
        log_level: Level for the ``minerva`` loggers (DEBUG, INFO, ...)
        json_format: One JSON document per line instead of plain text
        log_file: Write to this file instead of stderr
    """
    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"))
    handler.addFilter(RequestIdFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level.upper())

    logging.getLogger("minerva").setLevel(log_level.upper())
    # Library noise stays at WARNING regardless of the application level
    for name in ("uvicorn", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_request_id() -> str:
    """Id of the request currently being served, or an empty string."""
    return request_id_var.get("")
