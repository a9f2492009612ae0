"""Console logging with stable ``extra`` fields.

Request and store events attach ``event``/``method``/``path``/``status_code``/
``duration_ms`` through ``extra=``; records without them print ``-``.
"""
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request


class SafeExtraFormatter(logging.Formatter):
    """Formatter that fills missing extra fields with '-'."""

    _EXTRA_FIELDS = ("event", "method", "path", "status_code", "duration_ms", "details")

    def format(self, record: logging.LogRecord) -> str:
        for field in self._EXTRA_FIELDS:
            if not hasattr(record, field):
                setattr(record, field, "-")
        return super().format(record)


LOG_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    " | event=%(event)s | method=%(method)s | path=%(path)s"
    " | status=%(status_code)s | duration_ms=%(duration_ms)s | details=%(details)s"
)

_CONFIGURED = False


def setup_logging(level: str = "INFO") -> None:
    global _CONFIGURED
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    if _CONFIGURED:
        return

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(SafeExtraFormatter(LOG_FORMAT))
    root_logger.addHandler(stream_handler)

    _CONFIGURED = True


def add_request_logging(app: FastAPI) -> None:
    logger = logging.getLogger("notestack.http")

    @app.middleware("http")
    async def http_logging_middleware(request: Request, call_next):
        started = time.perf_counter()
        logger.debug(
            "HTTP request started",
            extra={"event": "http.request.start", "method": request.method, "path": request.url.path},
        )
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            "HTTP request completed",
            extra={
                "event": "http.request.end",
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )
        return response
