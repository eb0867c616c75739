"""Logging setup shared by the admin and skeleton services."""

from __future__ import annotations

import logging
import sys
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "wallpaper_admin.console"


def configure_logging(level: str = "info") -> None:
    """Attach a console handler to the root logger once."""

    log_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            handler.setLevel(log_level)
            return

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_HANDLER_NAME)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    console_handler.setLevel(log_level)
    root_logger.addHandler(console_handler)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one access line per request: method, path, status, size and latency."""

    def __init__(self, app, logger: logging.Logger) -> None:
        super().__init__(app)
        self.logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        length = response.headers.get("content-length", "-")
        self.logger.info(
            "%s %s %s %s - %.3f ms",
            request.method,
            request.url.path,
            response.status_code,
            length,
            elapsed_ms,
        )
        return response
