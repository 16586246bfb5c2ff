# =============================================================================
# lib/logging_config.py - Logging Setup
# =============================================================================
# Configures the root logger from the validated settings:
# - a file sink at <LOG_DIR>/app.log
# - a console sink on stdout (shorter, human-friendly format in development)
#
# Also provides the HTTP access-log middleware used by the FastAPI app.
# =============================================================================

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import IO

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import EnvironmentSettings

# Below DEBUG, for very chatty diagnostics
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEV_CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DEV_DATE_FORMAT = "%H:%M:%S"

LOG_FILE_NAME = "app.log"

LEVELS = {
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE,
}

# Marks handlers installed here so a second call replaces them
_HANDLER_ATTR = "_aethel_handler"


def to_logging_level(level: str) -> int:
    """Map a LOG_LEVEL tag (fatal, error, warn, ...) to a logging level."""
    try:
        return LEVELS[level]
    except KeyError:
        raise ValueError(f"Unknown log level: {level!r}") from None


def configure_logging(
    settings: EnvironmentSettings,
    console_stream: IO[str] | None = None,
) -> logging.Logger:
    """
    Configure the root logger with file and console handlers.

    Creates LOG_DIR if needed. Calling it again replaces the handlers it
    installed earlier instead of adding duplicates; handlers installed by
    others (e.g. pytest's caplog) are left alone.

    Args:
        settings: Validated settings (LOG_LEVEL, LOG_DIR, ENVIRONMENT are used)
        console_stream: Stream for the console handler (default: stdout)

    Returns:
        The configured root logger
    """
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root_logger = logging.getLogger()
    root_logger.setLevel(to_logging_level(settings.LOG_LEVEL))

    for handler in list(root_logger.handlers):
        if getattr(handler, _HANDLER_ATTR, False):
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler = logging.StreamHandler(console_stream or sys.stdout)
    if settings.is_development:
        console_handler.setFormatter(logging.Formatter(DEV_CONSOLE_FORMAT, DEV_DATE_FORMAT))
    else:
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    for handler in (file_handler, console_handler):
        setattr(handler, _HANDLER_ATTR, True)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={settings.LOG_LEVEL}, file={log_file}"
    )
    return root_logger


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per HTTP request: method, path, status and duration."""

    def __init__(self, app, logger_name: str = "app.access"):
        super().__init__(app)
        self.logger = logging.getLogger(logger_name)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.logger.error(
                f"{request.method} {request.url.path} -> 500 ({elapsed_ms:.1f}ms)"
            )
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        self.logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)",
        )
        return response
