"""
Logging setup for the gallery API.

Every record carries the id of the HTTP request it was emitted under
(`-` outside a request), so the lines of one upload or one delete can be
grepped together:

    12:00:01 | INFO     | 3f9c2a1b | services.galleries | Uploaded a.jpg to gallery ...
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(request_id)s | %(name)s | %(message)s"

# Chatty third-party loggers kept at WARNING
QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "uvicorn.access")

_request_id: ContextVar[str] = ContextVar("request_id", default="-")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def bind_request_id(request_id: str):
    """Tag records emitted in the current context; returns a token for reset_request_id."""
    return _request_id.set(request_id)


def reset_request_id(token) -> None:
    _request_id.reset(token)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()
        return True


class ColoredFormatter(logging.Formatter):
    """Level names colored for a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        # Color a copy so other handlers see the plain level name
        record = logging.makeLogRecord(record.__dict__)
        color = self.COLORS.get(record.levelname, '')
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logging(level: str = "INFO", format_string: Optional[str] = None) -> None:
    """
    Install a single stdout handler on the root logger.

    Colors are used only when stdout is a terminal.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())

    formatter_class = ColoredFormatter if sys.stdout.isatty() else logging.Formatter
    handler.setFormatter(formatter_class(format_string or LOG_FORMAT, datefmt="%H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = [handler]

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


# === HTTP helpers ===

def log_request(logger: logging.Logger, method: str, path: str):
    logger.info(f"→ {method} {path}")


def log_response(logger: logging.Logger, method: str, path: str, status: int, duration_ms: float):
    """Client errors at INFO, server errors at WARNING (the handler logs the cause)."""
    level = logging.WARNING if status >= 500 else logging.INFO
    logger.log(level, f"← {status} {method} {path} ({duration_ms:.1f}ms)")


def log_error(logger: logging.Logger, error: Exception, context: str = None):
    """Log an unexpected exception with its traceback."""
    msg = f"{type(error).__name__}: {error}"
    if context:
        msg = f"[{context}] {msg}"
    logger.error(msg, exc_info=True)
