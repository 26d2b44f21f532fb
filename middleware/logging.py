"""
Request logging middleware.

Assigns each request an id (or reuses the caller's X-Request-ID), binds it
to every log record emitted while the request runs and echoes it back in
the response headers.
"""

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import (
    bind_request_id,
    get_logger,
    log_request,
    log_response,
    new_request_id,
    reset_request_id,
)

logger = get_logger("http")

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        token = bind_request_id(request_id)
        started = time.perf_counter()
        try:
            log_request(logger, request.method, request.url.path)
            response = await call_next(request)
            log_response(
                logger,
                request.method,
                request.url.path,
                response.status_code,
                (time.perf_counter() - started) * 1000,
            )
        finally:
            reset_request_id(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
