# middlewares/request_logging_middleware.py
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger("RequestLoggingMiddleware")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000
        client = request.client.host if request.client else "-"
        logger.info(
            "%s %s %s -> %s (%.1fms)",
            client, request.method, request.url.path, response.status_code, duration_ms
        )
        return response
