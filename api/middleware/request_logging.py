"""Request logging middleware."""

import logging
from collections.abc import Callable
from time import perf_counter

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from shared.logging_config import redact

logger = logging.getLogger(__name__)

# Headers that never carry credentials and can be logged as-is
LOGGABLE_HEADERS = frozenset(
    {"accept", "content-length", "content-type", "host", "origin", "user-agent"}
)

# Routes whose headers are not logged (signature material)
UNLOGGED_HEADER_PATHS = frozenset({"/webhook"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request line, its redacted headers and the outcome."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        method = request.method
        extra = {"request_path": path, "method": method}

        logger.info(f"{method} {path}", extra=extra)
        if path not in UNLOGGED_HEADER_PATHS:
            logger.debug(
                f"Headers: {redact(dict(request.headers), LOGGABLE_HEADERS)}",
                extra=extra,
            )

        start = perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (perf_counter() - start) * 1000
            logger.error(f"{method} {path} raised after {elapsed_ms:.1f} ms", extra=extra)
            raise

        elapsed_ms = (perf_counter() - start) * 1000
        logger.info(
            f"{method} {path} -> {response.status_code} ({elapsed_ms:.1f} ms)",
            extra=extra,
        )
        return response
