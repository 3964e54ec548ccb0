"""Origin allow-list enforcement."""

import logging
from collections.abc import Callable, Iterable

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class OriginGateMiddleware(BaseHTTPMiddleware):
    """
    Reject browser requests coming from origins outside the allow-list.

    Requests without an Origin header (curl, Stripe, server-to-server) pass
    through untouched. A disallowed origin gets a bare 403 without CORS
    headers, before any route handler runs.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Iterable[str]) -> None:
        super().__init__(app)
        self.allowed_origins = frozenset(allowed_origins)
        self.allow_all = "*" in self.allowed_origins

    def is_allowed(self, origin: str | None) -> bool:
        if origin is None or self.allow_all:
            return True
        return origin in self.allowed_origins

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        origin = request.headers.get("origin")
        if self.is_allowed(origin):
            return await call_next(request)

        logger.warning(
            f"Blocked request from origin not allowed by CORS: {origin}",
            extra={"request_path": request.url.path, "method": request.method},
        )
        return PlainTextResponse(
            f"CORS error: origin {origin} is not allowed",
            status_code=403,
        )
