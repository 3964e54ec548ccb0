"""Error boundary: exception types and the handlers that render them."""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.validation import PaymentValidationError
from shared.stripe_client import PaymentProcessorError, StripeErrorCategory

logger = logging.getLogger(__name__)


class RequestBodyError(Exception):
    """Raised when a request body cannot be accepted (malformed or too large)."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class WebhookSignatureError(Exception):
    """Raised when a webhook cannot be verified; the event is never processed."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


def _timestamp() -> str:
    return datetime.now(UTC).isoformat()


def _is_development(request: Request) -> bool:
    return request.app.state.settings.is_development


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every exception handler of the service to ``app``."""

    @app.exception_handler(PaymentValidationError)
    async def payment_validation_handler(request: Request, exc: PaymentValidationError) -> JSONResponse:
        """Return 400 naming the offending field(s)."""
        logger.warning(
            f"Payment request rejected: {exc.message}",
            extra={"request_path": request.url.path, "method": request.method},
        )
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(RequestBodyError)
    async def request_body_handler(request: Request, exc: RequestBodyError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(PaymentProcessorError)
    async def payment_processor_handler(request: Request, exc: PaymentProcessorError) -> JSONResponse:
        """Map a classified Stripe failure to its status code and message."""
        content = exc.to_dict()
        if exc.category is StripeErrorCategory.UNKNOWN:
            content["timestamp"] = _timestamp()
            if _is_development(request) and exc.original_error is not None:
                content["detail"] = str(exc.original_error)
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(WebhookSignatureError)
    async def webhook_signature_handler(request: Request, exc: WebhookSignatureError) -> PlainTextResponse:
        return PlainTextResponse(f"Webhook Error: {exc.reason}", status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Unknown routes and unsupported methods both answer 404."""
        if exc.status_code in (404, 405):
            logger.info(
                f"Route not found: {request.method} {request.url.path}",
                extra={"request_path": request.url.path, "method": request.method},
            )
            return JSONResponse(
                status_code=404,
                content={
                    "error": "Route not found",
                    "path": request.url.path,
                    "method": request.method,
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Generic 500; details only leave the process in development."""
        logger.error(
            f"Unhandled error on {request.method} {request.url.path}: {exc}",
            exc_info=exc,
            extra={"request_path": request.url.path, "method": request.method},
        )
        content = {"error": "Internal server error", "timestamp": _timestamp()}
        if _is_development(request):
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)
