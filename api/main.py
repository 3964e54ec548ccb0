"""
FastAPI API Service Entry Point
"""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from api.middleware.origin_gate import OriginGateMiddleware
from api.middleware.request_logging import RequestLoggingMiddleware
from api.routes import payments, stripe, system
from shared.config import Settings, get_settings
from shared.customer_resolver import build_customer_resolver
from shared.logging_config import configure_logging
from shared.startup_validator import StartupValidationError, validate_startup_config
from shared.stripe_client import StripeGateway

logger = logging.getLogger(__name__)

ALLOWED_METHODS = ["GET", "POST", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization"]


def create_app(
    settings: Settings | None = None,
    gateway: StripeGateway | None = None,
) -> FastAPI:
    """
    Build the API application.

    Request pipeline, outermost first:
    1. OriginGateMiddleware    - reject disallowed browser origins
    2. CORSMiddleware          - preflight answers and CORS response headers
    3. RequestLoggingMiddleware - request line, redacted headers, outcome
    4. Route dependencies      - raw body for /webhook, parsed JSON elsewhere
    5. Exception handlers      - error boundary for everything above

    The webhook signature is computed over the raw body, so nothing before
    step 4 may consume or parse it.

    Args:
        settings: Application settings (defaults to environment)
        gateway: Stripe gateway (defaults to one bound to STRIPE_SECRET_KEY)

    Raises:
        StartupValidationError: If the Stripe configuration is unusable
    """
    settings = settings or get_settings()
    validate_startup_config(settings)

    gateway = gateway or StripeGateway(
        secret_key=settings.STRIPE_SECRET_KEY,
        api_version=settings.STRIPE_API_VERSION,
    )

    app = FastAPI(
        title="Stripe Payment Bridge",
        version="1.0.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.stripe_gateway = gateway
    app.state.customer_resolver = build_customer_resolver(settings.CUSTOMER_STRATEGY, gateway)

    # In FastAPI/Starlette, last added middleware executes first
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
    )
    app.add_middleware(OriginGateMiddleware, allowed_origins=settings.cors_origins)

    register_exception_handlers(app)

    app.include_router(system.router)
    app.include_router(payments.router)
    app.include_router(stripe.router)

    return app


def build_app() -> FastAPI:
    """Create the process-wide app from the environment, exiting on bad config."""
    settings = get_settings()
    configure_logging(settings)
    try:
        app = create_app(settings)
    except StartupValidationError as e:
        logger.critical(f"API startup blocked due to configuration errors: {e}")
        raise SystemExit(1) from e

    logger.info(
        f"Stripe configuration: secret key configured, "
        f"publishable key {'configured' if settings.STRIPE_PUBLISHABLE_KEY else 'MISSING'}, "
        f"webhook secret {'configured' if settings.STRIPE_WEBHOOK_SECRET else 'MISSING'}"
    )
    return app


app = build_app()


def run() -> None:
    """Serve the API with uvicorn on HOST:PORT."""
    settings = app.state.settings
    logger.info(f"Server listening on port {settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
