"""
Service status and client configuration endpoints.

Provides:
- GET /            - Service banner with the list of public endpoints
- GET /health      - Health probe reporting which Stripe secrets are configured
- GET /stripe-key  - Publishable key for the client payment sheet
"""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_app_settings
from shared.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])

PUBLIC_ENDPOINTS = ["/stripe-key", "/create-payment-intent", "/webhook"]


def _configured(value: str) -> str:
    return "configured" if value else "missing"


@router.get("/")
async def root() -> dict:
    """Root endpoint"""
    return {
        "message": "Stripe payment server running",
        "timestamp": datetime.now(UTC).isoformat(),
        "endpoints": PUBLIC_ENDPOINTS,
    }


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)) -> dict:
    """
    Health check endpoint for container probes and monitoring.

    Reports whether each Stripe secret is set without exposing any value.
    """
    return {
        "status": "healthy",
        "stripe": {
            "secret_key": _configured(settings.STRIPE_SECRET_KEY),
            "publishable_key": _configured(settings.STRIPE_PUBLISHABLE_KEY),
            "webhook_secret": _configured(settings.STRIPE_WEBHOOK_SECRET),
        },
    }


@router.get("/stripe-key")
async def get_stripe_key(settings: Settings = Depends(get_app_settings)) -> JSONResponse:
    """
    Return the Stripe publishable key.

    Returns:
        200 with {"publishableKey": ...}
        500 if the key is not configured (never an empty key)
    """
    if not settings.STRIPE_PUBLISHABLE_KEY:
        logger.error("Stripe publishable key not configured")
        return JSONResponse(
            status_code=500,
            content={"error": "Stripe publishable key not configured"},
        )

    logger.info("Sending Stripe publishable key")
    return JSONResponse(content={"publishableKey": settings.STRIPE_PUBLISHABLE_KEY})
