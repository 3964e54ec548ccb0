"""Dependency for webhook signature validation."""

import logging

import stripe
from fastapi import Depends, Request

from api.dependencies import get_app_settings
from api.errors import WebhookSignatureError
from shared.config import Settings
from shared.stripe_client import StripeGateway

logger = logging.getLogger(__name__)


async def validate_stripe_signature(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> stripe.Event:
    """
    Validate Stripe webhook signature and parse event.

    The signature is an HMAC over the exact bytes Stripe sent, so the body
    is read raw here and never JSON-decoded before verification.

    Args:
        request: FastAPI request object
        settings: Application settings (webhook signing secret)

    Returns:
        Verified Stripe event

    Raises:
        WebhookSignatureError: 400 if the event cannot be verified
    """
    body = await request.body()

    signature_header: str | None = request.headers.get("Stripe-Signature")

    if not signature_header:
        logger.warning("Stripe webhook received without signature header")
        raise WebhookSignatureError("Missing Stripe-Signature header")

    if not settings.STRIPE_WEBHOOK_SECRET:
        logger.error("Stripe webhook received but STRIPE_WEBHOOK_SECRET is not configured")
        raise WebhookSignatureError("Webhook secret not configured")

    try:
        event = StripeGateway.construct_webhook_event(
            payload=body,
            signature_header=signature_header,
            secret=settings.STRIPE_WEBHOOK_SECRET,
        )
    except stripe.SignatureVerificationError as e:
        logger.warning(f"Stripe signature verification failed: {e}")
        raise WebhookSignatureError(str(e)) from e
    except ValueError as e:
        logger.warning(f"Stripe webhook payload is not valid JSON: {e}")
        raise WebhookSignatureError(f"Invalid payload: {e}") from e

    logger.info(
        f"Stripe webhook verified: {event.type}",
        extra={"event_type": event.type},
    )
    return event
