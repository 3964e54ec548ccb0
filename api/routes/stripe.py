"""Stripe webhook route handler."""

import logging
from collections.abc import Callable

import stripe
from fastapi import APIRouter, Depends, Response

from api.middleware.signature_validation import validate_stripe_signature
from api.models.stripe_webhook import PaymentIntentEventData

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


def handle_payment_succeeded(data: PaymentIntentEventData) -> None:
    logger.info(
        f"Payment succeeded: amount={data.amount} currency={data.currency}",
        extra={"payment_intent_id": data.id, "event_type": "payment_intent.succeeded"},
    )


def handle_payment_failed(data: PaymentIntentEventData) -> None:
    logger.error(
        f"Payment failed: {data.failure_message or 'no reason given'}",
        extra={"payment_intent_id": data.id, "event_type": "payment_intent.payment_failed"},
    )


def handle_payment_intent_created(data: PaymentIntentEventData) -> None:
    logger.info(
        "PaymentIntent created",
        extra={"payment_intent_id": data.id, "event_type": "payment_intent.created"},
    )


def handle_payment_intent_canceled(data: PaymentIntentEventData) -> None:
    logger.warning(
        f"PaymentIntent canceled: reason={data.cancellation_reason}",
        extra={"payment_intent_id": data.id, "event_type": "payment_intent.canceled"},
    )


# Stripe event types with specific handling; the rest are acknowledged only
EVENT_HANDLERS: dict[str, Callable[[PaymentIntentEventData], None]] = {
    "payment_intent.succeeded": handle_payment_succeeded,
    "payment_intent.payment_failed": handle_payment_failed,
    "payment_intent.created": handle_payment_intent_created,
    "payment_intent.canceled": handle_payment_intent_canceled,
}


def dispatch_event(event: stripe.Event) -> bool:
    """
    Run the handler registered for the event type.

    Handler failures are logged and do not change the acknowledgment:
    Stripe only needs to know the webhook was received.

    Returns:
        True if the event type has a handler, False otherwise
    """
    event_type = event.type
    handler = EVENT_HANDLERS.get(event_type)
    if handler is None:
        logger.info(f"Unhandled Stripe event type: {event_type}", extra={"event_type": event_type})
        return False

    try:
        data = PaymentIntentEventData.model_validate(event.data.object.to_dict())
        handler(data)
    except Exception:
        logger.exception(
            f"Error handling Stripe event {event.id}",
            extra={"event_type": event_type},
        )
    return True


@router.post("/webhook")
async def receive_stripe_webhook(
    event: stripe.Event = Depends(validate_stripe_signature),
) -> Response:
    """
    Receive and acknowledge Stripe webhook events.

    Signature verification happens in the dependency; an unverifiable
    request never reaches this body.

    Returns:
        Empty 200 once the event is verified, whatever its type
    """
    dispatch_event(event)
    return Response(status_code=200)
