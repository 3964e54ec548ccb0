"""PaymentIntent creation route handler."""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import (
    get_app_settings,
    get_customer_resolver,
    get_stripe_gateway,
    json_body,
)
from api.models.payment import PaymentIntentResponse, PaymentRequest
from api.validation import validate_payment_request
from shared.config import Settings
from shared.customer_resolver import CustomerResolver
from shared.logging_config import redact
from shared.stripe_client import PaymentIntentResult, StripeGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])

DEFAULT_CUSTOMER_NAME = "Customer not provided"
DEFAULT_METADATA_NAME = "Not provided"


def create_payment_intent_for(
    payment: PaymentRequest,
    resolver: CustomerResolver,
    gateway: StripeGateway,
) -> PaymentIntentResult:
    """
    Resolve the customer, then create the PaymentIntent under it.

    The two Stripe calls are sequential: the customer id is a parameter of
    the PaymentIntent.

    Raises:
        PaymentProcessorError: If either Stripe call fails
    """
    customer_id = resolver.resolve(
        email=payment.email,
        name=payment.name or DEFAULT_CUSTOMER_NAME,
    )
    return gateway.create_payment_intent(
        amount=payment.amount,
        currency=payment.currency,
        customer_id=customer_id,
        request_three_d_secure=payment.request_three_d_secure,
        payment_method_types=payment.payment_method_types,
        metadata={
            "customer_email": payment.email,
            "customer_name": payment.name or DEFAULT_METADATA_NAME,
        },
    )


@router.post("/create-payment-intent")
def create_payment_intent(
    payload: dict[str, Any] = Depends(json_body),
    settings: Settings = Depends(get_app_settings),
    gateway: StripeGateway = Depends(get_stripe_gateway),
    resolver: CustomerResolver = Depends(get_customer_resolver),
) -> JSONResponse:
    """
    Create a Stripe customer and PaymentIntent for a purchase.

    Runs in FastAPI's threadpool because the Stripe client is blocking.

    Returns:
        200 with clientSecret, id, amount, currency and status

    Raises:
        PaymentValidationError: 400 naming the invalid field(s)
        PaymentProcessorError: Classified Stripe failure
    """
    logger.info(f"Creating PaymentIntent: {redact(payload, settings.log_body_fields)}")

    payment = validate_payment_request(payload, settings.supported_currencies)
    result = create_payment_intent_for(payment, resolver, gateway)

    response = PaymentIntentResponse(
        client_secret=result.client_secret,
        id=result.id,
        amount=result.amount,
        currency=result.currency,
        status=result.status,
    )
    logger.info(
        f"PaymentIntent ready: status={result.status}",
        extra={"payment_intent_id": result.id},
    )
    return JSONResponse(content=response.model_dump(by_alias=True))
