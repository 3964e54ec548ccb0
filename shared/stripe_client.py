"""
Stripe API client for payment processing.

This module wraps the small part of the Stripe API the service uses:
customer creation/lookup, PaymentIntent creation and webhook signature
verification. It also maps Stripe's exception hierarchy onto the
client-visible error categories returned by the API.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import stripe

logger = logging.getLogger(__name__)

DEFAULT_THREE_D_SECURE = "automatic"
DEFAULT_PAYMENT_METHOD_TYPES = ("card",)


@dataclass(frozen=True)
class PaymentIntentResult:
    """Fields of a created PaymentIntent that are handed back to the caller."""

    id: str
    client_secret: str
    amount: int
    currency: str
    status: str


class StripeErrorCategory(Enum):
    """Client-visible classification of Stripe failures."""

    CARD = "card"
    INVALID_REQUEST = "invalid_request"
    RATE_LIMIT = "rate_limit"
    API = "api"
    CONNECTION = "connection"
    AUTHENTICATION = "authentication"
    UNKNOWN = "unknown"


# category -> (HTTP status, error title, public message or None to echo Stripe's)
_CATEGORY_RESPONSES: dict[StripeErrorCategory, tuple[int, str, str | None]] = {
    StripeErrorCategory.CARD: (402, "Card error", None),
    StripeErrorCategory.INVALID_REQUEST: (400, "Invalid request to Stripe", None),
    StripeErrorCategory.RATE_LIMIT: (429, "Too many requests to Stripe", "Stripe rate limit reached, retry later"),
    StripeErrorCategory.API: (502, "Stripe API error", "Temporary problem with Stripe"),
    StripeErrorCategory.CONNECTION: (504, "Could not connect to Stripe", "Stripe could not be reached"),
    StripeErrorCategory.AUTHENTICATION: (503, "Stripe authentication error", "Invalid Stripe credentials"),
    StripeErrorCategory.UNKNOWN: (500, "Payment processor error", "Unknown error from Stripe"),
}


class PaymentProcessorError(Exception):
    """A classified Stripe failure ready to be rendered as an HTTP response."""

    def __init__(
        self,
        category: StripeErrorCategory,
        message: str,
        code: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.category = category
        self.status_code, self.error, _ = _CATEGORY_RESPONSES[category]
        self.message = message
        self.code = code
        self.original_error = original_error

    def to_dict(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.error, "message": self.message}
        if self.code:
            content["code"] = self.code
        return content


def classify_stripe_error(error: stripe.StripeError) -> StripeErrorCategory:
    """
    Classify a Stripe error into one of the client-visible categories.

    Args:
        error: Exception raised by the stripe library

    Returns:
        StripeErrorCategory for the error
    """
    if isinstance(error, stripe.CardError):
        return StripeErrorCategory.CARD
    if isinstance(error, stripe.InvalidRequestError):
        return StripeErrorCategory.INVALID_REQUEST
    if isinstance(error, stripe.RateLimitError):
        return StripeErrorCategory.RATE_LIMIT
    if isinstance(error, stripe.APIConnectionError):
        return StripeErrorCategory.CONNECTION
    if isinstance(error, stripe.AuthenticationError):
        return StripeErrorCategory.AUTHENTICATION
    if isinstance(error, stripe.APIError):
        return StripeErrorCategory.API
    return StripeErrorCategory.UNKNOWN


def to_processor_error(error: stripe.StripeError) -> PaymentProcessorError:
    """Build the PaymentProcessorError for a raw Stripe exception."""
    category = classify_stripe_error(error)
    _, _, public_message = _CATEGORY_RESPONSES[category]
    if public_message is None:
        # Card and request errors carry messages meant for the end user
        public_message = getattr(error, "user_message", None) or str(error) or "Stripe rejected the request"
    code = getattr(error, "code", None) if category is StripeErrorCategory.CARD else None
    return PaymentProcessorError(category, public_message, code=code, original_error=error)


class StripeGateway:
    """
    Thin wrapper around ``stripe.StripeClient`` bound to one secret key.

    Calls are one-shot: network retries are disabled so that the caller
    decides whether to try again.
    """

    def __init__(
        self,
        secret_key: str,
        api_version: str,
        client: stripe.StripeClient | None = None,
    ) -> None:
        self._client = client or stripe.StripeClient(
            secret_key,
            stripe_version=api_version,
            max_network_retries=0,
        )
        self.api_version = api_version

    def _call(self, operation: str, func: Any, params: dict[str, Any]) -> Any:
        try:
            return func(params=params)
        except stripe.StripeError as e:
            processor_error = to_processor_error(e)
            logger.error(
                f"Stripe API error during {operation}: "
                f"category={processor_error.category.value}, {str(e)}"
            )
            raise processor_error from e

    def create_customer(self, email: str, name: str) -> str:
        """
        Create a Stripe customer and return its id.

        Raises:
            PaymentProcessorError: If the Stripe API call fails
        """
        customer = self._call(
            "customer creation",
            self._client.customers.create,
            {"email": email, "name": name},
        )
        logger.info("Stripe customer created", extra={"customer_id": customer.id})
        return customer.id

    def find_customer_by_email(self, email: str) -> str | None:
        """
        Return the id of an existing customer with ``email``, if any.

        Raises:
            PaymentProcessorError: If the Stripe API call fails
        """
        customers = self._call(
            "customer lookup",
            self._client.customers.list,
            {"email": email, "limit": 1},
        )
        if not customers.data:
            return None
        return customers.data[0].id

    def create_payment_intent(
        self,
        amount: int,
        currency: str,
        customer_id: str,
        metadata: dict[str, str],
        request_three_d_secure: str = DEFAULT_THREE_D_SECURE,
        payment_method_types: list[str] | None = None,
    ) -> PaymentIntentResult:
        """
        Create a PaymentIntent for an existing customer.

        Args:
            amount: Amount in the smallest currency unit
            currency: Lower-case ISO currency code
            customer_id: Stripe customer id
            metadata: Metadata stored on the PaymentIntent
            request_three_d_secure: 3-D Secure mode for card payments
            payment_method_types: Accepted payment method types (default: card)

        Returns:
            PaymentIntentResult with the client secret

        Raises:
            PaymentProcessorError: If the Stripe API call fails
        """
        params = {
            "amount": amount,
            "currency": currency,
            "customer": customer_id,
            "payment_method_options": {
                "card": {"request_three_d_secure": request_three_d_secure},
            },
            "payment_method_types": list(payment_method_types or DEFAULT_PAYMENT_METHOD_TYPES),
            "metadata": metadata,
        }
        intent = self._call(
            "payment intent creation",
            self._client.payment_intents.create,
            params,
        )
        logger.info(
            f"PaymentIntent created: status={intent.status}",
            extra={"payment_intent_id": intent.id, "customer_id": customer_id},
        )
        return PaymentIntentResult(
            id=intent.id,
            client_secret=intent.client_secret,
            amount=intent.amount,
            currency=intent.currency,
            status=intent.status,
        )

    @staticmethod
    def construct_webhook_event(payload: bytes, signature_header: str, secret: str) -> stripe.Event:
        """
        Verify a webhook signature over the raw body and parse the event.

        Raises:
            stripe.SignatureVerificationError: If the signature does not match
            ValueError: If the payload is not valid JSON
        """
        return stripe.Webhook.construct_event(
            payload=payload,
            sig_header=signature_header,
            secret=secret,
        )
