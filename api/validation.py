"""
Validation of payment-intent requests.

Checks run in a fixed order and stop at the first failure so the client
always gets a single, specific reason:

1. required fields present (amount, currency, email)
2. amount is a positive integer (minor currency units)
3. currency is in the configured allow-list (case-insensitive)
4. email has a local@domain.tld shape
5. optional fields (name, request_three_d_secure, payment_method_types)
"""

import re
from collections.abc import Iterable
from typing import Any

from api.models.payment import PaymentRequest

REQUIRED_FIELDS = ("amount", "currency", "email")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
THREE_D_SECURE_MODES = ("automatic", "any", "challenge")


class PaymentValidationError(Exception):
    """Raised when a payment request fails validation (HTTP 400)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        missing: list[str] | None = None,
        received: list[str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.field = field
        self.missing = missing
        self.received = received

    def to_dict(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.message}
        if self.field is not None:
            content["field"] = self.field
        if self.missing is not None:
            content["missing"] = self.missing
            content["received"] = self.received or []
        return content


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_payment_request(
    payload: dict[str, Any],
    supported_currencies: Iterable[str],
) -> PaymentRequest:
    """
    Validate a raw JSON body and build a PaymentRequest.

    Args:
        payload: Parsed JSON object from the request body
        supported_currencies: Lower-case currency codes accepted

    Returns:
        PaymentRequest with normalised values

    Raises:
        PaymentValidationError: On the first violated rule
    """
    missing = [field for field in REQUIRED_FIELDS if _is_missing(payload.get(field))]
    if missing:
        raise PaymentValidationError(
            f"Missing required fields: {', '.join(missing)}",
            missing=missing,
            received=list(payload.keys()),
        )

    # JSON integers only; bool is an int subclass in Python
    amount = payload["amount"]
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise PaymentValidationError(
            "amount must be a positive integer in the smallest currency unit",
            field="amount",
        )

    currencies = tuple(code.lower() for code in supported_currencies)
    currency = payload["currency"]
    if not isinstance(currency, str) or currency.lower() not in currencies:
        raise PaymentValidationError(
            f"currency must be one of: {', '.join(currencies)}",
            field="currency",
        )

    email = payload["email"]
    if not isinstance(email, str) or not EMAIL_PATTERN.fullmatch(email):
        raise PaymentValidationError("Invalid email", field="email")

    name = payload.get("name")
    if _is_missing(name):
        name = None
    elif not isinstance(name, str):
        raise PaymentValidationError("name must be a string", field="name")

    three_d_secure = payload.get("request_three_d_secure")
    if _is_missing(three_d_secure):
        three_d_secure = "automatic"
    elif three_d_secure not in THREE_D_SECURE_MODES:
        raise PaymentValidationError(
            f"request_three_d_secure must be one of: {', '.join(THREE_D_SECURE_MODES)}",
            field="request_three_d_secure",
        )

    method_types = payload.get("payment_method_types")
    if method_types is None:
        method_types = ["card"]
    elif (
        not isinstance(method_types, list)
        or not method_types
        or not all(isinstance(item, str) and item.strip() for item in method_types)
    ):
        raise PaymentValidationError(
            "payment_method_types must be a non-empty list of strings",
            field="payment_method_types",
        )

    return PaymentRequest(
        amount=amount,
        currency=currency.lower(),
        email=email,
        name=name,
        request_three_d_secure=three_d_secure,
        payment_method_types=method_types,
    )
