"""Pydantic models for Stripe webhook payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class PaymentIntentEventData(BaseModel):
    """The `data.object` of a `payment_intent.*` webhook event."""

    model_config = ConfigDict(extra="ignore")

    id: str
    amount: int | None = None
    currency: str | None = None
    status: str | None = None
    last_payment_error: dict[str, Any] | None = None
    cancellation_reason: str | None = None

    @property
    def failure_message(self) -> str | None:
        """Human-readable reason of the last failed payment attempt."""
        if not self.last_payment_error:
            return None
        return self.last_payment_error.get("message")
