"""Pydantic models for the payment-intent endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class PaymentRequest(BaseModel):
    """
    Body of `POST /create-payment-intent` after validation.

    Field rules (positive amount, allowed 3-D Secure modes) are enforced by
    ``api.validation.validate_payment_request``; this model only carries the
    normalised values.
    """

    model_config = ConfigDict(frozen=True)

    amount: int = Field(description="Amount in the smallest currency unit")
    currency: str
    email: str
    name: str | None = None
    request_three_d_secure: str = "automatic"
    payment_method_types: list[str] = Field(default_factory=lambda: ["card"])


class PaymentIntentResponse(BaseModel):
    """Response returned to the client after a PaymentIntent is created."""

    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(alias="clientSecret")
    id: str
    amount: int
    currency: str
    status: str
