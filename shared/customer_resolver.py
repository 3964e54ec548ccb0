"""
Customer resolution strategies.

The payment-intent endpoint needs a Stripe customer id before it can create
a PaymentIntent. How that id is obtained is a strategy so deployments can
switch from "always create" to "reuse by email" without touching the route.
"""

import logging
from abc import ABC, abstractmethod

from shared.stripe_client import StripeGateway

logger = logging.getLogger(__name__)


class CustomerResolver(ABC):
    """Return a Stripe customer id for a payer."""

    def __init__(self, gateway: StripeGateway) -> None:
        self.gateway = gateway

    @abstractmethod
    def resolve(self, email: str, name: str) -> str:
        """Return the customer id to attach the PaymentIntent to."""


class CreateCustomerResolver(CustomerResolver):
    """Create a new customer on every request."""

    def resolve(self, email: str, name: str) -> str:
        return self.gateway.create_customer(email=email, name=name)


class LookupOrCreateCustomerResolver(CustomerResolver):
    """Reuse the first customer registered with the same email, else create one."""

    def resolve(self, email: str, name: str) -> str:
        existing = self.gateway.find_customer_by_email(email)
        if existing:
            logger.info("Reusing existing Stripe customer", extra={"customer_id": existing})
            return existing
        return self.gateway.create_customer(email=email, name=name)


CUSTOMER_RESOLVERS: dict[str, type[CustomerResolver]] = {
    "create": CreateCustomerResolver,
    "lookup_or_create": LookupOrCreateCustomerResolver,
}


def build_customer_resolver(strategy: str, gateway: StripeGateway) -> CustomerResolver:
    """
    Instantiate the resolver configured by CUSTOMER_STRATEGY.

    Raises:
        ValueError: If the strategy name is unknown
    """
    try:
        resolver_class = CUSTOMER_RESOLVERS[strategy.lower()]
    except KeyError as exc:
        raise ValueError(
            f"Unknown customer strategy '{strategy}'. "
            f"Available: {', '.join(sorted(CUSTOMER_RESOLVERS))}"
        ) from exc
    return resolver_class(gateway)
