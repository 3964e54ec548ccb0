"""
Test configuration and fixtures.

This module sets up test environment and provides shared fixtures for all tests.
"""

import hashlib
import hmac
import json
import os
import time
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

# Stripe credentials for tests.
# Must be set BEFORE any imports of api.main or shared.config
WEBHOOK_SECRET = "whsec_test_secret"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_123"
os.environ["STRIPE_PUBLISHABLE_KEY"] = "pk_test_123"
os.environ["STRIPE_WEBHOOK_SECRET"] = WEBHOOK_SECRET
os.environ["ENVIRONMENT"] = "production"

from fastapi.testclient import TestClient  # noqa: E402

from api.main import create_app  # noqa: E402
from shared.config import Settings  # noqa: E402
from shared.stripe_client import StripeGateway  # noqa: E402


def make_settings(**overrides) -> Settings:
    values = {
        "STRIPE_SECRET_KEY": "sk_test_123",
        "STRIPE_PUBLISHABLE_KEY": "pk_test_123",
        "STRIPE_WEBHOOK_SECRET": WEBHOOK_SECRET,
        "ENVIRONMENT": "production",
    }
    values.update(overrides)
    return Settings(**values)


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header the way Stripe does."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.".encode() + payload
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def make_event(event_type: str, data_object: dict | None = None) -> bytes:
    """Serialize a minimal Stripe event envelope."""
    return json.dumps(
        {
            "id": "evt_test_1",
            "object": "event",
            "type": event_type,
            "data": {
                "object": data_object
                or {
                    "id": "pi_test_1",
                    "object": "payment_intent",
                    "amount": 1000,
                    "currency": "usd",
                    "status": "succeeded",
                }
            },
        }
    ).encode()


@pytest.fixture
def stripe_client_mock():
    """Stand-in for stripe.StripeClient returning canned customer/intent objects."""
    client = MagicMock()
    client.customers.create.return_value = SimpleNamespace(id="cus_test_123")
    client.customers.list.return_value = SimpleNamespace(data=[])
    client.payment_intents.create.side_effect = lambda params: SimpleNamespace(
        id="pi_test_123",
        client_secret="pi_test_123_secret_abc",
        amount=params["amount"],
        currency=params["currency"],
        status="requires_payment_method",
    )
    return client


@pytest.fixture
def gateway(stripe_client_mock):
    return StripeGateway(
        secret_key="sk_test_123",
        api_version="2023-10-16",
        client=stripe_client_mock,
    )


@pytest.fixture
def build_client(gateway):
    """Factory for TestClients bound to custom settings."""

    def _build(**setting_overrides) -> TestClient:
        app = create_app(make_settings(**setting_overrides), gateway=gateway)
        return TestClient(app, raise_server_exceptions=False)

    return _build


@pytest.fixture
def client(build_client):
    return build_client()


@pytest.fixture
def post_webhook():
    """POST a (by default correctly signed) event to /webhook."""

    def _post(client: TestClient, body: bytes, signature: str | None = "sign"):
        headers = {"Content-Type": "application/json"}
        if signature == "sign":
            signature = sign_payload(body)
        if signature is not None:
            headers["Stripe-Signature"] = signature
        return client.post("/webhook", content=body, headers=headers)

    return _post


@pytest.fixture
def event_factory():
    return make_event


@pytest.fixture
def signer():
    return sign_payload


@pytest.fixture
def settings_factory():
    return make_settings
