"""Integration tests for the origin gate and CORS headers."""

from unittest.mock import patch


class TestOriginGate:
    def test_request_without_origin_is_allowed(self, client):
        response = client.get("/stripe-key")

        assert response.status_code == 200

    def test_allowed_origin_gets_cors_headers(self, client):
        response = client.get("/stripe-key", headers={"Origin": "http://localhost:3000"})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert response.headers["access-control-allow-credentials"] == "true"

    def test_disallowed_origin_is_rejected_before_handlers(self, client, stripe_client_mock):
        response = client.post(
            "/create-payment-intent",
            json={"amount": 1000, "currency": "usd", "email": "a@b.com"},
            headers={"Origin": "https://evil.example"},
        )

        assert response.status_code == 403
        assert "CORS" in response.text
        assert "access-control-allow-origin" not in response.headers
        stripe_client_mock.customers.create.assert_not_called()

    def test_disallowed_origin_never_reaches_webhook(self, client):
        with patch("api.routes.stripe.dispatch_event") as mock_dispatch:
            response = client.post(
                "/webhook",
                content=b"{}",
                headers={"Origin": "https://evil.example", "Stripe-Signature": "t=1,v1=x"},
            )

        assert response.status_code == 403
        mock_dispatch.assert_not_called()

    def test_preflight_for_allowed_origin(self, client):
        response = client.options(
            "/create-payment-intent",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
        allowed_methods = response.headers["access-control-allow-methods"]
        assert "POST" in allowed_methods
        assert "DELETE" not in allowed_methods

    def test_preflight_rejects_unlisted_header(self, client):
        response = client.options(
            "/create-payment-intent",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "X-Custom-Header",
            },
        )

        assert response.status_code == 400

    def test_configured_origins_replace_defaults(self, build_client):
        client = build_client(CORS_ORIGINS="https://shop.example")

        assert client.get("/", headers={"Origin": "https://shop.example"}).status_code == 200
        assert client.get("/", headers={"Origin": "http://localhost:3000"}).status_code == 403
