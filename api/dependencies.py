"""
FastAPI dependencies.

Settings, the Stripe gateway and the customer resolver are built once by
``create_app`` and stored on ``app.state``; handlers receive them through
these dependencies instead of importing module-level singletons.
"""

import json
from typing import Any

from fastapi import Depends, Request

from api.errors import RequestBodyError
from shared.config import Settings
from shared.customer_resolver import CustomerResolver
from shared.stripe_client import StripeGateway


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_stripe_gateway(request: Request) -> StripeGateway:
    return request.app.state.stripe_gateway


def get_customer_resolver(request: Request) -> CustomerResolver:
    return request.app.state.customer_resolver


async def json_body(
    request: Request,
    settings: Settings = Depends(get_app_settings),
) -> dict[str, Any]:
    """
    Parse the request body as a JSON object.

    An empty body is treated as ``{}`` so that validation can report the
    missing fields.

    Raises:
        RequestBodyError: 413 if the body is too large, 400 if it is not a JSON object
    """
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > settings.MAX_BODY_BYTES:
        raise RequestBodyError("Request body too large", status_code=413)

    body = await request.body()
    if len(body) > settings.MAX_BODY_BYTES:
        raise RequestBodyError("Request body too large", status_code=413)
    if not body.strip():
        return {}
    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise RequestBodyError("Request body must be valid JSON") from exc
    if not isinstance(payload, dict):
        raise RequestBodyError("Request body must be a JSON object")
    return payload
