"""Unit tests for request-body parsing dependencies."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from api.dependencies import json_body
from api.errors import RequestBodyError


def _request(body: bytes, headers: dict[str, str]) -> MagicMock:
    request = MagicMock()
    request.headers = headers
    request.body = AsyncMock(return_value=body)
    return request


class TestJsonBody:
    def test_declared_length_over_limit_rejected_before_reading(self, settings_factory):
        request = _request(b"{}", {"content-length": "100"})

        with pytest.raises(RequestBodyError) as exc_info:
            asyncio.run(json_body(request, settings_factory(MAX_BODY_BYTES=10)))

        assert exc_info.value.status_code == 413
        request.body.assert_not_awaited()

    def test_actual_length_still_checked_without_header(self, settings_factory):
        request = _request(b'{"name": "' + b"x" * 50 + b'"}', {})

        with pytest.raises(RequestBodyError) as exc_info:
            asyncio.run(json_body(request, settings_factory(MAX_BODY_BYTES=10)))

        assert exc_info.value.status_code == 413
        request.body.assert_awaited_once()

    @pytest.mark.parametrize("declared", ["2", "not-a-number"])
    def test_body_parsed_when_declared_length_within_limit(self, settings_factory, declared):
        request = _request(b"{}", {"content-length": declared})

        assert asyncio.run(json_body(request, settings_factory(MAX_BODY_BYTES=10))) == {}
