"""Tests for mapping core errors to HTTP responses"""
import json

import pytest

from errors import (
    AuthExpiredError,
    ErrorKind,
    MediaTooLargeError,
    RateLimitedError,
    RefreshFailedError,
    StateMismatchError,
    TokenExchangeError,
    ValidationError,
)
from server.exception_handlers import STATUS_BY_KIND, publisher_error_handler, status_for


class FakeURL:
    path = "/api/x/post"


class FakeRequest:
    method = "POST"
    url = FakeURL()


async def handle(error):
    response = await publisher_error_handler(FakeRequest(), error)
    return response, json.loads(response.body)


@pytest.mark.unit
class TestStatusFor:
    """Test suite for status_for"""

    def test_every_kind_has_a_status(self):
        assert set(STATUS_BY_KIND) == set(ErrorKind)

    def test_media_too_large_is_413(self):
        assert status_for(MediaTooLargeError()) == 413
        assert status_for(ValidationError()) == 400

    def test_auth_expired_is_401(self):
        assert status_for(AuthExpiredError()) == 401


@pytest.mark.unit
class TestPublisherErrorHandler:
    """Test suite for publisher_error_handler"""

    @pytest.mark.asyncio
    async def test_body_carries_kind_and_code(self):
        response, body = await handle(ValidationError("Text is required", code="empty_text"))

        assert response.status_code == 400
        assert body == {
            "kind": "validation",
            "message": "Text is required",
            "code": "empty_text",
            "error": "Bad Request",
        }

    @pytest.mark.asyncio
    async def test_rate_limit_sets_retry_after(self):
        response, body = await handle(RateLimitedError(retry_after=42))

        assert response.status_code == 429
        assert response.headers["retry-after"] == "42"
        assert body["retry_after"] == 42

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        StateMismatchError(code="state_mismatch"),
        TokenExchangeError("invalid_grant: bad code", code="invalid_grant"),
    ])
    async def test_login_failures_are_generic(self, error):
        response, body = await handle(error)

        assert response.status_code == 401
        assert body["message"] == "Authentication failed"
        assert "code" not in body

    @pytest.mark.asyncio
    async def test_state_and_code_failures_are_indistinguishable(self):
        state_response, state_body = await handle(StateMismatchError(code="state_mismatch"))
        code_response, code_body = await handle(TokenExchangeError("bad code", code="400"))

        assert state_response.status_code == code_response.status_code == 401
        assert state_body == code_body == {
            "kind": "authentication_failed",
            "message": "Authentication failed",
            "error": "Unauthorized",
        }

    @pytest.mark.asyncio
    async def test_refresh_failure_asks_for_login(self):
        response, body = await handle(RefreshFailedError("invalid_grant", code="invalid_grant"))

        assert response.status_code == 401
        assert body["message"] == "Please log in again"
