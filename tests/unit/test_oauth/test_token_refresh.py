"""Tests for OAuth token refresh functionality"""
from urllib.parse import parse_qs

import httpx
import pytest

from errors import MissingRefreshTokenError, RefreshFailedError
from x_oauth.token_refresh import refresh_tokens

TOKEN_URL = "https://api.x.com/2/oauth2/token"


@pytest.mark.unit
class TestRefreshTokens:
    """Test suite for token refresh"""

    @pytest.mark.asyncio
    async def test_refresh_success_with_rotation(self, x_config, mock_x_api):
        route = mock_x_api.post(TOKEN_URL).mock(return_value=httpx.Response(200, json={
            "access_token": "new_access",
            "refresh_token": "new_refresh",
            "expires_in": 7200,
        }))

        tokens = await refresh_tokens(x_config, "old_refresh")

        assert tokens.access_token == "new_access"
        assert tokens.refresh_token == "new_refresh"
        body = parse_qs(route.calls.last.request.content.decode())
        assert body["grant_type"] == ["refresh_token"]
        assert body["refresh_token"] == ["old_refresh"]
        assert body["client_id"] == ["test_client_id"]

    @pytest.mark.asyncio
    async def test_refresh_keeps_old_refresh_token_when_not_rotated(self, x_config, mock_x_api):
        mock_x_api.post(TOKEN_URL).mock(return_value=httpx.Response(200, json={
            "access_token": "new_access",
            "expires_in": 7200,
        }))

        tokens = await refresh_tokens(x_config, "old_refresh")

        assert tokens.refresh_token == "old_refresh"

    @pytest.mark.asyncio
    async def test_unparseable_expires_in_is_ignored(self, x_config, mock_x_api):
        mock_x_api.post(TOKEN_URL).mock(return_value=httpx.Response(200, json={
            "access_token": "new_access",
            "expires_in": "soon",
        }))

        tokens = await refresh_tokens(x_config, "old_refresh")

        assert tokens.access_token == "new_access"
        assert tokens.expires_in is None

    @pytest.mark.asyncio
    async def test_empty_refresh_token(self, x_config, mock_x_api):
        with pytest.raises(MissingRefreshTokenError):
            await refresh_tokens(x_config, "")

        assert not mock_x_api.calls

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [400, 401, 500, 503])
    async def test_http_failures_are_uniform(self, x_config, mock_x_api, status_code):
        route = mock_x_api.post(TOKEN_URL).mock(
            return_value=httpx.Response(status_code, json={"error": "invalid_grant"})
        )

        with pytest.raises(RefreshFailedError) as exc_info:
            await refresh_tokens(x_config, "refresh")

        assert exc_info.value.code == str(status_code)
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_network_error(self, x_config, mock_x_api):
        mock_x_api.post(TOKEN_URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        with pytest.raises(RefreshFailedError) as exc_info:
            await refresh_tokens(x_config, "refresh")

        assert exc_info.value.code == "network_error"

    @pytest.mark.asyncio
    async def test_malformed_body(self, x_config, mock_x_api):
        mock_x_api.post(TOKEN_URL).mock(return_value=httpx.Response(200, text="not json"))

        with pytest.raises(RefreshFailedError) as exc_info:
            await refresh_tokens(x_config, "refresh")

        assert exc_info.value.code == "invalid_response"
