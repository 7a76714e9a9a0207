"""Tests for media upload with retry"""
import httpx
import pytest

from errors import (
    AuthExpiredError,
    MediaPermissionError,
    MediaUploadExhaustedError,
    RateLimitedError,
    UnknownPublishError,
)
from publisher.retry import RetryPolicy
from publisher.upload import upload_media
from tests.conftest import PNG_BYTES

MEDIA_UPLOAD_URL = "https://api.x.com/2/media/upload"


@pytest.mark.unit
class TestUploadMedia:
    """Test suite for upload_media"""

    @pytest.mark.asyncio
    async def test_upload_success(self, x_config, mock_x_api, recording_sleep):
        route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(
            return_value=httpx.Response(200, json={"data": {"id": "1880028106020515840"}})
        )

        media_id = await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep)

        assert media_id == "1880028106020515840"
        request = route.calls.last.request
        assert request.headers["authorization"] == "Bearer access"
        assert request.headers["content-type"].startswith("multipart/form-data")
        body = request.read()
        assert b'name="media_category"' in body
        assert b"tweet_image" in body
        assert PNG_BYTES in body

    @pytest.mark.asyncio
    async def test_legacy_media_id_string(self, x_config, mock_x_api, recording_sleep):
        mock_x_api.post(MEDIA_UPLOAD_URL).mock(
            return_value=httpx.Response(200, json={"media_id": 710511363345354753, "media_id_string": "710511363345354753"})
        )

        assert await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep) == "710511363345354753"

    @pytest.mark.asyncio
    async def test_transient_failures_then_success(self, x_config, mock_x_api, recording_sleep):
        route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(side_effect=[
            httpx.Response(503),
            httpx.Response(503),
            httpx.Response(200, json={"data": {"id": "m1"}}),
        ])

        media_id = await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep)

        assert media_id == "m1"
        assert route.call_count == 3
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted_after_three_attempts(self, x_config, mock_x_api, recording_sleep):
        route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(return_value=httpx.Response(502))

        with pytest.raises(MediaUploadExhaustedError) as exc_info:
            await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep)

        assert route.call_count == 3
        assert exc_info.value.attempts == 3
        assert exc_info.value.code == "502"
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_forbidden_is_not_retried(self, x_config, mock_x_api, recording_sleep):
        route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(
            return_value=httpx.Response(403, json={"title": "Forbidden"})
        )

        with pytest.raises(MediaPermissionError):
            await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep)

        assert route.call_count == 1
        assert recording_sleep.delays == []

    @pytest.mark.asyncio
    async def test_unauthorized_is_not_retried(self, x_config, mock_x_api, recording_sleep):
        route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(return_value=httpx.Response(401))

        with pytest.raises(AuthExpiredError):
            await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep)

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_rate_limited_is_not_retried(self, x_config, mock_x_api, recording_sleep):
        route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(
            return_value=httpx.Response(429, headers={"x-rate-limit-reset": "9999999999"})
        )

        with pytest.raises(RateLimitedError) as exc_info:
            await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep)

        assert route.call_count == 1
        assert exc_info.value.retry_after > 0

    @pytest.mark.asyncio
    async def test_network_error_is_not_retried(self, x_config, mock_x_api, recording_sleep):
        route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(side_effect=httpx.ConnectError("Connection refused"))

        with pytest.raises(UnknownPublishError):
            await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep)

        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_custom_policy(self, x_config, mock_x_api, recording_sleep):
        route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(return_value=httpx.Response(500))
        policy = RetryPolicy(max_attempts=2, initial_delay=0.5)

        with pytest.raises(MediaUploadExhaustedError):
            await upload_media(x_config, PNG_BYTES, "image/png", "access", policy=policy, sleep=recording_sleep)

        assert route.call_count == 2
        assert recording_sleep.delays == [0.5]

    @pytest.mark.asyncio
    async def test_success_without_media_id(self, x_config, mock_x_api, recording_sleep):
        mock_x_api.post(MEDIA_UPLOAD_URL).mock(return_value=httpx.Response(200, json={"data": {}}))

        with pytest.raises(UnknownPublishError) as exc_info:
            await upload_media(x_config, PNG_BYTES, "image/png", "access", sleep=recording_sleep)

        assert exc_info.value.code == "invalid_response"
