"""Tests for the publish pipeline"""
import asyncio
import json

import httpx
import pytest

from errors import (
    AuthExpiredError,
    MediaFetchError,
    MediaPermissionError,
    MediaTooLargeError,
    ValidationError,
)
from publisher import PublishPipeline, PublishRequest
from publisher.models import MediaKind
from tests.conftest import JPEG_BYTES, PNG_BYTES, data_url

MEDIA_UPLOAD_URL = "https://api.x.com/2/media/upload"
TWEETS_URL = "https://api.x.com/2/tweets"
IMAGE_URL = "https://cdn.example.com/photo.jpg"


@pytest.fixture
def pipeline(x_config, recording_sleep):
    return PublishPipeline(x_config, sleep=recording_sleep)


def post_created(post_id="1", text="hello"):
    return httpx.Response(201, json={"data": {"id": post_id, "text": text}})


@pytest.mark.unit
class TestPublish:
    """Test suite for PublishPipeline.publish"""

    @pytest.mark.asyncio
    async def test_text_only_publish(self, pipeline, mock_x_api):
        upload_route = mock_x_api.post(MEDIA_UPLOAD_URL)
        post_route = mock_x_api.post(TWEETS_URL).mock(return_value=post_created("99", "hello"))

        result = await pipeline.publish("access", PublishRequest.text_only("  hello  "))

        assert result.post_id == "99"
        assert result.post_url == "https://x.com/i/web/status/99"
        assert not upload_route.called
        assert json.loads(post_route.calls.last.request.content) == {"text": "hello"}

    @pytest.mark.asyncio
    async def test_inline_image_publish(self, pipeline, mock_x_api):
        mock_x_api.post(MEDIA_UPLOAD_URL).mock(return_value=httpx.Response(200, json={"data": {"id": "m1"}}))
        post_route = mock_x_api.post(TWEETS_URL).mock(return_value=post_created())

        result = await pipeline.publish("access", PublishRequest.with_inline_image("hello", data_url(PNG_BYTES)))

        assert result.media_id == "m1"
        assert json.loads(post_route.calls.last.request.content)["media"] == {"media_ids": ["m1"]}

    @pytest.mark.asyncio
    async def test_remote_image_publish(self, pipeline, mock_x_api):
        mock_x_api.get(IMAGE_URL).mock(return_value=httpx.Response(
            200, content=JPEG_BYTES, headers={"content-type": "image/jpeg"}
        ))
        upload_route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(
            return_value=httpx.Response(200, json={"data": {"id": "m2"}})
        )
        mock_x_api.post(TWEETS_URL).mock(return_value=post_created())

        result = await pipeline.publish("access", PublishRequest.with_remote_image("hello", IMAGE_URL))

        assert result.media_id == "m2"
        assert JPEG_BYTES in upload_route.calls.last.request.read()

    @pytest.mark.asyncio
    async def test_upload_retries_then_posts(self, pipeline, mock_x_api, recording_sleep):
        upload_route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(side_effect=[
            httpx.Response(503),
            httpx.Response(503),
            httpx.Response(200, json={"data": {"id": "m3"}}),
        ])
        post_route = mock_x_api.post(TWEETS_URL).mock(return_value=post_created())

        result = await pipeline.publish("access", PublishRequest.with_inline_image("hello", data_url(PNG_BYTES)))

        assert result.media_id == "m3"
        assert upload_route.call_count == 3
        assert post_route.call_count == 1
        assert recording_sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_upload_forbidden_skips_post(self, pipeline, mock_x_api):
        upload_route = mock_x_api.post(MEDIA_UPLOAD_URL).mock(return_value=httpx.Response(403))
        post_route = mock_x_api.post(TWEETS_URL)

        with pytest.raises(MediaPermissionError):
            await pipeline.publish("access", PublishRequest.with_inline_image("hello", data_url(PNG_BYTES)))

        assert upload_route.call_count == 1
        assert not post_route.called

    @pytest.mark.asyncio
    async def test_validation_happens_before_network(self, pipeline, mock_x_api):
        with pytest.raises(ValidationError):
            await pipeline.publish("access", PublishRequest.text_only("a" * 281))

        assert not mock_x_api.calls

    @pytest.mark.asyncio
    async def test_remote_image_too_large(self, x_config, mock_x_api, recording_sleep):
        from dataclasses import replace

        pipeline = PublishPipeline(replace(x_config, max_media_bytes=16), sleep=recording_sleep)
        mock_x_api.get(IMAGE_URL).mock(return_value=httpx.Response(
            200, content=JPEG_BYTES, headers={"content-type": "image/jpeg"}
        ))
        upload_route = mock_x_api.post(MEDIA_UPLOAD_URL)

        with pytest.raises(MediaTooLargeError):
            await pipeline.publish("access", PublishRequest.with_remote_image("hello", IMAGE_URL))

        assert not upload_route.called

    @pytest.mark.asyncio
    async def test_remote_image_fetch_failure(self, pipeline, mock_x_api):
        mock_x_api.get(IMAGE_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(MediaFetchError):
            await pipeline.publish("access", PublishRequest.with_remote_image("hello", IMAGE_URL))

    @pytest.mark.asyncio
    async def test_expired_token_surfaces_auth_expired(self, pipeline, mock_x_api):
        mock_x_api.post(TWEETS_URL).mock(return_value=httpx.Response(401))

        with pytest.raises(AuthExpiredError):
            await pipeline.publish("expired", PublishRequest.text_only("hello"))

    @pytest.mark.asyncio
    async def test_concurrent_publishes_are_independent(self, pipeline, mock_x_api):
        def respond(request):
            token = request.headers["authorization"].split()[-1]
            return httpx.Response(201, json={"data": {"id": token, "text": "hi"}})

        mock_x_api.post(TWEETS_URL).mock(side_effect=respond)

        results = await asyncio.gather(
            pipeline.publish("token_a", PublishRequest.text_only("hi")),
            pipeline.publish("token_b", PublishRequest.text_only("hi")),
        )

        assert [result.post_id for result in results] == ["token_a", "token_b"]


@pytest.mark.unit
class TestResolveMedia:
    """Test suite for PublishPipeline.resolve_media"""

    @pytest.mark.asyncio
    async def test_no_media(self, pipeline):
        assert await pipeline.resolve_media(PublishRequest.text_only("hi")) is None

    @pytest.mark.asyncio
    async def test_inline_media(self, pipeline):
        request = PublishRequest.with_inline_image("hi", data_url(PNG_BYTES))

        media = await pipeline.resolve_media(request)

        assert request.media_kind is MediaKind.INLINE
        assert media.content == PNG_BYTES
        assert media.mime_type == "image/png"
