"""Publish pipeline: validate, resolve media, upload, post"""

import asyncio
import logging
from typing import Optional

import httpx

from x_oauth.config import XConfig
from .classification import FailureKind, UpstreamFailure, classify_response
from .media import fetch_remote_media, parse_data_url
from .models import MediaKind, PublishRequest, PublishResult, ResolvedMedia
from .retry import DEFAULT_UPLOAD_POLICY, RetryPolicy, SleepFunc, UploadAttempt, run_with_retry
from .submission import submit_post
from .upload import upload_media
from .validation import utf16_length, validate_request

logger = logging.getLogger(__name__)


class PublishPipeline:
    """Publishes posts, with an optional image, using a caller supplied token

    Holds only configuration, so one instance can serve concurrent
    publishes for different tokens.
    """

    def __init__(
        self,
        config: XConfig,
        client: Optional[httpx.AsyncClient] = None,
        retry_policy: RetryPolicy = DEFAULT_UPLOAD_POLICY,
        sleep: SleepFunc = asyncio.sleep
    ):
        """
        Args:
            config: X application configuration
            client: Optional shared HTTP client
            retry_policy: Backoff schedule and retryable statuses for media upload
            sleep: Awaitable used between upload attempts
        """
        self.config = config
        self.client = client
        self.retry_policy = retry_policy
        self.sleep = sleep

    def validate(self, request: PublishRequest) -> None:
        """Raise ValidationError (or a subclass) if request is not publishable"""
        validate_request(request, self.config.max_media_bytes)

    async def resolve_media(self, request: PublishRequest) -> Optional[ResolvedMedia]:
        """Turn the request's media into bytes and a MIME type

        Returns:
            ResolvedMedia, or None if the request has no media
        """
        kind = request.media_kind
        if kind is MediaKind.REMOTE:
            return await fetch_remote_media(
                request.image_url,
                max_bytes=self.config.max_media_bytes,
                timeout=self.config.media_download_timeout,
                client=self.client,
            )
        if kind is MediaKind.INLINE:
            logger.info("Processing base64 image...")
            media = parse_data_url(request.image_data)
            logger.info(f"Base64 decoded, size: {media.size} bytes, type: {media.mime_type}")
            return media
        return None

    async def upload_media(self, content: bytes, mime_type: str, access_token: str) -> str:
        """Upload image bytes with bounded retry and return the media id"""
        return await upload_media(
            self.config,
            content,
            mime_type,
            access_token,
            client=self.client,
            policy=self.retry_policy,
            sleep=self.sleep,
        )

    async def publish(self, access_token: str, request: PublishRequest) -> PublishResult:
        """Validate, upload media if any, and submit the post once

        Raises:
            ValidationError: Before any network call if the request is invalid
            AuthExpiredError: If the token is invalid or expired
            XPublisherError: Any other classified failure
        """
        self.validate(request)
        text = request.text.strip()

        media_ids = None
        media = await self.resolve_media(request)
        if media is not None:
            media_ids = [await self.upload_media(media.content, media.mime_type, access_token)]

        return await submit_post(self.config, text, access_token, media_ids=media_ids, client=self.client)


__all__ = [
    "PublishPipeline",
    "PublishRequest",
    "PublishResult",
    "ResolvedMedia",
    "MediaKind",
    "RetryPolicy",
    "UploadAttempt",
    "FailureKind",
    "UpstreamFailure",
    "classify_response",
    "run_with_retry",
    "utf16_length",
]
