"""Media upload to X with bounded retry"""

import asyncio
import logging
from typing import Optional

import httpx

from errors import UnknownPublishError
from x_oauth.config import XConfig
from x_oauth.utils import http_client, parse_json
from .classification import FailureKind, classify_httpx_response, upload_error_from_failure
from .retry import DEFAULT_UPLOAD_POLICY, RetryExhausted, RetryPolicy, SleepFunc, TransientError, run_with_retry

logger = logging.getLogger(__name__)

MEDIA_CATEGORY = "tweet_image"


def _extract_media_id(payload: Optional[dict]) -> Optional[str]:
    if not payload:
        return None
    data = payload.get("data")
    if isinstance(data, dict) and data.get("id"):
        return str(data["id"])
    # v1.1 response shape
    if payload.get("media_id_string"):
        return str(payload["media_id_string"])
    return None


async def upload_media(
    config: XConfig,
    content: bytes,
    mime_type: str,
    access_token: str,
    client: Optional[httpx.AsyncClient] = None,
    policy: RetryPolicy = DEFAULT_UPLOAD_POLICY,
    sleep: SleepFunc = asyncio.sleep
) -> str:
    """Upload image bytes and return the media id

    Uploads are idempotent at X, so statuses in policy.retryable_statuses
    are retried with backoff. Everything else fails on the first attempt.

    Raises:
        MediaPermissionError: On 403 (token lacks media.write); never retried
        AuthExpiredError: On 401
        MediaUploadExhaustedError: If every attempt hit a transient status
        RateLimitedError, PayloadTooLargeError, UpstreamRejectedError,
        UnknownPublishError: For other failures
    """
    async with http_client(client, config.request_timeout) as http:

        async def attempt_upload(attempt_number: int) -> str:
            logger.info(f"Uploading image to X (attempt {attempt_number}, {len(content)} bytes, {mime_type})")
            try:
                response = await http.post(
                    config.media_upload_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                    data={"media_category": MEDIA_CATEGORY, "media_type": mime_type},
                    files={"media": ("media", content, mime_type)},
                    timeout=config.request_timeout,
                )
            except httpx.RequestError as e:
                logger.error(f"Media upload request failed: {e}")
                raise UnknownPublishError("Media upload request failed", code="network_error") from e

            if response.status_code in (200, 201, 202):
                media_id = _extract_media_id(parse_json(response))
                if media_id:
                    logger.info(f"Image uploaded, media ID: {media_id}")
                    return media_id
                raise UnknownPublishError("Media upload response missing media id", code="invalid_response")

            failure = classify_httpx_response(response)
            if failure.kind is FailureKind.TRANSIENT and policy.is_retryable_status(response.status_code):
                raise TransientError(f"HTTP {response.status_code}", response.status_code, failure)

            logger.error(f"Media upload failed with status {response.status_code} ({failure.kind.value})")
            raise upload_error_from_failure(failure, attempts=attempt_number)

        try:
            return await run_with_retry(attempt_upload, policy=policy, sleep=sleep)
        except RetryExhausted as e:
            logger.error(f"Media upload gave up after {len(e.attempts)} attempts")
            raise upload_error_from_failure(e.last_error.failure, attempts=len(e.attempts)) from e
